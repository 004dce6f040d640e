# src/edgarlink/adapters/decoders/listing_decoder.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Reference listing decoders: ticker map and archive directory listings."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Final

from edgarlink.adapters.decoders.common import load_json_object, note_warning
from edgarlink.domain.entities.decode_report import Decoded, DecodeWarning
from edgarlink.domain.entities.edgar_company import CompanyTicker, normalize_cik
from edgarlink.domain.entities.edgar_index import DirectoryItem, DirectoryListing
from edgarlink.domain.exceptions.edgar import EdgarDecodeError, EdgarMappingError

logger = logging.getLogger(__name__)

_LAST_MODIFIED_FORMAT: Final[str] = "%m/%d/%Y %I:%M:%S %p"


def decode_company_tickers(data: bytes) -> Decoded[tuple[CompanyTicker, ...]]:
    """Decode ``company_tickers.json`` (``{"0": {"cik_str", "ticker", "title"}, ...}``).

    Rows without a ticker or a valid CIK are skipped with a warning.

    Raises:
        EdgarDecodeError: If the payload is not a JSON object.
    """
    root = load_json_object(data, source="tickers")
    rows: list[CompanyTicker] = []
    warnings: list[DecodeWarning] = []
    for position, (key, raw) in enumerate(root.items(), start=1):
        ticker = str(raw.get("ticker") or "").strip().upper() if isinstance(raw, Mapping) else ""
        try:
            cik = normalize_cik(raw.get("cik_str")) if ticker else None
        except (EdgarMappingError, TypeError):
            cik = None
        if not ticker or cik is None:
            warnings.append(
                note_warning(
                    logger,
                    "edgar.tickers.row_skipped",
                    DecodeWarning.build("tickers", position, "bad_row", f"{key}: {raw!r}"),
                )
            )
            continue
        rows.append(CompanyTicker(ticker=ticker, cik=cik, title=str(raw.get("title") or "").strip()))
    return Decoded(tuple(rows), tuple(warnings))


def _last_modified(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.strptime(value.strip(), _LAST_MODIFIED_FORMAT)
    except ValueError:
        return None


def decode_directory_listing(data: bytes) -> Decoded[DirectoryListing]:
    """Decode an archive ``index.json`` directory listing.

    Raises:
        EdgarDecodeError: If the payload is not a JSON object or has no
            ``directory`` object.
    """
    root = load_json_object(data, source="listing")
    directory = root.get("directory")
    if not isinstance(directory, Mapping):
        raise EdgarDecodeError("Directory listing has no 'directory' object.")

    raw_items = directory.get("item")
    items: list[DirectoryItem] = []
    warnings: list[DecodeWarning] = []
    for position, raw in enumerate(raw_items if isinstance(raw_items, list) else [], start=1):
        name = str(raw.get("name") or "").strip() if isinstance(raw, Mapping) else ""
        if not name:
            warnings.append(
                note_warning(
                    logger,
                    "edgar.listing.item_skipped",
                    DecodeWarning.build("listing", position, "missing_name", repr(raw)),
                )
            )
            continue
        items.append(
            DirectoryItem(
                name=name,
                href=str(raw.get("href") or name),
                item_type=str(raw.get("type") or "file"),
                size=str(raw.get("size") or ""),
                last_modified=_last_modified(raw.get("last-modified")),
            )
        )

    listing = DirectoryListing(
        name=str(directory.get("name") or ""),
        parent_dir=str(directory.get("parent-dir") or ""),
        items=tuple(items),
    )
    return Decoded(listing, tuple(warnings))
