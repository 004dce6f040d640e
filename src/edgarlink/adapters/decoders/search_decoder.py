# src/edgarlink/adapters/decoders/search_decoder.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Full-text search response decoder.

Hits whose ``_source`` lacks an accession number, form, filing date or any
CIK are skipped with a warning. The accession number falls back to the part
of ``_id`` before the colon (``<accession>:<filename>``).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Final, cast

from edgarlink.adapters.decoders.common import load_json_object, note_warning
from edgarlink.domain.entities.decode_report import Decoded, DecodeWarning
from edgarlink.domain.entities.edgar_search import SearchHit
from edgarlink.infrastructure.external_apis.edgar.types import EdgarSearchRoot

logger = logging.getLogger(__name__)

_SOURCE: Final[str] = "search"


def _strings(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    if not isinstance(value, list):
        return ()
    return tuple(str(v).strip() for v in value if v is not None and str(v).strip())


def _hit(raw: Mapping[str, Any]) -> SearchHit | str:
    """Build a hit, or return the skip reason."""
    source = raw.get("_source")
    if not isinstance(source, Mapping):
        return "missing_source"

    hit_id = str(raw.get("_id") or "")
    accession = str(source.get("adsh") or "").strip() or hit_id.split(":", 1)[0].strip()
    form_type = str(source.get("form") or "").strip()
    file_date = str(source.get("file_date") or "").strip()
    ciks = _strings(source.get("ciks"))

    if not accession or not form_type or not file_date or not ciks:
        return "missing_field"

    period = source.get("period_ending")
    return SearchHit(
        hit_id=hit_id,
        accession=accession,
        form_type=form_type,
        file_date=file_date,
        ciks=ciks,
        display_names=_strings(source.get("display_names")),
        period_ending=str(period).strip() if period else None,
        root_forms=_strings(source.get("root_forms")),
    )


def decode_search(data: bytes) -> Decoded[tuple[int, tuple[SearchHit, ...]]]:
    """Decode a search response into ``(total, hits)``.

    Raises:
        EdgarDecodeError: If the payload is not a JSON object.
    """
    root = cast(EdgarSearchRoot, load_json_object(data, source=_SOURCE))
    envelope = root.get("hits")
    if not isinstance(envelope, Mapping):
        return Decoded((0, ()))

    total_raw = envelope.get("total")
    total = 0
    if isinstance(total_raw, Mapping):
        value = total_raw.get("value")
        total = value if isinstance(value, int) else 0
    elif isinstance(total_raw, int):
        total = total_raw

    raw_hits = envelope.get("hits")
    hits: list[SearchHit] = []
    warnings: list[DecodeWarning] = []
    for position, raw in enumerate(raw_hits if isinstance(raw_hits, list) else [], start=1):
        result = _hit(raw) if isinstance(raw, Mapping) else "not_an_object"
        if isinstance(result, str):
            warnings.append(
                note_warning(
                    logger,
                    "edgar.search.hit_skipped",
                    DecodeWarning.build(_SOURCE, position, result, repr(raw)),
                )
            )
            continue
        hits.append(result)
    return Decoded((total, tuple(hits)), tuple(warnings))
