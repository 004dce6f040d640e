# src/edgarlink/adapters/decoders/index_decoder.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Bulk index decoder.

Purpose:
    Decode daily and quarterly EDGAR index files (optionally gzip-wrapped)
    into :class:`IndexEntry` values.

Layer:
    adapters/decoders

Notes:
    - Layouts:
        * master: ``CIK|Company Name|Form Type|Date Filed|Filename``.
        * company / crawler: fixed-width columns of 62, 12, 12 and 12
          characters followed by the path or URL.
    - The layout is detected from the first ten lines of the preamble unless
      the caller passes it. Unrecognized preambles decode as crawler.
    - Everything up to the first ``---`` separator within the first 50 lines
      is preamble. Without a separator the whole file is treated as data.
    - A malformed line (wrong field count, bad date, non-numeric CIK, empty
      form or path) is skipped with a :class:`DecodeWarning`. Only a corrupt
      gzip stream fails the whole payload.
"""

from __future__ import annotations

import logging
from typing import Final

from edgarlink.adapters.decoders.common import decode_text, note_warning, parse_filing_date
from edgarlink.adapters.decoders.compression import maybe_inflate
from edgarlink.domain.entities.decode_report import Decoded, DecodeWarning
from edgarlink.domain.entities.edgar_company import EntityIdentifier
from edgarlink.domain.entities.edgar_index import IndexEntry
from edgarlink.domain.enums.edgar import IndexType
from edgarlink.domain.exceptions.edgar import EdgarMappingError

logger = logging.getLogger(__name__)

_SOURCE: Final[str] = "index"
_DETECT_LINES: Final[int] = 10
_MAX_HEADER_LINES: Final[int] = 50
_SEPARATOR: Final[str] = "---"
_FIXED_WIDTHS: Final[tuple[int, ...]] = (62, 12, 12, 12)
_FIELD_COUNT: Final[int] = 5


def detect_index_type(text: str) -> IndexType:
    """Detect the index layout from the preamble."""
    for line in text.splitlines()[:_DETECT_LINES]:
        if "by Company Name" in line:
            return IndexType.COMPANY
        if "Crawler Index" in line:
            return IndexType.CRAWLER
        if "Master Index" in line or "XBRL Index" in line:
            return IndexType.MASTER
    return IndexType.CRAWLER


def _body_start(lines: list[str]) -> int:
    for number, line in enumerate(lines[:_MAX_HEADER_LINES]):
        if _SEPARATOR in line:
            return number + 1
    return 0


def _split_fixed(line: str) -> list[str]:
    fields: list[str] = []
    start = 0
    for width in _FIXED_WIDTHS:
        if start >= len(line):
            break
        fields.append(line[start : start + width].strip())
        start += width
    if start < len(line):
        fields.append(line[start:].strip())
    return fields


def _split(line: str, index_type: IndexType) -> list[str]:
    if index_type is IndexType.MASTER:
        return [part.strip() for part in line.split("|")]
    return _split_fixed(line)


def _entry_from_fields(fields: list[str], index_type: IndexType) -> IndexEntry | str:
    """Build an entry, or return the skip reason."""
    if index_type is IndexType.MASTER:
        cik_raw, company, form, filed, path = fields
    else:
        company, form, cik_raw, filed, path = fields

    if not cik_raw.isdigit():
        return "bad_cik"
    if not form or not path:
        return "missing_field"
    try:
        filed_on = parse_filing_date(filed)
    except ValueError:
        return "bad_date"
    try:
        entity = EntityIdentifier.from_cik(cik_raw)
    except EdgarMappingError:
        return "bad_cik"
    return IndexEntry(
        company_name=company,
        form_type=form,
        entity=entity,
        date_filed=filed_on,
        path=path,
    )


def decode_index(
    data: bytes,
    index_type: IndexType | None = None,
) -> Decoded[tuple[IndexEntry, ...]]:
    """Decode an index file into entries plus line-level warnings.

    Args:
        data: Raw or gzip-wrapped index bytes.
        index_type: Layout to use; detected from the preamble when omitted.

    Returns:
        Entries in file order and one warning per skipped line.

    Raises:
        EdgarDecodeError: If a gzip-wrapped payload is corrupt or truncated.
    """
    text = decode_text(maybe_inflate(data))
    resolved = index_type or detect_index_type(text)
    lines = text.splitlines()

    entries: list[IndexEntry] = []
    warnings: list[DecodeWarning] = []
    for number in range(_body_start(lines), len(lines)):
        line = lines[number]
        if not line.strip() or line.startswith(_SEPARATOR):
            continue

        fields = _split(line, resolved)
        if len(fields) != _FIELD_COUNT:
            reason = "too_few_fields" if len(fields) < _FIELD_COUNT else "too_many_fields"
            warnings.append(
                note_warning(
                    logger,
                    "edgar.index.line_skipped",
                    DecodeWarning.build(_SOURCE, number + 1, reason, line),
                )
            )
            continue

        result = _entry_from_fields(fields, resolved)
        if isinstance(result, str):
            warnings.append(
                note_warning(
                    logger,
                    "edgar.index.line_skipped",
                    DecodeWarning.build(_SOURCE, number + 1, result, line),
                )
            )
            continue
        entries.append(result)

    logger.debug(
        "edgar.index.decoded",
        extra={"index_type": resolved.value, "entries": len(entries), "skipped": len(warnings)},
    )
    return Decoded(tuple(entries), tuple(warnings))
