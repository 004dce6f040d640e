# src/edgarlink/adapters/decoders/submissions_decoder.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Submissions JSON decoder.

Purpose:
    Decode the per-entity submissions document (``CIK##########.json``) and
    its older history pages into company facts plus raw filing rows.

Layer:
    adapters/decoders

Notes:
    - Decoding is forward compatible: unknown keys are ignored and missing
      optional keys become ``None`` or empty tuples.
    - Filing tables are columnar. A row lacking an accession number, filing
      date or form is skipped with a warning; ragged columns are padded with
      ``None``.
    - Only a non-JSON payload, a non-object root or an unknown CIK fail the
      whole document.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Final, cast

from edgarlink.adapters.decoders.common import load_json_object, note_warning, parse_optional_date
from edgarlink.domain.entities.decode_report import Decoded, DecodeWarning
from edgarlink.domain.entities.edgar_company import CompanyProfile, EntityIdentifier, FormerName
from edgarlink.domain.entities.edgar_submissions import (
    HistoryPageRef,
    SubmissionRow,
    SubmissionsDocument,
)
from edgarlink.domain.exceptions.edgar import EdgarDecodeError, EdgarMappingError
from edgarlink.infrastructure.external_apis.edgar.types import (
    EdgarSubmissionsRecentSection,
    EdgarSubmissionsRoot,
)

logger = logging.getLogger(__name__)

_SOURCE: Final[str] = "submissions"


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


def _strings(value: Any) -> tuple[str, ...]:
    if not isinstance(value, Sequence) or isinstance(value, str):
        return ()
    return tuple(s for s in (_str_or_none(v) for v in value) if s is not None)


def _flag(value: Any) -> bool | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return None


def _int_or_none(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _column(section: Mapping[str, Any], name: str) -> list[Any]:
    value = section.get(name)
    return list(value) if isinstance(value, list) else []


def _decode_rows(
    section: Mapping[str, Any],
) -> tuple[tuple[SubmissionRow, ...], tuple[DecodeWarning, ...]]:
    table = cast(EdgarSubmissionsRecentSection, section)
    columns = {
        name: _column(table, name)
        for name in (
            "accessionNumber",
            "filingDate",
            "form",
            "primaryDocument",
            "reportDate",
            "acceptanceDateTime",
            "isXBRL",
            "isInlineXBRL",
            "size",
        )
    }
    count = max((len(col) for col in columns.values()), default=0)

    def cell(name: str, idx: int) -> Any:
        col = columns[name]
        return col[idx] if idx < len(col) else None

    rows: list[SubmissionRow] = []
    warnings: list[DecodeWarning] = []
    for idx in range(count):
        accession = _str_or_none(cell("accessionNumber", idx))
        filed = _str_or_none(cell("filingDate", idx))
        form = _str_or_none(cell("form", idx))
        if accession is None or filed is None or form is None:
            raw = f"accessionNumber={accession!r} filingDate={filed!r} form={form!r}"
            warnings.append(
                note_warning(
                    logger,
                    "edgar.submissions.row_skipped",
                    DecodeWarning.build(_SOURCE, idx + 1, "missing_field", raw),
                )
            )
            continue
        rows.append(
            SubmissionRow(
                accession_number=accession,
                filing_date=filed,
                form=form,
                primary_document=_str_or_none(cell("primaryDocument", idx)),
                report_date=_str_or_none(cell("reportDate", idx)),
                acceptance_datetime=_str_or_none(cell("acceptanceDateTime", idx)),
                is_xbrl=_flag(cell("isXBRL", idx)),
                is_inline_xbrl=_flag(cell("isInlineXBRL", idx)),
                size=_int_or_none(cell("size", idx)),
            )
        )
    return tuple(rows), tuple(warnings)


def _former_names(value: Any) -> tuple[FormerName, ...]:
    if not isinstance(value, list):
        return ()
    names: list[FormerName] = []
    for item in value:
        if not isinstance(item, Mapping):
            continue
        name = _str_or_none(item.get("name"))
        if name is None:
            continue
        names.append(
            FormerName(
                name=name,
                valid_from=parse_optional_date(str(item.get("from") or "")[:10]),
                valid_to=parse_optional_date(str(item.get("to") or "")[:10]),
            )
        )
    return tuple(names)


def _history(value: Any) -> tuple[HistoryPageRef, ...]:
    if not isinstance(value, list):
        return ()
    pages: list[HistoryPageRef] = []
    for item in value:
        if not isinstance(item, Mapping):
            continue
        name = _str_or_none(item.get("name"))
        if name is None:
            continue
        pages.append(
            HistoryPageRef(
                name=name,
                filing_count=_int_or_none(item.get("filingCount")),
                filing_from=parse_optional_date(item.get("filingFrom")),
                filing_to=parse_optional_date(item.get("filingTo")),
            )
        )
    return tuple(pages)


def decode_submissions(data: bytes, *, cik: str | None = None) -> Decoded[SubmissionsDocument]:
    """Decode a submissions document.

    Args:
        data: Raw JSON bytes.
        cik: CIK the document was requested for; used when the payload omits
            its own ``cik`` field.

    Raises:
        EdgarDecodeError: If the payload is not a JSON object or no CIK is
            known for it.
    """
    root = cast(EdgarSubmissionsRoot, load_json_object(data, source=_SOURCE))

    raw_cik = _str_or_none(root.get("cik")) or cik
    try:
        entity = EntityIdentifier.from_cik(raw_cik) if raw_cik else None
    except EdgarMappingError:
        entity = None
    if entity is None:
        raise EdgarDecodeError(
            "Submissions document carries no usable CIK.",
            details={"cik": root.get("cik"), "requested": cik},
        )

    tickers = _strings(root.get("tickers"))
    profile = CompanyProfile(
        entity=entity,
        name=_str_or_none(root.get("name")) or "",
        tickers=tickers,
        exchanges=_strings(root.get("exchanges")),
        entity_type=_str_or_none(root.get("entityType")),
        sic=_str_or_none(root.get("sic")),
        sic_description=_str_or_none(root.get("sicDescription")),
        fiscal_year_end=_str_or_none(root.get("fiscalYearEnd")),
        state_of_incorporation=_str_or_none(root.get("stateOfIncorporation")),
        ein=_str_or_none(root.get("ein")),
        former_names=_former_names(root.get("formerNames")),
    )

    filings = root.get("filings")
    recent: Mapping[str, Any] = {}
    history: tuple[HistoryPageRef, ...] = ()
    if isinstance(filings, Mapping):
        section = filings.get("recent")
        if isinstance(section, Mapping):
            recent = section
        history = _history(filings.get("files"))

    rows, warnings = _decode_rows(recent)
    return Decoded(SubmissionsDocument(profile=profile, filings=rows, history=history), warnings)


def decode_submission_page(data: bytes) -> Decoded[tuple[SubmissionRow, ...]]:
    """Decode an older history page (a bare columnar filing table).

    Raises:
        EdgarDecodeError: If the payload is not a JSON object.
    """
    section = load_json_object(data, source=_SOURCE)
    rows, warnings = _decode_rows(section)
    return Decoded(rows, warnings)
