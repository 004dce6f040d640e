# src/edgarlink/domain/entities/edgar_filing.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""EDGAR filing entity.

Purpose:
    Represent a single EDGAR filing (e.g., 10-K, 10-Q, 8-K) in a
    source-agnostic way. The same record is produced whether the filing came
    from the submissions API, a bulk index or a full-text search hit.

Layer:
    domain

Notes:
    Records are constructed by the normalizer only and are immutable
    thereafter. The accession number is kept structured (three numeric
    groups) so archive paths can be derived and re-parsed losslessly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Final

from edgarlink.domain.entities.edgar_company import EntityIdentifier
from edgarlink.domain.exceptions.edgar import EdgarMappingError

_DASHED_RE: Final[re.Pattern[str]] = re.compile(r"^(\d{10})-(\d{2})-(\d{6})$")
_COMPACT_RE: Final[re.Pattern[str]] = re.compile(r"^(\d{10})(\d{2})(\d{6})$")
_IN_TEXT_RE: Final[re.Pattern[str]] = re.compile(
    r"(?<!\d)(\d{10})-?(\d{2})-?(\d{6})(?!\d)",
)

AMENDMENT_SUFFIX: Final[str] = "/A"


@dataclass(frozen=True)
class AccessionNumber:
    """Structured accession identifier ``FFFFFFFFFF-YY-SSSSSS``.

    Args:
        filer_id: Ten-digit id of the submitting entity (often a filing agent).
        year: Two-digit year of submission.
        sequence: Six-digit sequence within the filer and year.
    """

    filer_id: int
    year: int
    sequence: int

    def __post_init__(self) -> None:
        """Validate group ranges."""
        if not (0 <= self.filer_id < 10**10 and 0 <= self.year < 100 and 0 <= self.sequence < 10**6):
            raise EdgarMappingError(
                "Accession number groups out of range.",
                details={"filer_id": self.filer_id, "year": self.year, "sequence": self.sequence},
            )

    @classmethod
    def parse(cls, value: str) -> AccessionNumber:
        """Parse a dashed (``0000320193-23-000106``) or compact accession number.

        Raises:
            EdgarMappingError: If ``value`` is not a well-formed accession number.
        """
        cleaned = value.strip()
        match = _DASHED_RE.match(cleaned) or _COMPACT_RE.match(cleaned)
        if match is None:
            raise EdgarMappingError("Malformed accession number.", details={"value": value})
        filer, year, seq = match.groups()
        return cls(filer_id=int(filer), year=int(year), sequence=int(seq))

    @classmethod
    def find_in(cls, text: str) -> AccessionNumber:
        """Locate the first accession number embedded in a path or URL.

        Raises:
            EdgarMappingError: If no accession number occurs in ``text``.
        """
        match = _IN_TEXT_RE.search(text)
        if match is None:
            raise EdgarMappingError("No accession number in text.", details={"text": text})
        filer, year, seq = match.groups()
        return cls(filer_id=int(filer), year=int(year), sequence=int(seq))

    @property
    def groups(self) -> tuple[int, int, int]:
        """The three numeric groups."""
        return (self.filer_id, self.year, self.sequence)

    @property
    def dashed(self) -> str:
        """Canonical dashed form."""
        return f"{self.filer_id:010d}-{self.year:02d}-{self.sequence:06d}"

    @property
    def compact(self) -> str:
        """Dash-free form used as the archive directory segment."""
        return self.dashed.replace("-", "")

    def __str__(self) -> str:
        return self.dashed


def is_amendment_form(form_type: str) -> bool:
    """Return True for amendment form codes (``10-K/A``)."""
    return form_type.strip().upper().endswith(AMENDMENT_SUFFIX)


def base_form(form_type: str) -> str:
    """Strip the amendment suffix from a form code."""
    cleaned = form_type.strip()
    if is_amendment_form(cleaned):
        return cleaned[: -len(AMENDMENT_SUFFIX)]
    return cleaned


@dataclass(frozen=True)
class FilingRecord:
    """Canonical filing record.

    Args:
        entity: Filer identity (canonical CIK, ticker when resolved).
        form_type: Raw form code as filed (e.g., ``10-K``, ``10-Q/A``).
        filing_date: Date the filing was accepted for dissemination.
        accession: Structured accession identifier.
        primary_document: Primary document path relative to the filing
            directory, if known.
        document_url: Absolute archive URL for the primary document (or the
            full text submission when no primary document is known).
        has_structured_data: A separate machine-readable financial data
            manifest accompanies the filing.
        has_inline_data: Financial data is embedded inline in the primary
            document.
        company_name: Filer name, when the source provides it.
        report_date: Period of report, when the source provides it.
        accepted_at: Acceptance timestamp, when the source provides it.
    """

    entity: EntityIdentifier
    form_type: str
    filing_date: date
    accession: AccessionNumber
    primary_document: str | None
    document_url: str
    has_structured_data: bool = False
    has_inline_data: bool = False
    company_name: str | None = None
    report_date: date | None = None
    accepted_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate core filing invariants."""
        cleaned = self.form_type.strip()
        if not cleaned:
            raise EdgarMappingError("form_type must not be empty.")
        object.__setattr__(self, "form_type", cleaned)

    @property
    def cik(self) -> str:
        """Canonical CIK of the filer."""
        return self.entity.cik

    @property
    def is_amendment(self) -> bool:
        """Whether this filing amends a prior submission."""
        return is_amendment_form(self.form_type)
