# src/edgarlink/domain/entities/edgar_submissions.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Decoded per-entity submissions document.

Purpose:
    Hold the company facts and the raw filing rows of a submissions document
    after decoding and before normalization into :class:`FilingRecord`.

Layer:
    domain
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from edgarlink.domain.entities.edgar_company import CompanyProfile


@dataclass(frozen=True)
class SubmissionRow:
    """One filing row from the columnar ``filings`` table.

    Text fields are kept as published; the normalizer parses them. The two
    data flags are ``None`` when the payload omits them.
    """

    accession_number: str
    filing_date: str
    form: str
    primary_document: str | None = None
    report_date: str | None = None
    acceptance_datetime: str | None = None
    is_xbrl: bool | None = None
    is_inline_xbrl: bool | None = None
    size: int | None = None


@dataclass(frozen=True)
class HistoryPageRef:
    """Pointer to an older page of filing history (``files`` array)."""

    name: str
    filing_count: int | None = None
    filing_from: date | None = None
    filing_to: date | None = None


@dataclass(frozen=True)
class SubmissionsDocument:
    """Company profile, recent filing rows and older history pages."""

    profile: CompanyProfile
    filings: tuple[SubmissionRow, ...]
    history: tuple[HistoryPageRef, ...] = ()
