# src/edgarlink/adapters/mappers/edgar_normalizer.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""EDGAR domain normalizer.

Purpose:
    Turn decoder output (submission rows, index entries, search hits) into
    canonical :class:`FilingRecord` values, whichever endpoint produced them.

Layer:
    adapters/mappers

Notes:
    - Entity identifiers are zero-padded to ten digits.
    - Archive URLs embed the accession number without dashes as a directory
      segment under ``data/<numeric cik>/``, so the accession number can be
      recovered from any URL this module builds.
    - The two financial-data flags come from a pluggable classifier. The
      default prefers explicit payload flags and otherwise falls back to
      document naming conventions.
    - A row that cannot become a record (malformed accession number or filing
      date) is skipped with a :class:`DecodeWarning`.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from typing import Final

from edgarlink.adapters.decoders.common import (
    note_warning,
    parse_filing_date,
    parse_optional_date,
    parse_timestamp,
)
from edgarlink.domain.entities.decode_report import Decoded, DecodeWarning
from edgarlink.domain.entities.edgar_company import EntityIdentifier
from edgarlink.domain.entities.edgar_filing import AccessionNumber, FilingRecord
from edgarlink.domain.entities.edgar_index import IndexEntry
from edgarlink.domain.entities.edgar_search import SearchHit
from edgarlink.domain.entities.edgar_submissions import SubmissionRow, SubmissionsDocument
from edgarlink.domain.exceptions.edgar import EdgarMappingError

logger = logging.getLogger(__name__)

_SOURCE: Final[str] = "normalizer"

FinancialDataClassifier = Callable[
    [str | None, bool | None, bool | None, Sequence[str]],
    tuple[bool, bool],
]

_INLINE_DOC_RE: Final[re.Pattern[str]] = re.compile(r"^[\w.-]+-(?:19|20)\d{6}\.htm$", re.IGNORECASE)
_MANIFEST_SUFFIXES: Final[tuple[str, ...]] = ("_htm.xml", ".xsd", ".xbrl")
_MANIFEST_NAMES: Final[frozenset[str]] = frozenset({"filingsummary.xml"})
_DISPLAY_CIK_RE: Final[re.Pattern[str]] = re.compile(r"\s*\(CIK\s*\d+\)\s*$", re.IGNORECASE)


def _basename(path: str) -> str:
    return path.rstrip("/").rsplit("/", 1)[-1]


def is_structured_manifest(name: str) -> bool:
    """Return True for machine-readable financial data manifests."""
    lowered = _basename(name).lower()
    return lowered in _MANIFEST_NAMES or lowered.endswith(_MANIFEST_SUFFIXES)


def default_financial_data_classifier(
    primary_document: str | None,
    explicit_structured: bool | None,
    explicit_inline: bool | None,
    documents: Sequence[str] = (),
) -> tuple[bool, bool]:
    """Derive ``(has_structured_data, has_inline_data)``.

    Explicit payload flags win. Without them an inline primary document is
    recognized by its ``<prefix>-<YYYYMMDD>.htm`` name, and structured data is
    implied by inline data or by a manifest among the sibling documents.
    """
    if explicit_inline is not None:
        inline = explicit_inline
    else:
        inline = bool(primary_document) and _INLINE_DOC_RE.match(_basename(primary_document or "")) is not None

    if explicit_structured is not None:
        structured = explicit_structured
    else:
        structured = inline or any(is_structured_manifest(d) for d in documents)
    return structured, inline


class ArchiveUrls:
    """Builds the archive URL family for one filing.

    Args:
        archives_url: Archive root, e.g. ``https://www.sec.gov/Archives/edgar``.
    """

    def __init__(self, archives_url: str) -> None:
        self.base = archives_url.rstrip("/")
        # Index files list paths relative to the parent of the archive root.
        self._root = self.base[: -len("/edgar")] if self.base.endswith("/edgar") else self.base

    def filing_directory(self, entity: EntityIdentifier, accession: AccessionNumber) -> str:
        return f"{self.base}/data/{entity.numeric}/{accession.compact}"

    def document(self, entity: EntityIdentifier, accession: AccessionNumber, name: str) -> str:
        return f"{self.filing_directory(entity, accession)}/{name.lstrip('/')}"

    def full_text(self, entity: EntityIdentifier, accession: AccessionNumber) -> str:
        return self.document(entity, accession, f"{accession.dashed}.txt")

    def index_page(self, entity: EntityIdentifier, accession: AccessionNumber) -> str:
        return self.document(entity, accession, f"{accession.dashed}-index.html")

    def sgml_header(self, entity: EntityIdentifier, accession: AccessionNumber) -> str:
        return self.document(entity, accession, f"{accession.dashed}.hdr.sgml")

    def directory_listing(self, entity: EntityIdentifier, accession: AccessionNumber) -> str:
        return self.document(entity, accession, "index.json")

    def absolute(self, path: str) -> str:
        """Resolve an index path (``edgar/data/...``) or URL to an absolute URL."""
        if path.startswith(("http://", "https://")):
            return path
        cleaned = path.lstrip("/")
        if cleaned.startswith("edgar/"):
            return f"{self._root}/{cleaned}"
        return f"{self.base}/{cleaned}"


class EdgarNormalizer:
    """Pure transformation from decoded payloads into canonical records.

    Args:
        archives_url: Archive root used to build document URLs.
        classifier: Financial-data flag classifier.
    """

    def __init__(
        self,
        archives_url: str,
        *,
        classifier: FinancialDataClassifier = default_financial_data_classifier,
    ) -> None:
        self.urls = ArchiveUrls(archives_url)
        self._classify = classifier

    # ------------------------------------------------------------------ #
    # URLs
    # ------------------------------------------------------------------ #

    def document_url(
        self,
        entity: EntityIdentifier,
        accession: AccessionNumber,
        primary_document: str | None,
    ) -> str:
        """Primary document URL, or the full text submission when none is known."""
        if primary_document:
            return self.urls.document(entity, accession, primary_document)
        return self.urls.full_text(entity, accession)

    @staticmethod
    def accession_from_url(url: str) -> AccessionNumber:
        """Recover the accession number embedded in an archive URL.

        Raises:
            EdgarMappingError: If the URL carries no accession number.
        """
        return AccessionNumber.find_in(url)

    # ------------------------------------------------------------------ #
    # Records
    # ------------------------------------------------------------------ #

    def from_submissions(
        self,
        document: SubmissionsDocument,
        rows: Iterable[SubmissionRow] | None = None,
        *,
        ticker: str | None = None,
    ) -> Decoded[tuple[FilingRecord, ...]]:
        """Normalize submission rows (the document's own rows by default).

        Args:
            document: Decoded submissions document providing the filer identity.
            rows: Rows to normalize, e.g. from an older history page.
            ticker: Ticker the entity was resolved from, if any.
        """
        profile = document.profile
        entity = EntityIdentifier(profile.entity.cik, ticker=ticker) if ticker else profile.entity
        company_name = profile.name or None

        records: list[FilingRecord] = []
        warnings: list[DecodeWarning] = []
        source_rows = document.filings if rows is None else tuple(rows)
        for position, row in enumerate(source_rows, start=1):
            try:
                accession = AccessionNumber.parse(row.accession_number)
            except EdgarMappingError:
                warnings.append(self._skip(position, "bad_accession", row.accession_number))
                continue
            try:
                filed = parse_filing_date(row.filing_date)
            except ValueError:
                warnings.append(self._skip(position, "bad_date", row.filing_date))
                continue

            structured, inline = self._classify(row.primary_document, row.is_xbrl, row.is_inline_xbrl, ())
            records.append(
                FilingRecord(
                    entity=entity,
                    form_type=row.form,
                    filing_date=filed,
                    accession=accession,
                    primary_document=row.primary_document,
                    document_url=self.document_url(entity, accession, row.primary_document),
                    has_structured_data=structured,
                    has_inline_data=inline,
                    company_name=company_name,
                    report_date=parse_optional_date(row.report_date),
                    accepted_at=parse_timestamp(row.acceptance_datetime),
                )
            )
        return Decoded(tuple(records), tuple(warnings))

    def from_index_entries(self, entries: Iterable[IndexEntry]) -> Decoded[tuple[FilingRecord, ...]]:
        """Normalize bulk index entries.

        The listed path becomes the document URL. Index files carry no
        primary document name, so ``primary_document`` is ``None``.
        """
        records: list[FilingRecord] = []
        warnings: list[DecodeWarning] = []
        for position, entry in enumerate(entries, start=1):
            try:
                accession = AccessionNumber.find_in(entry.path)
            except EdgarMappingError:
                warnings.append(self._skip(position, "bad_accession", entry.path))
                continue
            structured, inline = self._classify(None, None, None, ())
            records.append(
                FilingRecord(
                    entity=entry.entity,
                    form_type=entry.form_type,
                    filing_date=entry.date_filed,
                    accession=accession,
                    primary_document=None,
                    document_url=self.urls.absolute(entry.path),
                    has_structured_data=structured,
                    has_inline_data=inline,
                    company_name=entry.company_name or None,
                )
            )
        return Decoded(tuple(records), tuple(warnings))

    def from_search_hits(self, hits: Iterable[SearchHit]) -> Decoded[tuple[FilingRecord, ...]]:
        """Normalize full-text search hits.

        The first listed CIK is the filer. The document name is the part of
        the hit id after the colon.
        """
        records: list[FilingRecord] = []
        warnings: list[DecodeWarning] = []
        for position, hit in enumerate(hits, start=1):
            try:
                accession = AccessionNumber.parse(hit.accession)
                entity = EntityIdentifier.from_cik(hit.ciks[0])
            except (EdgarMappingError, IndexError):
                warnings.append(self._skip(position, "bad_identifier", hit.hit_id))
                continue
            try:
                filed = parse_filing_date(hit.file_date)
            except ValueError:
                warnings.append(self._skip(position, "bad_date", hit.file_date))
                continue

            _, _, document = hit.hit_id.partition(":")
            primary = document.strip() or None
            structured, inline = self._classify(primary, None, None, ())
            records.append(
                FilingRecord(
                    entity=entity,
                    form_type=hit.form_type,
                    filing_date=filed,
                    accession=accession,
                    primary_document=primary,
                    document_url=self.document_url(entity, accession, primary),
                    has_structured_data=structured,
                    has_inline_data=inline,
                    company_name=self._display_name(hit.display_names),
                    report_date=parse_optional_date(hit.period_ending),
                )
            )
        return Decoded(tuple(records), tuple(warnings))

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _display_name(names: Sequence[str]) -> str | None:
        if not names:
            return None
        return _DISPLAY_CIK_RE.sub("", names[0]).strip() or None

    @staticmethod
    def _skip(position: int, reason: str, raw: str) -> DecodeWarning:
        return note_warning(
            logger,
            "edgar.normalizer.record_skipped",
            DecodeWarning.build(_SOURCE, position, reason, raw),
        )


def newest_first(records: Iterable[FilingRecord]) -> list[FilingRecord]:
    """Order records by filing date (then accession) descending."""
    return sorted(
        records,
        key=lambda r: (r.filing_date, r.accession.groups),
        reverse=True,
    )
