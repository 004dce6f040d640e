# src/edgarlink/application/use_cases/edgar/get_entity_filings.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Use case: list an entity's filings, and fetch its latest filing document.

Scope:
    * Resolve a ticker (or raw CIK) to an entity identifier.
    * Fetch and decode the entity's submissions document; optionally follow
      the older history pages it references.
    * Normalize rows into :class:`FilingRecord` values, newest first.
    * Apply :class:`FilingOptions`.

Notes:
    Skipped rows are returned as warnings next to the records; they never
    fail the operation.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from edgarlink.adapters.gateways.ticker_resolver import TickerResolver
from edgarlink.adapters.mappers.edgar_normalizer import EdgarNormalizer, newest_first
from edgarlink.application.interfaces.edgar_gateway import EdgarArchiveGateway
from edgarlink.application.services.filing_filter import apply_filing_options
from edgarlink.domain.entities.decode_report import DecodeWarning
from edgarlink.domain.entities.edgar_company import CompanyProfile, EntityIdentifier
from edgarlink.domain.entities.edgar_filing import FilingRecord
from edgarlink.domain.entities.filing_options import FilingOptions
from edgarlink.domain.exceptions.edgar import EdgarDecodeError, EdgarMappingError, EdgarNotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GetEntityFilingsRequest:
    """Request parameters for an entity's filing list.

    Args:
        entity: Entity identifier, numeric CIK or ticker symbol.
        options: Filter applied after normalization.
        include_history: Also fetch older history pages.
    """

    entity: str | int | EntityIdentifier
    options: FilingOptions | None = None
    include_history: bool = False


@dataclass(frozen=True)
class EntityFilings:
    """Company profile with its filtered filing records.

    ``history_pages`` counts the older history pages the document references,
    whether or not they were fetched.
    """

    profile: CompanyProfile
    records: tuple[FilingRecord, ...]
    warnings: tuple[DecodeWarning, ...] = ()
    history_pages: int = 0


class GetEntityFilingsUseCase:
    """List filings for one entity.

    Args:
        gateway: Archive gateway used to fetch submissions.
        normalizer: Domain normalizer.
        resolver: Ticker resolver for symbol inputs.
    """

    def __init__(
        self,
        *,
        gateway: EdgarArchiveGateway,
        normalizer: EdgarNormalizer,
        resolver: TickerResolver,
    ) -> None:
        self._gateway = gateway
        self._normalizer = normalizer
        self._resolver = resolver

    async def execute(self, req: GetEntityFilingsRequest) -> EntityFilings:
        """Execute the lookup.

        Raises:
            EdgarNotFound: If the ticker or entity does not exist.
            EdgarDecodeError: If the submissions document cannot be decoded.
        """
        entity = await self._resolver.resolve_entity(req.entity)
        logger.info(
            "edgar.entity_filings.start",
            extra={"cik": entity.cik, "ticker": entity.ticker, "include_history": req.include_history},
        )

        decoded = await self._gateway.fetch_submissions(entity)
        document = decoded.value
        normalized = self._normalizer.from_submissions(document, ticker=entity.ticker)

        records = list(normalized.value)
        warnings = [*decoded.warnings, *normalized.warnings]

        if req.include_history and document.history:
            pages = await asyncio.gather(
                *(self._gateway.fetch_submission_page(page.name) for page in document.history)
            )
            for page in pages:
                page_records = self._normalizer.from_submissions(
                    document, page.value, ticker=entity.ticker
                )
                records.extend(page_records.value)
                warnings.extend(page.warnings)
                warnings.extend(page_records.warnings)

        seen: set[str] = set()
        unique: list[FilingRecord] = []
        for record in newest_first(records):
            if record.accession.dashed in seen:
                continue
            seen.add(record.accession.dashed)
            unique.append(record)

        filtered = apply_filing_options(unique, req.options)
        logger.info(
            "edgar.entity_filings.success",
            extra={
                "cik": entity.cik,
                "decoded": len(unique),
                "returned": len(filtered),
                "skipped": len(warnings),
            },
        )
        return EntityFilings(
            profile=document.profile,
            records=tuple(filtered),
            warnings=tuple(warnings),
            history_pages=len(document.history),
        )


@dataclass(frozen=True)
class FetchLatestDocumentRequest:
    """Request parameters for the newest filing document of one form type."""

    entity: str | int | EntityIdentifier
    form_type: str


@dataclass(frozen=True)
class LatestDocument:
    """The newest matching filing and its primary document bytes."""

    record: FilingRecord
    content: bytes


class FetchLatestDocumentUseCase:
    """Fetch the primary document of an entity's most recent filing of a form type.

    Amendments count as matches, so a later ``10-K/A`` wins over a ``10-K``.
    """

    def __init__(self, *, filings: GetEntityFilingsUseCase, gateway: EdgarArchiveGateway) -> None:
        self._filings = filings
        self._gateway = gateway

    async def execute(self, req: FetchLatestDocumentRequest) -> LatestDocument:
        """Execute the fetch.

        Raises:
            EdgarMappingError: If ``form_type`` is blank.
            EdgarNotFound: If the entity has no filing of that form type.
            EdgarDecodeError: If the newest filing lists no primary document.
        """
        if not req.form_type.strip():
            raise EdgarMappingError("form_type must not be empty.")
        options = FilingOptions(form_types=(req.form_type,), limit=1)

        result = await self._filings.execute(GetEntityFilingsRequest(req.entity, options))
        if not result.records and result.history_pages:
            result = await self._filings.execute(
                GetEntityFilingsRequest(req.entity, options, include_history=True)
            )
        if not result.records:
            raise EdgarNotFound(
                "No filing of the requested form type.",
                details={"entity": str(req.entity), "form_type": req.form_type},
            )

        record = result.records[0]
        if not record.primary_document:
            raise EdgarDecodeError(
                "Filing lists no primary document.",
                details={"accession": record.accession.dashed, "form_type": record.form_type},
            )

        content = await self._gateway.fetch_document(record.document_url)
        logger.info(
            "edgar.latest_document.success",
            extra={"cik": record.cik, "accession": record.accession.dashed, "bytes": len(content)},
        )
        return LatestDocument(record=record, content=content)
