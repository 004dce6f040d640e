# src/edgarlink/dependencies/edgar.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Dependency wiring for EDGAR callers.

Purpose:
    Construct the transport, gateway, normalizer, ticker resolver and the
    operation use cases from one settings value, and expose them as a single
    closable bundle.

Layer:
    dependencies

Notes:
    All use cases share one transport and therefore one rate governor, so the
    fair-access budget is global across every concurrent operation started
    from the bundle. Separate bundles have independent budgets.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from types import TracebackType

import httpx

from edgarlink.adapters.gateways.edgar_gateway import HttpEdgarGateway
from edgarlink.adapters.gateways.ticker_resolver import TickerResolver
from edgarlink.adapters.mappers.edgar_normalizer import (
    EdgarNormalizer,
    FinancialDataClassifier,
    default_financial_data_classifier,
)
from edgarlink.application.use_cases.edgar.fetch_index_range import (
    FetchIndexRangeRequest,
    FetchIndexRangeUseCase,
    IndexRangeResult,
)
from edgarlink.application.use_cases.edgar.get_entity_filings import (
    EntityFilings,
    FetchLatestDocumentRequest,
    FetchLatestDocumentUseCase,
    GetEntityFilingsRequest,
    GetEntityFilingsUseCase,
    LatestDocument,
)
from edgarlink.application.use_cases.edgar.poll_feed import (
    FeedPollResult,
    PollFeedRequest,
    PollFeedUseCase,
)
from edgarlink.application.use_cases.edgar.search_filings import (
    SearchFilingsRequest,
    SearchFilingsUseCase,
)
from edgarlink.domain.entities.edgar_company import EntityIdentifier
from edgarlink.domain.entities.edgar_search import SearchPage, SearchQuery
from edgarlink.domain.entities.filing_options import FilingOptions
from edgarlink.infrastructure.external_apis.edgar.client import EdgarClient
from edgarlink.infrastructure.external_apis.edgar.settings import EdgarSettings


@dataclass
class EdgarServices:
    """Wired EDGAR components and caller-facing operations."""

    client: EdgarClient
    gateway: HttpEdgarGateway
    normalizer: EdgarNormalizer
    resolver: TickerResolver
    entity_filings: GetEntityFilingsUseCase
    latest_document: FetchLatestDocumentUseCase
    search_filings: SearchFilingsUseCase
    poll: PollFeedUseCase
    index_range: FetchIndexRangeUseCase

    async def get_entity_filings(
        self,
        entity: str | int | EntityIdentifier,
        options: FilingOptions | None = None,
        *,
        include_history: bool = False,
    ) -> EntityFilings:
        """Filings for one entity (identifier, CIK or ticker)."""
        return await self.entity_filings.execute(
            GetEntityFilingsRequest(entity, options, include_history=include_history)
        )

    async def fetch_latest_document(
        self,
        entity: str | int | EntityIdentifier,
        form_type: str,
    ) -> LatestDocument:
        """Primary document bytes of the newest filing of ``form_type``."""
        return await self.latest_document.execute(FetchLatestDocumentRequest(entity, form_type))

    async def search(self, query: SearchQuery, options: FilingOptions | None = None) -> SearchPage:
        """One page of full-text search results."""
        return await self.search_filings.execute(SearchFilingsRequest(query, options))

    async def search_all(self, query: SearchQuery, options: FilingOptions | None = None) -> SearchPage:
        """Every page of full-text search results."""
        return await self.search_filings.execute_all(SearchFilingsRequest(query, options))

    async def poll_feed(
        self,
        url: str,
        since: datetime | None = None,
        options: FilingOptions | None = None,
        resolve_entities: bool = False,
    ) -> FeedPollResult:
        """Recent items of an Atom or RSS feed."""
        return await self.poll.execute(PollFeedRequest(url, since, options, resolve_entities))

    async def fetch_index_range(self, req: FetchIndexRangeRequest) -> IndexRangeResult:
        """Merged daily index entries across a window of days."""
        return await self.index_range.execute(req)

    async def aclose(self) -> None:
        """Close the transport's HTTP client if the bundle created it."""
        await self.client.aclose()

    async def __aenter__(self) -> EdgarServices:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def build_edgar_services(
    settings: EdgarSettings,
    *,
    http: httpx.AsyncClient | None = None,
    classifier: FinancialDataClassifier = default_financial_data_classifier,
) -> EdgarServices:
    """Wire every EDGAR component from ``settings``.

    Args:
        settings: Client settings.
        http: Optional shared ``httpx.AsyncClient``; the caller keeps
            ownership of it.
        classifier: Financial-data flag classifier for the normalizer.

    Raises:
        EdgarInvalidConfiguration: If the settings are unusable. Nothing is
            sent over the network in that case.
    """
    client = EdgarClient(settings, http=http)
    gateway = HttpEdgarGateway(client)
    normalizer = EdgarNormalizer(settings.archives_url, classifier=classifier)
    resolver = TickerResolver(gateway)
    entity_filings = GetEntityFilingsUseCase(gateway=gateway, normalizer=normalizer, resolver=resolver)
    return EdgarServices(
        client=client,
        gateway=gateway,
        normalizer=normalizer,
        resolver=resolver,
        entity_filings=entity_filings,
        latest_document=FetchLatestDocumentUseCase(filings=entity_filings, gateway=gateway),
        search_filings=SearchFilingsUseCase(gateway=gateway, normalizer=normalizer),
        poll=PollFeedUseCase(gateway=gateway, resolver=resolver),
        index_range=FetchIndexRangeUseCase(gateway=gateway, normalizer=normalizer),
    )
