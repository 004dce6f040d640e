# src/edgarlink/adapters/gateways/edgar_gateway.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Adapter Gateway: EDGAR archive → decoded payloads.

Purpose:
    Implement the application-level archive gateway on top of the
    rate-governed EDGAR transport. Provide:

    * Submissions documents and older history pages.
    * The ticker reference map.
    * Full-text search pages.
    * Atom/RSS feeds and the standard feed URLs.
    * Daily and quarterly bulk index files, with file-name fallbacks.
    * ``index.json`` directory listings.

Layer:
    adapters
"""

from __future__ import annotations

import logging
from typing import Final

import httpx

from edgarlink.adapters.decoders.feed_decoder import decode_feed
from edgarlink.adapters.decoders.index_decoder import decode_index
from edgarlink.adapters.decoders.listing_decoder import (
    decode_company_tickers,
    decode_directory_listing,
)
from edgarlink.adapters.decoders.search_decoder import decode_search
from edgarlink.adapters.decoders.submissions_decoder import (
    decode_submission_page,
    decode_submissions,
)
from edgarlink.domain.entities.decode_report import Decoded
from edgarlink.domain.entities.edgar_company import CompanyTicker, EntityIdentifier
from edgarlink.domain.entities.edgar_feed import FeedDocument
from edgarlink.domain.entities.edgar_index import (
    DirectoryListing,
    EdgarDay,
    EdgarPeriod,
    IndexEntry,
)
from edgarlink.domain.entities.edgar_search import SearchHit, SearchQuery
from edgarlink.domain.entities.edgar_submissions import SubmissionRow, SubmissionsDocument
from edgarlink.domain.enums.edgar import IndexType
from edgarlink.domain.exceptions.edgar import EdgarMappingError, EdgarNotFound
from edgarlink.infrastructure.external_apis.edgar.client import EdgarClient

logger = logging.getLogger(__name__)

XBRL_RSS_PATH: Final[str] = "usgaap.rss.xml"
DEFAULT_FEED_COUNT: Final[int] = 40


class HttpEdgarGateway:
    """HTTP-based EDGAR archive gateway implementation."""

    def __init__(self, client: EdgarClient) -> None:
        """Initialize the gateway.

        Args:
            client: Rate-governed EDGAR transport.
        """
        self._client = client
        settings = client.settings
        self._archives = settings.archives_url.rstrip("/")
        self._data = settings.data_url.rstrip("/")
        self._files = settings.files_url.rstrip("/")
        self._search = settings.search_url.rstrip("/")
        self._browse = settings.browse_url.rstrip("/")

    @property
    def archives_url(self) -> str:
        return self._archives

    # ------------------------------------------------------------------ #
    # Entities
    # ------------------------------------------------------------------ #

    async def fetch_submissions(self, entity: EntityIdentifier) -> Decoded[SubmissionsDocument]:
        """Fetch and decode ``submissions/CIK##########.json``."""
        url = f"{self._data}/submissions/CIK{entity.cik}.json"
        logger.info("edgar.fetch_submissions.start", extra={"cik": entity.cik})
        body = await self._client.get_bytes(url, endpoint="submissions")
        decoded = decode_submissions(body, cik=entity.cik)
        logger.info(
            "edgar.fetch_submissions.success",
            extra={
                "cik": entity.cik,
                "filings_count": len(decoded.value.filings),
                "history_pages": len(decoded.value.history),
                "skipped": len(decoded.warnings),
            },
        )
        return decoded

    async def fetch_submission_page(self, name: str) -> Decoded[tuple[SubmissionRow, ...]]:
        """Fetch and decode an older history page (``CIK##########-submissions-001.json``)."""
        cleaned = name.strip().lstrip("/")
        if not cleaned:
            raise EdgarMappingError("History page name must not be empty.")
        body = await self._client.get_bytes(f"{self._data}/submissions/{cleaned}", endpoint="submissions_page")
        return decode_submission_page(body)

    async def fetch_company_tickers(self) -> Decoded[tuple[CompanyTicker, ...]]:
        """Fetch and decode ``company_tickers.json``."""
        body = await self._client.get_bytes(f"{self._files}/company_tickers.json", endpoint="tickers")
        return decode_company_tickers(body)

    async def fetch_document(self, url: str) -> bytes:
        """Fetch raw document bytes."""
        return await self._client.get_bytes(url, endpoint="document")

    # ------------------------------------------------------------------ #
    # Search
    # ------------------------------------------------------------------ #

    async def search(self, query: SearchQuery) -> Decoded[tuple[int, tuple[SearchHit, ...]]]:
        """Execute one full-text search request."""
        body = await self._client.get_bytes(
            self._search,
            endpoint="search",
            params=query.to_query_params(),
        )
        return decode_search(body)

    # ------------------------------------------------------------------ #
    # Feeds
    # ------------------------------------------------------------------ #

    async def fetch_feed(self, url: str) -> Decoded[FeedDocument]:
        """Fetch and decode an Atom or RSS feed."""
        body = await self._client.get_bytes(url, endpoint="feed")
        return decode_feed(body)

    def current_filings_feed_url(
        self,
        *,
        form_type: str | None = None,
        count: int = DEFAULT_FEED_COUNT,
    ) -> str:
        """URL of the current-filings Atom feed."""
        params: dict[str, str | int] = {
            "action": "getcurrent",
            "type": form_type or "",
            "count": count,
            "output": "atom",
        }
        return str(httpx.URL(self._browse, params=params))

    def company_feed_url(
        self,
        entity: EntityIdentifier,
        *,
        form_type: str | None = None,
        count: int = DEFAULT_FEED_COUNT,
    ) -> str:
        """URL of one company's filings Atom feed."""
        params: dict[str, str | int] = {
            "action": "getcompany",
            "CIK": entity.cik,
            "type": form_type or "",
            "dateb": "",
            "owner": "include",
            "count": count,
            "output": "atom",
        }
        return str(httpx.URL(self._browse, params=params))

    def xbrl_feed_url(self) -> str:
        """URL of the XBRL financial data RSS feed."""
        return f"{self._archives}/{XBRL_RSS_PATH}"

    # ------------------------------------------------------------------ #
    # Bulk indices
    # ------------------------------------------------------------------ #

    def daily_index_urls(self, day: EdgarDay, index_type: IndexType = IndexType.MASTER) -> tuple[str, ...]:
        """Candidate URLs for one day's index, in fetch order."""
        stem = (
            f"{self._archives}/daily-index/{day.year}/QTR{day.quarter.value}/"
            f"{index_type.value}.{day.compact}"
        )
        return (f"{stem}.idx", f"{stem}.gz")

    def quarterly_index_urls(
        self,
        period: EdgarPeriod,
        index_type: IndexType = IndexType.MASTER,
    ) -> tuple[str, ...]:
        """Candidate URLs for one quarter's full index, in fetch order."""
        stem = f"{self._archives}/full-index/{period.year}/QTR{period.quarter.value}/{index_type.value}"
        return (f"{stem}.gz", f"{stem}.idx")

    async def fetch_daily_index(
        self,
        day: EdgarDay,
        index_type: IndexType = IndexType.MASTER,
    ) -> Decoded[tuple[IndexEntry, ...]]:
        """Fetch and decode one day's index, trying ``.idx`` then ``.gz``."""
        return await self._fetch_index(self.daily_index_urls(day, index_type), index_type, label=str(day))

    async def fetch_quarterly_index(
        self,
        period: EdgarPeriod,
        index_type: IndexType = IndexType.MASTER,
    ) -> Decoded[tuple[IndexEntry, ...]]:
        """Fetch and decode one quarter's full index, trying ``.gz`` then ``.idx``."""
        return await self._fetch_index(
            self.quarterly_index_urls(period, index_type), index_type, label=str(period)
        )

    async def fetch_directory_listing(self, path: str) -> Decoded[DirectoryListing]:
        """Fetch ``<archives>/<path>/index.json``, e.g. ``daily-index/2024/QTR1``."""
        cleaned = path.strip("/")
        url = f"{self._archives}/{cleaned}/index.json" if cleaned else f"{self._archives}/index.json"
        body = await self._client.get_bytes(url, endpoint="listing")
        return decode_directory_listing(body)

    async def _fetch_index(
        self,
        urls: tuple[str, ...],
        index_type: IndexType,
        *,
        label: str,
    ) -> Decoded[tuple[IndexEntry, ...]]:
        for url in urls:
            try:
                body = await self._client.get_bytes(url, endpoint="index")
            except EdgarNotFound:
                logger.debug("edgar.index.candidate_missing", extra={"url": url, "label": label})
                continue
            decoded = decode_index(body, index_type)
            logger.info(
                "edgar.index.fetched",
                extra={
                    "label": label,
                    "url": url,
                    "entries": len(decoded.value),
                    "skipped": len(decoded.warnings),
                },
            )
            return decoded
        raise EdgarNotFound(
            "EDGAR index file not found.",
            details={"label": label, "index_type": index_type.value, "tried": list(urls)},
        )
