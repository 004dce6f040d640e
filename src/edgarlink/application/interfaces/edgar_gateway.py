# src/edgarlink/application/interfaces/edgar_gateway.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Application-level EDGAR archive gateway interface.

Purpose:
    Provide a use-case-friendly read interface over the archive. Use cases
    depend on this protocol, never on the transport or the decoders directly.

Layer:
    application

Notes:
    Implementations fetch bytes through the rate-governed transport and
    return decoder output (values plus skip warnings). Normalization into
    :class:`FilingRecord` stays in the use cases.
"""

from __future__ import annotations

from typing import Protocol

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


class EdgarArchiveGateway(Protocol):
    """Read access to the EDGAR archive."""

    async def fetch_submissions(self, entity: EntityIdentifier) -> Decoded[SubmissionsDocument]:
        """Fetch and decode the submissions document for ``entity``.

        Raises:
            EdgarNotFound: If the archive has no such entity.
            EdgarDecodeError: If the document cannot be decoded.
        """

    async def fetch_submission_page(self, name: str) -> Decoded[tuple[SubmissionRow, ...]]:
        """Fetch and decode an older filing history page by file name."""

    async def fetch_company_tickers(self) -> Decoded[tuple[CompanyTicker, ...]]:
        """Fetch and decode the ticker → CIK reference map."""

    async def fetch_document(self, url: str) -> bytes:
        """Fetch raw document bytes from an archive URL."""

    async def search(self, query: SearchQuery) -> Decoded[tuple[int, tuple[SearchHit, ...]]]:
        """Execute one full-text search request and decode ``(total, hits)``."""

    async def fetch_feed(self, url: str) -> Decoded[FeedDocument]:
        """Fetch and decode an Atom or RSS feed."""

    async def fetch_daily_index(
        self,
        day: EdgarDay,
        index_type: IndexType = IndexType.MASTER,
    ) -> Decoded[tuple[IndexEntry, ...]]:
        """Fetch and decode one day's index file."""

    async def fetch_quarterly_index(
        self,
        period: EdgarPeriod,
        index_type: IndexType = IndexType.MASTER,
    ) -> Decoded[tuple[IndexEntry, ...]]:
        """Fetch and decode one quarter's full index file."""

    async def fetch_directory_listing(self, path: str) -> Decoded[DirectoryListing]:
        """Fetch and decode an ``index.json`` listing below the archive root."""
