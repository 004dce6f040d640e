# src/edgarlink/application/use_cases/edgar/search_filings.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Use case: full-text filing search.

Scope:
    * ``execute`` runs one search request and returns one normalized page.
    * ``execute_all`` walks every result page at 100 hits per page, issuing
      page requests in concurrent batches of seven. Each page request passes
      through the shared rate governor.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Final

from edgarlink.adapters.mappers.edgar_normalizer import EdgarNormalizer
from edgarlink.application.interfaces.edgar_gateway import EdgarArchiveGateway
from edgarlink.application.services.filing_filter import apply_filing_options
from edgarlink.domain.entities.decode_report import DecodeWarning
from edgarlink.domain.entities.edgar_filing import FilingRecord
from edgarlink.domain.entities.edgar_search import SearchHit, SearchPage, SearchQuery
from edgarlink.domain.entities.filing_options import FilingOptions

logger = logging.getLogger(__name__)

SEARCH_PAGE_SIZE: Final[int] = 100
SEARCH_BATCH_SIZE: Final[int] = 7


@dataclass(frozen=True)
class SearchFilingsRequest:
    """Request parameters for a filing search."""

    query: SearchQuery
    options: FilingOptions | None = None


class SearchFilingsUseCase:
    """Execute structured full-text searches.

    Args:
        gateway: Archive gateway used for search requests.
        normalizer: Domain normalizer.
        page_size: Hits requested per page by ``execute_all``.
        batch_size: Pages requested concurrently by ``execute_all``.
    """

    def __init__(
        self,
        *,
        gateway: EdgarArchiveGateway,
        normalizer: EdgarNormalizer,
        page_size: int = SEARCH_PAGE_SIZE,
        batch_size: int = SEARCH_BATCH_SIZE,
    ) -> None:
        self._gateway = gateway
        self._normalizer = normalizer
        self._page_size = page_size
        self._batch_size = batch_size

    async def execute(self, req: SearchFilingsRequest) -> SearchPage:
        """Run one search request."""
        decoded = await self._gateway.search(req.query)
        total, hits = decoded.value
        normalized = self._normalizer.from_search_hits(hits)
        records = apply_filing_options(normalized.value, req.options)
        logger.info(
            "edgar.search.page",
            extra={"total": total, "hits": len(hits), "returned": len(records)},
        )
        return SearchPage(
            total=total,
            records=tuple(records),
            warnings=(*decoded.warnings, *normalized.warnings),
        )

    async def execute_all(self, req: SearchFilingsRequest) -> SearchPage:
        """Fetch every page of results, then normalize and filter once."""
        first = await self._gateway.search(self._page(req.query, 0))
        total, first_hits = first.value
        hits: list[SearchHit] = list(first_hits)
        warnings: list[DecodeWarning] = list(first.warnings)

        offsets = list(range(self._page_size, total, self._page_size))
        for start in range(0, len(offsets), self._batch_size):
            batch = offsets[start : start + self._batch_size]
            pages = await asyncio.gather(
                *(self._gateway.search(self._page(req.query, offset)) for offset in batch)
            )
            for page in pages:
                hits.extend(page.value[1])
                warnings.extend(page.warnings)
            logger.debug(
                "edgar.search.batch",
                extra={"offsets": batch, "collected": len(hits), "total": total},
            )

        normalized = self._normalizer.from_search_hits(hits)
        records: list[FilingRecord] = apply_filing_options(normalized.value, req.options)
        logger.info(
            "edgar.search.all",
            extra={"total": total, "pages": 1 + len(offsets), "returned": len(records)},
        )
        return SearchPage(
            total=total,
            records=tuple(records),
            warnings=(*warnings, *normalized.warnings),
        )

    def _page(self, query: SearchQuery, offset: int) -> SearchQuery:
        return query.paged(page=offset // self._page_size + 1, from_=offset, count=self._page_size)
