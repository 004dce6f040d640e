# src/edgarlink/adapters/gateways/ticker_resolver.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Ticker → CIK resolution backed by the archive's reference map.

The map is downloaded once per resolver and cached in memory. Concurrent
first lookups wait on the same fetch.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Mapping
from typing import Final

from edgarlink.application.interfaces.edgar_gateway import EdgarArchiveGateway
from edgarlink.domain.entities.edgar_company import CompanyTicker, EntityIdentifier
from edgarlink.domain.exceptions.edgar import EdgarMappingError, EdgarNotFound

logger = logging.getLogger(__name__)

_NUMERIC_RE: Final[re.Pattern[str]] = re.compile(r"^\s*(?:CIK)?\s*\d{1,10}\s*$", re.IGNORECASE)


class TickerResolver:
    """Resolve ticker symbols (or raw CIKs) to entity identifiers."""

    def __init__(self, gateway: EdgarArchiveGateway) -> None:
        self._gateway = gateway
        self._by_ticker: dict[str, CompanyTicker] | None = None
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._by_ticker is not None

    async def load(self) -> Mapping[str, CompanyTicker]:
        """Return the cached map, fetching it on first use."""
        if self._by_ticker is not None:
            return self._by_ticker
        async with self._lock:
            if self._by_ticker is None:
                decoded = await self._gateway.fetch_company_tickers()
                by_ticker: dict[str, CompanyTicker] = {}
                for row in decoded.value:
                    by_ticker.setdefault(row.ticker, row)
                self._by_ticker = by_ticker
                logger.info(
                    "edgar.tickers.loaded",
                    extra={"tickers": len(by_ticker), "skipped": len(decoded.warnings)},
                )
        return self._by_ticker

    async def lookup(self, ticker: str) -> CompanyTicker | None:
        """Return the reference row for ``ticker``, if listed."""
        by_ticker = await self.load()
        return by_ticker.get(ticker.strip().upper())

    async def resolve(self, ticker: str) -> EntityIdentifier:
        """Resolve a ticker symbol.

        Raises:
            EdgarNotFound: If the ticker is not listed.
        """
        row = await self.lookup(ticker)
        if row is None:
            raise EdgarNotFound("Unknown ticker symbol.", details={"ticker": ticker})
        return EntityIdentifier(row.cik, ticker=row.ticker)

    async def resolve_entity(self, value: str | int | EntityIdentifier) -> EntityIdentifier:
        """Accept an identifier, a numeric CIK or a ticker symbol.

        Raises:
            EdgarMappingError: If ``value`` is blank.
            EdgarNotFound: If a ticker symbol is not listed.
        """
        if isinstance(value, EntityIdentifier):
            return value
        if isinstance(value, int) or _NUMERIC_RE.match(value):
            return EntityIdentifier.from_cik(value)
        if not value.strip():
            raise EdgarMappingError("Entity must not be empty.")
        return await self.resolve(value)
