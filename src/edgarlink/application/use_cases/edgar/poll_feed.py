# src/edgarlink/application/use_cases/edgar/poll_feed.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Use case: poll an Atom or RSS feed for recent filings.

Scope:
    * Fetch and decode any feed URL.
    * Drop items published before ``since``; items without a timestamp are
      kept.
    * Optionally resolve entities for items whose payload carries no CIK but
      whose title names a ticker, best effort.
    * Apply :class:`FilingOptions`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Final

from edgarlink.adapters.gateways.ticker_resolver import TickerResolver
from edgarlink.application.interfaces.edgar_gateway import EdgarArchiveGateway
from edgarlink.application.services.filing_filter import apply_filing_options
from edgarlink.domain.entities.decode_report import DecodeWarning
from edgarlink.domain.entities.edgar_feed import FeedItem
from edgarlink.domain.entities.filing_options import FilingOptions
from edgarlink.domain.enums.edgar import FeedFormat
from edgarlink.domain.exceptions.edgar import EdgarNotFound

logger = logging.getLogger(__name__)

_TICKER_RE: Final[re.Pattern[str]] = re.compile(r"\(([A-Z]{1,5}(?:[.-][A-Z]{1,2})?)\)")
_BARE_TICKER_RE: Final[re.Pattern[str]] = re.compile(r"^[A-Z]{1,5}(?:[.-][A-Z]{1,2})?$")


@dataclass(frozen=True)
class PollFeedRequest:
    """Request parameters for one feed poll.

    Args:
        url: Atom or RSS feed URL.
        since: Drop items published before this instant. Naive values are
            taken as UTC.
        options: Filter applied to the remaining items.
        resolve_entities: Resolve tickers named in titles for items without
            an entity.
    """

    url: str
    since: datetime | None = None
    options: FilingOptions | None = None
    resolve_entities: bool = False


@dataclass(frozen=True)
class FeedPollResult:
    """Items kept by one poll, in feed order."""

    feed_format: FeedFormat
    title: str | None
    items: tuple[FeedItem, ...]
    warnings: tuple[DecodeWarning, ...] = ()


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def ticker_hint(title: str) -> str | None:
    """Return a ticker-looking token from a feed title, if any."""
    match = _TICKER_RE.search(title)
    if match:
        return match.group(1)
    stripped = title.strip()
    return stripped if _BARE_TICKER_RE.match(stripped) else None


class PollFeedUseCase:
    """Poll a feed.

    Args:
        gateway: Archive gateway used to fetch the feed.
        resolver: Ticker resolver used when ``resolve_entities`` is set.
    """

    def __init__(self, *, gateway: EdgarArchiveGateway, resolver: TickerResolver | None = None) -> None:
        self._gateway = gateway
        self._resolver = resolver

    async def execute(self, req: PollFeedRequest) -> FeedPollResult:
        """Execute the poll.

        Raises:
            EdgarDecodeError: If the feed XML cannot be parsed or has an
                unknown root element.
        """
        decoded = await self._gateway.fetch_feed(req.url)
        document = decoded.value
        items = list(document.items)

        if req.since is not None:
            since = _aware(req.since)
            items = [i for i in items if i.published is None or _aware(i.published) >= since]

        if req.resolve_entities and self._resolver is not None:
            items = [await self._resolve(item) for item in items]

        kept = apply_filing_options(items, req.options)
        logger.info(
            "edgar.feed.polled",
            extra={
                "url": req.url,
                "format": document.feed_format.value,
                "decoded": len(document.items),
                "returned": len(kept),
                "skipped": len(decoded.warnings),
            },
        )
        return FeedPollResult(
            feed_format=document.feed_format,
            title=document.title,
            items=tuple(kept),
            warnings=decoded.warnings,
        )

    async def _resolve(self, item: FeedItem) -> FeedItem:
        if item.entity is not None or self._resolver is None:
            return item
        hint = ticker_hint(item.title)
        if hint is None:
            return item
        try:
            entity = await self._resolver.resolve(hint)
        except EdgarNotFound:
            logger.debug("edgar.feed.unresolved_ticker", extra={"ticker": hint, "title": item.title})
            return item
        return item.with_entity(entity)
