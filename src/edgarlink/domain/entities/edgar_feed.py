# src/edgarlink/domain/entities/edgar_feed.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""EDGAR syndication feed entities.

Layer:
    domain
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from edgarlink.domain.entities.edgar_company import EntityIdentifier
from edgarlink.domain.enums.edgar import FeedFormat


@dataclass(frozen=True)
class FeedItem:
    """One Atom entry or RSS item.

    Args:
        title: Item title.
        link: Item link (Atom ``alternate`` link or RSS ``<link>``).
        published: Publish/update timestamp, if the item carries one.
        summary: Summary, description or content text.
        entity: Filer identity, when resolvable from the payload.
        form_type: Filing form code, when the payload carries one.
        accession_number: Dashed accession number, when the payload carries one.
    """

    title: str
    link: str
    published: datetime | None = None
    summary: str | None = None
    entity: EntityIdentifier | None = None
    form_type: str | None = None
    accession_number: str | None = None

    @property
    def cik(self) -> str | None:
        return self.entity.cik if self.entity is not None else None

    def with_entity(self, entity: EntityIdentifier) -> FeedItem:
        """Return a copy carrying ``entity``."""
        return replace(self, entity=entity)


@dataclass(frozen=True)
class FeedDocument:
    """A decoded feed: format, channel title and items in document order."""

    feed_format: FeedFormat
    title: str | None
    items: tuple[FeedItem, ...]
