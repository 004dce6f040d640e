# src/edgarlink/domain/enums/edgar.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""
EDGAR-specific enumerations.

Purpose:
    Provide stable tokens for bulk index layouts, calendar quarters and
    syndication feed formats.

Layer:
    domain
"""

from __future__ import annotations

from enum import Enum

from edgarlink.domain.exceptions.edgar import EdgarMappingError


class IndexType(str, Enum):
    """Layout of an EDGAR bulk index file.

    * MASTER: pipe-delimited ``CIK|Company Name|Form Type|Date Filed|Filename``.
    * COMPANY: fixed-width, sorted by company name, relative archive paths.
    * CRAWLER: fixed-width, sorted by company name, absolute index-page URLs.
    """

    MASTER = "master"
    COMPANY = "company"
    CRAWLER = "crawler"

    @classmethod
    def from_label(cls, label: str) -> IndexType:
        """Resolve an index type from any label containing its name.

        Raises:
            EdgarMappingError: If no known index type name occurs in ``label``.
        """
        lowered = label.lower()
        for member in cls:
            if member.value in lowered:
                return member
        raise EdgarMappingError("Unknown index type.", details={"label": label})


class Quarter(int, Enum):
    """Calendar quarter used by the EDGAR index directory layout."""

    Q1 = 1
    Q2 = 2
    Q3 = 3
    Q4 = 4

    @classmethod
    def from_month(cls, month: int) -> Quarter:
        """Return the quarter containing ``month``.

        Raises:
            EdgarMappingError: If ``month`` is outside 1..12.
        """
        if not 1 <= month <= 12:
            raise EdgarMappingError("Month must be between 1 and 12.", details={"month": month})
        return cls((month - 1) // 3 + 1)


class FeedFormat(str, Enum):
    """Syndication format detected from the feed's root element."""

    ATOM = "atom"
    RSS = "rss"
