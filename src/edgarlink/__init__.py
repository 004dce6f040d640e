# src/edgarlink/__init__.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""EdgarLink: a fair-access compliant async client for the SEC EDGAR archive."""

from __future__ import annotations

from edgarlink.application.use_cases.edgar.fetch_index_range import (
    FetchIndexRangeRequest,
    FetchQuarterRangeRequest,
    IndexFetchFailure,
    IndexRangeResult,
)
from edgarlink.application.use_cases.edgar.get_entity_filings import EntityFilings, LatestDocument
from edgarlink.application.use_cases.edgar.poll_feed import FeedPollResult
from edgarlink.dependencies.edgar import EdgarServices, build_edgar_services
from edgarlink.domain.entities.decode_report import DecodeWarning
from edgarlink.domain.entities.edgar_company import EntityIdentifier
from edgarlink.domain.entities.edgar_feed import FeedItem
from edgarlink.domain.entities.edgar_filing import AccessionNumber, FilingRecord
from edgarlink.domain.entities.edgar_index import EdgarDay, EdgarPeriod, IndexEntry
from edgarlink.domain.entities.edgar_search import SearchPage, SearchQuery
from edgarlink.domain.entities.filing_options import FilingOptions
from edgarlink.domain.enums.edgar import IndexType, Quarter
from edgarlink.domain.exceptions.edgar import (
    EdgarClientError,
    EdgarDecodeError,
    EdgarError,
    EdgarInvalidConfiguration,
    EdgarMappingError,
    EdgarNotFound,
    EdgarRateLimitExceeded,
    EdgarServerError,
)
from edgarlink.infrastructure.external_apis.edgar.settings import EdgarSettings, load_edgar_settings

__all__ = [
    "AccessionNumber",
    "DecodeWarning",
    "EdgarClientError",
    "EdgarDay",
    "EdgarDecodeError",
    "EdgarError",
    "EdgarInvalidConfiguration",
    "EdgarMappingError",
    "EdgarNotFound",
    "EdgarPeriod",
    "EdgarRateLimitExceeded",
    "EdgarServerError",
    "EdgarServices",
    "EdgarSettings",
    "EntityFilings",
    "EntityIdentifier",
    "FeedItem",
    "FeedPollResult",
    "FetchIndexRangeRequest",
    "FetchQuarterRangeRequest",
    "FilingOptions",
    "FilingRecord",
    "IndexEntry",
    "IndexFetchFailure",
    "IndexRangeResult",
    "IndexType",
    "LatestDocument",
    "Quarter",
    "SearchPage",
    "SearchQuery",
    "build_edgar_services",
    "load_edgar_settings",
]
