# src/edgarlink/domain/entities/edgar_search.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""EDGAR full-text search criteria and result pages.

Layer:
    domain
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from edgarlink.domain.entities.decode_report import DecodeWarning
from edgarlink.domain.entities.edgar_filing import FilingRecord


@dataclass(frozen=True)
class SearchQuery:
    """Structured full-text search criteria.

    Field names follow Python conventions; :meth:`to_query_params` maps them
    onto the search endpoint's parameter names.
    """

    query: str | None = None
    keys_typed: str | None = None
    category: str | None = None
    location_code: str | None = None
    entity_name: str | None = None
    forms: tuple[str, ...] | None = None
    location_codes: tuple[str, ...] | None = None
    page: int | None = None
    from_: int | None = None
    count: int | None = None
    reverse_order: bool | None = None
    start_date: str | None = None
    end_date: str | None = None
    stemming: str | None = None
    ciks: tuple[str, ...] | None = None
    sic: str | None = None
    incorporated_location: bool | None = None

    def paged(self, *, page: int, from_: int, count: int) -> SearchQuery:
        """Return a copy addressing one result page."""
        return replace(self, page=page, from_=from_, count=count)

    def to_query_params(self) -> list[tuple[str, str]]:
        """Render the criteria as ordered query parameters."""
        params: list[tuple[str, str]] = []

        def put(name: str, value: str | None) -> None:
            if value is not None:
                params.append((name, value))

        put("q", self.query)
        put("keysTyped", self.keys_typed)
        put("category", self.category)
        put("locationCode", self.location_code)
        put("entityName", self.entity_name)
        put("forms", ",".join(self.forms) if self.forms else None)
        put("locationCodes", ",".join(self.location_codes) if self.location_codes else None)
        put("page", str(self.page) if self.page is not None else None)
        put("from", str(self.from_) if self.from_ is not None else None)
        put("count", str(self.count) if self.count is not None else None)
        if self.reverse_order is not None:
            put("reverse_order", "TRUE" if self.reverse_order else "FALSE")
        put("startdt", self.start_date)
        put("enddt", self.end_date)
        put("stemming", self.stemming)
        put("ciks", ",".join(self.ciks) if self.ciks else None)
        put("sic", self.sic)
        if self.incorporated_location is not None:
            put("incorporated_location", "true" if self.incorporated_location else "false")
        return params


@dataclass(frozen=True)
class SearchHit:
    """Decoded search hit before normalization."""

    hit_id: str
    accession: str
    form_type: str
    file_date: str
    ciks: tuple[str, ...]
    display_names: tuple[str, ...]
    period_ending: str | None = None
    root_forms: tuple[str, ...] = ()


@dataclass(frozen=True)
class SearchPage:
    """One page (or the merged pages) of normalized search results."""

    total: int
    records: tuple[FilingRecord, ...]
    warnings: tuple[DecodeWarning, ...] = ()
