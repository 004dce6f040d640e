# src/edgarlink/domain/entities/edgar_index.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""EDGAR bulk index entities.

Purpose:
    Model bulk index rows and the calendar addressing (day / quarter) used to
    locate daily and quarterly index archives, plus the directory listings the
    archive publishes for them.

Layer:
    domain
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Final

from edgarlink.domain.entities.edgar_company import EntityIdentifier
from edgarlink.domain.enums.edgar import Quarter
from edgarlink.domain.exceptions.edgar import EdgarMappingError

FIRST_INDEX_YEAR: Final[int] = 1994


def _check_year(year: int) -> None:
    if year < FIRST_INDEX_YEAR:
        raise EdgarMappingError(
            f"Index year must be {FIRST_INDEX_YEAR} or later.",
            details={"year": year},
        )


@dataclass(frozen=True)
class IndexEntry:
    """One row of a bulk index file.

    Args:
        company_name: Filer name as listed.
        form_type: Form code as listed.
        entity: Filer identity (canonical CIK).
        date_filed: Filing date.
        path: Document path as listed; relative to the archive root for
            master/company indices, absolute for crawler indices.
    """

    company_name: str
    form_type: str
    entity: EntityIdentifier
    date_filed: date
    path: str

    @property
    def cik(self) -> str:
        """Canonical CIK of the filer."""
        return self.entity.cik


@dataclass(frozen=True)
class EdgarDay:
    """A calendar day addressable in the daily index tree."""

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        """Validate the calendar date and the archive's first year."""
        _check_year(self.year)
        try:
            date(self.year, self.month, self.day)
        except ValueError as exc:
            raise EdgarMappingError(
                "Invalid calendar day.",
                details={"year": self.year, "month": self.month, "day": self.day},
            ) from exc

    @classmethod
    def from_date(cls, value: date) -> EdgarDay:
        return cls(value.year, value.month, value.day)

    @property
    def as_date(self) -> date:
        return date(self.year, self.month, self.day)

    @property
    def quarter(self) -> Quarter:
        return Quarter.from_month(self.month)

    @property
    def compact(self) -> str:
        """``YYYYMMDD`` form used in daily index file names."""
        return f"{self.year:04d}{self.month:02d}{self.day:02d}"

    def __str__(self) -> str:
        return self.as_date.isoformat()


@dataclass(frozen=True)
class EdgarPeriod:
    """A calendar quarter addressable in the full index tree."""

    year: int
    quarter: Quarter

    def __post_init__(self) -> None:
        _check_year(self.year)
        object.__setattr__(self, "quarter", Quarter(self.quarter))

    @classmethod
    def containing(cls, value: date) -> EdgarPeriod:
        """Return the quarter that contains ``value``."""
        return cls(value.year, Quarter.from_month(value.month))

    def next(self) -> EdgarPeriod:
        """Return the following quarter."""
        if self.quarter is Quarter.Q4:
            return EdgarPeriod(self.year + 1, Quarter.Q1)
        return EdgarPeriod(self.year, Quarter(self.quarter.value + 1))

    def __str__(self) -> str:
        return f"{self.year}Q{self.quarter.value}"


@dataclass(frozen=True)
class DirectoryItem:
    """One entry of an archive ``index.json`` directory listing."""

    name: str
    href: str
    item_type: str
    size: str
    last_modified: datetime | None

    @property
    def is_file(self) -> bool:
        return self.item_type == "file"


@dataclass(frozen=True)
class DirectoryListing:
    """Archive ``index.json`` directory listing."""

    name: str
    parent_dir: str
    items: tuple[DirectoryItem, ...]

    def find(self, name: str) -> DirectoryItem | None:
        """Return the file item called ``name``, if listed."""
        for item in self.items:
            if item.name == name and item.is_file:
                return item
        return None
