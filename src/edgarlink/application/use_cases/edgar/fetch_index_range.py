# src/edgarlink/application/use_cases/edgar/fetch_index_range.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Use case: fetch bulk index files across a window of days or quarters.

Scope:
    * One day or one quarter, or an inclusive window of either.
    * Every sub-fetch runs concurrently; the shared rate governor bounds the
      aggregate request rate.
    * A failed sub-fetch (missing file, exhausted retries, corrupt archive)
      is reported as an :class:`IndexFetchFailure` next to the entries of the
      sub-fetches that succeeded. The range as a whole does not fail.
    * Weekends are skipped for daily windows unless requested.

Notes:
    Entries are merged in calendar order and then filtered with
    :class:`FilingOptions`. :meth:`FetchIndexRangeUseCase.to_records`
    normalizes them into :class:`FilingRecord` values.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date, timedelta

from edgarlink.adapters.mappers.edgar_normalizer import EdgarNormalizer
from edgarlink.application.interfaces.edgar_gateway import EdgarArchiveGateway
from edgarlink.application.services.filing_filter import apply_filing_options
from edgarlink.domain.entities.decode_report import Decoded, DecodeWarning
from edgarlink.domain.entities.edgar_filing import FilingRecord
from edgarlink.domain.entities.edgar_index import EdgarDay, EdgarPeriod, IndexEntry
from edgarlink.domain.entities.filing_options import FilingOptions
from edgarlink.domain.enums.edgar import IndexType
from edgarlink.domain.exceptions.edgar import EdgarError, EdgarMappingError

logger = logging.getLogger(__name__)

_SATURDAY = 5


@dataclass(frozen=True)
class IndexFetchFailure:
    """One sub-fetch that produced no entries.

    Args:
        label: Day (``2024-01-02``) or quarter (``2024Q1``) that failed.
        error_kind: Name of the EDGAR error kind, e.g. ``EdgarNotFound``.
        message: Error message.
    """

    label: str
    error_kind: str
    message: str


@dataclass(frozen=True)
class IndexRangeResult:
    """Best-effort aggregate of a range fetch."""

    entries: tuple[IndexEntry, ...]
    warnings: tuple[DecodeWarning, ...] = ()
    failures: tuple[IndexFetchFailure, ...] = ()

    @property
    def complete(self) -> bool:
        """Whether every sub-fetch succeeded."""
        return not self.failures


@dataclass(frozen=True)
class FetchIndexRangeRequest:
    """Inclusive window of days.

    Args:
        start: First day.
        end: Last day; defaults to ``start``.
        index_type: Index layout to fetch.
        options: Filter applied to the merged entries.
        include_weekends: Also fetch Saturdays and Sundays.
    """

    start: date
    end: date | None = None
    index_type: IndexType = IndexType.MASTER
    options: FilingOptions | None = None
    include_weekends: bool = False


@dataclass(frozen=True)
class FetchQuarterRangeRequest:
    """Inclusive window of quarters."""

    start: EdgarPeriod
    end: EdgarPeriod | None = None
    index_type: IndexType = IndexType.MASTER
    options: FilingOptions | None = None


class FetchIndexRangeUseCase:
    """Fetch and merge bulk index files.

    Args:
        gateway: Archive gateway used to fetch index files.
        normalizer: Domain normalizer for :meth:`to_records`.
    """

    def __init__(self, *, gateway: EdgarArchiveGateway, normalizer: EdgarNormalizer) -> None:
        self._gateway = gateway
        self._normalizer = normalizer

    async def execute(self, req: FetchIndexRangeRequest) -> IndexRangeResult:
        """Fetch every day in the window.

        Raises:
            EdgarMappingError: If the window is reversed or starts before 1994.
        """
        end = req.end or req.start
        if end < req.start:
            raise EdgarMappingError(
                "Index range end precedes start.",
                details={"start": req.start.isoformat(), "end": end.isoformat()},
            )

        days: list[EdgarDay] = []
        current = req.start
        while current <= end:
            if req.include_weekends or current.weekday() < _SATURDAY:
                days.append(EdgarDay.from_date(current))
            current += timedelta(days=1)

        jobs = [
            (str(day), lambda d=day: self._gateway.fetch_daily_index(d, req.index_type))
            for day in days
        ]
        return await self._gather(jobs, req.options)

    async def execute_quarters(self, req: FetchQuarterRangeRequest) -> IndexRangeResult:
        """Fetch every quarter in the window.

        Raises:
            EdgarMappingError: If the window is reversed.
        """
        end = req.end or req.start
        if (end.year, end.quarter.value) < (req.start.year, req.start.quarter.value):
            raise EdgarMappingError(
                "Index range end precedes start.",
                details={"start": str(req.start), "end": str(end)},
            )

        periods: list[EdgarPeriod] = []
        current = req.start
        while (current.year, current.quarter.value) <= (end.year, end.quarter.value):
            periods.append(current)
            current = current.next()

        jobs = [
            (str(period), lambda p=period: self._gateway.fetch_quarterly_index(p, req.index_type))
            for period in periods
        ]
        return await self._gather(jobs, req.options)

    async def fetch_day(
        self,
        day: date,
        index_type: IndexType = IndexType.MASTER,
        options: FilingOptions | None = None,
    ) -> IndexRangeResult:
        """Fetch one calendar day's index (weekend days included)."""
        return await self.execute(
            FetchIndexRangeRequest(day, day, index_type, options, include_weekends=True)
        )

    async def fetch_quarter(
        self,
        period: EdgarPeriod,
        index_type: IndexType = IndexType.MASTER,
        options: FilingOptions | None = None,
    ) -> IndexRangeResult:
        """Fetch one quarter's full index."""
        return await self.execute_quarters(FetchQuarterRangeRequest(period, period, index_type, options))

    def to_records(self, result: IndexRangeResult) -> Decoded[tuple[FilingRecord, ...]]:
        """Normalize range entries into filing records."""
        return self._normalizer.from_index_entries(result.entries)

    async def _gather(
        self,
        jobs: list[tuple[str, Callable[[], Awaitable[Decoded[tuple[IndexEntry, ...]]]]]],
        options: FilingOptions | None,
    ) -> IndexRangeResult:
        outcomes = await asyncio.gather(*(self._one(label, job) for label, job in jobs))

        entries: list[IndexEntry] = []
        warnings: list[DecodeWarning] = []
        failures: list[IndexFetchFailure] = []
        for outcome in outcomes:
            if isinstance(outcome, IndexFetchFailure):
                failures.append(outcome)
                continue
            entries.extend(outcome.value)
            warnings.extend(outcome.warnings)

        kept = apply_filing_options(entries, options)
        logger.info(
            "edgar.index_range.done",
            extra={
                "sub_fetches": len(jobs),
                "failed": len(failures),
                "entries": len(kept),
                "skipped": len(warnings),
            },
        )
        return IndexRangeResult(entries=tuple(kept), warnings=tuple(warnings), failures=tuple(failures))

    @staticmethod
    async def _one(
        label: str,
        job: Callable[[], Awaitable[Decoded[tuple[IndexEntry, ...]]]],
    ) -> Decoded[tuple[IndexEntry, ...]] | IndexFetchFailure:
        try:
            return await job()
        except EdgarError as exc:
            logger.warning(
                "edgar.index_range.day_failed",
                extra={"label": label, "error_kind": type(exc).__name__, "details": exc.details},
            )
            return IndexFetchFailure(label=label, error_kind=type(exc).__name__, message=exc.message)
