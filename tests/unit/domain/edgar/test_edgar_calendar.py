from __future__ import annotations

from datetime import date, datetime

import pytest

from edgarlink.domain.entities.edgar_index import (
    DirectoryItem,
    DirectoryListing,
    EdgarDay,
    EdgarPeriod,
)
from edgarlink.domain.enums.edgar import IndexType, Quarter
from edgarlink.domain.exceptions.edgar import EdgarMappingError


@pytest.mark.parametrize(
    ("month", "quarter"),
    [(1, Quarter.Q1), (3, Quarter.Q1), (4, Quarter.Q2), (9, Quarter.Q3), (12, Quarter.Q4)],
)
def test_quarter_from_month(month: int, quarter: Quarter) -> None:
    assert Quarter.from_month(month) is quarter


@pytest.mark.parametrize("month", [0, 13])
def test_quarter_from_month_rejects_out_of_range(month: int) -> None:
    with pytest.raises(EdgarMappingError):
        Quarter.from_month(month)


def test_edgar_day_addresses_daily_index_tree() -> None:
    day = EdgarDay.from_date(date(2024, 5, 7))

    assert day.compact == "20240507"
    assert day.quarter is Quarter.Q2
    assert day.as_date == date(2024, 5, 7)
    assert str(day) == "2024-05-07"


def test_edgar_day_rejects_invalid_calendar_values() -> None:
    with pytest.raises(EdgarMappingError):
        EdgarDay(2023, 2, 29)
    with pytest.raises(EdgarMappingError):
        EdgarDay(1993, 12, 31)


def test_edgar_period_next_rolls_over_year() -> None:
    q4 = EdgarPeriod(2023, Quarter.Q4)

    assert q4.next() == EdgarPeriod(2024, Quarter.Q1)
    assert EdgarPeriod(2024, Quarter.Q1).next() == EdgarPeriod(2024, Quarter.Q2)
    assert str(q4) == "2023Q4"


def test_edgar_period_containing_and_int_quarter() -> None:
    assert EdgarPeriod.containing(date(2024, 8, 1)) == EdgarPeriod(2024, Quarter.Q3)
    assert EdgarPeriod(2024, 2).quarter is Quarter.Q2  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("label", "expected"),
    [("master", IndexType.MASTER), ("Company", IndexType.COMPANY), ("crawler.idx", IndexType.CRAWLER)],
)
def test_index_type_from_label(label: str, expected: IndexType) -> None:
    assert IndexType.from_label(label) is expected


def test_index_type_from_label_unknown() -> None:
    with pytest.raises(EdgarMappingError):
        IndexType.from_label("form")


def test_directory_listing_find_only_returns_files() -> None:
    listing = DirectoryListing(
        name="daily-index/2024/",
        parent_dir="../",
        items=(
            DirectoryItem("QTR1", "QTR1/", "dir", "4 KB", None),
            DirectoryItem("master.20240102.idx", "master.20240102.idx", "file", "1 KB", datetime(2024, 1, 2)),
        ),
    )

    assert listing.find("QTR1") is None
    found = listing.find("master.20240102.idx")
    assert found is not None
    assert found.is_file
