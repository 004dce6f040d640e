from __future__ import annotations

from datetime import date

import pytest

from edgarlink.adapters.mappers.edgar_normalizer import EdgarNormalizer
from edgarlink.application.use_cases.edgar.fetch_index_range import (
    FetchIndexRangeRequest,
    FetchIndexRangeUseCase,
    FetchQuarterRangeRequest,
    IndexFetchFailure,
)
from edgarlink.domain.entities.edgar_index import EdgarPeriod
from edgarlink.domain.entities.filing_options import FilingOptions
from edgarlink.domain.enums.edgar import Quarter
from edgarlink.domain.exceptions.edgar import EdgarMappingError
from tests.fixtures.edgar_payloads import master_index, master_index_with_malformed, master_line
from tests.fixtures.edgar_testkit import ARCHIVES_URL, StubGateway


def _day_index(day: str, *forms: str) -> bytes:
    compact = day.replace("-", "")
    return master_index(
        master_line(1000000 + n, f"FILER {n}", form, compact, n) for n, form in enumerate(forms, 1)
    )


def _use_case(stub: StubGateway) -> FetchIndexRangeUseCase:
    return FetchIndexRangeUseCase(gateway=stub, normalizer=EdgarNormalizer(ARCHIVES_URL))


@pytest.mark.asyncio
async def test_week_skips_weekends_and_collects_failures() -> None:
    stub = StubGateway()
    stub.daily["2024-01-02"] = _day_index("2024-01-02", "10-K", "8-K")
    stub.daily["2024-01-03"] = _day_index("2024-01-03", "4")
    stub.daily["2024-01-05"] = _day_index("2024-01-05", "10-Q")

    result = await _use_case(stub).execute(FetchIndexRangeRequest(date(2024, 1, 1), date(2024, 1, 7)))

    assert [key for _, key in stub.calls] == [
        "2024-01-01",
        "2024-01-02",
        "2024-01-03",
        "2024-01-04",
        "2024-01-05",
    ]
    assert [e.date_filed for e in result.entries] == [
        date(2024, 1, 2),
        date(2024, 1, 2),
        date(2024, 1, 3),
        date(2024, 1, 5),
    ]
    assert not result.complete
    assert result.failures == (
        IndexFetchFailure("2024-01-01", "EdgarNotFound", "EDGAR resource not found."),
        IndexFetchFailure("2024-01-04", "EdgarNotFound", "EDGAR resource not found."),
    )


@pytest.mark.asyncio
async def test_weekends_can_be_included() -> None:
    stub = StubGateway()

    result = await _use_case(stub).execute(
        FetchIndexRangeRequest(date(2024, 1, 6), date(2024, 1, 7), include_weekends=True)
    )

    assert stub.count("daily_index") == 2
    assert len(result.failures) == 2


@pytest.mark.asyncio
async def test_malformed_lines_become_warnings() -> None:
    stub = StubGateway()
    stub.daily["2024-01-02"] = master_index_with_malformed()

    result = await _use_case(stub).fetch_day(date(2024, 1, 2))

    assert len(result.entries) == 98
    assert len(result.warnings) == 2
    assert result.complete


@pytest.mark.asyncio
async def test_options_apply_to_merged_entries() -> None:
    stub = StubGateway()
    stub.daily["2024-01-02"] = _day_index("2024-01-02", "10-K", "8-K", "10-K/A")
    stub.daily["2024-01-03"] = _day_index("2024-01-03", "10-K")

    result = await _use_case(stub).execute(
        FetchIndexRangeRequest(
            date(2024, 1, 2),
            date(2024, 1, 3),
            options=FilingOptions(form_types=("10-K",), include_amendments=False, limit=2),
        )
    )

    assert [(e.form_type, e.date_filed.day) for e in result.entries] == [("10-K", 2), ("10-K", 3)]


@pytest.mark.asyncio
async def test_reversed_window_is_rejected() -> None:
    stub = StubGateway()

    with pytest.raises(EdgarMappingError):
        await _use_case(stub).execute(FetchIndexRangeRequest(date(2024, 1, 5), date(2024, 1, 2)))

    assert stub.calls == []


@pytest.mark.asyncio
async def test_single_saturday_is_fetched_on_request() -> None:
    stub = StubGateway()
    stub.daily["2024-01-06"] = _day_index("2024-01-06", "8-K")

    result = await _use_case(stub).fetch_day(date(2024, 1, 6))

    assert len(result.entries) == 1


@pytest.mark.asyncio
async def test_quarter_window_crosses_year_end() -> None:
    stub = StubGateway()
    stub.quarterly["2023Q4"] = _day_index("2023-12-29", "10-K")
    stub.quarterly["2024Q1"] = _day_index("2024-01-02", "10-Q")

    result = await _use_case(stub).execute_quarters(
        FetchQuarterRangeRequest(EdgarPeriod(2023, Quarter.Q4), EdgarPeriod(2024, Quarter.Q1))
    )

    assert [key for _, key in stub.calls] == ["2023Q4", "2024Q1"]
    assert [e.form_type for e in result.entries] == ["10-K", "10-Q"]
    assert result.complete


@pytest.mark.asyncio
async def test_reversed_quarter_window_is_rejected() -> None:
    stub = StubGateway()

    with pytest.raises(EdgarMappingError):
        await _use_case(stub).execute_quarters(
            FetchQuarterRangeRequest(EdgarPeriod(2024, Quarter.Q2), EdgarPeriod(2024, Quarter.Q1))
        )


@pytest.mark.asyncio
async def test_entries_normalize_into_records() -> None:
    stub = StubGateway()
    stub.quarterly["2024Q1"] = _day_index("2024-01-02", "10-K")
    use_case = _use_case(stub)

    result = await use_case.fetch_quarter(EdgarPeriod(2024, Quarter.Q1))
    (record,) = use_case.to_records(result).value

    assert record.accession.dashed == "0001000001-24-000001"
    assert record.document_url == f"{ARCHIVES_URL}/data/1000001/0001000001-24-000001.txt"
