from __future__ import annotations

import gzip
from datetime import date

import httpx
import pytest
import respx

from edgarlink.adapters.gateways.edgar_gateway import HttpEdgarGateway
from edgarlink.domain.entities.edgar_company import EntityIdentifier
from edgarlink.domain.entities.edgar_index import EdgarDay, EdgarPeriod
from edgarlink.domain.entities.edgar_search import SearchQuery
from edgarlink.domain.enums.edgar import IndexType, Quarter
from edgarlink.domain.exceptions.edgar import EdgarMappingError, EdgarNotFound
from edgarlink.infrastructure.external_apis.edgar.client import EdgarClient
from tests.fixtures.edgar_payloads import (
    apple_rows,
    directory_json,
    master_index,
    master_line,
    search_hit,
    search_json,
    submissions_json,
    tickers_json,
)
from tests.fixtures.edgar_testkit import (
    ARCHIVES_URL,
    BROWSE_URL,
    DATA_URL,
    FILES_URL,
    SEARCH_URL,
    CountingGovernor,
    RecordingSleep,
    make_settings,
)

DAY = EdgarDay(2024, 1, 2)
DAILY_STEM = f"{ARCHIVES_URL}/daily-index/2024/QTR1/master.20240102"


@pytest.fixture
def gateway() -> HttpEdgarGateway:
    client = EdgarClient(
        make_settings(max_attempts=2),
        governor=CountingGovernor(),
        sleep=RecordingSleep(),
        rng=lambda: 0.5,
    )
    return HttpEdgarGateway(client)


def _index_body() -> bytes:
    return master_index(
        [
            master_line(320193, "Apple Inc.", "10-K", "20240102", 1),
            master_line(789019, "MICROSOFT CORP", "8-K", "20240102", 2),
        ]
    )


@pytest.mark.asyncio
@respx.mock
async def test_fetch_submissions_uses_padded_cik_path(gateway: HttpEdgarGateway) -> None:
    route = respx.get(f"{DATA_URL}/submissions/CIK0000320193.json").mock(
        return_value=httpx.Response(200, content=submissions_json(apple_rows()))
    )

    decoded = await gateway.fetch_submissions(EntityIdentifier("320193"))

    assert route.call_count == 1
    assert decoded.value.profile.name == "Apple Inc."
    assert len(decoded.value.filings) == 3


@pytest.mark.asyncio
@respx.mock
async def test_fetch_submission_page_and_blank_name(gateway: HttpEdgarGateway) -> None:
    route = respx.get(f"{DATA_URL}/submissions/CIK0000320193-submissions-001.json").mock(
        return_value=httpx.Response(200, content=b'{"accessionNumber": [], "filingDate": [], "form": []}')
    )

    decoded = await gateway.fetch_submission_page("/CIK0000320193-submissions-001.json")

    assert route.call_count == 1
    assert decoded.value == ()
    with pytest.raises(EdgarMappingError):
        await gateway.fetch_submission_page("   ")


@pytest.mark.asyncio
@respx.mock
async def test_fetch_company_tickers(gateway: HttpEdgarGateway) -> None:
    respx.get(f"{FILES_URL}/company_tickers.json").mock(
        return_value=httpx.Response(200, content=tickers_json())
    )

    decoded = await gateway.fetch_company_tickers()

    assert {row.ticker for row in decoded.value} == {"AAPL", "MSFT", "AMZN"}


@pytest.mark.asyncio
@respx.mock
async def test_search_sends_query_params(gateway: HttpEdgarGateway) -> None:
    route = respx.get(SEARCH_URL).mock(
        return_value=httpx.Response(
            200, content=search_json([search_hit("0000320193-23-000106", "aapl-20230930.htm")], total=1)
        )
    )

    decoded = await gateway.search(SearchQuery(query="climate risk", forms=("10-K", "10-Q"), from_=0))

    request = route.calls.last.request
    assert request.url.params["q"] == "climate risk"
    assert request.url.params["forms"] == "10-K,10-Q"
    assert request.url.params["from"] == "0"
    total, hits = decoded.value
    assert total == 1
    assert hits[0].accession == "0000320193-23-000106"


def test_feed_url_builders(gateway: HttpEdgarGateway) -> None:
    current = httpx.URL(gateway.current_filings_feed_url(form_type="8-K", count=10))
    company = httpx.URL(gateway.company_feed_url(EntityIdentifier("320193"), form_type="10-K"))

    assert str(current).startswith(BROWSE_URL)
    assert current.params["action"] == "getcurrent"
    assert current.params["type"] == "8-K"
    assert current.params["count"] == "10"
    assert current.params["output"] == "atom"
    assert company.params["action"] == "getcompany"
    assert company.params["CIK"] == "0000320193"
    assert company.params["owner"] == "include"
    assert company.params["count"] == "40"
    assert gateway.xbrl_feed_url() == f"{ARCHIVES_URL}/usgaap.rss.xml"


def test_index_url_candidates(gateway: HttpEdgarGateway) -> None:
    assert gateway.daily_index_urls(DAY) == (f"{DAILY_STEM}.idx", f"{DAILY_STEM}.gz")
    assert gateway.daily_index_urls(EdgarDay(2024, 11, 5), IndexType.COMPANY) == (
        f"{ARCHIVES_URL}/daily-index/2024/QTR4/company.20241105.idx",
        f"{ARCHIVES_URL}/daily-index/2024/QTR4/company.20241105.gz",
    )
    assert gateway.quarterly_index_urls(EdgarPeriod(2023, Quarter.Q3)) == (
        f"{ARCHIVES_URL}/full-index/2023/QTR3/master.gz",
        f"{ARCHIVES_URL}/full-index/2023/QTR3/master.idx",
    )


@pytest.mark.asyncio
@respx.mock
async def test_daily_index_falls_back_to_compressed_file(gateway: HttpEdgarGateway) -> None:
    plain = respx.get(f"{DAILY_STEM}.idx").mock(return_value=httpx.Response(404))
    packed = respx.get(f"{DAILY_STEM}.gz").mock(
        return_value=httpx.Response(200, content=gzip.compress(_index_body()))
    )

    decoded = await gateway.fetch_daily_index(DAY)

    assert plain.call_count == 1
    assert packed.call_count == 1
    assert [e.cik for e in decoded.value] == ["0000320193", "0000789019"]
    assert decoded.value[0].date_filed == date(2024, 1, 2)


@pytest.mark.asyncio
@respx.mock
async def test_missing_index_reports_every_candidate(gateway: HttpEdgarGateway) -> None:
    respx.get(f"{DAILY_STEM}.idx").mock(return_value=httpx.Response(404))
    respx.get(f"{DAILY_STEM}.gz").mock(return_value=httpx.Response(404))

    with pytest.raises(EdgarNotFound) as exc_info:
        await gateway.fetch_daily_index(DAY)

    assert exc_info.value.details["tried"] == [f"{DAILY_STEM}.idx", f"{DAILY_STEM}.gz"]
    assert exc_info.value.details["label"] == "2024-01-02"


@pytest.mark.asyncio
@pytest.mark.respx(assert_all_called=False)
async def test_quarterly_index_prefers_compressed_file(
    gateway: HttpEdgarGateway, respx_mock: respx.MockRouter
) -> None:
    packed = respx_mock.get(f"{ARCHIVES_URL}/full-index/2024/QTR1/master.gz").mock(
        return_value=httpx.Response(200, content=gzip.compress(_index_body()))
    )
    plain = respx_mock.get(f"{ARCHIVES_URL}/full-index/2024/QTR1/master.idx").mock(
        return_value=httpx.Response(200, content=_index_body())
    )

    decoded = await gateway.fetch_quarterly_index(EdgarPeriod(2024, Quarter.Q1))

    assert packed.call_count == 1
    assert plain.call_count == 0
    assert len(decoded.value) == 2


@pytest.mark.asyncio
@respx.mock
async def test_directory_listing(gateway: HttpEdgarGateway) -> None:
    route = respx.get(f"{ARCHIVES_URL}/daily-index/2024/QTR1/index.json").mock(
        return_value=httpx.Response(200, content=directory_json())
    )

    decoded = await gateway.fetch_directory_listing("/daily-index/2024/QTR1/")

    assert route.call_count == 1
    assert decoded.value.find("master.20240102.idx") is not None
