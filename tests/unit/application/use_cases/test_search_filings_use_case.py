from __future__ import annotations

import pytest

from edgarlink.adapters.mappers.edgar_normalizer import EdgarNormalizer
from edgarlink.application.use_cases.edgar.search_filings import (
    SearchFilingsRequest,
    SearchFilingsUseCase,
)
from edgarlink.domain.entities.edgar_search import SearchQuery
from edgarlink.domain.entities.filing_options import FilingOptions
from tests.fixtures.edgar_payloads import search_hit, search_json
from tests.fixtures.edgar_testkit import ARCHIVES_URL, StubGateway

QUERY = SearchQuery(query="supply chain", forms=("10-K",))


def _page(total: int, offset: int, size: int = 1) -> bytes:
    hits = [
        search_hit(f"0000320193-23-{offset + n:06d}", f"doc{offset + n}.htm", file_date="2023-11-03")
        for n in range(size)
    ]
    return search_json(hits, total=total)


def _use_case(stub: StubGateway, **kwargs: int) -> SearchFilingsUseCase:
    return SearchFilingsUseCase(gateway=stub, normalizer=EdgarNormalizer(ARCHIVES_URL), **kwargs)


@pytest.mark.asyncio
async def test_single_page_is_normalized_and_filtered() -> None:
    stub = StubGateway()
    stub.search_pages[0] = search_json(
        [
            search_hit("0000320193-23-000106", "aapl-20230930.htm"),
            search_hit("0000320193-23-000077", "aapl-20230701.htm", form="10-Q", file_date="2023-08-04"),
        ],
        total=2,
    )
    query = SearchQuery(query="supply chain", from_=0)

    page = await _use_case(stub).execute(
        SearchFilingsRequest(query, FilingOptions(form_types=("10-Q",)))
    )

    assert page.total == 2
    assert [r.accession.dashed for r in page.records] == ["0000320193-23-000077"]
    assert stub.queries == [query]


@pytest.mark.asyncio
async def test_execute_all_walks_every_page() -> None:
    stub = StubGateway()
    for offset in (0, 100, 200):
        stub.search_pages[offset] = _page(250, offset)

    page = await _use_case(stub).execute_all(SearchFilingsRequest(QUERY))

    assert page.total == 250
    assert len(page.records) == 3
    assert [(q.page, q.from_, q.count) for q in stub.queries] == [
        (1, 0, 100),
        (2, 100, 100),
        (3, 200, 100),
    ]
    assert all(q.query == "supply chain" and q.forms == ("10-K",) for q in stub.queries)


@pytest.mark.asyncio
async def test_execute_all_issues_pages_in_batches() -> None:
    stub = StubGateway()
    for offset in range(0, 550, 100):
        stub.search_pages[offset] = _page(550, offset)

    page = await _use_case(stub, batch_size=2).execute_all(SearchFilingsRequest(QUERY))

    assert stub.count("search") == 6
    assert [q.from_ for q in stub.queries] == [0, 100, 200, 300, 400, 500]
    assert len(page.records) == 6


@pytest.mark.asyncio
async def test_execute_all_with_single_page_result() -> None:
    stub = StubGateway()
    stub.search_pages[0] = _page(3, 0, size=3)

    page = await _use_case(stub).execute_all(SearchFilingsRequest(QUERY))

    assert page.total == 3
    assert len(page.records) == 3
    assert stub.count("search") == 1
