from __future__ import annotations

import pytest

from edgarlink.domain.entities.edgar_search import SearchQuery
from edgarlink.domain.entities.filing_options import FilingOptions
from edgarlink.domain.exceptions.edgar import EdgarMappingError


def test_filing_options_normalize_forms_and_ciks() -> None:
    options = FilingOptions(form_types=(" 10-k ", "", "8-K"), ciks=frozenset({"320193", "CIK789019"}))

    assert options.form_types == ("10-K", "8-K")
    assert options.ciks == frozenset({"0000320193", "0000789019"})


def test_filing_options_accept_a_single_form_string() -> None:
    options = FilingOptions(form_types=" 10-k", ciks="320193")  # type: ignore[arg-type]

    assert options.form_types == ("10-K",)
    assert options.ciks == frozenset({"0000320193"})
    assert FilingOptions.for_forms("8-K").form_types == ("8-K",)


def test_filing_options_blank_forms_mean_every_form() -> None:
    assert FilingOptions(form_types=(" ",)).form_types is None


@pytest.mark.parametrize("kwargs", [{"limit": 0}, {"limit": -1}, {"offset": -1}])
def test_filing_options_reject_bad_paging(kwargs: dict[str, int]) -> None:
    with pytest.raises(EdgarMappingError):
        FilingOptions(**kwargs)


def test_for_forms_shorthand() -> None:
    options = FilingOptions.for_forms(["10-Q"], limit=5, include_amendments=False)

    assert options.form_types == ("10-Q",)
    assert options.limit == 5
    assert options.include_amendments is False


def test_search_query_renders_endpoint_parameter_names() -> None:
    query = SearchQuery(
        query='"climate risk"',
        forms=("10-K", "10-Q"),
        start_date="2023-01-01",
        end_date="2023-12-31",
        ciks=("0000320193",),
        reverse_order=True,
    ).paged(page=2, from_=100, count=100)

    assert query.to_query_params() == [
        ("q", '"climate risk"'),
        ("forms", "10-K,10-Q"),
        ("page", "2"),
        ("from", "100"),
        ("count", "100"),
        ("reverse_order", "TRUE"),
        ("startdt", "2023-01-01"),
        ("enddt", "2023-12-31"),
        ("ciks", "0000320193"),
    ]


def test_search_query_omits_unset_fields() -> None:
    assert SearchQuery().to_query_params() == []
    assert SearchQuery(incorporated_location=False).to_query_params() == [("incorporated_location", "false")]
