from __future__ import annotations

from datetime import date

import pytest

from edgarlink.application.services.filing_filter import (
    apply_filing_options,
    matches,
    matches_form,
)
from edgarlink.domain.entities.edgar_company import EntityIdentifier
from edgarlink.domain.entities.edgar_feed import FeedItem
from edgarlink.domain.entities.edgar_index import IndexEntry
from edgarlink.domain.entities.filing_options import FilingOptions


def _entry(form: str, cik: int = 320193) -> IndexEntry:
    entity = EntityIdentifier.from_cik(cik)
    return IndexEntry("Filer", form, entity, date(2024, 1, 2), f"edgar/data/{cik}/x.txt")


@pytest.mark.parametrize(
    ("form", "requested", "expected"),
    [
        ("10-K", "10-K", True),
        ("10-K/A", "10-K", True),
        ("10-KT", "10-K", False),
        ("10-K", "10-K/A", False),
        ("10-K/A", "10-K/A", True),
        ("10-q", "10-Q", True),
        ("8-K", "10-K", False),
    ],
)
def test_exact_form_matching(form: str, requested: str, expected: bool) -> None:
    assert matches_form(form, FilingOptions(form_types=(requested,))) is expected


def test_prefix_form_matching() -> None:
    options = FilingOptions(form_types=("10-K",), form_prefix_match=True)

    assert matches_form("10-K", options)
    assert matches_form("10-KT", options)
    assert matches_form("10-K405", options)
    assert not matches_form("8-K", options)


def test_amendments_can_be_excluded() -> None:
    options = FilingOptions(include_amendments=False)

    assert matches_form("10-K", options)
    assert not matches_form("10-K/A", options)
    assert not matches_form("SC 13D/A", options)


def test_missing_form_only_matches_without_form_filter() -> None:
    assert matches_form(None, FilingOptions())
    assert not matches_form(None, FilingOptions(form_types=("8-K",)))


def test_cik_filter_applies_to_items_without_entity() -> None:
    options = FilingOptions(ciks=frozenset({"320193"}))

    assert matches(_entry("8-K"), options)
    assert not matches(_entry("8-K", cik=789019), options)
    assert not matches(FeedItem(title="t", link="https://x.test"), options)


def test_filter_then_offset_then_limit_preserves_order() -> None:
    forms = ["10-K", "8-K", "10-K/A", "10-Q", "10-K", "10-K"]
    items = [_entry(form, cik=n) for n, form in enumerate(forms, 1)]

    kept = apply_filing_options(items, FilingOptions(form_types=("10-K",), offset=1, limit=2))

    assert [e.entity.numeric for e in kept] == [3, 5]


def test_no_options_keeps_everything() -> None:
    items = [_entry("4"), _entry("8-K")]

    assert apply_filing_options(items, None) == items
    assert apply_filing_options(iter(items), FilingOptions()) == items


def test_single_form_string_filters_by_whole_code() -> None:
    entries = [_entry("10-K"), _entry("10-Q"), _entry("10-K/A")]

    kept = apply_filing_options(entries, FilingOptions(form_types="10-K"))  # type: ignore[arg-type]

    assert [e.form_type for e in kept] == ["10-K", "10-K/A"]
