from __future__ import annotations

import pytest

from edgarlink.domain.entities.edgar_company import EntityIdentifier, normalize_cik
from edgarlink.domain.exceptions.edgar import EdgarMappingError


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("320193", "0000320193"),
        ("0000320193", "0000320193"),
        (" CIK0000320193 ", "0000320193"),
        (320193, "0000320193"),
        (0, "0000000000"),
        ("00000000000320193", "0000320193"),
    ],
)
def test_normalize_cik_pads_to_ten_digits(raw: str | int, expected: str) -> None:
    assert normalize_cik(raw) == expected


@pytest.mark.parametrize("raw", ["", "CIK", "   ", 12345678901, "12345678901", -5])
def test_normalize_cik_rejects_unusable_values(raw: str | int) -> None:
    with pytest.raises(EdgarMappingError):
        normalize_cik(raw)


def test_entity_identifier_normalizes_cik_and_ticker() -> None:
    entity = EntityIdentifier("320193", ticker=" aapl ")

    assert entity.cik == "0000320193"
    assert entity.ticker == "AAPL"
    assert entity.numeric == 320193
    assert entity.display_cik == "320193"
    assert str(entity) == "0000320193"


def test_entity_identifier_equality_is_by_normalized_value() -> None:
    assert EntityIdentifier.from_cik(320193) == EntityIdentifier("0000320193")
    assert EntityIdentifier.from_cik("320193", ticker="AAPL") != EntityIdentifier("320193")


def test_entity_identifier_rejects_blank_ticker() -> None:
    with pytest.raises(EdgarMappingError):
        EntityIdentifier("320193", ticker="  ")
