from __future__ import annotations

import pytest

from edgarlink.domain.exceptions.edgar import EdgarInvalidConfiguration
from edgarlink.infrastructure.external_apis.edgar.settings import (
    EdgarSettings,
    load_edgar_settings,
    validate_settings,
)
from tests.fixtures.edgar_testkit import TEST_USER_AGENT, make_settings


def test_defaults_follow_fair_access_budget() -> None:
    settings = EdgarSettings(user_agent=TEST_USER_AGENT)

    assert settings.rate_limit_rps == 10.0
    assert settings.burst == 10
    assert settings.max_attempts == 6
    assert settings.base_backoff_s == 1.0
    assert settings.backoff_multiplier == 2.0
    assert settings.archives_url == "https://www.sec.gov/Archives/edgar"
    assert validate_settings(settings) is settings


def test_settings_are_read_from_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EDGAR_USER_AGENT", "Research Bot research@example.org")
    monkeypatch.setenv("EDGAR_RATE_LIMIT_RPS", "4")
    monkeypatch.setenv("EDGAR_MAX_ATTEMPTS", "2")

    settings = load_edgar_settings()

    assert settings.user_agent == "Research Bot research@example.org"
    assert settings.rate_limit_rps == 4.0
    assert settings.max_attempts == 2


def test_explicit_overrides_win_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EDGAR_BURST", "3")

    assert load_edgar_settings(user_agent=TEST_USER_AGENT, burst=7).burst == 7


@pytest.mark.parametrize("user_agent", ["", "   ", "edgarlink-tests"])
def test_missing_or_contactless_user_agent_is_rejected(user_agent: str) -> None:
    with pytest.raises(EdgarInvalidConfiguration):
        validate_settings(make_settings(user_agent=user_agent))


@pytest.mark.parametrize(
    "overrides",
    [
        {"rate_limit_rps": 0.0},
        {"burst": 0},
        {"timeout_s": 0.0},
        {"max_attempts": 0},
        {"base_backoff_s": -1.0},
        {"backoff_multiplier": 0.5},
        {"jitter_ratio": 1.5},
        {"base_backoff_s": 10.0, "max_backoff_s": 5.0},
        {"data_url": "data.sec.gov"},
        {"archives_url": "ftp://ftp.sec.gov/edgar"},
    ],
)
def test_invalid_values_are_rejected(overrides: dict[str, object]) -> None:
    with pytest.raises(EdgarInvalidConfiguration):
        validate_settings(make_settings(**overrides))


def test_type_coercion_failures_surface_as_configuration_errors() -> None:
    with pytest.raises(EdgarInvalidConfiguration) as excinfo:
        load_edgar_settings(user_agent=TEST_USER_AGENT, burst="many")

    assert excinfo.value.details["errors"]
