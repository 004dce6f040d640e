# tests/conftest.py
from __future__ import annotations

from collections.abc import Generator

import pytest

from edgarlink.infrastructure.external_apis.edgar.settings import EdgarSettings
from edgarlink.infrastructure.logging.logger import clear_request_context
from tests.fixtures.edgar_testkit import (
    CountingGovernor,
    FakeClock,
    RecordingSleep,
    make_settings,
)


@pytest.fixture
def settings() -> EdgarSettings:
    """Valid settings pointing at test hosts."""
    return make_settings()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def counting_governor() -> CountingGovernor:
    return CountingGovernor()


@pytest.fixture(autouse=True)
def _reset_request_context() -> Generator[None, None, None]:
    """Keep correlation ids from leaking between tests."""
    clear_request_context()
    yield
    clear_request_context()
