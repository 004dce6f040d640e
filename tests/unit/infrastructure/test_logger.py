# tests/unit/infrastructure/test_logger.py
from __future__ import annotations

import json
import logging

import pytest

from edgarlink.infrastructure.logging.logger import (
    _JsonFormatter,  # internal but importable
    configure_root_logging,
    get_json_logger,
    get_request_id,
    get_trace_id,
    set_request_context,
)


def _capture_log(record_msg: str, level: int = logging.INFO, **extra: object) -> dict:
    """Format a record carrying ``extra`` attributes and return the parsed JSON."""
    logger = logging.getLogger("test.logger")
    record = logger.makeRecord(
        name=logger.name,
        level=level,
        fn="test_logger",
        lno=123,
        msg=record_msg,
        args=(),
        exc_info=None,
        extra=extra or None,
    )
    return json.loads(_JsonFormatter().format(record))


def test_configure_root_logging_installs_json_handler(monkeypatch: pytest.MonkeyPatch) -> None:
    """Root logger should get a JSON formatter and respect LOG_LEVEL."""
    monkeypatch.setenv("LOG_LEVEL", "debug")
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers.clear()
    try:
        configure_root_logging()
        configure_root_logging()

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, _JsonFormatter)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_json_formatter_basic_fields() -> None:
    payload = _capture_log("edgar.transport.retry")

    assert payload["message"] == "edgar.transport.retry"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert "ts" in payload


def test_json_formatter_merges_call_site_extras() -> None:
    payload = _capture_log("edgar.index.fetched", label="2024-01-02", entries=98, tried=["a", "b"])

    assert payload["label"] == "2024-01-02"
    assert payload["entries"] == 98
    assert payload["tried"] == ["a", "b"]
    assert "args" not in payload
    assert "lineno" not in payload


def test_json_formatter_request_id_sources(monkeypatch: pytest.MonkeyPatch) -> None:
    """Request ID comes from the record, then contextvars, then the REQUEST_ID env."""
    monkeypatch.setenv("REQUEST_ID", "env-id")

    assert _capture_log("record", request_id="abc-123")["request_id"] == "abc-123"
    assert _capture_log("env")["request_id"] == "env-id"

    set_request_context(request_id="ctx-id", trace_id="0af7651916cd43dd")
    payload = _capture_log("ctx")
    assert payload["request_id"] == "ctx-id"
    assert payload["trace_id"] == "0af7651916cd43dd"


def test_set_request_context_updates_only_given_values() -> None:
    set_request_context(request_id="r1", trace_id="t1")
    set_request_context(request_id="r2")

    assert get_request_id() == "r2"
    assert get_trace_id() == "t1"


def test_json_formatter_includes_exception_info(caplog: pytest.LogCaptureFixture) -> None:
    """Formatter should add exc_type and exc_message for errors with exc_info."""
    logger = get_json_logger("test.logger.exc")

    with caplog.at_level(logging.ERROR, logger="test.logger.exc"):
        try:
            raise ValueError("boom")
        except ValueError:
            logger.exception("failure")

    payload = json.loads(_JsonFormatter().format(caplog.records[-1]))
    assert payload["level"] == "ERROR"
    assert payload["exc_type"] == "ValueError"
    assert "boom" in payload["exc_message"]
