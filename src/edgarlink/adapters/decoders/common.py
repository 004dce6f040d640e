# src/edgarlink/adapters/decoders/common.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Shared decoding helpers.

Text decoding, date parsing and skip-warning bookkeeping used by every
format decoder.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from contextlib import suppress
from datetime import date, datetime
from typing import Any

from edgarlink.domain.entities.decode_report import DecodeWarning
from edgarlink.domain.exceptions.edgar import EdgarDecodeError
from edgarlink.infrastructure.observability.metrics_edgar import get_edgar_decode_warnings_total


def decode_text(data: bytes) -> str:
    """Decode archive text as UTF-8, falling back to Latin-1.

    Older index files contain Latin-1 company names; Latin-1 never fails.
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def load_json_object(data: bytes, *, source: str) -> Mapping[str, Any]:
    """Parse ``data`` as a JSON object.

    Raises:
        EdgarDecodeError: If the payload is not JSON or its root is not an object.
    """
    try:
        payload: Any = json.loads(data)
    except ValueError as exc:
        raise EdgarDecodeError(
            "EDGAR response was not valid JSON.",
            details={"source": source, "error": str(exc)},
        ) from exc
    if not isinstance(payload, Mapping):
        raise EdgarDecodeError(
            "EDGAR JSON response must be an object.",
            details={"source": source, "type": type(payload).__name__},
        )
    return payload


def parse_filing_date(value: str) -> date:
    """Parse ``YYYY-MM-DD`` or compact ``YYYYMMDD``.

    Raises:
        ValueError: If ``value`` matches neither form.
    """
    cleaned = value.strip()
    if len(cleaned) == 8 and cleaned.isdigit():
        return datetime.strptime(cleaned, "%Y%m%d").date()
    return datetime.strptime(cleaned, "%Y-%m-%d").date()


def parse_optional_date(value: Any) -> date | None:
    """Lenient variant of :func:`parse_filing_date` for optional fields."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return parse_filing_date(value)
    except ValueError:
        return None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp (``Z`` suffix accepted), or return ``None``."""
    if not isinstance(value, str) or not value.strip():
        return None
    cleaned = value.strip()
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(cleaned)
    except ValueError:
        return None


def note_warning(logger: logging.Logger, event: str, warning: DecodeWarning) -> DecodeWarning:
    """Log and count a skip warning, then return it."""
    logger.debug(
        event,
        extra={
            "decoder": warning.source,
            "position": warning.position,
            "reason": warning.reason,
            "excerpt": warning.excerpt,
        },
    )
    with suppress(Exception):
        get_edgar_decode_warnings_total().labels(warning.source, warning.reason).inc()
    return warning
