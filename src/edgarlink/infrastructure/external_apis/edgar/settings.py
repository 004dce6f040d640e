# src/edgarlink/infrastructure/external_apis/edgar/settings.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""EDGAR transport client settings.

Purpose:
    Provide Pydantic-based configuration for the EDGAR HTTP client, including
    the identification header, fair-access rate budget, timeouts, retry policy
    and the archive's base URLs.

Layer:
    infrastructure

Notes:
    - Values are sourced from environment variables prefixed with ``EDGAR_``.
    - Settings are frozen; there is no runtime mutation after construction.
    - :func:`validate_settings` is called by the transport constructor, so any
      misconfiguration fails before a network call is attempted.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlsplit

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from edgarlink.domain.exceptions.edgar import EdgarInvalidConfiguration
from edgarlink.infrastructure.external_apis.edgar.request import require_user_agent

_URL_FIELDS: tuple[str, ...] = ("archives_url", "data_url", "files_url", "search_url", "browse_url")


class EdgarSettings(BaseSettings):
    """Configuration for the EDGAR HTTP client.

    Environment variables (with ``model_config.env_prefix``):

    * ``EDGAR_USER_AGENT``
    * ``EDGAR_RATE_LIMIT_RPS``
    * ``EDGAR_BURST``
    * ``EDGAR_TIMEOUT_S``
    * ``EDGAR_MAX_ATTEMPTS``
    * ``EDGAR_BASE_BACKOFF_S``
    * ``EDGAR_BACKOFF_MULTIPLIER``
    * ``EDGAR_JITTER_RATIO``
    * ``EDGAR_ARCHIVES_URL`` / ``EDGAR_DATA_URL`` / ``EDGAR_FILES_URL`` /
      ``EDGAR_SEARCH_URL`` / ``EDGAR_BROWSE_URL``
    """

    user_agent: str = Field(
        "",
        description=(
            "Identification header sent to EDGAR, '<application-name> <contact>'. "
            "Must include an e-mail address or URL per SEC fair-access policy."
        ),
    )
    rate_limit_rps: float = Field(
        10.0,
        description="Sustained request rate in requests per second.",
    )
    burst: int = Field(
        10,
        description="Token bucket capacity (requests allowed back to back).",
    )
    timeout_s: float = Field(
        30.0,
        description="Per-request timeout in seconds for the transport client.",
    )
    max_attempts: int = Field(
        6,
        description="Physical attempts per logical request, the first one included.",
    )
    base_backoff_s: float = Field(
        1.0,
        description="Backoff delay before the second attempt, in seconds.",
    )
    backoff_multiplier: float = Field(
        2.0,
        description="Exponential growth factor between backoff delays.",
    )
    jitter_ratio: float = Field(
        0.2,
        description="Symmetric jitter applied to each backoff delay, as a fraction.",
    )
    max_backoff_s: float = Field(
        60.0,
        description="Longest single backoff wait, Retry-After hints included.",
    )
    archives_url: str = Field(
        "https://www.sec.gov/Archives/edgar",
        description="Archive root (filing documents and bulk indices).",
    )
    data_url: str = Field(
        "https://data.sec.gov",
        description="Base URL for the submissions API.",
    )
    files_url: str = Field(
        "https://www.sec.gov/files",
        description="Reference files such as the ticker map.",
    )
    search_url: str = Field(
        "https://efts.sec.gov/LATEST/search-index",
        description="Full-text search endpoint.",
    )
    browse_url: str = Field(
        "https://www.sec.gov/cgi-bin/browse-edgar",
        description="Browse endpoint serving the current and per-company Atom feeds.",
    )

    model_config: SettingsConfigDict = SettingsConfigDict(
        env_prefix="EDGAR_",
        extra="ignore",
        frozen=True,
    )


def _is_http_url(value: str) -> bool:
    parts = urlsplit(value)
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def validate_settings(settings: EdgarSettings) -> EdgarSettings:
    """Check settings invariants that pydantic field types do not express.

    Args:
        settings: Settings to validate.

    Returns:
        The same settings instance.

    Raises:
        EdgarInvalidConfiguration: On a missing identification header, a
            non-positive rate, burst or timeout, invalid retry parameters or a
            base URL that is not an absolute http(s) URL.
    """
    require_user_agent(settings.user_agent)

    if settings.rate_limit_rps <= 0:
        raise EdgarInvalidConfiguration(
            "rate_limit_rps must be positive.",
            details={"rate_limit_rps": settings.rate_limit_rps},
        )
    if settings.burst < 1:
        raise EdgarInvalidConfiguration("burst must be at least 1.", details={"burst": settings.burst})
    if settings.timeout_s <= 0:
        raise EdgarInvalidConfiguration(
            "timeout_s must be positive.", details={"timeout_s": settings.timeout_s}
        )
    if settings.max_attempts < 1:
        raise EdgarInvalidConfiguration(
            "max_attempts must be at least 1.", details={"max_attempts": settings.max_attempts}
        )
    if settings.base_backoff_s < 0 or settings.backoff_multiplier < 1.0:
        raise EdgarInvalidConfiguration(
            "Backoff must be non-negative and non-decreasing.",
            details={
                "base_backoff_s": settings.base_backoff_s,
                "backoff_multiplier": settings.backoff_multiplier,
            },
        )
    if not 0.0 <= settings.jitter_ratio < 1.0:
        raise EdgarInvalidConfiguration(
            "jitter_ratio must be in [0, 1).", details={"jitter_ratio": settings.jitter_ratio}
        )
    if not settings.max_backoff_s >= settings.base_backoff_s:
        raise EdgarInvalidConfiguration(
            "max_backoff_s must not be below base_backoff_s.",
            details={
                "max_backoff_s": settings.max_backoff_s,
                "base_backoff_s": settings.base_backoff_s,
            },
        )

    for name in _URL_FIELDS:
        value = getattr(settings, name)
        if not _is_http_url(value):
            raise EdgarInvalidConfiguration(
                "Base URL must be an absolute http(s) URL.",
                details={"field": name, "value": value},
            )
    return settings


def load_edgar_settings(**overrides: Any) -> EdgarSettings:
    """Build and validate settings from the environment plus explicit overrides.

    Raises:
        EdgarInvalidConfiguration: If a value fails type coercion or validation.
    """
    try:
        settings = EdgarSettings(**overrides)
    except ValidationError as exc:
        raise EdgarInvalidConfiguration(
            "Invalid EDGAR settings.",
            details={"errors": [err.get("msg") for err in exc.errors()]},
        ) from exc
    return validate_settings(settings)
