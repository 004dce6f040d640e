# src/edgarlink/domain/exceptions/edgar.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""EDGAR domain exceptions.

Purpose:
    Provide the closed set of error kinds surfaced to callers of the EDGAR
    client. Callers distinguish failures by type, never by message text.

Layer:
    domain

Notes:
    - Infrastructure translates transport failures (httpx, status codes) into
      these types; httpx exceptions never cross the transport boundary.
    - Line-level and item-level decode problems are *not* exceptions. Decoders
      record them as ``DecodeWarning`` values and keep going.
"""

from __future__ import annotations

from typing import Any


class EdgarError(Exception):
    """Base class for EDGAR-related errors.

    Attributes:
        message:
            Human-readable error message.
        details:
            Machine-readable diagnostic payload for logs and callers.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize an EDGAR error instance.

        Args:
            message:
                Human-readable error message describing the failure.
            details:
                Optional structured diagnostic payload; should be safe to log.
        """
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details or {}

    def __str__(self) -> str:
        """Return the human-readable message for this error."""
        # Details stay out of the string form; they are available on .details.
        return self.message


class EdgarInvalidConfiguration(EdgarError):
    """Raised at construction time for unusable client or request configuration."""


class EdgarNotFound(EdgarError):
    """Raised when an entity, ticker, index file or document does not exist."""


class EdgarRateLimitExceeded(EdgarError):
    """Raised when every permitted attempt was answered with HTTP 429."""


class EdgarServerError(EdgarError):
    """Raised when retries are exhausted against 5xx or connection failures."""


class EdgarClientError(EdgarError):
    """Raised for non-retryable 4xx responses other than 404.

    Attributes:
        status:
            HTTP status code returned by the archive.
        payload:
            Decoded error body (JSON object or text excerpt), if any.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int,
        payload: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.status = status
        self.payload = payload


class EdgarDecodeError(EdgarError):
    """Raised when a whole payload cannot be decoded (corrupt gzip, bad root XML, non-JSON)."""


class EdgarMappingError(EdgarError):
    """Raised when caller-supplied or decoded values violate a domain invariant."""
