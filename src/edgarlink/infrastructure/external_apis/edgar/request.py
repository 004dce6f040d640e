# src/edgarlink/infrastructure/external_apis/edgar/request.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Outbound request description.

Purpose:
    Describe one logical GET against the archive. Construction enforces the
    fair-access identification rule, so a request without a usable
    ``User-Agent`` never reaches the network.

Layer:
    infrastructure
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Final
from urllib.parse import urlsplit

from edgarlink.domain.exceptions.edgar import EdgarInvalidConfiguration

_CONTACT_RE: Final[re.Pattern[str]] = re.compile(
    r"[^@\s]+@[^@\s]+\.[^@\s]+|https?://\S+|www\.\S+",
    re.IGNORECASE,
)

QueryParams = tuple[tuple[str, str], ...]


def require_user_agent(value: str | None) -> str:
    """Return the stripped identification header or raise.

    The archive requires ``"<application-name> <contact>"`` where the contact
    is an e-mail address or a URL.

    Raises:
        EdgarInvalidConfiguration: If the value is missing, blank or carries no
            contact token.
    """
    cleaned = (value or "").strip()
    if not cleaned:
        raise EdgarInvalidConfiguration("User agent must not be empty.")
    if _CONTACT_RE.search(cleaned) is None:
        raise EdgarInvalidConfiguration(
            "User agent must include a contact e-mail address or URL.",
            details={"user_agent": cleaned},
        )
    return cleaned


def to_query_params(params: Mapping[str, object] | Iterable[tuple[str, object]] | None) -> QueryParams:
    """Normalize a mapping or pair sequence into ordered string pairs, dropping ``None`` values."""
    if params is None:
        return ()
    pairs = params.items() if isinstance(params, Mapping) else params
    return tuple((str(k), str(v)) for k, v in pairs if v is not None)


@dataclass(frozen=True)
class RequestDescriptor:
    """Immutable description of one logical archive request.

    Args:
        url: Absolute http(s) URL.
        user_agent: Identification header value.
        params: Ordered query parameters.
        endpoint: Logical endpoint name used for metrics and logs.
        method: HTTP method; the archive is read-only, so ``GET``.
    """

    url: str
    user_agent: str
    params: QueryParams = ()
    endpoint: str = "archive"
    method: str = "GET"

    def __post_init__(self) -> None:
        """Validate identification header, URL and method."""
        object.__setattr__(self, "user_agent", require_user_agent(self.user_agent))
        parts = urlsplit(self.url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise EdgarInvalidConfiguration(
                "Request URL must be an absolute http(s) URL.", details={"url": self.url}
            )
        method = self.method.upper()
        if method != "GET":
            raise EdgarInvalidConfiguration(
                "Only GET requests are supported.", details={"method": self.method}
            )
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "params", tuple(self.params))
