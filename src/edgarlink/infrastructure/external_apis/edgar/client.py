# src/edgarlink/infrastructure/external_apis/edgar/client.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""EDGAR Transport Client (rate-governed, async).

This transport is framework-agnostic and provides:

* Async HTTP (httpx) with per-request timeout.
* Admission through a shared token-bucket rate governor on every physical
  attempt, retries included.
* Jittered exponential retries driven by an explicit attempt state machine,
  honouring ``Retry-After`` on 429.
* Deterministic mapping to EDGAR domain errors.
* Structured logs and Prometheus metrics.

Notes:
    * Settings are validated in the constructor; an unusable identification
      header fails before any HTTP client is created.
    * Caller-facing exceptions are always EDGAR domain exceptions; httpx types
      are never allowed to cross the boundary.
    * The transport returns raw body bytes. Decoding belongs to the decoders.
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
import random
import time
from collections.abc import Awaitable, Callable, Iterable, Mapping
from contextlib import suppress
from typing import Any, Final

import httpx

from edgarlink.domain.exceptions.edgar import (
    EdgarClientError,
    EdgarNotFound,
    EdgarRateLimitExceeded,
    EdgarServerError,
)
from edgarlink.infrastructure.external_apis.edgar.request import RequestDescriptor, to_query_params
from edgarlink.infrastructure.external_apis.edgar.settings import EdgarSettings, validate_settings
from edgarlink.infrastructure.logging.logger import get_request_id, get_trace_id
from edgarlink.infrastructure.observability.metrics_edgar import (
    get_edgar_errors_total,
    get_edgar_http_status_total,
    get_edgar_request_latency_seconds,
    get_edgar_response_bytes,
    get_edgar_retries_total,
)
from edgarlink.infrastructure.resilience.rate_governor import RateGovernor
from edgarlink.infrastructure.resilience.retry import (
    Backoff,
    Failed,
    OutcomeClass,
    RetryPolicy,
    next_state,
)

logger = logging.getLogger(__name__)

_PAYLOAD_EXCERPT: Final[int] = 500

_DEFAULT_HEADERS: Final[dict[str, str]] = {
    "Accept": "*/*",
    "Accept-Encoding": "gzip, deflate",
}


class _Attempt:
    """Outcome of one physical attempt."""

    __slots__ = ("outcome", "body", "status", "retry_after", "error")

    def __init__(
        self,
        outcome: OutcomeClass,
        *,
        body: bytes = b"",
        status: int | None = None,
        retry_after: float | None = None,
        error: str | None = None,
    ) -> None:
        self.outcome = outcome
        self.body = body
        self.status = status
        self.retry_after = retry_after
        self.error = error


class EdgarClient:
    """Rate-governed, instrumented transport client for SEC EDGAR."""

    def __init__(
        self,
        settings: EdgarSettings,
        *,
        http: httpx.AsyncClient | None = None,
        governor: RateGovernor | None = None,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Callable[[], float] = random.random,
    ) -> None:
        """Initialize the transport client.

        Args:
            settings: Provider settings loaded from environment or DI.
            http: Optional shared ``httpx.AsyncClient``. If omitted, a client
                is created and owned by this instance.
            governor: Rate governor to share; created from settings if omitted.
            retry_policy: Retry configuration; derived from settings if omitted.
            sleep: Awaitable used for backoff waits between attempts.
            rng: Uniform ``[0, 1)`` source for backoff jitter.

        Raises:
            EdgarInvalidConfiguration: If the settings are unusable.
        """
        validate_settings(settings)
        self._settings = settings
        self._user_agent = settings.user_agent.strip()
        self._timeout = float(settings.timeout_s)

        self._governor = governor or RateGovernor(settings.rate_limit_rps, settings.burst)
        self._retry = retry_policy or RetryPolicy.from_settings(settings)
        self._sleep = sleep
        self._rng = rng

        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(
            timeout=self._timeout,
            headers=_DEFAULT_HEADERS.copy(),
            follow_redirects=True,
        )

        # Metrics handles.
        self._latency = get_edgar_request_latency_seconds()
        self._errors = get_edgar_errors_total()
        self._status_total = get_edgar_http_status_total()
        self._resp_bytes = get_edgar_response_bytes()
        self._retries_total = get_edgar_retries_total()

    @property
    def settings(self) -> EdgarSettings:
        return self._settings

    @property
    def governor(self) -> RateGovernor:
        return self._governor

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def describe(
        self,
        url: str,
        *,
        endpoint: str,
        params: Mapping[str, object] | Iterable[tuple[str, object]] | None = None,
    ) -> RequestDescriptor:
        """Build a request descriptor carrying this client's identification header."""
        return RequestDescriptor(
            url=url,
            user_agent=self._user_agent,
            params=to_query_params(params),
            endpoint=endpoint,
        )

    async def get_bytes(
        self,
        url: str,
        *,
        endpoint: str,
        params: Mapping[str, object] | Iterable[tuple[str, object]] | None = None,
    ) -> bytes:
        """GET ``url`` and return the raw body bytes."""
        return await self.execute(self.describe(url, endpoint=endpoint, params=params))

    async def execute(self, request: RequestDescriptor, policy: RetryPolicy | None = None) -> bytes:
        """Execute one logical request and return the response body.

        Every physical attempt is admitted by the rate governor first.

        Args:
            request: Request to perform.
            policy: Retry policy override for this request.

        Returns:
            Raw response body bytes of the first 2xx response.

        Raises:
            EdgarNotFound: On 404 (never retried).
            EdgarClientError: On any other 4xx except 429 (never retried).
            EdgarRateLimitExceeded: When the final permitted attempt got 429.
            EdgarServerError: When the final permitted attempt got 5xx or a
                connection-level failure.
        """
        policy = policy or self._retry
        endpoint = request.endpoint
        headers = self._headers(request)

        start = time.perf_counter()
        error_reason: str | None = None
        attempt = 1
        try:
            while True:
                await self._governor.admit()
                result = await self._attempt(request, headers)
                state = next_state(
                    policy,
                    attempt,
                    result.outcome,
                    retry_after=result.retry_after,
                    rng=self._rng,
                )
                if isinstance(state, Backoff):
                    with suppress(Exception):
                        self._retries_total.labels(endpoint, state.outcome.value).inc()
                    logger.warning(
                        "edgar.transport.retry",
                        extra={
                            "endpoint": endpoint,
                            "url": request.url,
                            "attempt": state.attempt,
                            "status": result.status,
                            "outcome": state.outcome.value,
                            "delay_s": round(state.delay, 3),
                        },
                    )
                    await self._sleep(state.delay)
                    attempt = state.resume().attempt
                    continue
                if isinstance(state, Failed):
                    error_reason = state.outcome.value
                    raise self._terminal_error(request, state, result)
                return result.body
        finally:
            elapsed = time.perf_counter() - start
            outcome = "error" if error_reason else "success"
            with suppress(Exception):
                self._latency.labels(endpoint, outcome).observe(elapsed)
                if error_reason:
                    self._errors.labels(endpoint, error_reason).inc()

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _headers(self, request: RequestDescriptor) -> dict[str, str]:
        headers: dict[str, str] = {"User-Agent": request.user_agent}
        request_id = get_request_id()
        trace_id = get_trace_id()
        if request_id:
            headers["X-Request-ID"] = request_id
        if trace_id:
            headers["x-trace-id"] = trace_id
        return headers

    async def _attempt(self, request: RequestDescriptor, headers: Mapping[str, str]) -> _Attempt:
        """Perform one physical GET and classify the outcome."""
        try:
            response = await self._client.request(
                request.method,
                request.url,
                params=list(request.params) or None,
                headers=headers,
                timeout=self._timeout,
                follow_redirects=True,
            )
        except httpx.TransportError as exc:
            return _Attempt(OutcomeClass.CONNECTION, error=f"{type(exc).__name__}: {exc}")

        status = response.status_code
        with suppress(Exception):
            self._status_total.labels(request.endpoint, str(status)).inc()

        if 200 <= status < 300:
            body = response.content
            with suppress(Exception):
                self._resp_bytes.labels(request.endpoint).observe(float(len(body)))
            return _Attempt(OutcomeClass.SUCCESS, body=body, status=status)
        if status == 404:
            return _Attempt(OutcomeClass.NOT_FOUND, status=status)
        if status == 429:
            return _Attempt(
                OutcomeClass.RATE_LIMITED,
                status=status,
                retry_after=self._parse_retry_after(response.headers.get("Retry-After")),
            )
        if status >= 500:
            return _Attempt(OutcomeClass.SERVER_ERROR, status=status)
        return _Attempt(OutcomeClass.CLIENT_ERROR, body=response.content, status=status)

    def _terminal_error(
        self,
        request: RequestDescriptor,
        state: Failed,
        result: _Attempt,
    ) -> Exception:
        """Map a terminal state into the caller-facing domain error."""
        details: dict[str, Any] = {
            "endpoint": request.endpoint,
            "url": request.url,
            "status": result.status,
            "attempts": state.attempt,
        }
        if result.error:
            details["error"] = result.error

        logger.info(
            "edgar.transport.failed",
            extra={**details, "outcome": state.outcome.value},
        )

        if state.outcome is OutcomeClass.NOT_FOUND:
            return EdgarNotFound("EDGAR resource not found.", details=details)
        if state.outcome is OutcomeClass.RATE_LIMITED:
            return EdgarRateLimitExceeded("EDGAR rate limit retries exhausted.", details=details)
        if state.outcome is OutcomeClass.CLIENT_ERROR:
            return EdgarClientError(
                "EDGAR rejected the request.",
                status=result.status or 0,
                payload=self._decode_error_payload(result.body),
                details=details,
            )
        return EdgarServerError("EDGAR upstream unavailable.", details=details)

    @staticmethod
    def _decode_error_payload(body: bytes) -> Any:
        """Decode an error body as JSON, falling back to a text excerpt."""
        if not body:
            return None
        try:
            return json.loads(body)
        except ValueError:
            return body[:_PAYLOAD_EXCERPT].decode("utf-8", errors="replace")

    @staticmethod
    def _parse_retry_after(val: str | None) -> float | None:
        """Parse HTTP Retry-After header (seconds form only)."""
        if not val:
            return None
        try:
            seconds = float(val)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(seconds):
            return None
        return max(0.0, seconds)
