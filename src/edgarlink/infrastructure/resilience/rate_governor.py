# src/edgarlink/infrastructure/resilience/rate_governor.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Rate governor (token bucket, async).

Summary:
    A single in-memory token bucket that every physical request to the archive
    passes through. Tokens refill continuously at the sustained rate, capped at
    the burst allowance. ``admit()`` suspends the caller until one token is
    available and then consumes it.

Concurrency:
    Only the token mutation is guarded by an ``asyncio.Lock``. Waiting happens
    outside the lock, so many callers may be suspended at once without
    serializing their timers. Ordering among waiters is approximately FIFO.

Notes:
    A consumed token is never returned, even if the caller is cancelled after
    admission. The budget lives in process memory and resets on restart.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from contextlib import suppress
from dataclasses import dataclass

from edgarlink.domain.exceptions.edgar import EdgarInvalidConfiguration
from edgarlink.infrastructure.observability.metrics_edgar import get_edgar_governor_wait_seconds

# Refill arithmetic can leave a full token a few ULPs short of 1.0.
_TOKEN_EPSILON = 1e-6


@dataclass
class _Bucket:
    """Token bucket state."""

    tokens: float
    last: float


@dataclass(frozen=True)
class RateBudget:
    """Point-in-time view of the governor's budget.

    Args:
        rate: Sustained refill rate in tokens per second.
        burst: Maximum bucket capacity.
        tokens: Tokens available at ``last_refill``.
        last_refill: Clock reading of the last refill.
    """

    rate: float
    burst: float
    tokens: float
    last_refill: float


class RateGovernor:
    """Async token-bucket admission control.

    Args:
        rate_per_sec: Sustained token refill rate per second.
        burst: Maximum bucket capacity (requests allowed at once).
        clock: Monotonic clock returning seconds.
        sleep: Awaitable sleep used while waiting for tokens.

    Raises:
        EdgarInvalidConfiguration: If the rate or burst is not positive.
    """

    def __init__(
        self,
        rate_per_sec: float = 10.0,
        burst: int = 10,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if rate_per_sec <= 0:
            raise EdgarInvalidConfiguration(
                "Rate must be positive.", details={"rate_per_sec": rate_per_sec}
            )
        if burst < 1:
            raise EdgarInvalidConfiguration("Burst must be at least 1.", details={"burst": burst})
        self.rate: float = float(rate_per_sec)
        self.capacity: float = float(burst)
        self._clock = clock
        self._sleep = sleep
        self._bucket = _Bucket(tokens=self.capacity, last=clock())
        self._lock = asyncio.Lock()
        self._wait_hist = get_edgar_governor_wait_seconds()

    def _refill(self, now: float) -> None:
        bucket = self._bucket
        delta = max(0.0, now - bucket.last)
        bucket.tokens = min(self.capacity, bucket.tokens + delta * self.rate)
        bucket.last = max(bucket.last, now)

    async def _try_take(self) -> float:
        """Consume a token if one is available.

        Returns:
            ``0.0`` when a token was consumed, otherwise the seconds until the
            next token becomes available.
        """
        async with self._lock:
            self._refill(self._clock())
            if self._bucket.tokens >= 1.0 - _TOKEN_EPSILON:
                self._bucket.tokens = max(0.0, self._bucket.tokens - 1.0)
                return 0.0
            return (1.0 - self._bucket.tokens) / self.rate

    async def admit(self) -> float:
        """Suspend until a token is available, then consume it.

        Returns:
            Total seconds the caller spent suspended.
        """
        waited = 0.0
        while True:
            wait = await self._try_take()
            if wait == 0.0:
                break
            await self._sleep(wait)
            waited += wait

        with suppress(Exception):
            self._wait_hist.observe(waited)
        return waited

    def snapshot(self) -> RateBudget:
        """Return the current budget, refilled to now."""
        self._refill(self._clock())
        return RateBudget(
            rate=self.rate,
            burst=self.capacity,
            tokens=self._bucket.tokens,
            last_refill=self._bucket.last,
        )
