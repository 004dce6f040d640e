# src/edgarlink/infrastructure/resilience/retry.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Retry policy and attempt state machine with jittered exponential backoff.

A logical request moves through explicit states::

    Attempting(n) -> Succeeded
    Attempting(n) -> Backoff(n, delay) -> Attempting(n + 1)
    Attempting(n) -> Failed(n)

:func:`next_state` is the pure transition function; the transport drives the
loop and performs the backoff wait between states.
"""

from __future__ import annotations

import random
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from edgarlink.domain.exceptions.edgar import EdgarInvalidConfiguration

if TYPE_CHECKING:
    from edgarlink.infrastructure.external_apis.edgar.settings import EdgarSettings


class OutcomeClass(str, Enum):
    """Classification of one physical attempt."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    CONNECTION = "connection"
    CLIENT_ERROR = "client_error"


DEFAULT_RETRYABLE: frozenset[OutcomeClass] = frozenset(
    {OutcomeClass.RATE_LIMITED, OutcomeClass.SERVER_ERROR, OutcomeClass.CONNECTION}
)


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for retry attempts.

    Args:
        max_attempts: Physical attempts allowed, the first one included.
        base_delay: Delay before the second attempt, in seconds.
        multiplier: Exponential growth factor between delays.
        jitter_ratio: Symmetric jitter as a fraction of the computed delay.
        max_delay: Upper bound on any single wait, server hints included.
        retryable: Outcome classes that may be retried.
    """

    max_attempts: int = 6
    base_delay: float = 1.0
    multiplier: float = 2.0
    jitter_ratio: float = 0.2
    max_delay: float = 60.0
    retryable: frozenset[OutcomeClass] = field(default=DEFAULT_RETRYABLE)

    def __post_init__(self) -> None:
        """Validate policy bounds."""
        if self.max_attempts < 1:
            raise EdgarInvalidConfiguration(
                "max_attempts must be at least 1.", details={"max_attempts": self.max_attempts}
            )
        if self.base_delay < 0:
            raise EdgarInvalidConfiguration(
                "base_delay must not be negative.", details={"base_delay": self.base_delay}
            )
        if self.multiplier < 1.0:
            raise EdgarInvalidConfiguration(
                "multiplier must be at least 1.", details={"multiplier": self.multiplier}
            )
        if not 0.0 <= self.jitter_ratio < 1.0:
            raise EdgarInvalidConfiguration(
                "jitter_ratio must be in [0, 1).", details={"jitter_ratio": self.jitter_ratio}
            )
        if not self.max_delay >= self.base_delay:
            raise EdgarInvalidConfiguration(
                "max_delay must not be below base_delay.",
                details={"max_delay": self.max_delay, "base_delay": self.base_delay},
            )
        object.__setattr__(self, "retryable", frozenset(self.retryable))

    @classmethod
    def from_settings(cls, settings: EdgarSettings) -> RetryPolicy:
        """Build the policy described by client settings."""
        return cls(
            max_attempts=settings.max_attempts,
            base_delay=settings.base_backoff_s,
            multiplier=settings.backoff_multiplier,
            jitter_ratio=settings.jitter_ratio,
            max_delay=settings.max_backoff_s,
        )

    def nominal_delay(self, attempt: int) -> float:
        """Delay after failed attempt ``attempt`` (1-based), without jitter."""
        return self.base_delay * (self.multiplier ** (attempt - 1))

    def delay_for(self, attempt: int, *, rng: Callable[[], float] = random.random) -> float:
        """Jittered delay after failed attempt ``attempt`` (1-based)."""
        nominal = self.nominal_delay(attempt)
        jitter = nominal * self.jitter_ratio * (2.0 * rng() - 1.0)
        return min(self.max_delay, max(0.0, nominal + jitter))


@dataclass(frozen=True)
class Attempting:
    attempt: int


@dataclass(frozen=True)
class Backoff:
    """Wait ``delay`` seconds, then make attempt ``attempt + 1``."""

    attempt: int
    delay: float
    outcome: OutcomeClass

    def resume(self) -> Attempting:
        return Attempting(self.attempt + 1)


@dataclass(frozen=True)
class Succeeded:
    attempt: int


@dataclass(frozen=True)
class Failed:
    attempt: int
    outcome: OutcomeClass


RetryState = Attempting | Backoff | Succeeded | Failed


def next_state(
    policy: RetryPolicy,
    attempt: int,
    outcome: OutcomeClass,
    *,
    retry_after: float | None = None,
    rng: Callable[[], float] = random.random,
) -> RetryState:
    """Transition out of ``Attempting(attempt)`` given the attempt's outcome.

    Args:
        policy: Retry configuration.
        attempt: 1-based number of the attempt that just finished.
        outcome: Classification of that attempt.
        retry_after: Server back-off hint in seconds; used when it exceeds the
            computed delay, capped at ``policy.max_delay``.
        rng: Uniform ``[0, 1)`` source for jitter.

    Returns:
        ``Succeeded``, ``Backoff`` or ``Failed``.
    """
    if outcome is OutcomeClass.SUCCESS:
        return Succeeded(attempt)
    if outcome not in policy.retryable or attempt >= policy.max_attempts:
        return Failed(attempt, outcome)

    delay = policy.delay_for(attempt, rng=rng)
    if retry_after is not None and retry_after > delay:
        delay = min(retry_after, policy.max_delay)
    return Backoff(attempt, delay, outcome)
