# src/edgarlink/infrastructure/observability/metrics_edgar.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""EDGAR metrics.

Purpose:
    Provide Prometheus metrics for EDGAR archive calls:
      * Latency histograms per endpoint and outcome.
      * HTTP status distribution.
      * Retry and terminal error counters.
      * Response size histograms.
      * Rate governor wait time.
      * Decoder skip warnings.

Design:
    Functions return lazily-created singleton metric instances so that
    repeated client construction (tests, multiple clients per process) never
    registers a collector twice.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

_edgar_request_latency_seconds: Histogram | None = None
_edgar_http_status_total: Counter | None = None
_edgar_retries_total: Counter | None = None
_edgar_errors_total: Counter | None = None
_edgar_response_bytes: Histogram | None = None
_edgar_governor_wait_seconds: Histogram | None = None
_edgar_decode_warnings_total: Counter | None = None


def get_edgar_request_latency_seconds() -> Histogram:
    """Return (and lazily create) the EDGAR request latency histogram."""
    global _edgar_request_latency_seconds
    if _edgar_request_latency_seconds is None:
        _edgar_request_latency_seconds = Histogram(
            "edgarlink_request_latency_seconds",
            "Latency of EDGAR logical requests (all attempts) in seconds.",
            ["endpoint", "outcome"],
        )
    return _edgar_request_latency_seconds


def get_edgar_http_status_total() -> Counter:
    """Return (and lazily create) the EDGAR HTTP status counter."""
    global _edgar_http_status_total
    if _edgar_http_status_total is None:
        _edgar_http_status_total = Counter(
            "edgarlink_http_status_total",
            "EDGAR HTTP responses by status code.",
            ["endpoint", "status"],
        )
    return _edgar_http_status_total


def get_edgar_retries_total() -> Counter:
    """Return (and lazily create) the EDGAR retry counter."""
    global _edgar_retries_total
    if _edgar_retries_total is None:
        _edgar_retries_total = Counter(
            "edgarlink_retries_total",
            "Total number of EDGAR retries by outcome class.",
            ["endpoint", "reason"],
        )
    return _edgar_retries_total


def get_edgar_errors_total() -> Counter:
    """Return (and lazily create) the EDGAR terminal error counter."""
    global _edgar_errors_total
    if _edgar_errors_total is None:
        _edgar_errors_total = Counter(
            "edgarlink_errors_total",
            "Total number of EDGAR requests that ended in an error.",
            ["endpoint", "reason"],
        )
    return _edgar_errors_total


def get_edgar_response_bytes() -> Histogram:
    """Return (and lazily create) the EDGAR response-bytes histogram."""
    global _edgar_response_bytes
    if _edgar_response_bytes is None:
        _edgar_response_bytes = Histogram(
            "edgarlink_response_bytes",
            "Size of EDGAR HTTP response bodies in bytes.",
            ["endpoint"],
            buckets=(1e3, 1e4, 1e5, 1e6, 1e7, 5e7, float("inf")),
        )
    return _edgar_response_bytes


def get_edgar_governor_wait_seconds() -> Histogram:
    """Return (and lazily create) the rate governor wait histogram."""
    global _edgar_governor_wait_seconds
    if _edgar_governor_wait_seconds is None:
        _edgar_governor_wait_seconds = Histogram(
            "edgarlink_governor_wait_seconds",
            "Time callers spent suspended waiting for a request token.",
            buckets=(0.0, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, float("inf")),
        )
    return _edgar_governor_wait_seconds


def get_edgar_decode_warnings_total() -> Counter:
    """Return (and lazily create) the decoder skip-warning counter."""
    global _edgar_decode_warnings_total
    if _edgar_decode_warnings_total is None:
        _edgar_decode_warnings_total = Counter(
            "edgarlink_decode_warnings_total",
            "Records skipped by decoders because a line or item was malformed.",
            ["decoder", "reason"],
        )
    return _edgar_decode_warnings_total
