# src/edgarlink/domain/entities/decode_report.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Decode warnings.

Purpose:
    Record line-level or item-level data that a decoder skipped while the
    surrounding payload stayed decodable. A warning is a filtered-out record,
    not an error.

Layer:
    domain
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Generic, TypeVar

T = TypeVar("T")

_EXCERPT_LIMIT: Final[int] = 160


@dataclass(frozen=True)
class DecodeWarning:
    """A skipped line or item.

    Args:
        source: Decoder that produced the warning (``index``, ``feed``, ...).
        position: 1-based line number or item ordinal within the payload.
        reason: Short machine-friendly reason (``too_few_fields``, ``bad_date``).
        excerpt: Beginning of the offending raw text.
    """

    source: str
    position: int
    reason: str
    excerpt: str = ""

    @classmethod
    def build(cls, source: str, position: int, reason: str, raw: str = "") -> DecodeWarning:
        return cls(source=source, position=position, reason=reason, excerpt=raw[:_EXCERPT_LIMIT])


@dataclass(frozen=True)
class Decoded(Generic[T]):
    """Decoder output: the recovered value plus any skip warnings."""

    value: T
    warnings: tuple[DecodeWarning, ...] = ()
