# src/edgarlink/adapters/decoders/compression.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Gzip wrapping and unwrapping for archive payloads."""

from __future__ import annotations

import gzip
import zlib
from typing import Final

from edgarlink.domain.exceptions.edgar import EdgarDecodeError

GZIP_MAGIC: Final[bytes] = b"\x1f\x8b"


def is_gzip(data: bytes) -> bool:
    """Return True when ``data`` starts with the gzip magic number."""
    return data[:2] == GZIP_MAGIC


def inflate(data: bytes) -> bytes:
    """Decompress a gzip stream.

    Raises:
        EdgarDecodeError: If the stream is truncated or corrupt.
    """
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as exc:
        raise EdgarDecodeError(
            "Corrupt or truncated gzip stream.",
            details={"error": f"{type(exc).__name__}: {exc}", "size": len(data)},
        ) from exc


def deflate(data: bytes) -> bytes:
    """Compress ``data`` into a gzip stream."""
    return gzip.compress(data)


def maybe_inflate(data: bytes) -> bytes:
    """Inflate ``data`` when it is gzip-wrapped; otherwise return it unchanged."""
    return inflate(data) if is_gzip(data) else data
