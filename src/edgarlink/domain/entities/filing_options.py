# src/edgarlink/domain/entities/filing_options.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Caller-supplied filing filters.

Purpose:
    Describe the post-decode filter applied uniformly to filing records and
    index entries, whichever endpoint produced them.

Layer:
    domain

Notes:
    Matching rules:
        * Exact match compares the form with its amendment suffix removed, so
          ``10-K`` matches ``10-K`` and ``10-K/A``. An explicitly requested
          amendment (``10-K/A``) matches only itself.
        * Prefix match (``form_prefix_match=True``) matches any form starting
          with a requested value (``10-K`` also matches ``10-KT``).
        * ``include_amendments=False`` drops every ``/A`` form.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from edgarlink.domain.entities.edgar_company import normalize_cik
from edgarlink.domain.exceptions.edgar import EdgarMappingError


@dataclass(frozen=True)
class FilingOptions:
    """Filter configuration for filing sequences.

    Args:
        form_types: Requested form codes; ``None`` keeps every form.
        form_prefix_match: Use prefix rather than exact form matching.
        limit: Maximum number of results; ``None`` means unlimited.
        offset: Number of matching results to skip.
        include_amendments: Keep amendment (``/A``) forms.
        ciks: Restrict to these filers; ``None`` keeps every filer.
    """

    form_types: tuple[str, ...] | None = None
    form_prefix_match: bool = False
    limit: int | None = None
    offset: int = 0
    include_amendments: bool = True
    ciks: frozenset[str] | None = None

    def __post_init__(self) -> None:
        """Validate and normalize filter values."""
        if isinstance(self.form_types, str):
            object.__setattr__(self, "form_types", (self.form_types,))
        if isinstance(self.ciks, str):
            object.__setattr__(self, "ciks", frozenset({self.ciks}))
        if self.form_types is not None:
            cleaned = tuple(ft.strip().upper() for ft in self.form_types if ft.strip())
            object.__setattr__(self, "form_types", cleaned or None)
        if self.limit is not None and self.limit <= 0:
            raise EdgarMappingError(
                "limit must be a positive integer when provided.",
                details={"limit": self.limit},
            )
        if self.offset < 0:
            raise EdgarMappingError("offset must not be negative.", details={"offset": self.offset})
        if self.ciks is not None:
            object.__setattr__(self, "ciks", frozenset(normalize_cik(c) for c in self.ciks))

    @classmethod
    def for_forms(cls, form_types: str | Iterable[str], **kwargs: object) -> FilingOptions:
        """Shorthand for a form-type filter with optional extra settings."""
        forms = (form_types,) if isinstance(form_types, str) else tuple(form_types)
        return cls(form_types=forms, **kwargs)  # type: ignore[arg-type]
