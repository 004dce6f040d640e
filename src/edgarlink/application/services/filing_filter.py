# src/edgarlink/application/services/filing_filter.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Uniform post-decode filing filter.

Purpose:
    Apply :class:`FilingOptions` identically to filing records, index entries
    and feed items, whichever decoder produced them.

Layer:
    application/services
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, TypeVar

from edgarlink.domain.entities.edgar_filing import base_form, is_amendment_form
from edgarlink.domain.entities.filing_options import FilingOptions


class Filterable(Protocol):
    """Anything carrying a form code and a filer CIK."""

    @property
    def form_type(self) -> str | None: ...

    @property
    def cik(self) -> str | None: ...


T = TypeVar("T", bound=Filterable)


def matches_form(form_type: str | None, options: FilingOptions) -> bool:
    """Return True when ``form_type`` passes the form and amendment rules."""
    form = (form_type or "").strip().upper()
    amendment = is_amendment_form(form)
    if amendment and not options.include_amendments:
        return False
    if options.form_types is None:
        return True
    if not form:
        return False

    for requested in options.form_types:
        if options.form_prefix_match:
            if form.startswith(requested):
                return True
            continue
        if form == requested:
            return True
        if amendment and not is_amendment_form(requested) and base_form(form) == requested:
            return True
    return False


def matches(item: Filterable, options: FilingOptions) -> bool:
    """Return True when ``item`` passes every filter except offset and limit."""
    if options.ciks is not None and item.cik not in options.ciks:
        return False
    return matches_form(item.form_type, options)


def apply_filing_options(items: Iterable[T], options: FilingOptions | None) -> list[T]:
    """Filter, then slice by offset and limit, preserving input order."""
    if options is None:
        return list(items)
    kept = [item for item in items if matches(item, options)]
    end = None if options.limit is None else options.offset + options.limit
    return kept[options.offset : end]
