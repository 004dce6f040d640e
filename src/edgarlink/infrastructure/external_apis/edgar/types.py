# src/edgarlink/infrastructure/external_apis/edgar/types.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""
EDGAR Types.

Purpose:
    Provide typed response fragments for the EDGAR endpoints this client
    consumes (submissions, full-text search, ticker map, directory listings).

Layer:
    infrastructure

Notes:
    These are intentionally partial; only fields read by the decoders are
    typed. Every key is optional because the archive omits fields freely.
"""

from __future__ import annotations

from typing import TypedDict


class EdgarSubmissionsRecentSection(TypedDict, total=False):
    """Columnar filing table from the submissions JSON ('recent' or a history page)."""

    accessionNumber: list[str]
    filingDate: list[str]
    reportDate: list[str]
    acceptanceDateTime: list[str]
    form: list[str]
    primaryDocument: list[str]
    isXBRL: list[int]
    isInlineXBRL: list[int]
    size: list[int]


class EdgarSubmissionsFilePage(TypedDict, total=False):
    """Pointer to an older filing history page."""

    name: str
    filingCount: int
    filingFrom: str
    filingTo: str


class EdgarSubmissionsFilings(TypedDict, total=False):
    recent: EdgarSubmissionsRecentSection
    files: list[EdgarSubmissionsFilePage]


class EdgarFormerName(TypedDict, total=False):
    name: str
    # "from" and "to" are Python keywords; read them with .get().


class EdgarSubmissionsRoot(TypedDict, total=False):
    """Subset of the SEC submissions JSON used by the decoder."""

    cik: str
    name: str
    entityType: str
    sic: str
    sicDescription: str
    tickers: list[str]
    exchanges: list[str]
    ein: str
    fiscalYearEnd: str
    stateOfIncorporation: str
    formerNames: list[EdgarFormerName]
    filings: EdgarSubmissionsFilings


class EdgarSearchSource(TypedDict, total=False):
    ciks: list[str]
    display_names: list[str]
    form: str
    root_forms: list[str]
    file_date: str
    adsh: str
    period_ending: str


class EdgarSearchHit(TypedDict, total=False):
    _id: str
    _source: EdgarSearchSource


class EdgarSearchTotal(TypedDict, total=False):
    value: int
    relation: str


class EdgarSearchHits(TypedDict, total=False):
    total: EdgarSearchTotal
    hits: list[EdgarSearchHit]


class EdgarSearchRoot(TypedDict, total=False):
    """Full-text search response envelope."""

    hits: EdgarSearchHits


class EdgarTickerRow(TypedDict, total=False):
    """One value of ``company_tickers.json`` (keyed by ordinal strings)."""

    cik_str: int
    ticker: str
    title: str


EdgarDirectoryItem = TypedDict(
    "EdgarDirectoryItem",
    {
        "last-modified": str,
        "name": str,
        "type": str,
        "href": str,
        "size": str,
    },
    total=False,
)

EdgarDirectory = TypedDict(
    "EdgarDirectory",
    {
        "item": list[EdgarDirectoryItem],
        "name": str,
        "parent-dir": str,
    },
    total=False,
)


class EdgarDirectoryRoot(TypedDict, total=False):
    """Archive ``index.json`` directory listing envelope."""

    directory: EdgarDirectory
