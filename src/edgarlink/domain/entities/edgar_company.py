# src/edgarlink/domain/entities/edgar_company.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""EDGAR entity identity.

Purpose:
    Represent a filer's canonical key (the CIK) together with the optional
    ticker it was resolved from, plus the lightweight company profile decoded
    from the submissions document.

Layer:
    domain

Notes:
    The CIK is always stored zero-padded to ten digits. Display formatting
    (``display_cik``) is separate from the canonical key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Final

from edgarlink.domain.exceptions.edgar import EdgarMappingError

CIK_WIDTH: Final[int] = 10


def normalize_cik(value: str | int) -> str:
    """Normalize a CIK to its canonical 10-digit, zero-padded form.

    Non-digit characters (a ``CIK`` prefix, whitespace) are stripped before
    padding.

    Raises:
        EdgarMappingError: If no digits remain or the value exceeds ten digits.
    """
    if isinstance(value, int):
        if value < 0:
            raise EdgarMappingError("CIK must not be negative.", details={"cik": value})
        digits = str(value)
    else:
        digits = "".join(ch for ch in value if ch.isdigit())
    if not digits:
        raise EdgarMappingError("CIK must contain at least one digit.", details={"cik": value})
    if len(digits.lstrip("0")) > CIK_WIDTH:
        raise EdgarMappingError("CIK must fit in ten digits.", details={"cik": value})
    return digits.lstrip("0").zfill(CIK_WIDTH)


@dataclass(frozen=True)
class EntityIdentifier:
    """Canonical identity for an EDGAR filer.

    Args:
        cik: Central Index Key; normalized to ten zero-padded digits.
        ticker: Ticker symbol the identifier was resolved from, if any.
            Stored upper case.
    """

    cik: str
    ticker: str | None = None

    def __post_init__(self) -> None:
        """Normalize the CIK and ticker."""
        object.__setattr__(self, "cik", normalize_cik(self.cik))
        if self.ticker is not None:
            cleaned = self.ticker.strip().upper()
            if not cleaned:
                raise EdgarMappingError(
                    "Ticker, when provided, must not be empty.",
                    details={"ticker": self.ticker},
                )
            object.__setattr__(self, "ticker", cleaned)

    @classmethod
    def from_cik(cls, value: str | int, *, ticker: str | None = None) -> EntityIdentifier:
        """Build an identifier from a raw CIK (string or integer)."""
        return cls(cik=normalize_cik(value), ticker=ticker)

    @property
    def numeric(self) -> int:
        """CIK as an integer (archive directory paths use this form)."""
        return int(self.cik)

    @property
    def display_cik(self) -> str:
        """CIK without leading zeros, for presentation."""
        return str(self.numeric)

    def __str__(self) -> str:
        return self.cik


@dataclass(frozen=True)
class CompanyTicker:
    """One row of the archive's ticker → CIK reference map."""

    ticker: str
    cik: str
    title: str


@dataclass(frozen=True)
class FormerName:
    """A previous legal name reported in the submissions document."""

    name: str
    valid_from: date | None
    valid_to: date | None


@dataclass(frozen=True)
class CompanyProfile:
    """Company facts decoded from the per-entity submissions document.

    Only ``entity`` and ``name`` are required; every other field defaults to
    absent so older or partial payloads still decode.
    """

    entity: EntityIdentifier
    name: str
    tickers: tuple[str, ...] = ()
    exchanges: tuple[str, ...] = ()
    entity_type: str | None = None
    sic: str | None = None
    sic_description: str | None = None
    fiscal_year_end: str | None = None
    state_of_incorporation: str | None = None
    ein: str | None = None
    former_names: tuple[FormerName, ...] = field(default_factory=tuple)
