# src/edgarlink/adapters/decoders/feed_decoder.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Atom / RSS feed decoder.

Purpose:
    Parse EDGAR syndication feeds (current filings, per-company filings, XBRL
    RSS) into :class:`FeedDocument` values without leaking XML details.

Layer:
    adapters/decoders

Notes:
    - The format is chosen by the root element: ``feed`` is Atom, ``rss`` is
      RSS. Any other root, or XML that does not parse, is a decode error.
    - Elements are matched by local name, so namespace prefixes do not matter.
      Unknown elements are ignored.
    - An item without a title or link is skipped with a warning.
    - The filer CIK is taken from, in order: the XBRL ``cikNumber`` element,
      the feed's ``company-info`` block, a ten-digit number in parentheses in
      the title, or a ``/data/<cik>/`` segment in the link.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Final
from xml.etree.ElementTree import Element

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as ET

from edgarlink.adapters.decoders.common import note_warning, parse_timestamp
from edgarlink.domain.entities.decode_report import Decoded, DecodeWarning
from edgarlink.domain.entities.edgar_company import EntityIdentifier
from edgarlink.domain.entities.edgar_feed import FeedDocument, FeedItem
from edgarlink.domain.entities.edgar_filing import AccessionNumber
from edgarlink.domain.enums.edgar import FeedFormat
from edgarlink.domain.exceptions.edgar import EdgarDecodeError, EdgarMappingError

logger = logging.getLogger(__name__)

_SOURCE: Final[str] = "feed"
_TITLE_CIK_RE: Final[re.Pattern[str]] = re.compile(r"\((\d{10})\)")
_LINK_CIK_RE: Final[re.Pattern[str]] = re.compile(r"/data/(\d{1,10})/")
_TITLE_FORM_RE: Final[re.Pattern[str]] = re.compile(r"^\s*([^\s].*?)\s+-\s+")


def _local(tag: str) -> str:
    """Strip a Clark-notation namespace from ``tag``."""
    return tag.rsplit("}", 1)[-1] if tag.startswith("{") else tag


def _child(elem: Element, name: str) -> Element | None:
    for child in elem:
        if _local(child.tag) == name:
            return child
    return None


def _children(elem: Element, name: str) -> list[Element]:
    return [child for child in elem if _local(child.tag) == name]


def _find_deep(elem: Element, name: str) -> Element | None:
    for node in elem.iter():
        if node is not elem and _local(node.tag) == name:
            return node
    return None


def _text(elem: Element | None) -> str | None:
    if elem is None or elem.text is None:
        return None
    cleaned = elem.text.strip()
    return cleaned or None


def _parse_rfc822(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None


def _entity_from(cik: str | None) -> EntityIdentifier | None:
    if not cik:
        return None
    try:
        return EntityIdentifier.from_cik(cik)
    except EdgarMappingError:
        return None


def _entity_from_text(title: str, link: str) -> EntityIdentifier | None:
    match = _TITLE_CIK_RE.search(title) or _LINK_CIK_RE.search(link)
    return _entity_from(match.group(1)) if match else None


def _accession_from(*candidates: str | None) -> str | None:
    for candidate in candidates:
        if not candidate:
            continue
        try:
            return AccessionNumber.find_in(candidate).dashed
        except EdgarMappingError:
            continue
    return None


def _form_from_title(title: str) -> str | None:
    match = _TITLE_FORM_RE.match(title)
    return match.group(1) if match else None


def _atom_link(entry: Element) -> str | None:
    fallback: str | None = None
    for link in _children(entry, "link"):
        href = (link.get("href") or "").strip()
        if not href:
            continue
        if link.get("rel") in (None, "alternate"):
            return href
        fallback = fallback or href
    return fallback


def _skip(position: int, reason: str, elem: Element) -> DecodeWarning:
    raw = ET.tostring(elem, encoding="unicode") if elem is not None else ""
    return note_warning(
        logger,
        "edgar.feed.item_skipped",
        DecodeWarning.build(_SOURCE, position, reason, raw),
    )


def _decode_atom(root: Element) -> tuple[FeedDocument, list[DecodeWarning]]:
    company_info = _child(root, "company-info")
    feed_entity = _entity_from(_text(_child(company_info, "cik"))) if company_info is not None else None

    items: list[FeedItem] = []
    warnings: list[DecodeWarning] = []
    for position, entry in enumerate(_children(root, "entry"), start=1):
        title = _text(_child(entry, "title"))
        link = _atom_link(entry)
        if not title or not link:
            warnings.append(_skip(position, "missing_title" if not title else "missing_link", entry))
            continue

        content = _child(entry, "content")
        summary = _text(_child(entry, "summary")) or (
            _text(_find_deep(content, "items-desc")) if content is not None else None
        )
        if summary is None and content is not None and len(content) == 0:
            summary = _text(content)

        category = _child(entry, "category")
        form_type = (
            (_text(_find_deep(content, "filing-type")) if content is not None else None)
            or (category.get("term") if category is not None else None)
            or _form_from_title(title)
        )
        accession = _accession_from(
            _text(_find_deep(content, "accession-number")) if content is not None else None,
            _text(_child(entry, "id")),
            link,
        )
        published = parse_timestamp(_text(_child(entry, "updated"))) or parse_timestamp(
            _text(_child(entry, "published"))
        )

        items.append(
            FeedItem(
                title=title,
                link=link,
                published=published,
                summary=summary,
                entity=feed_entity or _entity_from_text(title, link),
                form_type=form_type,
                accession_number=accession,
            )
        )

    document = FeedDocument(FeedFormat.ATOM, _text(_child(root, "title")), tuple(items))
    return document, warnings


def _decode_rss(root: Element) -> tuple[FeedDocument, list[DecodeWarning]]:
    channel = _child(root, "channel")
    if channel is None:
        raise EdgarDecodeError("RSS feed has no channel element.")

    items: list[FeedItem] = []
    warnings: list[DecodeWarning] = []
    for position, item in enumerate(_children(channel, "item"), start=1):
        title = _text(_child(item, "title"))
        link = _text(_child(item, "link"))
        if not title or not link:
            warnings.append(_skip(position, "missing_title" if not title else "missing_link", item))
            continue

        filing = _child(item, "xbrlFiling")
        cik = _text(_find_deep(filing, "cikNumber")) if filing is not None else None
        form_type = _text(_find_deep(filing, "formType")) if filing is not None else None
        accession = _accession_from(
            _text(_find_deep(filing, "accessionNumber")) if filing is not None else None,
            _text(_child(item, "guid")),
            link,
        )

        items.append(
            FeedItem(
                title=title,
                link=link,
                published=_parse_rfc822(_text(_child(item, "pubDate"))),
                summary=_text(_child(item, "description")),
                entity=_entity_from(cik) or _entity_from_text(title, link),
                form_type=form_type or _form_from_title(title),
                accession_number=accession,
            )
        )

    document = FeedDocument(FeedFormat.RSS, _text(_child(channel, "title")), tuple(items))
    return document, warnings


def decode_feed(data: bytes) -> Decoded[FeedDocument]:
    """Decode an Atom or RSS payload.

    Raises:
        EdgarDecodeError: If the XML does not parse or the root element is
            neither ``feed`` nor ``rss``.
    """
    try:
        root = ET.fromstring(data.strip())
    except (ET.ParseError, DefusedXmlException) as exc:
        raise EdgarDecodeError("Feed XML could not be parsed.", details={"error": str(exc)}) from exc

    root_name = _local(root.tag)
    if root_name == "feed":
        document, warnings = _decode_atom(root)
    elif root_name == "rss":
        document, warnings = _decode_rss(root)
    else:
        raise EdgarDecodeError("Unrecognized feed root element.", details={"root": root_name})
    return Decoded(document, tuple(warnings))
