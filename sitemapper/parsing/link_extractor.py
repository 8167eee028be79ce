"""Anchor extraction from HTML content.

This module turns a fetched document into the raw anchors the crawler works
with. It does not resolve, normalize or deduplicate links; that is the
crawler's job. Anchors are returned in document order, which decides the
order pages are discovered in and therefore the order of the sitemap.
"""

from __future__ import annotations

import logging
from typing import List

from bs4 import BeautifulSoup

from sitemapper.parsing.url_scope import Anchor

logger = logging.getLogger(__name__)


class AnchorParseError(RuntimeError):
    """Raised when a document body cannot be turned into anchors."""


def decode_html(data: bytes) -> tuple[str, str]:
    """Decode a response body, returning the text and the encoding used.

    UTF-8 is tried first; latin-1 maps every byte, so it always succeeds.
    """
    try:
        return data.decode("utf-8"), "utf-8"
    except UnicodeDecodeError:
        return data.decode("latin-1"), "latin-1"


def parse_anchors(body: bytes | str) -> List[Anchor]:
    """Extract every ``<a href>`` from a document.

    Args:
        body: The document, as raw response bytes or already decoded text

    Returns:
        List of Anchor objects in document order. The href is kept exactly
        as written (surrounding whitespace removed); link text has its
        whitespace collapsed.

    Raises:
        AnchorParseError: If the body is neither bytes nor text, or the HTML
            parser fails on it

    Example:
        >>> parse_anchors('<a href="/about">About <b>us</b></a>')
        [Anchor(href='/about', link_text='About us')]
    """
    if isinstance(body, bytes):
        html, encoding = decode_html(body)
        logger.debug("Decoded %d bytes as %s", len(body), encoding)
    elif isinstance(body, str):
        html = body
    else:
        raise AnchorParseError(f"Cannot parse a document body of type {type(body).__name__}")

    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as exc:
        raise AnchorParseError(f"Could not parse document: {exc}") from exc

    anchors: List[Anchor] = []
    for tag in soup.find_all("a", href=True):
        href = tag["href"].strip()
        if not href:
            continue
        anchors.append(Anchor(href=href, link_text=_normalize_whitespace(tag.get_text(" "))))
    return anchors


def _normalize_whitespace(value: str) -> str:
    return " ".join(value.split())
