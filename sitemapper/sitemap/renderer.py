"""Sitemap XML rendering.

The document is emitted without whitespace between elements and URLs are
written exactly as crawled; no entity escaping is applied.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


def render_sitemap(urls: Iterable[str]) -> str:
    """Render canonical URLs as a sitemap ``urlset`` document.

    Example:
        >>> render_sitemap(["https://example.org/"])
        '<?xml version="1.0" encoding="UTF-8"?><urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"><url><loc>https://example.org/</loc></url></urlset>'
    """
    entries = "".join(f"<url><loc>{url}</loc></url>" for url in urls)
    return f'{XML_DECLARATION}<urlset xmlns="{SITEMAP_NAMESPACE}">{entries}</urlset>'


def write_sitemap(sitemap: str, path: Path) -> Path:
    """Write a rendered sitemap to disk, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(sitemap, encoding="utf-8")
    tmp_path.replace(path)
    logger.info("Wrote sitemap to %s", path)
    return path
