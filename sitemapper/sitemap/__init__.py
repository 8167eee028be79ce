"""Breadth-first crawling and sitemap rendering for a single domain.

Usage:
    from sitemapper.sitemap import SitemapGenerator

    generator = SitemapGenerator("https://example.org", max_depth=3)
    print(generator.generate())
"""

from .config import CrawlConfig
from .crawler import CrawlResult, SitemapGenerator
from .frontier import UrlSet, admit, contains
from .renderer import render_sitemap, write_sitemap

__all__ = [
    # Config
    "CrawlConfig",
    # Crawler
    "CrawlResult",
    "SitemapGenerator",
    # Frontier
    "UrlSet",
    "admit",
    "contains",
    # Renderer
    "render_sitemap",
    "write_sitemap",
]
