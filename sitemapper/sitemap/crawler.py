"""Breadth-first crawl of a single domain.

The crawler starts at the site root and expands one depth level at a time:

1. Every URL in the current frontier is fetched and recorded as visited,
   whether or not the fetch succeeds
2. Anchors on each fetched page are normalized, and those not yet visited,
   not in the current frontier and inside the domain form the next frontier
3. The next level runs while there is something to visit and the depth
   bound allows it

A page that fails to load or parse still counts as visited, so it is never
retried and the crawl always terminates. The only hard failure is a seed URL
without scheme or host, raised when the generator is built.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Sequence

from sitemapper.parsing.fetcher import FetchError, Fetcher, HttpFetcher
from sitemapper.parsing.link_extractor import parse_anchors
from sitemapper.parsing.url_scope import Anchor, normalize_anchor, parse_seed_url

from .config import DEFAULT_MAX_DEPTH, CrawlConfig
from .frontier import UrlSet
from .renderer import render_sitemap

logger = logging.getLogger(__name__)

AnchorParser = Callable[[bytes], Sequence[Anchor]]
FetchFunction = Callable[[str], bytes]


@dataclass
class CrawlResult:
    """Outcome of one crawl.

    Attributes:
        seed_url: The ``<scheme>://<host>`` the crawl was bound to.
        urls: Canonical URLs visited, seed first, in breadth-first order.
        failed: Visited URLs whose fetch or parse failed.
        depth_reached: Deepest level that was expanded.
        cancelled: Whether the crawl stopped early on request.
    """

    seed_url: str
    urls: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    depth_reached: int = 0
    cancelled: bool = False

    @property
    def page_count(self) -> int:
        return len(self.urls)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for logging/reporting."""
        return {
            "seed_url": self.seed_url,
            "pages": self.page_count,
            "failed": len(self.failed),
            "depth_reached": self.depth_reached,
            "cancelled": self.cancelled,
            "urls": list(self.urls),
            "failed_urls": list(self.failed),
        }


def _resolve_fetch(fetcher: Fetcher | FetchFunction) -> FetchFunction:
    fetch = getattr(fetcher, "fetch", None)
    if callable(fetch):
        return fetch
    if callable(fetcher):
        return fetcher
    raise TypeError(
        f"Fetcher must have a fetch(url) method or be callable, got {type(fetcher).__name__}"
    )


def _is_cancelled(cancel_event: threading.Event | None) -> bool:
    return cancel_event is not None and cancel_event.is_set()


class SitemapGenerator:
    """Generates a sitemap for the domain of a seed URL.

    Usage:
        generator = SitemapGenerator("https://example.org", max_depth=3)
        xml = generator.generate()

    The fetcher and anchor parser are injected so a crawl can run against
    fixtures instead of the network.
    """

    def __init__(
        self,
        url: str,
        max_depth: int = DEFAULT_MAX_DEPTH,
        fetcher: Fetcher | FetchFunction | None = None,
        parser: AnchorParser = parse_anchors,
        max_workers: int = 1,
    ) -> None:
        """Initialize the generator.

        Args:
            url: Seed URL; only its scheme and host are used
            max_depth: Deepest breadth-first level to expand
            fetcher: Object with ``fetch(url) -> bytes`` or a plain callable
                taking a URL; an :class:`HttpFetcher` is created, and closed
                after each crawl, when omitted
            parser: Callable turning a body into anchors in document order
            max_workers: Concurrent fetches within one level

        Raises:
            SeedURLError: If the seed URL has no usable scheme or host
            ValueError: If max_depth or max_workers is out of range
            TypeError: If the fetcher has no ``fetch`` method and is not callable
        """
        self.seed = parse_seed_url(url)
        if max_depth < 0:
            raise ValueError(f"Invalid max_depth: {max_depth}. Must be >= 0")
        if max_workers < 1:
            raise ValueError(f"Invalid max_workers: {max_workers}. Must be >= 1")
        self.max_depth = max_depth
        self.max_workers = max_workers
        self._owns_fetcher = fetcher is None
        self.fetcher = HttpFetcher() if fetcher is None else fetcher
        self._fetch = _resolve_fetch(self.fetcher)
        self.parser = parser

    @classmethod
    def from_config(
        cls,
        url: str,
        config: CrawlConfig,
        fetcher: Fetcher | FetchFunction | None = None,
    ) -> "SitemapGenerator":
        """Build a generator from a :class:`CrawlConfig`."""
        owns_fetcher = fetcher is None
        if fetcher is None:
            fetcher = HttpFetcher(timeout=config.timeout, user_agent=config.user_agent)
        generator = cls(
            url,
            max_depth=config.max_depth,
            fetcher=fetcher,
            max_workers=config.max_workers,
        )
        generator._owns_fetcher = owns_fetcher
        return generator

    def generate(self, cancel_event: threading.Event | None = None) -> str:
        """Crawl the domain and render the visited pages as sitemap XML."""
        return render_sitemap(self.crawl(cancel_event).urls)

    def crawl(self, cancel_event: threading.Event | None = None) -> CrawlResult:
        """Crawl the domain breadth-first.

        Args:
            cancel_event: When set, no further pages are fetched and the pages
                visited so far are returned

        Returns:
            CrawlResult with the visited URLs in discovery order
        """
        try:
            return self._traverse(cancel_event)
        finally:
            if self._owns_fetcher:
                self.fetcher.close()

    def _traverse(self, cancel_event: threading.Event | None) -> CrawlResult:
        scheme, host = self.seed
        domain_prefix = self.seed.domain_prefix
        result = CrawlResult(seed_url=domain_prefix)

        visited = UrlSet()
        frontier: List[str] = [self.seed.root.href]
        depth = 0

        logger.info("Starting crawl: %s (max_depth=%d)", domain_prefix, self.max_depth)

        while True:
            in_frontier = UrlSet(frontier)
            next_frontier = UrlSet()
            attempted = 0

            for url, anchors in self._visit_level(frontier, cancel_event):
                attempted += 1
                visited.add(url)
                if anchors is None:
                    result.failed.append(url)
                    continue

                for anchor in anchors:
                    canonical = normalize_anchor(anchor, scheme, host)
                    if canonical in in_frontier or canonical in visited:
                        continue
                    next_frontier.admit(canonical, domain_prefix, scheme, host)

            result.depth_reached = depth

            if attempted < len(frontier):
                result.cancelled = True
                logger.warning(
                    "Crawl cancelled at depth %d after %d pages",
                    depth,
                    len(visited),
                )
                break

            logger.info(
                "Depth %d: visited %d page(s), discovered %d new",
                depth,
                len(frontier),
                len(next_frontier),
            )

            if not next_frontier or depth + 1 > self.max_depth:
                break

            frontier = next_frontier.urls
            depth += 1

        result.urls = visited.urls

        logger.info(
            "Crawl complete for %s: %d pages, %d failed, depth %d",
            domain_prefix,
            result.page_count,
            len(result.failed),
            result.depth_reached,
        )
        return result

    def _visit_level(
        self,
        frontier: List[str],
        cancel_event: threading.Event | None,
    ) -> Iterator[tuple[str, Sequence[Anchor] | None]]:
        """Fetch every URL of one level, yielding results in frontier order."""
        if self.max_workers == 1 or len(frontier) == 1:
            for url in frontier:
                if _is_cancelled(cancel_event):
                    return
                yield url, self._fetch_anchors(url)
            return

        workers = min(self.max_workers, len(frontier))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._fetch_anchors, url) for url in frontier]
            for url, future in zip(frontier, futures):
                if _is_cancelled(cancel_event):
                    executor.shutdown(wait=False, cancel_futures=True)
                    return
                yield url, future.result()

    def _fetch_anchors(self, url: str) -> Sequence[Anchor] | None:
        """Fetch a page and parse its anchors, returning None on any failure."""
        try:
            body = self._fetch(url)
        except FetchError as exc:
            if exc.status_code is not None:
                logger.warning("Could not visit [%s]: HTTP status %d", url, exc.status_code)
            else:
                logger.warning("Could not visit [%s]: %s", url, exc)
            return None
        except Exception as exc:
            logger.warning("Could not visit [%s]: %s", url, exc)
            return None

        try:
            anchors = self.parser(body)
        except Exception as exc:
            logger.warning("Could not parse anchors from [%s]: %s", url, exc)
            return None

        logger.debug("Visited %s: %d anchor(s)", url, len(anchors))
        return anchors
