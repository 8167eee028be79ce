"""Configuration for a single crawl.

This module defines the knobs that bound the cost of one sitemap run: how
deep the breadth-first expansion may go and how pages are fetched.
"""

from __future__ import annotations

from dataclasses import dataclass

from sitemapper.parsing.fetcher import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT

DEFAULT_MAX_DEPTH = 10


@dataclass(frozen=True)
class CrawlConfig:
    """Settings for one crawl.

    Attributes:
        max_depth: Deepest breadth-first level to expand. 0 visits the seed
            only.
        timeout: Per-request timeout in seconds.
        max_workers: Pages fetched concurrently within one level. 1 fetches
            strictly sequentially.
        user_agent: User-Agent header sent with every request.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    timeout: float = DEFAULT_TIMEOUT
    max_workers: int = 1
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.max_depth < 0:
            raise ValueError(f"Invalid max_depth: {self.max_depth}. Must be >= 0")
        if self.timeout <= 0:
            raise ValueError(f"Invalid timeout: {self.timeout}. Must be > 0")
        if self.max_workers < 1:
            raise ValueError(f"Invalid max_workers: {self.max_workers}. Must be >= 1")
