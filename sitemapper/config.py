"""Project configuration management.

Defaults for the command line come from ``SITEMAP_*`` environment variables,
which ``main.py`` may populate from a ``.env`` file.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Any, Mapping, Optional

from sitemapper.parsing.fetcher import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from sitemapper.sitemap.config import DEFAULT_MAX_DEPTH, CrawlConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "SITEMAP_"


class ProjectConfig:
    """Access to project configuration values."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ
        self._data: dict[str, str] = {}
        self._loaded = False

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return

        environ = os.environ if self._environ is None else self._environ
        self._data = {
            key[len(ENV_PREFIX):].lower(): value
            for key, value in environ.items()
            if key.startswith(ENV_PREFIX) and value != ""
        }
        self._loaded = True

    def _number(self, key: str, default: Any, cast: type) -> Any:
        raw = self.get(key)
        if raw is None:
            return default
        try:
            return cast(raw)
        except ValueError:
            logger.warning("Ignoring invalid %s%s=%r", ENV_PREFIX, key.upper(), raw)
            return default

    @property
    def domain(self) -> Optional[str]:
        """Get the configured domain to crawl."""
        return self.get("domain")

    @property
    def scheme(self) -> str:
        """Get the crawl scheme, defaulting to https."""
        return self.get("scheme", "https")

    @property
    def max_depth(self) -> int:
        return self._number("max_depth", DEFAULT_MAX_DEPTH, int)

    @property
    def timeout(self) -> float:
        return self._number("timeout", DEFAULT_TIMEOUT, float)

    @property
    def workers(self) -> int:
        return self._number("workers", 1, int)

    @property
    def user_agent(self) -> str:
        return self.get("user_agent", DEFAULT_USER_AGENT)

    def crawl_config(self) -> CrawlConfig:
        """Build a :class:`CrawlConfig` from the configured values."""
        return CrawlConfig(
            max_depth=self.max_depth,
            timeout=self.timeout,
            max_workers=self.workers,
            user_agent=self.user_agent,
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Get a raw configuration value."""
        self._ensure_loaded()
        return self._data.get(key, default)


@lru_cache(maxsize=1)
def get_config() -> ProjectConfig:
    """Get the singleton configuration instance."""
    return ProjectConfig()
