"""HTTP fetching for the sitemap crawler.

The crawler only needs the body of a page. Everything else about HTTP is
left to requests; any failure, at the transport level or a non-2xx status,
surfaces as a :class:`FetchError` and the crawler skips the page.

Each :class:`HttpFetcher` owns its own ``requests.Session`` so connection
pooling and timeouts are scoped to one crawl.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "sitemapper/0.1 (+https://www.sitemaps.org/)"


class FetchError(RuntimeError):
    """Raised when a page cannot be fetched.

    Attributes:
        url: The URL that failed
        status_code: The HTTP status for status failures, None for transport
            failures (DNS, TLS, timeouts, refused connections)
    """

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class Fetcher(Protocol):
    """Anything that can return the body of a URL."""

    def fetch(self, url: str) -> bytes:
        ...


@dataclass
class HttpFetcher:
    """Fetcher backed by a ``requests.Session``.

    Usage:
        with HttpFetcher(timeout=5) as fetcher:
            body = fetcher.fetch("https://example.org/")
    """

    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    session: requests.Session = field(default_factory=requests.Session)

    def __post_init__(self) -> None:
        self.session.headers.update(
            {
                "User-Agent": self.user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            }
        )

    def __enter__(self) -> "HttpFetcher":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def fetch(self, url: str) -> bytes:
        """Fetch a URL and return the response body.

        Raises:
            FetchError: On any transport failure or non-2xx response
        """
        try:
            response = self.session.get(url, timeout=self.timeout, allow_redirects=True)
        except requests.exceptions.Timeout as exc:
            raise FetchError(url, f"Request timed out after {self.timeout}s") from exc
        except requests.exceptions.RequestException as exc:
            raise FetchError(url, str(exc)) from exc

        if not 200 <= response.status_code < 300:
            raise FetchError(url, f"HTTP {response.status_code}", status_code=response.status_code)

        logger.debug("Fetched %s (%d bytes)", url, len(response.content))
        return response.content
