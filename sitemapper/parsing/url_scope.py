"""URL normalization and domain containment for the sitemap crawler.

Every link discovered during a crawl is reduced to a canonical URL before it
is compared, scheduled or recorded. The canonical form is deliberately
simple: scheme-relative and host-relative references are qualified with the
crawl's scheme and host, absolute references are kept as they are, and a
trailing slash is always appended.

Examples:
    >>> normalize_url("/about", "https", "example.org")
    'https://example.org/about/'
    >>> normalize_url("//example.org/about", "https", "example.org")
    'https://example.org/about/'
    >>> normalize_url("https://example.org/about/", "https", "example.org")
    'https://example.org/about/'
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import NamedTuple
from urllib.parse import urlparse

ALLOWED_SCHEMES = ("http", "https")


class SeedURLError(ValueError):
    """Raised when the crawl's seed URL cannot be split into scheme and host."""


@dataclass(frozen=True, slots=True)
class Anchor:
    """A link as found in markup.

    Attributes:
        href: The raw (or, after normalization, canonical) link target
        link_text: The display text of the link, may be empty
    """

    href: str
    link_text: str = ""


class SeedURL(NamedTuple):
    """The scheme and host every crawled URL must share."""

    scheme: str
    host: str

    @property
    def domain_prefix(self) -> str:
        """The ``<scheme>://<host>`` prefix used for domain containment."""
        return f"{self.scheme}://{self.host}"

    @property
    def root(self) -> Anchor:
        """The canonical anchor for the site root, the crawl's seed."""
        return normalize_anchor(Anchor(href="/"), self.scheme, self.host)


def parse_seed_url(url: str) -> SeedURL:
    """Split a seed URL into the scheme and host the crawl is bound to.

    Args:
        url: An absolute URL such as ``https://example.org``

    Returns:
        SeedURL with the scheme and host (``netloc``, port included)

    Raises:
        SeedURLError: If the URL has no scheme or host, or the scheme is not
            http/https
    """
    if not url or not url.strip():
        raise SeedURLError("Seed URL must not be empty")

    try:
        parsed = urlparse(url.strip())
    except ValueError as exc:
        raise SeedURLError(f"Could not parse seed URL '{url}': {exc}") from exc

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise SeedURLError(
            f"Invalid scheme in seed URL '{url}'. Must be one of {ALLOWED_SCHEMES}"
        )
    if not parsed.netloc:
        raise SeedURLError(f"Seed URL '{url}' has no host")

    return SeedURL(scheme=parsed.scheme, host=parsed.netloc)


def build_seed_url(domain: str, scheme: str = "https") -> str:
    """Build the seed URL for a domain given on the command line.

    Raises:
        SeedURLError: If the domain is empty or the result is not a valid seed
    """
    domain = (domain or "").strip()
    if not domain:
        raise SeedURLError("Please provide a domain to generate the sitemap for")

    url = f"{scheme}://{domain}"
    parse_seed_url(url)
    return url


def normalize_url(href: str, scheme: str, host: str) -> str:
    """Convert a raw href into its canonical absolute form.

    No validation is performed beyond prefix checks. A query string or
    fragment is kept, and the trailing slash lands after it
    (``/about?x=1`` becomes ``<scheme>://<host>/about?x=1/``).
    """
    if href.startswith("//"):
        href = f"{scheme}:{href}"
    elif href.startswith("/"):
        href = f"{scheme}://{host}{href}"

    if not href.endswith("/"):
        href = href + "/"
    return href


def normalize_anchor(anchor: Anchor, scheme: str, host: str) -> Anchor:
    """Return a new anchor whose href is canonical. Link text is kept."""
    return replace(anchor, href=normalize_url(anchor.href, scheme, host))


def is_in_domain(url: str, domain_prefix: str) -> bool:
    """Check a canonical URL against the crawl's ``<scheme>://<host>`` prefix.

    The match is a case-sensitive string prefix test.
    """
    return url.startswith(domain_prefix)
