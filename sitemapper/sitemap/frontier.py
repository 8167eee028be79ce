"""Frontier and visited-set bookkeeping for a crawl.

Two pages are the same page iff their canonical URLs are string-equal, so
every membership test here compares canonical hrefs exactly.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Union

from sitemapper.parsing.url_scope import Anchor, is_in_domain, normalize_anchor

UrlLike = Union[Anchor, str]


def _href(item: UrlLike) -> str:
    return item.href if isinstance(item, Anchor) else item


def contains(urls: Iterable[UrlLike], candidate: UrlLike) -> bool:
    """Check whether any member's canonical URL equals the candidate's."""
    href = _href(candidate)
    return any(_href(item) == href for item in urls)


def admit(
    urls: List[Anchor],
    candidate: Anchor,
    domain_prefix: str,
    scheme: str,
    host: str,
) -> List[Anchor]:
    """Normalize a candidate and append it if it is new and inside the domain.

    This is the single dedup and domain gate every discovered anchor passes
    through before it is scheduled.

    Returns:
        The same list, with the canonical candidate appended when admitted
    """
    canonical = normalize_anchor(candidate, scheme, host)
    if not contains(urls, canonical) and is_in_domain(canonical.href, domain_prefix):
        urls.append(canonical)
    return urls


class UrlSet:
    """Insertion-ordered set of canonical URLs.

    Same semantics as :func:`contains`/:func:`admit` over a list, with
    constant-time membership.
    """

    def __init__(self, urls: Iterable[UrlLike] = ()) -> None:
        self._urls: dict[str, None] = {}
        for url in urls:
            self.add(url)

    def add(self, url: UrlLike) -> bool:
        """Add a URL, returning False if it was already present."""
        href = _href(url)
        if href in self._urls:
            return False
        self._urls[href] = None
        return True

    def admit(self, candidate: Anchor, domain_prefix: str, scheme: str, host: str) -> bool:
        """Normalize and add a candidate if it is inside the domain.

        Returns:
            True if the candidate was added
        """
        canonical = normalize_anchor(candidate, scheme, host)
        if not is_in_domain(canonical.href, domain_prefix):
            return False
        return self.add(canonical)

    @property
    def urls(self) -> List[str]:
        """The URLs in insertion order."""
        return list(self._urls)

    def __contains__(self, url: object) -> bool:
        if not isinstance(url, (Anchor, str)):
            return False
        return _href(url) in self._urls

    def __iter__(self) -> Iterator[str]:
        return iter(self._urls)

    def __len__(self) -> int:
        return len(self._urls)

    def __bool__(self) -> bool:
        return bool(self._urls)

    def __repr__(self) -> str:
        return f"UrlSet({self.urls!r})"
