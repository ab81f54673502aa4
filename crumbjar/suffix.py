from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

import tldextract


class PublicSuffixList(Protocol):
    """
    Anything that can report the public suffix of a domain.

    ``public_suffix`` returns the longest known public suffix of ``domain``
    (for example ``"co.uk"`` for ``"www.example.co.uk"``), or ``""`` when the
    domain has no known suffix.
    """

    def public_suffix(self, domain: str) -> str: ...


class TLDExtractSuffixList:
    """
    Public suffix lookups backed by tldextract.

    By default only the Public Suffix List snapshot bundled with tldextract is
    used, so constructing one never touches the network.

    Args:
        include_psl_private_domains: Treat private suffixes (``github.io``...) as public
        suffix_list_urls: URLs to fetch a fresher list from, tried in order
        cache_dir: Where tldextract caches fetched lists (None disables caching)
    """

    def __init__(
        self,
        include_psl_private_domains: bool = False,
        suffix_list_urls: Sequence[str] = (),
        cache_dir: str | None = None,
    ) -> None:
        self.include_psl_private_domains = include_psl_private_domains
        self._extract = tldextract.TLDExtract(
            cache_dir=cache_dir,
            suffix_list_urls=tuple(suffix_list_urls),
            fallback_to_snapshot=True,
            include_psl_private_domains=include_psl_private_domains,
        )

    def public_suffix(self, domain: str) -> str:
        return self._extract(domain).suffix

    def __repr__(self) -> str:
        return f"<TLDExtractSuffixList private={self.include_psl_private_domains}>"
