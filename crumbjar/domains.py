"""Domain attribute validation and registrable-domain lookup (RFC 6265, 5.3)."""

from __future__ import annotations

import logging

from .errors import IllegalDomainError, MalformedDomainError, NoHostnameError
from .hosts import has_dot_suffix, is_ip
from .punycode import to_ascii
from .suffix import PublicSuffixList

logger = logging.getLogger(__name__)


def validate_domain(
    host: str, domain: str, psl: PublicSuffixList | None
) -> tuple[str, bool]:
    """
    Work out the domain a cookie is scoped to and whether it is host-only.

    ``host`` must already be canonical. ``domain`` is the raw Domain attribute
    of the cookie, possibly empty.

    Returns:
        A ``(domain, host_only)`` pair

    Raises:
        NoHostnameError: If a Domain attribute is set by an IP address
        MalformedDomainError: If the attribute is empty or badly dotted
        IllegalDomainError: If the attribute does not cover host, or names a
            public suffix other than host itself
        EncodingOverflowError: If the attribute cannot be punycode-encoded
    """
    if domain == "":
        return host, True

    if is_ip(host):
        raise NoHostnameError(f"host {host!r} is an IP address; Domain={domain!r} not allowed")

    # A single leading dot is allowed and ignored.
    if domain.startswith("."):
        domain = domain[1:]
    if domain == "" or domain.startswith(".") or domain.endswith("."):
        raise MalformedDomainError(f"malformed Domain attribute: {domain!r}")

    domain = to_ascii(domain.lower())

    if psl is not None:
        suffix = psl.public_suffix(domain)
        if suffix != "" and not has_dot_suffix(domain, suffix):
            # The attribute is a public suffix; only the suffix itself may set
            # a (host-only) cookie for it.
            if host == domain:
                return host, True
            logger.debug("rejecting Domain=%s from %s: public suffix %s", domain, host, suffix)
            raise IllegalDomainError(f"Domain={domain!r} is a public suffix")

    if host != domain and not has_dot_suffix(host, domain):
        logger.debug("rejecting Domain=%s from %s: host does not domain-match", domain, host)
        raise IllegalDomainError(f"Domain={domain!r} does not cover host {host!r}")

    return domain, False


def domain_root(host: str, psl: PublicSuffixList | None) -> str:
    """
    Return the bucket key for host.

    IP addresses are their own root. Otherwise the root is the registrable
    domain, e.g. ``"example.com"`` for ``"foo.bar.example.com"``. Without a
    suffix list, or when the list returns a suffix that does not fall on a
    label boundary of host, the root is ``""``.
    """
    if is_ip(host):
        return host
    if psl is None:
        return ""

    suffix = psl.public_suffix(host)
    if suffix == host:
        return host

    i = len(host) - len(suffix)
    if i > 0 and host[i - 1] == "." and host.endswith(suffix):
        return host[host.rfind(".", 0, i - 1) + 1:]

    logger.debug("suffix %r is not aligned with host %r; using empty root", suffix, host)
    return ""
