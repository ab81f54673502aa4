from __future__ import annotations

import ipaddress

from .errors import CanonicalizationError
from .punycode import to_ascii


def canonical_host(host: str) -> str:
    """
    Lowercase a request host, strip any port and ASCII-encode its labels.

    Bracketed IPv6 literals lose their brackets, so ``[::1]:8080`` and
    ``[::1]`` both become ``::1``.

    Raises:
        CanonicalizationError: If the host:port form is malformed
        EncodingOverflowError: If a label cannot be punycode-encoded
    """
    host = host.lower()
    bracketed = host.startswith("[")
    if has_port(host):
        host, _ = split_host_port(host)
    elif bracketed:
        if not host.endswith("]"):
            raise CanonicalizationError(f"missing ']' in address: {host!r}")
        host = host[1:-1]

    if bracketed and not is_ip(host):
        raise CanonicalizationError(f"invalid IPv6 literal: {host!r}")
    return to_ascii(host)


def has_port(addr: str) -> bool:
    """
    Return True if addr carries a port.

    A single colon always means a port. With more colons the address must be
    a bracketed IPv6 literal whose last colon follows the closing bracket.
    """
    colons = 0
    rbrack = False
    for i, c in enumerate(addr):
        if c == ":":
            colons += 1
            rbrack = i > 0 and addr[i - 1] == "]"

    if colons == 0:
        return False
    if colons == 1:
        return True
    return addr[0] == "[" and rbrack


def split_host_port(addr: str) -> tuple[str, str]:
    """Split ``host:port`` or ``[host]:port`` into host and port."""
    i = addr.rfind(":")
    if i < 0:
        raise CanonicalizationError(f"missing port in address: {addr!r}")

    if addr.startswith("["):
        end = addr.find("]")
        if end < 0:
            raise CanonicalizationError(f"missing ']' in address: {addr!r}")
        if end + 1 != i:
            raise CanonicalizationError(f"unexpected text after ']' in address: {addr!r}")
        host = addr[1:end]
        if "[" in host:
            raise CanonicalizationError(f"unexpected '[' in address: {addr!r}")
    else:
        host = addr[:i]
        if ":" in host:
            raise CanonicalizationError(f"too many colons in address: {addr!r}")
        if "[" in host or "]" in host:
            raise CanonicalizationError(f"unexpected bracket in address: {addr!r}")

    port = addr[i + 1:]
    if "[" in port or "]" in port:
        raise CanonicalizationError(f"unexpected bracket in address: {addr!r}")
    return host, port


def is_ip(host: str) -> bool:
    """Return True if host is an IPv4 or IPv6 literal (without brackets)."""
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def has_dot_suffix(s: str, suffix: str) -> bool:
    """Return True if s is strictly longer than suffix and ends in ``"." + suffix``."""
    return (
        len(s) > len(suffix)
        and s[len(s) - len(suffix) - 1] == "."
        and s.endswith(suffix)
    )
