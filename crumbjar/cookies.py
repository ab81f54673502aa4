"""Cookie records and the Set-Cookie header codec.

``parse_cookie`` turns one Set-Cookie header value into a :class:`Cookie`;
``Cookie.marshal`` turns it back into header text. Character classes follow
RFC 6265 with two pragmatic relaxations: cookie values may contain spaces and
commas, and any attribute text except ``;`` is accepted.
"""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .errors import CookieSyntaxError

NAME_CHAR = 1
VALUE_CHAR = 2
ATTR_CHAR = 4

_NAME_SEPARATORS = frozenset('()<>@,;:\\"/[]?={} \t')


def _build_char_table() -> tuple[int, ...]:
    table = [0] * 256
    for c in range(0x20, 0x7F):
        ch = chr(c)
        if ch not in _NAME_SEPARATORS:
            table[c] |= NAME_CHAR
        # Spaces and commas are tolerated in values despite RFC 2109.
        if ch not in '";\\':
            table[c] |= VALUE_CHAR
        if ch != ";":
            table[c] |= ATTR_CHAR
    return tuple(table)


CHARS = _build_char_table()

# Day and month names are always English, whatever the process locale.
_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# RFC 1123 and the dashed Netscape variant. The zone name is always read as UTC.
_EXPIRES_RE = re.compile(
    r"([A-Za-z]{3}), (\d{1,2})([ -])([A-Za-z]{3})\3(\d{4}) (\d{2}):(\d{2}):(\d{2}) \S+"
)


def _valid(s: str, cls: int) -> bool:
    if not s:
        return False
    for ch in s:
        c = ord(ch)
        if c > 0xFF or not CHARS[c] & cls:
            return False
    return True


def is_valid_name(s: str) -> bool:
    return _valid(s, NAME_CHAR)


def is_valid_value(s: str) -> bool:
    return _valid(s, VALUE_CHAR)


def is_valid_attr(s: str) -> bool:
    return _valid(s, ATTR_CHAR)


def is_domain_name(s: str) -> bool:
    """
    Check that s is a valid domain name, optionally with one leading dot.

    Labels are 1-63 letters, digits or hyphens, may not start or end with a
    hyphen, and at least one letter must appear somewhere.
    """
    if not s or len(s) > 255:
        return False
    if s[0] == ".":
        s = s[1:]

    prev = "."
    has_letter = False
    n = 0
    for c in s:
        if "a" <= c <= "z" or "A" <= c <= "Z":
            has_letter = True
            n += 1
        elif "0" <= c <= "9":
            n += 1
        elif c == "-":
            if prev == ".":
                return False
            n += 1
        elif c == ".":
            if prev in ".-" or n > 63 or n == 0:
                return False
            n = 0
        else:
            return False
        prev = c

    if prev == "-" or n > 63:
        return False
    return has_letter


def is_valid_domain(s: str) -> bool:
    """A Domain attribute is a domain name or a bare IPv4 address."""
    if is_domain_name(s):
        return True
    try:
        return isinstance(ipaddress.ip_address(s), ipaddress.IPv4Address)
    except ValueError:
        return False


def should_quote_value(s: str) -> bool:
    return s[0] in " ," or s[-1] in " ,"


def _trim(s: str) -> str:
    return s.strip(" \t")


def _unquote(raw: str) -> str:
    if len(raw) >= 2 and raw[0] == '"' and raw[-1] == '"':
        return raw[1:-1]
    return raw


def parse_expires(value: str) -> datetime:
    """Parse an Expires attribute value into an aware UTC datetime."""
    m = _EXPIRES_RE.fullmatch(value)
    if m is None:
        raise CookieSyntaxError(f"invalid Expires value: {value!r}")
    day, mday, _, month, year, hour, minute, second = m.groups()
    day, month = day.title(), month.title()
    if day not in _DAYS or month not in _MONTHS:
        raise CookieSyntaxError(f"invalid Expires value: {value!r}")
    try:
        return datetime(
            int(year), _MONTHS.index(month) + 1, int(mday),
            int(hour), int(minute), int(second), tzinfo=timezone.utc,
        )
    except ValueError:
        raise CookieSyntaxError(f"invalid Expires value: {value!r}") from None


def format_expires(when: datetime) -> str:
    """Format when as an RFC 1123 date in UTC, e.g. ``Mon, 01 Jan 2024 12:00:00 UTC``."""
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    when = when.astimezone(timezone.utc)
    return (
        f"{_DAYS[when.weekday()]}, {when.day:02d} {_MONTHS[when.month - 1]} {when.year:04d} "
        f"{when.hour:02d}:{when.minute:02d}:{when.second:02d} UTC"
    )


@dataclass
class Cookie:
    """
    An HTTP cookie as carried by a Set-Cookie header.

    ``max_age`` of 0 means no Max-Age attribute was given; ``Max-Age=0`` (a
    request to delete the cookie) is stored as -1. ``expires`` is None when
    there is no Expires attribute. Attributes the codec does not understand
    are kept verbatim in ``unparsed``.
    """

    name: str
    value: str
    domain: str = ""
    path: str = ""
    expires: datetime | None = None
    secure: bool = False
    http_only: bool = False
    max_age: int = 0
    unparsed: list[str] = field(default_factory=list)

    def marshal(self, attrs: bool = True) -> str:
        """
        Serialize the cookie.

        With ``attrs=False`` only ``name=value`` is produced, as in a Cookie
        request header.

        Raises:
            CookieSyntaxError: If a field holds characters that cannot be sent
        """
        if not is_valid_name(self.name):
            raise CookieSyntaxError(f"invalid cookie name: {self.name!r}")
        if not is_valid_value(self.value):
            raise CookieSyntaxError(f"invalid cookie value: {self.value!r}")

        if should_quote_value(self.value):
            parts = [f'{self.name}="{self.value}"']
        else:
            parts = [f"{self.name}={self.value}"]
        if not attrs:
            return parts[0]

        if self.domain:
            if not is_valid_domain(self.domain):
                raise CookieSyntaxError(f"invalid Domain value: {self.domain!r}")
            parts.append(f"Domain={self.domain}")
        if self.path:
            if not is_valid_attr(self.path):
                raise CookieSyntaxError(f"invalid Path value: {self.path!r}")
            parts.append(f"Path={self.path}")
        if self.expires is not None and self.expires.timestamp() > 0:
            parts.append("Expires=" + format_expires(self.expires))
        if self.max_age > 0:
            parts.append(f"Max-Age={self.max_age}")
        elif self.max_age < 0:
            parts.append("Max-Age=0")
        if self.http_only:
            parts.append("HttpOnly")
        if self.secure:
            parts.append("Secure")
        for attr in self.unparsed:
            if not is_valid_attr(attr):
                raise CookieSyntaxError(f"invalid attribute: {attr!r}")
            parts.append(attr)

        return "; ".join(parts)

    def __str__(self) -> str:
        return self.marshal()


def parse_cookie(raw: str) -> Cookie:
    """
    Parse one Set-Cookie header value.

    For a Cookie request header, each semicolon-separated pair must be
    parsed on its own.

    Raises:
        CookieSyntaxError: On a bad name or value, or a malformed attribute
    """
    first, *attrs = raw.split(";")
    part = _trim(first)

    name, eq, value = part.partition("=")
    if not eq:
        raise CookieSyntaxError("missing cookie value")
    if not is_valid_name(name):
        raise CookieSyntaxError(f"invalid cookie name: {name!r}")
    value = _unquote(value)
    if not is_valid_value(value):
        raise CookieSyntaxError(f"invalid cookie value: {value!r}")

    cookie = Cookie(name=name, value=value)
    for attr in attrs:
        _parse_attr(cookie, _trim(attr))
    return cookie


def _parse_attr(cookie: Cookie, raw: str) -> None:
    # Empty segments ("a=b; ; Secure" or a trailing ";") carry nothing.
    if raw == "":
        return
    if not is_valid_attr(raw):
        raise CookieSyntaxError(f"invalid attribute: {raw!r}")

    key, eq, val = raw.partition("=")
    if key == "":
        raise CookieSyntaxError(f"invalid attribute: {raw!r}")
    if eq:
        val = _unquote(val)
        if val and not is_valid_value(val):
            raise CookieSyntaxError(f"invalid attribute: {raw!r}")

    lkey = key.lower()
    if lkey == "domain":
        # An empty Domain attribute is ignored (RFC 6265, 5.2.3).
        if val == "":
            return
        if not is_valid_domain(val):
            raise CookieSyntaxError(f"invalid Domain value: {val!r}")
        cookie.domain = val
    elif lkey == "expires":
        cookie.expires = parse_expires(val)
    elif lkey == "httponly":
        cookie.http_only = True
    elif lkey == "max-age":
        try:
            n = int(val)
        except ValueError:
            raise CookieSyntaxError(f"invalid Max-Age value: {val!r}") from None
        if n < 0 or not val.isdigit():
            raise CookieSyntaxError(f"invalid Max-Age value: {val!r}")
        cookie.max_age = n if n else -1
    elif lkey == "path":
        cookie.path = val
    elif lkey == "secure":
        cookie.secure = True
    else:
        cookie.unparsed.append(raw)
