from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from .cookies import Cookie
from .domains import domain_root, validate_domain
from .errors import InvalidSchemeError
from .hosts import canonical_host, has_dot_suffix
from .suffix import PublicSuffixList

logger = logging.getLogger(__name__)

SCHEMES = ("http", "https")


def _check_scheme(scheme: str) -> None:
    if scheme not in SCHEMES:
        raise InvalidSchemeError(f"invalid scheme: {scheme!r}")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(when: datetime) -> datetime:
    # Naive datetimes are read as UTC so they compare with parsed Expires dates.
    if when.tzinfo is None:
        return when.replace(tzinfo=timezone.utc)
    return when


_FOREVER = datetime.max.replace(tzinfo=timezone.utc)


@dataclass
class JarEntry:
    """A stored cookie plus the bookkeeping the jar needs to find it again."""

    root: str
    key: str
    name: str
    value: str
    domain: str
    path: str
    host_only: bool
    created: datetime
    expires: datetime | None = None
    secure: bool = False
    http_only: bool = False
    seq: int = field(default=0, repr=False, compare=False)

    def is_expired(self, now: datetime) -> bool:
        return self.expires is not None and self.expires <= now

    def should_send(self, scheme: str, host: str, path: str) -> bool:
        """Return True if this cookie belongs on a request to scheme://host/path."""
        if self.secure and scheme != "https":
            return False

        if self.domain != host and (self.host_only or not has_dot_suffix(host, self.domain)):
            return False

        if path != self.path:
            if not path.startswith(self.path):
                return False
            # "/foo" covers "/foo/bar" but not "/foobar".
            if not self.path.endswith("/") and path[len(self.path)] != "/":
                return False

        return True


class Jar:
    """
    In-memory cookie jar bucketed by registrable domain.

    Entries live in ``{root: {key: JarEntry}}`` where root is the host's
    registrable domain (or IP address) and key is ``domain;path;name``.
    Empty buckets are never kept. Expired entries are dropped lazily when a
    read touches their bucket, or all at once by :meth:`clear_expired`.

    Every public method holds one lock for its whole duration, so a jar can
    be shared between threads.

    Args:
        psl: Public suffix lookup used to reject supercookies and to pick
            buckets. Without one, suffix checks are skipped and all named hosts
            share the ``""`` bucket.
    """

    def __init__(self, psl: PublicSuffixList | None = None) -> None:
        self.psl = psl
        self._entries: dict[str, dict[str, JarEntry]] = {}
        self._lock = threading.Lock()
        self._seq = itertools.count()

    def cookies(
        self, scheme: str, host: str, path: str, now: datetime | None = None
    ) -> list[Cookie]:
        """
        Return the cookies to send with a request to scheme://host/path.

        Only name and value are filled in on the returned cookies. They come
        longest path first, then oldest first.

        Raises:
            InvalidSchemeError: If scheme is not http or https
            CanonicalizationError: If host cannot be canonicalized
        """
        _check_scheme(scheme)
        host = canonical_host(host)
        now = _utcnow() if now is None else _as_utc(now)
        path = path or "/"

        with self._lock:
            root = domain_root(host, self.psl)
            bucket = self._entries.get(root)
            if bucket is None:
                return []

            selected: list[JarEntry] = []
            # Snapshot the bucket; expired entries are deleted as we go.
            for key, entry in list(bucket.items()):
                if entry.is_expired(now):
                    logger.debug("evicting expired cookie %s", key)
                    del bucket[key]
                    continue
                if entry.should_send(scheme, host, path):
                    selected.append(entry)

            if not bucket:
                del self._entries[root]

        selected.sort(key=lambda e: (-len(e.path), e.created, e.seq))
        return [Cookie(name=e.name, value=e.value) for e in selected]

    def set_cookie(
        self,
        scheme: str,
        host: str,
        path: str,
        cookie: Cookie,
        now: datetime | None = None,
    ) -> None:
        """
        Store, replace or delete a cookie received from scheme://host/path.

        The request path is not used to derive a default cookie path: a
        cookie without a usable Path attribute is scoped to ``/``.

        A Max-Age of -1 (``Max-Age=0`` on the wire) or an Expires date that
        is not in the future deletes any stored cookie with the same domain,
        path and name. Nothing is changed if an error is raised.

        A Max-Age too large for ``datetime`` is stored as never expiring by
        time. A naive ``now`` or ``Expires`` is read as UTC.

        Raises:
            InvalidSchemeError: If scheme is not http or https
            CanonicalizationError: If host cannot be canonicalized
            NoHostnameError: If an IP host sends a Domain attribute
            MalformedDomainError: If the Domain attribute is malformed
            IllegalDomainError: If the Domain attribute is not allowed for host
        """
        _check_scheme(scheme)
        host = canonical_host(host)
        now = _utcnow() if now is None else _as_utc(now)

        entry, remove = self._new_entry(cookie, host, now)

        with self._lock:
            if remove:
                self._remove(entry.root, entry.key)
            else:
                self._set(entry)

    def _new_entry(self, cookie: Cookie, host: str, now: datetime) -> tuple[JarEntry, bool]:
        domain, host_only = validate_domain(host, cookie.domain, self.psl)

        if cookie.path.startswith("/"):
            path = cookie.path
        else:
            path = "/"

        # Max-Age takes precedence over Expires.
        expires = None
        remove = False
        if cookie.max_age < 0:
            remove = True
        elif cookie.max_age > 0:
            try:
                expires = now + timedelta(seconds=cookie.max_age)
            except OverflowError:
                expires = _FOREVER
        elif cookie.expires is not None:
            if _as_utc(cookie.expires) > now:
                expires = _as_utc(cookie.expires)
            else:
                remove = True

        entry = JarEntry(
            root=domain_root(host, self.psl),
            key=f"{domain};{path};{cookie.name}",
            name=cookie.name,
            value=cookie.value,
            domain=domain,
            path=path,
            host_only=host_only,
            created=now,
            expires=expires,
            secure=cookie.secure,
            http_only=cookie.http_only,
        )
        return entry, remove

    def _set(self, entry: JarEntry) -> None:
        bucket = self._entries.setdefault(entry.root, {})
        old = bucket.get(entry.key)
        if old is not None:
            # A replaced cookie keeps its original creation time.
            entry.created = old.created
            entry.seq = old.seq
        else:
            entry.seq = next(self._seq)
        bucket[entry.key] = entry
        logger.debug("stored cookie %s in bucket %r", entry.key, entry.root)

    def _remove(self, root: str, key: str) -> None:
        bucket = self._entries.get(root)
        if bucket is None or key not in bucket:
            return
        del bucket[key]
        logger.debug("deleted cookie %s from bucket %r", key, root)
        if not bucket:
            del self._entries[root]

    def clear(self) -> None:
        """Remove every cookie."""
        with self._lock:
            self._entries = {}

    def clear_expired(self, now: datetime | None = None) -> int:
        """Remove every expired cookie and return how many were dropped."""
        now = _utcnow() if now is None else _as_utc(now)
        dropped = 0
        with self._lock:
            for root, bucket in list(self._entries.items()):
                for key in [k for k, e in bucket.items() if e.is_expired(now)]:
                    del bucket[key]
                    dropped += 1
                if not bucket:
                    del self._entries[root]
        return dropped

    def __iter__(self) -> Iterator[JarEntry]:
        with self._lock:
            entries = [e for bucket in self._entries.values() for e in bucket.values()]
        return iter(entries)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(bucket) for bucket in self._entries.values())

    def __repr__(self) -> str:
        with self._lock:
            roots = sorted(self._entries)
        return f"<Jar {roots}>"
