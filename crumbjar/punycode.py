"""Punycode (RFC 3492) encoding of internationalized domain labels.

Only the encoding direction is provided: cookie domains are compared in their
ASCII form, so the jar never needs to turn an ACE label back into Unicode.
"""

from __future__ import annotations

from .errors import EncodingOverflowError

BASE = 36
DAMP = 700
SKEW = 38
TMAX = 26
TMIN = 1

INITIAL_BIAS = 72
INITIAL_N = 128

ACE_PREFIX = "xn--"

# Largest value of the signed 32-bit delta accumulator.
_MAX_DELTA = 0x7FFFFFFF


def is_ascii(s: str) -> bool:
    """Return True if every character of s is below U+0080."""
    return all(ord(c) < 0x80 for c in s)


def to_ascii(domain: str) -> str:
    """
    Convert a dotted domain name to its ASCII form.

    Labels that are already ASCII are left untouched; every other label is
    replaced by its ``xn--`` encoding.

    Raises:
        EncodingOverflowError: If a label is too long to encode
    """
    if is_ascii(domain):
        return domain

    labels = domain.split(".")
    for i, label in enumerate(labels):
        if is_ascii(label):
            continue
        labels[i] = encode(label)
    return ".".join(labels)


def _digit(d: int) -> str:
    # 0-25 map to a-z, 26-35 map to 0-9.
    if d < 26:
        return chr(ord("a") + d)
    return chr(ord("0") + d - 26)


def _check(delta: int) -> int:
    if delta > _MAX_DELTA:
        raise EncodingOverflowError("punycode delta overflow")
    return delta


def encode(label: str) -> str:
    """
    Encode a single domain label as an ASCII Compatible Encoding.

    The label is not lowercased and ASCII-only labels are not short-circuited:
    ``encode("a")`` is ``"xn--a-"``. Use :func:`to_ascii` for whole names.

    Raises:
        EncodingOverflowError: If the running delta leaves the 32-bit range
    """
    points = [ord(c) for c in label]
    out = [ACE_PREFIX]

    basic = [chr(cp) for cp in points if cp < 0x80]
    out.extend(basic)
    b = len(basic)
    if b > 0:
        out.append("-")

    remaining = len(points) - b
    bias = INITIAL_BIAS
    n = INITIAL_N
    delta = 0
    h = b

    while remaining > 0:
        # Smallest code point not yet handled.
        m = min(cp for cp in points if cp >= n)
        delta = _check(delta + (m - n) * (h + 1))
        n = m

        for cp in points:
            if cp < n:
                delta = _check(delta + 1)
                continue
            if cp > n:
                continue

            q = delta
            k = BASE
            while True:
                t = k - bias
                if t < TMIN:
                    t = TMIN
                elif t > TMAX:
                    t = TMAX
                if q < t:
                    break
                out.append(_digit(t + (q - t) % (BASE - t)))
                q = (q - t) // (BASE - t)
                k += BASE
            out.append(_digit(q))

            bias = adapt(delta, h + 1, h == b)
            delta = 0
            h += 1
            remaining -= 1

        delta += 1
        n += 1

    return "".join(out)


def adapt(delta: int, points: int, first: bool) -> int:
    """Bias adaptation function from RFC 3492, section 6.1."""
    if first:
        delta //= DAMP
    else:
        delta //= 2

    delta += delta // points
    k = 0
    while delta > ((BASE - TMIN) * TMAX) // 2:
        delta //= BASE - TMIN
        k += BASE

    return k + (BASE - TMIN + 1) * delta // (delta + SKEW)
