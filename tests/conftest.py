"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import pytest
from crumbjar.jar import Jar


class FakeSuffixList:
    """Deterministic public suffix list over a fixed set of suffixes."""

    def __init__(self, suffixes):
        self.suffixes = set(suffixes)

    def public_suffix(self, domain):
        labels = domain.split(".")
        for i in range(len(labels)):
            candidate = ".".join(labels[i:])
            if candidate in self.suffixes:
                return candidate
        return ""


@pytest.fixture
def psl():
    """Suffix list knowing a few generic and country-code suffixes."""
    return FakeSuffixList(["com", "org", "uk", "co.uk", "xn--p1ai", "blogspot.com"])


@pytest.fixture
def jar(psl):
    """Empty jar using the fake suffix list."""
    return Jar(psl=psl)


@pytest.fixture
def now():
    """Fixed clock reading."""
    return datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
