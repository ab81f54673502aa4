"""Tests for crumbjar.hosts module."""

import pytest
from crumbjar.errors import CanonicalizationError
from crumbjar.hosts import canonical_host, has_dot_suffix, has_port, is_ip, split_host_port


class TestCanonicalHost:
    """Tests for canonical_host()."""

    def test_lowercases(self):
        """Test hosts are lowercased."""
        assert canonical_host("WWW.Example.COM") == "www.example.com"

    def test_ascii_passthrough(self):
        """Test ASCII hosts pass through unchanged."""
        assert canonical_host("already-ascii.com") == "already-ascii.com"

    def test_strips_port(self):
        """Test a trailing port is removed."""
        assert canonical_host("example.com:8080") == "example.com"

    def test_strips_ipv6_port_and_brackets(self):
        """Test bracketed IPv6 with a port."""
        assert canonical_host("[::1]:8080") == "::1"

    def test_bare_bracketed_ipv6(self):
        """Test bracketed IPv6 without a port."""
        assert canonical_host("[2001:DB8::1]") == "2001:db8::1"

    def test_unbracketed_ipv6_kept(self):
        """Test a bare IPv6 literal is not mistaken for host:port."""
        assert canonical_host("2001:db8::1") == "2001:db8::1"

    def test_punycode_labels(self):
        """Test non-ASCII labels are encoded after lowercasing."""
        assert canonical_host("www.Bücher.de:443") == "www.xn--bcher-kva.de"

    def test_unclosed_bracket_raises(self):
        """Test a missing closing bracket is rejected."""
        with pytest.raises(CanonicalizationError):
            canonical_host("[::1")

    def test_bracketed_name_raises(self):
        """Test brackets around a non-IP are rejected."""
        with pytest.raises(CanonicalizationError):
            canonical_host("[example.com]:80")

    def test_text_after_bracket_raises(self):
        """Test junk between ']' and the port is rejected."""
        with pytest.raises(CanonicalizationError):
            canonical_host("[::1]x:80")


class TestHasPort:
    """Tests for has_port()."""

    @pytest.mark.parametrize(
        "addr,expected",
        [
            ("", False),
            ("example.com", False),
            ("example.com:80", True),
            ("example.com:", True),
            ("::1", False),
            ("[::1]", False),
            ("[::1]:80", True),
            (":80", True),
        ],
    )
    def test_has_port(self, addr, expected):
        """Test port detection across host forms."""
        assert has_port(addr) is expected


class TestSplitHostPort:
    """Tests for split_host_port()."""

    def test_name_and_port(self):
        """Test splitting a name and port."""
        assert split_host_port("example.com:80") == ("example.com", "80")

    def test_ipv6(self):
        """Test splitting a bracketed IPv6 address."""
        assert split_host_port("[fe80::1]:443") == ("fe80::1", "443")

    def test_empty_port(self):
        """Test an empty port is allowed."""
        assert split_host_port("example.com:") == ("example.com", "")

    def test_missing_port(self):
        """Test an address without a colon is rejected."""
        with pytest.raises(CanonicalizationError):
            split_host_port("example.com")

    def test_too_many_colons(self):
        """Test unbracketed extra colons are rejected."""
        with pytest.raises(CanonicalizationError):
            split_host_port("a:b:80")


class TestIsIP:
    """Tests for is_ip()."""

    @pytest.mark.parametrize("host", ["127.0.0.1", "::1", "2001:db8::1", "10.0.0.255"])
    def test_ip_literals(self, host):
        """Test IP literals are recognized."""
        assert is_ip(host)

    @pytest.mark.parametrize("host", ["example.com", "", "[::1]", "1.2.3", "localhost"])
    def test_non_ip(self, host):
        """Test names and malformed literals are not IPs."""
        assert not is_ip(host)


class TestHasDotSuffix:
    """Tests for has_dot_suffix()."""

    def test_subdomain(self):
        """Test a strict subdomain."""
        assert has_dot_suffix("www.example.com", "example.com")

    def test_equal_is_not_dot_suffix(self):
        """Test equal strings do not count."""
        assert not has_dot_suffix("example.com", "example.com")

    def test_requires_dot_boundary(self):
        """Test a plain string suffix without a dot does not count."""
        assert not has_dot_suffix("notexample.com", "example.com")
