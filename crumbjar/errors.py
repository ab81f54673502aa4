class CrumbjarError(Exception):
    """Base error for crumbjar."""


class InvalidSchemeError(CrumbjarError):
    """Raised when a jar operation is given a scheme other than http or https."""


class NoHostnameError(CrumbjarError):
    """Raised when a Domain attribute is set by a host that is an IP address."""


class MalformedDomainError(CrumbjarError):
    """Raised when a Domain attribute is empty or has stray leading/trailing dots."""


class IllegalDomainError(CrumbjarError):
    """Raised when a Domain attribute does not cover the host or names a public suffix."""


class CanonicalizationError(CrumbjarError):
    """Raised when a host cannot be reduced to its canonical ASCII form."""


class EncodingOverflowError(CanonicalizationError):
    """Raised when punycode encoding overflows its 32-bit delta counter."""


class CookieSyntaxError(CrumbjarError):
    """Raised for malformed Set-Cookie text or unserializable cookie fields."""
