from crumbjar.jar import Jar, JarEntry
from crumbjar.cookies import Cookie, parse_cookie
from crumbjar.hosts import canonical_host
from crumbjar.domains import domain_root, validate_domain
from crumbjar.punycode import encode as punycode_encode, to_ascii
from crumbjar.suffix import PublicSuffixList, TLDExtractSuffixList
from crumbjar.errors import (
    CrumbjarError,
    InvalidSchemeError,
    NoHostnameError,
    MalformedDomainError,
    IllegalDomainError,
    CanonicalizationError,
    EncodingOverflowError,
    CookieSyntaxError,
)

__all__ = [
    "Jar",
    "JarEntry",
    "Cookie",
    "parse_cookie",
    "canonical_host",
    "domain_root",
    "validate_domain",
    "punycode_encode",
    "to_ascii",
    "PublicSuffixList",
    "TLDExtractSuffixList",
    "CrumbjarError",
    "InvalidSchemeError",
    "NoHostnameError",
    "MalformedDomainError",
    "IllegalDomainError",
    "CanonicalizationError",
    "EncodingOverflowError",
    "CookieSyntaxError",
]
