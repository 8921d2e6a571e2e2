"""Input validation for link creation

All functions are pure and never raise on string input; they either answer
with a boolean or return a normalized string.

Functions:
    is_valid_url(url) -> bool
        True if the value is an absolute URL with a scheme and a host.
    normalize_url(url) -> str
        Prefix https:// when the value lacks an http(s) scheme.
    is_valid_custom_code(code) -> bool
        True if the value is a non-empty string of [A-Za-z0-9_-].
    is_valid_domain(domain) -> bool
        True if the value is a conventional dotted hostname.
    normalize_domain(domain) -> str
        Prefix https:// when the value lacks an http(s) scheme.

Example:
    >>> is_valid_url(normalize_url('example.com/page'))
    True
    >>> is_valid_custom_code('my-link_1')
    True
    >>> is_valid_domain('links.example.com')
    True
    >>> normalize_domain('links.example.com')
    'https://links.example.com'
"""

import re
from urllib.parse import urlsplit


CUSTOM_CODE_PATTERN = re.compile(r'^[A-Za-z0-9_-]+$')
DOMAIN_PATTERN = re.compile(r'^([A-Za-z0-9]([A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,}$')
SCHEME_PATTERN = re.compile(r'^https?://', re.IGNORECASE)


def is_valid_url(url: str) -> bool:
    if not isinstance(url, str) or not url or any(c.isspace() for c in url):
        return False
    try:
        components = urlsplit(url)
        # Accessing .port validates it (raises ValueError when out of range)
        components.port
    except ValueError:
        return False
    return bool(components.scheme) and bool(components.hostname)


def normalize_url(url: str) -> str:
    """Prefix `https://` to a URL typed without an http(s) scheme.

    Example:
        >>> normalize_url('  example.com ')
        'https://example.com'
        >>> normalize_url('HTTP://example.com')
        'HTTP://example.com'
    """
    url = url.strip()
    return url if SCHEME_PATTERN.match(url) else f'https://{url}'


def is_valid_custom_code(code: str) -> bool:
    return isinstance(code, str) and CUSTOM_CODE_PATTERN.fullmatch(code) is not None


def is_valid_domain(domain: str) -> bool:
    return isinstance(domain, str) and DOMAIN_PATTERN.fullmatch(domain) is not None


def strip_scheme(value: str) -> str:
    return SCHEME_PATTERN.sub('', value, count=1)


def normalize_domain(domain: str) -> str:
    domain = domain.strip().rstrip('/')
    return domain if SCHEME_PATTERN.match(domain) else f'https://{domain}'
