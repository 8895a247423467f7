"""
URL Validation

Caller-misuse checks, run before any network access.
"""

from urllib.parse import urlparse

from ..errors import InvalidURLError


def validate_url(url) -> str:
    """
    Check that ``url`` is an absolute http(s) URL.

    Args:
        url: Candidate URL

    Returns:
        The URL with surrounding whitespace removed

    Raises:
        InvalidURLError: If the URL is not a string, has another scheme,
            has no host, or contains whitespace
    """
    if not isinstance(url, str):
        raise InvalidURLError(url)

    candidate = url.strip()
    if not candidate or any(c.isspace() for c in candidate):
        raise InvalidURLError(url)

    try:
        parsed = urlparse(candidate)
        hostname = parsed.hostname
    except ValueError as e:
        raise InvalidURLError(url) from e

    if parsed.scheme not in ("http", "https") or not hostname:
        raise InvalidURLError(url)

    return candidate


def is_valid_url(url) -> bool:
    try:
        validate_url(url)
    except InvalidURLError:
        return False
    return True
