"""
Exceptions

Everything the extraction pipeline raises on purpose. Transport, parse,
validation and decode failures are not here: they are absorbed by the
cascade and never reach the caller.
"""


class WishfillError(Exception):
    """Base class for wishfill errors."""


class InvalidURLError(WishfillError, ValueError):
    """The input is not an absolute http(s) URL."""

    def __init__(self, url):
        self.url = url
        super().__init__(f"Invalid product URL: {url!r}")


class ExtractionCancelled(WishfillError):
    """Raised inside a worker when its cancellation token fires."""


class ConfigError(WishfillError):
    """A configuration file is present but malformed."""
