"""
Page Fetcher

Downloads a product page the way a browser would. Many storefronts serve
degraded or blocked markup to non-browser clients, so requests carry a
realistic User-Agent and Accept headers.
"""

import logging
import re
from typing import Optional

from ..common.cancellation import CancellationToken
from ..common.config_loader import FetchSettings
from .http_client import HTTPClient

logger = logging.getLogger(__name__)

_CHARSET_HEADER = re.compile(r'charset=["\']?([\w.:-]+)', re.IGNORECASE)
_CHARSET_META = re.compile(rb'<meta[^>]+charset=["\']?([\w.:-]+)', re.IGNORECASE)


def decode_html(body: bytes, content_type: str = "") -> Optional[str]:
    """
    Decode an HTML body.

    Tries the charset from the Content-Type header, then the one declared
    in a <meta> tag, then UTF-8. Decoding is strict: a body no candidate
    can decode is reported as None.

    Args:
        body: Raw response bytes
        content_type: Content-Type header value

    Returns:
        Decoded text or None
    """
    candidates = []

    header_match = _CHARSET_HEADER.search(content_type or "")
    if header_match:
        candidates.append(header_match.group(1))

    meta_match = _CHARSET_META.search(body[:4096])
    if meta_match:
        candidates.append(meta_match.group(1).decode("ascii", "ignore"))

    candidates.append("utf-8")

    for encoding in candidates:
        try:
            return body.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            continue

    return None


class PageFetcher:
    """
    Fetches product page HTML.

    Returns None ("no content") on network error, non-2xx status or an
    undecodable body; the orchestrator then tries the rendering proxy or
    the link preview instead.

    Usage:
        fetcher = PageFetcher(settings)
        html = fetcher.fetch("https://shop.example/product/1")
    """

    def __init__(self, settings: Optional[FetchSettings] = None, client: Optional[HTTPClient] = None):
        self.settings = settings or FetchSettings()
        self.client = client or HTTPClient()

    def fetch(self, url: str, cancel_token: Optional[CancellationToken] = None) -> Optional[str]:
        """
        Fetch the page HTML.

        Args:
            url: Absolute product URL
            cancel_token: Cancellation token of the current extraction

        Returns:
            HTML text or None
        """
        result = self.client.get(
            url,
            headers=self.settings.browser_headers,
            timeout=self.settings.page_timeout,
            max_bytes=self.settings.max_page_bytes,
            cancel_token=cancel_token,
        )
        if result is None:
            return None

        html = decode_html(result.body, result.content_type)
        if html is None:
            logger.warning("Could not decode page body for %s", url)
            return None

        logger.info("Fetched %s (%d characters)", url, len(html))
        return html
