"""
Rendering Proxy Fetcher

Alternate HTML source for storefronts that load their content with
JavaScript. The remote service executes page scripts server-side and
returns the rendered HTML, which goes through the same extractors as a
direct fetch.

The service is slow and billed per request, so it is only used on demand.
"""

import logging
from typing import Optional
from urllib.parse import urlparse

from ..common.cancellation import CancellationToken
from ..common.config_loader import FetchSettings
from .http_client import HTTPClient
from .page_fetcher import decode_html

logger = logging.getLogger(__name__)


class RenderingProxyFetcher:
    """
    Fetches fully rendered HTML through a rendering proxy API.

    Request format:
        GET {endpoint}?api_key=KEY&url=TARGET&render=true&country_code=fr

    Usage:
        fetcher = RenderingProxyFetcher(settings)
        if fetcher.is_configured:
            html = fetcher.fetch(url)
    """

    def __init__(self, settings: Optional[FetchSettings] = None, client: Optional[HTTPClient] = None):
        self.settings = settings or FetchSettings()
        self.proxy = self.settings.rendering_proxy
        self.client = client or HTTPClient()

    @property
    def is_configured(self) -> bool:
        return bool(self.proxy.api_key and self.proxy.endpoint)

    def should_render(self, url: str) -> bool:
        """
        Check whether a failed direct fetch of ``url`` warrants the proxy.

        True when automatic rendering is on, or when the host is one of the
        configured JavaScript-heavy storefronts.
        """
        if not self.is_configured:
            return False
        if self.proxy.auto:
            return True

        host = (urlparse(url).hostname or "").lower()
        if host.startswith("www."):
            host = host[4:]
        return any(host == h or host.endswith("." + h) for h in self.proxy.hosts)

    def build_params(self, url: str) -> dict:
        """Query parameters for the proxy request."""
        params = {
            "api_key": self.proxy.api_key,
            "url": url,
            "render": "true",
        }
        if self.proxy.country_code:
            params["country_code"] = self.proxy.country_code
        return params

    def fetch(self, url: str, cancel_token: Optional[CancellationToken] = None) -> Optional[str]:
        """
        Fetch rendered HTML for ``url``.

        Args:
            url: Absolute product URL
            cancel_token: Cancellation token of the current extraction

        Returns:
            Rendered HTML or None (also None when no API key is configured)
        """
        if not self.is_configured:
            logger.debug("Rendering proxy not configured, skipping %s", url)
            return None

        logger.info("Requesting rendered HTML for %s", url)
        result = self.client.get(
            self.proxy.endpoint,
            params=self.build_params(url),
            timeout=self.proxy.timeout,
            max_bytes=self.settings.max_page_bytes,
            cancel_token=cancel_token,
            log_url=f"rendering proxy ({url})",
        )
        if result is None:
            return None

        html = decode_html(result.body, result.content_type)
        if html is None:
            logger.warning("Could not decode rendered body for %s", url)
            return None

        logger.info("Rendered %s (%d characters)", url, len(html))
        return html
