"""
Link Preview Fallback

Last resort for title and image when the page itself yielded neither.
A preview provider fetches its own metadata for the URL, independently of
the main fetch; whatever it finds only fills fields still missing.

Price is never filled here: preview metadata has no price equivalent.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from bs4 import BeautifulSoup

from ..common.cancellation import CancellationToken
from ..common.config_loader import FetchSettings
from ..common.text_utils import clean_text, clean_title
from ..models import ImageCandidate, ImageSource, ProductMetadata
from .http_client import HTTPClient
from .page_fetcher import decode_html

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkPreview:
    """What a preview provider could tell about a URL."""
    title: Optional[str] = None
    image_url: Optional[str] = None


class HTMLLinkPreviewProvider:
    """
    Preview provider that reads the page as a link-preview bot.

    Storefronts that block or strip ordinary clients usually answer preview
    bots (chat apps, social networks) with their full Open Graph markup.
    """

    TITLE_SELECTORS = [
        ('meta[property="og:title"]', 'content'),
        ('meta[name="og:title"]', 'content'),
        ('meta[name="twitter:title"]', 'content'),
        ('meta[property="twitter:title"]', 'content'),
        ('title', None),
    ]

    IMAGE_SELECTORS = [
        ('meta[property="og:image"]', 'content'),
        ('meta[name="og:image"]', 'content'),
        ('meta[name="twitter:image"]', 'content'),
        ('meta[property="twitter:image"]', 'content'),
        ('link[rel~="image_src"]', 'href'),
        ('link[rel~="apple-touch-icon"]', 'href'),
    ]

    def __init__(self, settings: Optional[FetchSettings] = None, client: Optional[HTTPClient] = None):
        self.settings = settings or FetchSettings()
        self.client = client or HTTPClient()

    def fetch_preview(self, url: str, cancel_token: Optional[CancellationToken] = None) -> LinkPreview:
        """
        Fetch preview metadata for ``url``.

        Returns:
            LinkPreview, with both fields None when nothing was found
        """
        preview_settings = self.settings.link_preview
        result = self.client.get(
            url,
            headers={
                "User-Agent": preview_settings.user_agent,
                "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
                "Accept-Language": self.settings.accept_language,
            },
            timeout=preview_settings.timeout,
            max_bytes=self.settings.max_page_bytes,
            cancel_token=cancel_token,
        )
        if result is None:
            return LinkPreview()

        html = decode_html(result.body, result.content_type)
        if not html:
            return LinkPreview()

        return self.parse(html)

    def parse(self, html: str) -> LinkPreview:
        """Read title and image from preview markup."""
        soup = BeautifulSoup(html, "lxml")
        return LinkPreview(
            title=self._first(soup, self.TITLE_SELECTORS),
            image_url=self._first(soup, self.IMAGE_SELECTORS),
        )

    @staticmethod
    def _first(soup: BeautifulSoup, selectors) -> Optional[str]:
        for selector, attribute in selectors:
            element = soup.select_one(selector)
            if element is None:
                continue
            value = element.get(attribute) if attribute else element.get_text()
            value = clean_text(value or "")
            if value:
                return value
        return None


class LinkPreviewFallback:
    """
    Fills missing title and image from a link-preview provider.

    Usage:
        fallback = LinkPreviewFallback(provider, image_resolver)
        metadata = fallback.fill_missing(url, metadata)
    """

    def __init__(self, provider, image_resolver):
        """
        Args:
            provider: Object with fetch_preview(url, cancel_token) -> LinkPreview
            image_resolver: ImageResolver used to download the preview image
        """
        self.provider = provider
        self.image_resolver = image_resolver

    @staticmethod
    def is_needed(metadata: ProductMetadata) -> bool:
        return metadata.title is None or metadata.image is None

    def fill_missing(
        self,
        url: str,
        metadata: ProductMetadata,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ProductMetadata:
        """
        Merge preview title/image into ``metadata`` where unset.

        Args:
            url: Product URL
            metadata: Result of the main cascade
            cancel_token: Cancellation token of the current extraction

        Returns:
            New ProductMetadata; set fields are never overwritten
        """
        if not self.is_needed(metadata):
            return metadata

        logger.info("Using link preview for missing %s", ", ".join(
            f for f in metadata.missing_fields() if f != "price"))
        preview = self.provider.fetch_preview(url, cancel_token)

        title = None
        if metadata.title is None and preview.title:
            title = clean_title(preview.title) or None

        image = None
        if metadata.image is None and preview.image_url:
            candidate = ImageCandidate(url=preview.image_url, source=ImageSource.LINK_PREVIEW)
            resolved = self.image_resolver.resolve_first(url, [candidate], cancel_token)
            if resolved is not None:
                image = resolved[1]

        return metadata.merged_with(ProductMetadata(title=title, image=image))
