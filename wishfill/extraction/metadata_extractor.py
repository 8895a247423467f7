"""
Metadata Orchestrator

Public entry point of the extraction pipeline: fetches a product page and
runs the extraction cascade for title, price and image.

Each field is resolved independently along the same fixed order,
most authoritative first:

    JSON-LD > Open Graph / Twitter Card > Microdata > HTML heuristics

Prices have one more tier after the heuristics: a price written in the
product URL itself.

A later source is only consulted when earlier ones gave nothing (or, for
prices, nothing within the plausibility range). When title or image is
still missing afterwards, a link-preview provider fills the gaps.

Nothing here raises for an extraction failure: the worst outcome is a
ProductMetadata with every field unset.
"""

import logging
from typing import Callable, List, Optional, Tuple

from ..common.cancellation import CancellationToken
from ..common.config_loader import FetchSettings, load_fetch_settings
from ..common.text_utils import clean_title
from ..common.validation import validate_url
from ..errors import ExtractionCancelled, InvalidURLError
from ..fetching import (
    HTMLLinkPreviewProvider,
    HTTPClient,
    LinkPreviewFallback,
    PageFetcher,
    RenderingProxyFetcher,
)
from ..models import ExtractionReport, ExtractionState, PriceSource, ProductMetadata
from .image_resolver import ImageResolver
from .parsers import (
    HeuristicTextParser,
    MicrodataParser,
    PageDocument,
    SocialTagParser,
    StructuredDataParser,
    UrlPriceParser,
)
from .price_normalizer import PriceNormalizer

logger = logging.getLogger(__name__)

# (source name, document -> value or None)
TitleStrategy = Tuple[str, Callable[[PageDocument], Optional[str]]]


class MetadataOrchestrator:
    """
    Sequences fetchers, parsers, normalizer and resolver into one cascade.

    Stateless between calls: one instance can serve many URLs, and
    independent instances can run concurrently.

    Usage:
        with MetadataOrchestrator() as orchestrator:
            metadata = orchestrator.fetch_metadata("https://shop.example/p/1")
    """

    def __init__(
        self,
        settings: Optional[FetchSettings] = None,
        session=None,
        page_fetcher: Optional[PageFetcher] = None,
        rendering_proxy: Optional[RenderingProxyFetcher] = None,
        image_resolver: Optional[ImageResolver] = None,
        link_preview: Optional[LinkPreviewFallback] = None,
        use_link_preview: Optional[bool] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            settings: Pipeline settings (if None, loads from config)
            session: requests.Session shared by every default component
            page_fetcher: Direct page fetcher
            rendering_proxy: Rendering proxy fetcher
            image_resolver: Image downloader/downsizer
            link_preview: Link-preview fallback
            use_link_preview: Override settings.link_preview.enabled
        """
        self.settings = settings or load_fetch_settings()
        self._client = HTTPClient(session)

        self.page_fetcher = page_fetcher or PageFetcher(self.settings, self._client)
        self.rendering_proxy = rendering_proxy or RenderingProxyFetcher(self.settings, self._client)
        self.image_resolver = image_resolver or ImageResolver(self.settings, self._client)

        if use_link_preview is None:
            use_link_preview = self.settings.link_preview.enabled
        if link_preview is None and use_link_preview:
            link_preview = LinkPreviewFallback(
                HTMLLinkPreviewProvider(self.settings, self._client),
                self.image_resolver,
            )
        self.link_preview = link_preview if use_link_preview else None

        self.structured = StructuredDataParser()
        self.social = SocialTagParser()
        self.microdata = MicrodataParser()
        self.heuristic = HeuristicTextParser()
        self.url_price = UrlPriceParser()
        self.normalizer = PriceNormalizer(self.settings.price_min, self.settings.price_max)

        # Priority orders, most authoritative first
        self.title_strategies: List[TitleStrategy] = [
            ("json-ld", self.structured.extract_title),
            ("og:title", self.social.extract_og_title),
            ("twitter:title", self.social.extract_twitter_title),
        ]
        self.structured_price_strategies = [
            (PriceSource.JSON_LD, self.structured.extract_price_candidates),
            (PriceSource.OPEN_GRAPH, self.social.extract_price_candidates),
            (PriceSource.MICRODATA, self.microdata.extract_price_candidates),
        ]
        self.page_fallback_price_strategies = [
            (PriceSource.HTML_HEURISTIC, self.heuristic.iter_price_candidates),
        ]
        self.fallback_price_strategies = self.page_fallback_price_strategies + [
            (PriceSource.URL, self.url_price.extract_price_candidates),
        ]
        self.image_strategies = [
            self.structured.extract_image_candidates,
            self.social.extract_image_candidates,
            self.microdata.extract_image_candidates,
            self.heuristic.extract_image_candidates,
        ]

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def close(self):
        self._client.close()

    def fetch_metadata(
        self,
        url: str,
        render: bool = False,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Optional[ProductMetadata]:
        """
        Extract product metadata for ``url``.

        Args:
            url: Product URL
            render: Fetch through the rendering proxy first
            cancel_token: Token the caller may cancel

        Returns:
            ProductMetadata (possibly with every field unset), or None for a
            syntactically invalid URL, in which case nothing is fetched
        """
        try:
            metadata, _ = self.extract(url, render=render, cancel_token=cancel_token)
        except InvalidURLError as e:
            logger.warning("%s", e)
            return None
        return metadata

    def extract(
        self,
        url: str,
        render: bool = False,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Tuple[ProductMetadata, ExtractionReport]:
        """
        Run the full cascade and report where each field came from.

        On cancellation, returns whatever was found before the token fired.

        Raises:
            InvalidURLError: If ``url`` is not an absolute http(s) URL
        """
        url = validate_url(url)
        token = cancel_token or CancellationToken()
        report = ExtractionReport(url=url)
        found = {}

        try:
            self._run(url, render, token, report, found)
        except ExtractionCancelled:
            report.cancelled = True
            logger.info("Extraction of %s cancelled while %s", url, report.state.value)

        title = clean_title(found.get("title") or "") or None
        metadata = ProductMetadata(title=title, price=found.get("price"), image=found.get("image"))

        if not report.cancelled:
            report.state = ExtractionState.FINALIZING
            metadata = self._apply_link_preview(url, metadata, token, report)
            report.state = ExtractionState.DONE

        logger.info(
            "Extracted %s: title=%s price=%s image=%s",
            url,
            report.title_source or "-",
            report.price_source or "-",
            report.image_source or "-",
        )
        return metadata, report

    def _run(self, url: str, render: bool, token: CancellationToken, report: ExtractionReport, found: dict):
        report.state = ExtractionState.FETCHING
        html = self._fetch_html(url, render, token, report)
        token.raise_if_cancelled()

        if not html:
            logger.info("No usable HTML for %s", url)
            return

        document = PageDocument(url, html)

        report.state = ExtractionState.EXTRACTING_STRUCTURED
        title, title_source = self._first_title(document, token)
        if title:
            found["title"] = title
            report.title_source = title_source

        self._extract_price(document, self.structured_price_strategies, token, report, found)

        if "price" not in found:
            report.state = ExtractionState.EXTRACTING_FALLBACKS
            self._extract_price(document, self.fallback_price_strategies, token, report, found)

        report.state = ExtractionState.RESOLVING_IMAGE
        self._extract_image(document, token, report, found)

    def _fetch_html(self, url: str, render: bool, token: CancellationToken, report: ExtractionReport) -> Optional[str]:
        """Direct fetch, with the rendering proxy when requested or needed."""
        if render:
            if self.rendering_proxy.is_configured:
                report.used_rendering_proxy = True
                html = self.rendering_proxy.fetch(url, token)
                if html:
                    return html
                logger.info("Rendering proxy gave nothing for %s, trying direct fetch", url)
            else:
                logger.warning("Rendering requested but no proxy API key configured")

        html = self.page_fetcher.fetch(url, token)
        if report.used_rendering_proxy or not self.rendering_proxy.should_render(url):
            return html

        if html and self._has_product_data(PageDocument(url, html), token):
            return html

        token.raise_if_cancelled()
        if html:
            logger.info("No product data in %s, retrying through rendering proxy", url)
        else:
            logger.info("Direct fetch failed for %s, retrying through rendering proxy", url)
        report.used_rendering_proxy = True
        rendered = self.rendering_proxy.fetch(url, token)
        return rendered or html

    def _has_product_data(self, document: PageDocument, token: CancellationToken) -> bool:
        """True when any page strategy finds a title or an in-range price."""
        title, _ = self._first_title(document, token)
        if title:
            return True
        for _, strategy in self.structured_price_strategies + self.page_fallback_price_strategies:
            token.raise_if_cancelled()
            price, _, _ = self.normalizer.first_valid(strategy(document))
            if price is not None:
                return True
        return False

    def _first_title(self, document: PageDocument, token: CancellationToken) -> Tuple[Optional[str], str]:
        for name, strategy in self.title_strategies:
            token.raise_if_cancelled()
            value = strategy(document)
            if value and value.strip():
                return value, name
        return None, ""

    def _extract_price(self, document, strategies, token: CancellationToken, report: ExtractionReport, found: dict):
        for source, strategy in strategies:
            token.raise_if_cancelled()
            price, candidate, rejected = self.normalizer.first_valid(strategy(document))
            report.rejected_prices.extend(rejected)
            if price is not None:
                found["price"] = price
                report.price_source = source.value
                logger.debug("Price %s from %s (%r)", price, source.value, candidate.raw_text)
                return

    def _extract_image(self, document: PageDocument, token: CancellationToken, report: ExtractionReport, found: dict):
        for strategy in self.image_strategies:
            token.raise_if_cancelled()
            candidates = strategy(document)
            if not candidates:
                continue
            resolved = self.image_resolver.resolve_first(document.url, candidates, token)
            if resolved is not None:
                candidate, image = resolved
                found["image"] = image
                report.image_source = candidate.source.value
                report.image_url = candidate.url
                return

    def _apply_link_preview(
        self, url: str, metadata: ProductMetadata, token: CancellationToken, report: ExtractionReport
    ) -> ProductMetadata:
        if self.link_preview is None or not self.link_preview.is_needed(metadata):
            return metadata

        try:
            merged = self.link_preview.fill_missing(url, metadata, token)
        except ExtractionCancelled:
            report.cancelled = True
            logger.info("Link preview for %s cancelled", url)
            return metadata

        report.used_link_preview = True
        if metadata.title is None and merged.title is not None:
            report.title_source = "link-preview"
        if metadata.image is None and merged.image is not None:
            report.image_source = "link-preview"
        return merged


def fetch_metadata(url: str, render: bool = False, settings: Optional[FetchSettings] = None) -> Optional[ProductMetadata]:
    """
    One-shot extraction with a fresh orchestrator.

    Args:
        url: Product URL
        render: Fetch through the rendering proxy first
        settings: Pipeline settings (if None, loads from config)

    Returns:
        ProductMetadata, or None for an invalid URL
    """
    with MetadataOrchestrator(settings=settings) as orchestrator:
        return orchestrator.fetch_metadata(url, render=render)
