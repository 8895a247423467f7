"""Tests for wishfill/fetching/link_preview.py"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from conftest import make_response, routed_session
from wishfill.fetching import HTMLLinkPreviewProvider, HTTPClient, LinkPreview, LinkPreviewFallback
from wishfill.models import ImageCandidate, ImageSource, ProductMetadata


class TestHTMLLinkPreviewProvider:
    def test_parse_open_graph(self, settings):
        provider = HTMLLinkPreviewProvider(settings, HTTPClient(routed_session({})))
        preview = provider.parse(
            '<meta property="og:title" content="Plaid Laine">'
            '<meta property="og:image" content="https://cdn.example/plaid.jpg">'
        )
        assert preview == LinkPreview(title="Plaid Laine", image_url="https://cdn.example/plaid.jpg")

    def test_parse_falls_back_to_title_and_image_src(self, settings):
        provider = HTMLLinkPreviewProvider(settings, HTTPClient(routed_session({})))
        preview = provider.parse(
            '<html><head><title> Plaid  Laine </title>'
            '<link rel="image_src" href="/plaid.jpg"></head></html>'
        )
        assert preview.title == "Plaid Laine"
        assert preview.image_url == "/plaid.jpg"

    def test_fetch_as_preview_bot(self, settings):
        session = routed_session({
            "https://shop.example/p/1": make_response('<meta property="og:title" content="Plaid">'),
        })
        provider = HTMLLinkPreviewProvider(settings, HTTPClient(session))

        assert provider.fetch_preview("https://shop.example/p/1").title == "Plaid"
        kwargs = session.get.call_args.kwargs
        assert "facebookexternalhit" in kwargs["headers"]["User-Agent"]
        assert kwargs["timeout"] == settings.link_preview.timeout

    def test_fetch_failure_is_empty_preview(self, settings):
        provider = HTMLLinkPreviewProvider(settings, HTTPClient(routed_session({})))
        assert provider.fetch_preview("https://shop.example/p/1") == LinkPreview()

    def test_oversized_preview_page_dropped(self, settings):
        settings.max_page_bytes = 1024
        body = '<meta property="og:title" content="Plaid">' + "x" * 5000
        session = routed_session({"https://shop.example/p/1": make_response(body)})
        provider = HTMLLinkPreviewProvider(settings, HTTPClient(session))

        assert provider.fetch_preview("https://shop.example/p/1") == LinkPreview()


class TestLinkPreviewFallback:
    @pytest.fixture
    def provider(self):
        provider = MagicMock()
        provider.fetch_preview.return_value = LinkPreview(title="Plaid Laine | Maison", image_url="/og/plaid.jpg")
        return provider

    @pytest.fixture
    def image_resolver(self):
        resolver = MagicMock()
        resolver.resolve_first.return_value = (
            ImageCandidate("https://shop.example/og/plaid.jpg", ImageSource.LINK_PREVIEW),
            b"jpeg",
        )
        return resolver

    def test_fills_missing_fields(self, provider, image_resolver):
        fallback = LinkPreviewFallback(provider, image_resolver)

        merged = fallback.fill_missing("https://shop.example/p/1", ProductMetadata(price=Decimal("35")))

        assert merged == ProductMetadata(title="Plaid Laine", price=Decimal("35"), image=b"jpeg")
        candidates = image_resolver.resolve_first.call_args.args[1]
        assert candidates[0].source == ImageSource.LINK_PREVIEW

    def test_keeps_existing_title(self, provider, image_resolver):
        fallback = LinkPreviewFallback(provider, image_resolver)
        merged = fallback.fill_missing("https://shop.example/p/1", ProductMetadata(title="Plaid"))
        assert merged.title == "Plaid"
        assert merged.image == b"jpeg"

    def test_not_needed_when_title_and_image_set(self, provider, image_resolver):
        fallback = LinkPreviewFallback(provider, image_resolver)
        metadata = ProductMetadata(title="Plaid", image=b"img")

        assert fallback.fill_missing("https://shop.example/p/1", metadata) is metadata
        provider.fetch_preview.assert_not_called()

    def test_missing_price_alone_does_not_trigger(self):
        assert not LinkPreviewFallback.is_needed(ProductMetadata(title="Plaid", image=b"img"))

    def test_unresolvable_preview_image(self, provider, image_resolver):
        image_resolver.resolve_first.return_value = None
        fallback = LinkPreviewFallback(provider, image_resolver)

        merged = fallback.fill_missing("https://shop.example/p/1", ProductMetadata())

        assert merged.title == "Plaid Laine"
        assert merged.image is None
