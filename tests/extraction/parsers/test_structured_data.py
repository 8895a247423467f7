"""Tests for wishfill/extraction/parsers/structured_data.py"""

import pytest

from wishfill.extraction.parsers import PageDocument, StructuredDataParser
from wishfill.models import ImageSource, PriceSource


def make_document_with_jsonld(*blocks: str) -> PageDocument:
    """Create a PageDocument with one JSON-LD script tag per block."""
    scripts = "".join(f'<script type="application/ld+json">{b}</script>' for b in blocks)
    return PageDocument("https://shop.example/p/1", f"<html><head>{scripts}</head><body></body></html>")


@pytest.fixture
def parser():
    return StructuredDataParser()


class TestBlocks:
    def test_all_blocks_in_order(self, parser):
        doc = make_document_with_jsonld('{"a": 1}', '{"b": 2}')
        assert len(parser.blocks(doc)) == 2
        assert parser.has_data(doc)

    def test_no_script(self, parser):
        doc = PageDocument("https://shop.example/", "<html><body></body></html>")
        assert parser.blocks(doc) == []
        assert not parser.has_data(doc)

    def test_other_script_types_ignored(self, parser):
        doc = PageDocument("https://shop.example/", '<script>var price = "12.00";</script>')
        assert parser.extract_price_candidates(doc) == []


class TestExtractTitle:
    def test_product_name(self, parser):
        doc = make_document_with_jsonld('{"@type": "Product", "name": "Vase Céramique"}')
        assert parser.extract_title(doc) == "Vase Céramique"

    def test_skips_brand_name(self, parser):
        doc = make_document_with_jsonld(
            '{"@type": "Product", "brand": {"@type": "Brand", "name": "Nordika"}, "name": "Chaise Oslo"}'
        )
        assert parser.extract_title(doc) == "Chaise Oslo"

    def test_skips_organization_block(self, parser):
        doc = make_document_with_jsonld(
            '{"@type": "Organization", "name": "MaBoutique"}',
            '{"@type": "Product", "name": "Chaise Oslo"}',
        )
        assert parser.extract_title(doc) == "Chaise Oslo"

    def test_graph_with_sibling_objects(self, parser):
        doc = make_document_with_jsonld(
            '{"@graph": [{"@type": "WebSite", "name": "Site"}, {"@type": "Product", "name": "Vase"}]}'
        )
        assert parser.extract_title(doc) == "Vase"

    def test_type_as_array(self, parser):
        doc = make_document_with_jsonld('{"@type": ["Product", "Thing"], "name": "Plaid"}')
        assert parser.extract_title(doc) == "Plaid"

    def test_unescapes_json_string(self, parser):
        doc = make_document_with_jsonld(r'{"@type": "Product", "name": "Café \"Le Bon\""}')
        assert parser.extract_title(doc) == 'Café "Le Bon"'

    def test_no_product_type(self, parser):
        doc = make_document_with_jsonld('{"@type": "Organization", "name": "MaBoutique"}')
        assert parser.extract_title(doc) is None

    def test_only_nested_name(self, parser):
        doc = make_document_with_jsonld('{"@type": "Product", "offers": {"@type": "Offer", "name": "Offre"}}')
        assert parser.extract_title(doc) is None


class TestExtractPriceCandidates:
    def test_quoted_price(self, parser):
        doc = make_document_with_jsonld('{"@type": "Product", "offers": {"price": "49.99"}}')
        candidates = parser.extract_price_candidates(doc)
        assert [c.raw_text for c in candidates] == ["49.99"]
        assert candidates[0].source == PriceSource.JSON_LD

    def test_bare_number(self, parser):
        doc = make_document_with_jsonld('{"offers": {"price": 129.90}}')
        assert [c.raw_text for c in parser.extract_price_candidates(doc)] == ["129.90"]

    def test_low_price(self, parser):
        doc = make_document_with_jsonld('{"offers": {"@type": "AggregateOffer", "lowPrice": "12,50"}}')
        assert [c.raw_text for c in parser.extract_price_candidates(doc)] == ["12,50"]

    def test_all_candidates_in_document_order(self, parser):
        doc = make_document_with_jsonld(
            '{"offers": [{"price": "0"}, {"price": "24.90"}]}',
            '{"offers": {"price": "19.90"}}',
        )
        assert [c.raw_text for c in parser.extract_price_candidates(doc)] == ["0", "24.90", "19.90"]

    def test_malformed_json_still_readable(self, parser):
        doc = make_document_with_jsonld('{"@type": "Product", "name": "Lampe", "offers": {"price": "89.00",}')
        assert [c.raw_text for c in parser.extract_price_candidates(doc)] == ["89.00"]

    def test_price_currency_not_matched(self, parser):
        doc = make_document_with_jsonld('{"offers": {"priceCurrency": "EUR"}}')
        assert parser.extract_price_candidates(doc) == []


class TestExtractImageCandidates:
    def test_image_string(self, parser):
        doc = make_document_with_jsonld('{"image": "https://cdn.example/a.jpg"}')
        candidates = parser.extract_image_candidates(doc)
        assert [c.url for c in candidates] == ["https://cdn.example/a.jpg"]
        assert candidates[0].source == ImageSource.JSON_LD

    def test_image_array_first_element(self, parser):
        doc = make_document_with_jsonld('{"image": ["https://cdn.example/a.jpg", "https://cdn.example/b.jpg"]}')
        assert [c.url for c in parser.extract_image_candidates(doc)] == ["https://cdn.example/a.jpg"]

    def test_image_object(self, parser):
        doc = make_document_with_jsonld('{"image": {"@type": "ImageObject", "url": "https://cdn.example/o.jpg"}}')
        assert [c.url for c in parser.extract_image_candidates(doc)] == ["https://cdn.example/o.jpg"]

    def test_image_object_content_url(self, parser):
        doc = make_document_with_jsonld('{"image": [{"@type": "ImageObject", "contentUrl": "/img/c.jpg"}]}')
        assert [c.url for c in parser.extract_image_candidates(doc)] == ["/img/c.jpg"]

    def test_escaped_slashes(self, parser):
        doc = make_document_with_jsonld(r'{"image": "https:\/\/cdn.example\/a.jpg"}')
        assert [c.url for c in parser.extract_image_candidates(doc)] == ["https://cdn.example/a.jpg"]

    def test_duplicates_removed(self, parser):
        doc = make_document_with_jsonld('{"image": "/a.jpg"}', '{"image": "/a.jpg"}')
        assert len(parser.extract_image_candidates(doc)) == 1


class TestFixturePage:
    def test_product_page(self, parser, read_fixture):
        doc = PageDocument("https://www.maboutique.fr/chaise-oslo", read_fixture("product_jsonld.html"))
        assert parser.extract_title(doc) == "Chaise Scandinave Oslo"
        assert [c.raw_text for c in parser.extract_price_candidates(doc)] == ["49.99"]
        assert parser.extract_image_candidates(doc)[0].url == "https://cdn.maboutique.fr/p/oslo-1.jpg"
