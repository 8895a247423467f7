"""Tests for wishfill/extraction/parsers/document.py"""

from wishfill.extraction.parsers import PageDocument


class TestPageDocument:
    def test_soup_is_cached(self):
        doc = PageDocument("https://shop.example/", "<html><body><h1>Chaise</h1></body></html>")
        assert doc.soup is doc.soup
        assert doc.soup.h1.get_text() == "Chaise"

    def test_none_html(self):
        doc = PageDocument("https://shop.example/", None)
        assert doc.html == ""
        assert doc.meta_content("og:title") == []

    def test_meta_content_key_order(self):
        doc = PageDocument("https://shop.example/", (
            '<meta name="twitter:image" content="tw.jpg">'
            '<meta property="og:image" content="og.jpg">'
        ))
        assert doc.meta_content("og:image", "twitter:image") == ["og.jpg", "tw.jpg"]
