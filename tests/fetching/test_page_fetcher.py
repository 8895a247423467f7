"""Tests for wishfill/fetching/page_fetcher.py"""

from conftest import make_response, routed_session
from wishfill.fetching import HTTPClient, PageFetcher, decode_html


class TestDecodeHtml:
    def test_header_charset(self):
        body = "Chaise à bascule".encode("iso-8859-1")
        assert decode_html(body, "text/html; charset=ISO-8859-1") == "Chaise à bascule"

    def test_meta_charset(self):
        body = '<meta charset="windows-1252"><p>Déco</p>'.encode("cp1252")
        assert "Déco" in decode_html(body, "text/html")

    def test_defaults_to_utf8(self):
        assert decode_html("Tapis berbère".encode("utf-8")) == "Tapis berbère"

    def test_unknown_charset_falls_back(self):
        assert decode_html(b"plain", "text/html; charset=x-unknown") == "plain"

    def test_undecodable_body(self):
        assert decode_html(b"\xff\xfe\xfa\xc3") is None


class TestPageFetcher:
    def test_fetch_with_browser_headers(self, settings):
        session = routed_session({"https://shop.example/p/1": make_response("<html>ok</html>")})
        fetcher = PageFetcher(settings, HTTPClient(session))

        assert fetcher.fetch("https://shop.example/p/1") == "<html>ok</html>"
        kwargs = session.get.call_args.kwargs
        assert kwargs["headers"]["User-Agent"] == settings.user_agent
        assert kwargs["headers"]["Accept-Language"] == settings.accept_language
        assert kwargs["timeout"] == settings.page_timeout

    def test_http_error_is_no_content(self, settings):
        fetcher = PageFetcher(settings, HTTPClient(routed_session({})))
        assert fetcher.fetch("https://shop.example/missing") is None

    def test_undecodable_is_no_content(self, settings):
        session = routed_session({
            "https://shop.example/bin": make_response(b"\xff\xfe\xfa\xc3", content_type="text/html"),
        })
        fetcher = PageFetcher(settings, HTTPClient(session))
        assert fetcher.fetch("https://shop.example/bin") is None

    def test_oversized_page_dropped(self, settings):
        settings.max_page_bytes = 2048
        session = routed_session({
            "https://shop.example/huge": make_response("<html>" + "x" * 10000 + "</html>"),
        })
        fetcher = PageFetcher(settings, HTTPClient(session))

        assert fetcher.fetch("https://shop.example/huge") is None
        assert session.get.call_args.kwargs["stream"] is True

    def test_page_under_cap_kept(self, settings):
        settings.max_page_bytes = 2048
        session = routed_session({"https://shop.example/p/1": make_response("<html>ok</html>")})
        fetcher = PageFetcher(settings, HTTPClient(session))

        assert fetcher.fetch("https://shop.example/p/1") == "<html>ok</html>"
