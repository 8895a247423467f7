"""Shared test fixtures."""

import io
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from PIL import Image

from wishfill.common.config_loader import FetchSettings, LinkPreviewSettings, RenderingProxySettings

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def make_response(body=b"", status_code=200, content_type="text/html; charset=utf-8", url=None):
    """Fake streamed requests.Response."""
    if isinstance(body, str):
        body = body.encode("utf-8")

    response = MagicMock()
    response.status_code = status_code
    response.headers = {"Content-Type": content_type}
    response.url = url
    # A fresh iterator per call, so one response can be served twice
    response.iter_content.side_effect = lambda chunk_size=None: iter(
        [body[i:i + 1024] for i in range(0, len(body), 1024)]
    )
    return response


def routed_session(routes):
    """
    MagicMock session whose get() answers from ``routes`` (url -> response).

    Unknown URLs get a 404.
    """
    session = MagicMock()

    def get(url, **kwargs):
        if url in routes:
            return routes[url]
        return make_response(b"Not Found", status_code=404)

    session.get.side_effect = get
    return session


@pytest.fixture
def fixtures_dir():
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def read_fixture():
    """Read an HTML fixture by file name."""
    def _read(name):
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")
    return _read


@pytest.fixture
def settings():
    """Default settings, no config file, no proxy key, preview disabled."""
    return FetchSettings(
        rendering_proxy=RenderingProxySettings(),
        link_preview=LinkPreviewSettings(enabled=False),
    )


@pytest.fixture
def proxy_settings():
    """Settings with a rendering proxy key and one JavaScript-heavy host."""
    return FetchSettings(
        rendering_proxy=RenderingProxySettings(
            endpoint="https://proxy.example/render",
            api_key="test-key",
            hosts=["amazon.fr"],
        ),
        link_preview=LinkPreviewSettings(enabled=False),
    )


@pytest.fixture
def jpeg_bytes():
    """A 1600x1200 JPEG, larger than the 800px cap."""
    buffer = io.BytesIO()
    Image.new("RGB", (1600, 1200), (200, 30, 30)).save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def small_png_bytes():
    """A 200x100 PNG with transparency."""
    buffer = io.BytesIO()
    Image.new("RGBA", (200, 100), (0, 120, 255, 128)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def known_hosts():
    """Small host -> label map for URL title tests."""
    return {
        "amazon.fr": "Produit Amazon",
        "amazon.com": "Produit Amazon",
        "amzn.eu": "Produit Amazon",
        "fnac.com": "Produit Fnac",
    }
