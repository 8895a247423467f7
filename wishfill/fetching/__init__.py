"""
HTML and preview acquisition.

Modules:
    http_client - HTTPClient, streaming GET with cancellation
    page_fetcher - PageFetcher for direct browser-like fetches
    rendering_proxy - RenderingProxyFetcher for JavaScript-heavy sites
    link_preview - LinkPreviewFallback and the default preview provider
"""

from .http_client import HTTPClient, HTTPResult
from .link_preview import HTMLLinkPreviewProvider, LinkPreview, LinkPreviewFallback
from .page_fetcher import PageFetcher, decode_html
from .rendering_proxy import RenderingProxyFetcher

__all__ = [
    'HTTPClient',
    'HTTPResult',
    'PageFetcher',
    'decode_html',
    'RenderingProxyFetcher',
    'HTMLLinkPreviewProvider',
    'LinkPreview',
    'LinkPreviewFallback',
]
