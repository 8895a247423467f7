"""
Wishlist Product Metadata Extraction

Modules:
    models      - Data models (ProductMetadata, ExtractionReport)
    common      - Shared utilities (config loader, logging, URL titles, cancellation)
    fetching    - Page, rendering proxy and link-preview acquisition
    extraction  - Parsers, price normalization, image resolution, orchestration
"""

from .errors import ConfigError, ExtractionCancelled, InvalidURLError, WishfillError
from .models import ExtractionReport, ProductMetadata
from .extraction import MetadataOrchestrator, QuickAddExtractor, fetch_metadata

__all__ = [
    'fetch_metadata',
    'MetadataOrchestrator',
    'QuickAddExtractor',
    'ProductMetadata',
    'ExtractionReport',
    'WishfillError',
    'InvalidURLError',
    'ExtractionCancelled',
    'ConfigError',
]
