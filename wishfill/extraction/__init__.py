"""
Product metadata extraction.

Modules:
    metadata_extractor - MetadataOrchestrator, the extraction cascade
    quick_add - QuickAddExtractor, deadline-bounded extraction
    price_normalizer - PriceNormalizer for locale-aware price parsing
    image_resolver - ImageResolver for download and downsizing
    parsers - Specialized parsers for different data sources
"""

from .image_resolver import ImageResolver, resolve_url
from .metadata_extractor import MetadataOrchestrator, fetch_metadata
from .parsers import (
    HeuristicTextParser,
    MicrodataParser,
    PageDocument,
    SocialTagParser,
    StructuredDataParser,
    UrlPriceParser,
)
from .price_normalizer import PriceNormalizer
from .quick_add import QuickAddExtractor

__all__ = [
    # Orchestration
    'MetadataOrchestrator',
    'QuickAddExtractor',
    'fetch_metadata',
    # Building blocks
    'PriceNormalizer',
    'ImageResolver',
    'resolve_url',
    # Parsers
    'PageDocument',
    'StructuredDataParser',
    'SocialTagParser',
    'MicrodataParser',
    'HeuristicTextParser',
    'UrlPriceParser',
]
