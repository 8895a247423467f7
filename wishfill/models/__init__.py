"""
Data models for metadata extraction.

This module contains pure data classes with no business logic.
"""

from .metadata import (
    ExtractionCandidate,
    ExtractionReport,
    ExtractionState,
    ImageCandidate,
    ImageSource,
    PriceSource,
    ProductMetadata,
)

__all__ = [
    'ProductMetadata',
    'ExtractionCandidate',
    'ImageCandidate',
    'ExtractionReport',
    'ExtractionState',
    'PriceSource',
    'ImageSource',
]
