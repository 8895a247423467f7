"""
Social Tag Parser

Extracts Open Graph and Twitter Card <meta> tags: title, image and price.
Second-priority source after JSON-LD. Meta tags are read from the parsed
tree, so the order of the property/content attributes does not matter.
"""

from typing import List, Optional

from ...models import ExtractionCandidate, ImageCandidate, ImageSource, PriceSource
from .document import PageDocument


class SocialTagParser:
    """
    Parses Open Graph / Twitter Card meta tags.

    Usage:
        parser = SocialTagParser()
        title = parser.extract_og_title(document)
        images = parser.extract_image_candidates(document)
    """

    IMAGE_KEYS = ('og:image', 'og:image:secure_url', 'og:image:url', 'twitter:image', 'twitter:image:src')
    PRICE_KEYS = ('og:price:amount', 'product:price:amount')

    def extract_og_title(self, document: PageDocument) -> Optional[str]:
        values = document.meta_content('og:title')
        return values[0] if values else None

    def extract_twitter_title(self, document: PageDocument) -> Optional[str]:
        values = document.meta_content('twitter:title')
        return values[0] if values else None

    def extract_image_candidates(self, document: PageDocument) -> List[ImageCandidate]:
        """Image URLs from og:image first, then Twitter Card."""
        return [
            ImageCandidate(url=url, source=ImageSource.OPEN_GRAPH)
            for url in document.meta_content(*self.IMAGE_KEYS)
        ]

    def extract_price_candidates(self, document: PageDocument) -> List[ExtractionCandidate]:
        """Price amounts from og:price:amount / product:price:amount."""
        return [
            ExtractionCandidate(raw_text=value, source=PriceSource.OPEN_GRAPH)
            for value in document.meta_content(*self.PRICE_KEYS)
        ]
