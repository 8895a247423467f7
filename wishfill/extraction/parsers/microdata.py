"""
Microdata Parser

Extracts schema.org microdata: inline itemprop="price", itemprop="lowPrice"
and itemprop="image" annotations. Third-priority source.
"""

from typing import List

from ...common.text_utils import clean_text
from ...models import ExtractionCandidate, ImageCandidate, ImageSource, PriceSource
from .document import PageDocument


class MicrodataParser:
    """
    Parses itemprop-annotated elements.

    Values come from the content= attribute when present (meta tags,
    spans with machine-readable values), else src= / href= for images and
    the element text for prices.

    Usage:
        parser = MicrodataParser()
        prices = parser.extract_price_candidates(document)
    """

    PRICE_PROPS = ('price', 'lowPrice')

    def extract_price_candidates(self, document: PageDocument) -> List[ExtractionCandidate]:
        candidates = []
        for element in document.soup.find_all(attrs={'itemprop': True}):
            if not self._has_prop(element, self.PRICE_PROPS):
                continue
            value = element.get('content')
            if not value:
                value = element.get_text()
            value = clean_text(value or "")
            if value:
                candidates.append(ExtractionCandidate(raw_text=value, source=PriceSource.MICRODATA))
        return candidates

    def extract_image_candidates(self, document: PageDocument) -> List[ImageCandidate]:
        candidates = []
        seen = set()
        for element in document.soup.find_all(attrs={'itemprop': True}):
            if not self._has_prop(element, ('image',)):
                continue
            url = element.get('content') or element.get('src') or element.get('href') or ""
            url = url.strip()
            if url and url not in seen:
                seen.add(url)
                candidates.append(ImageCandidate(url=url, source=ImageSource.MICRODATA))
        return candidates

    @staticmethod
    def _has_prop(element, props) -> bool:
        # itemprop may list several space-separated properties
        value = element.get('itemprop')
        tokens = value if isinstance(value, list) else str(value).split()
        return any(token in props for token in tokens)
