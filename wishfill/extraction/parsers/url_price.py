"""
URL Price Parser

Some shops put the price in the product URL itself: a ``price=29.99``
query parameter, or a ``/p/29-99-EUR`` style path token. Lowest-priority
price source, consulted after the page heuristics.
"""

import re
from typing import List
from urllib.parse import parse_qsl, unquote, urlparse

from ...models import ExtractionCandidate, PriceSource
from .document import PageDocument

PRICE_QUERY_KEYS = ('price', 'prix')

# "29-99" or "29.99" standing alone in the path; not part of a longer
# number run such as a date ("2024-10-05") or a version ("1.20.30")
_PATH_PRICE = re.compile(r'(?<![\d.])(?<!\d-)(\d{2,})[.-](\d{2})(?!\d)(?![.-]\d)')


class UrlPriceParser:
    """
    Reads price tokens from the page URL.

    Usage:
        parser = UrlPriceParser()
        prices = parser.extract_price_candidates(document)
    """

    def extract_price_candidates(self, document: PageDocument) -> List[ExtractionCandidate]:
        parsed = urlparse(document.url)
        candidates = []

        for key, value in parse_qsl(parsed.query):
            if key.lower() in PRICE_QUERY_KEYS and value.strip():
                candidates.append(ExtractionCandidate(raw_text=value.strip(), source=PriceSource.URL))

        for match in _PATH_PRICE.finditer(unquote(parsed.path)):
            raw = f"{match.group(1)}.{match.group(2)}"
            candidates.append(ExtractionCandidate(raw_text=raw, source=PriceSource.URL))

        return candidates
