"""
Structured Data Parser

Extracts product name, image and price from JSON-LD structured data
(schema.org). This is the highest priority source for every field as it
is explicitly structured by the website for search engines.

The JSON is not parsed as a whole: templating engines routinely emit
trailing commas, unescaped quotes or truncated blocks, so targeted
patterns pull the few fields we need out of the raw text instead.
"""

import json
import re
from typing import List, Optional

from ...models import ExtractionCandidate, ImageCandidate, ImageSource, PriceSource
from .document import PageDocument

_LD_JSON_TYPE = re.compile(r'application/ld\+json', re.IGNORECASE)

_JSON_STRING = r'"((?:[^"\\]|\\.)*)"'

PRICE_PATTERN = re.compile(
    r'"(?:price|lowPrice)"\s*:\s*(?:' + _JSON_STRING + r'|(-?[0-9][0-9.,]*))'
)

IMAGE_PATTERN = re.compile(
    r'"image"\s*:\s*(?:'
    + _JSON_STRING                                                    # "image": "url"
    + r'|\[\s*' + _JSON_STRING                                        # "image": ["url", ...]
    + r'|\[?\s*\{[^{}]*?"(?:url|contentUrl)"\s*:\s*' + _JSON_STRING   # {"url": "..."}
    + r')'
)

NAME_PATTERN = re.compile(r'"name"\s*:\s*' + _JSON_STRING)

PRODUCT_TYPE_PATTERN = re.compile(
    r'"@type"\s*:\s*\[?\s*"(?:https?://schema\.org/)?(?:Product|ProductGroup|IndividualProduct|ProductModel)"'
)


def _unescape(value: str) -> str:
    """Decode JSON string escapes (\\/, \\u00e9, \\")."""
    try:
        return json.loads(f'"{value}"')
    except ValueError:
        return value.replace('\\/', '/').replace('\\"', '"')


def _object_depths(text: str) -> List[int]:
    """
    Brace depth before each character, ignoring braces inside strings.

    Used to tell whether a "name" belongs to the Product object itself or
    to a nested one (brand, offer, review author).
    """
    depths = []
    depth = 0
    in_string = False
    escaped = False
    for char in text:
        depths.append(depth)
        if in_string:
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
    depths.append(depth)
    return depths


def _same_object(depths: List[int], a: int, b: int) -> bool:
    """True if positions a and b sit directly in the same JSON object."""
    lo, hi = min(a, b), max(a, b)
    level = depths[a]
    return depths[b] == level and min(depths[lo:hi + 1]) >= level


class StructuredDataParser:
    """
    Pattern-based reader for JSON-LD blocks.

    A page may hold several <script type="application/ld+json"> blocks;
    all of them are scanned in document order.

    Usage:
        parser = StructuredDataParser()
        title = parser.extract_title(document)
        prices = parser.extract_price_candidates(document)
        images = parser.extract_image_candidates(document)
    """

    def blocks(self, document: PageDocument) -> List[str]:
        """Raw text of every JSON-LD block, in document order."""
        scripts = document.soup.find_all('script', attrs={'type': _LD_JSON_TYPE})
        texts = []
        for script in scripts:
            text = script.string if script.string is not None else script.get_text()
            if text and text.strip():
                texts.append(text)
        return texts

    def extract_title(self, document: PageDocument) -> Optional[str]:
        """
        Extract the product name.

        Only a "name" sitting directly in an object typed Product (or a
        product variant type) counts; WebSite, Organization and
        BreadcrumbList names are site chrome, not product titles.

        Returns:
            Raw product name or None
        """
        for block in self.blocks(document):
            type_matches = list(PRODUCT_TYPE_PATTERN.finditer(block))
            if not type_matches:
                continue

            depths = _object_depths(block)
            for type_match in type_matches:
                for name_match in NAME_PATTERN.finditer(block):
                    if _same_object(depths, type_match.start(), name_match.start()):
                        name = _unescape(name_match.group(1)).strip()
                        if name:
                            return name

        return None

    def extract_price_candidates(self, document: PageDocument) -> List[ExtractionCandidate]:
        """
        Extract every price / lowPrice value.

        Returns:
            Candidates in document order (quoted or bare numbers)
        """
        candidates = []
        for block in self.blocks(document):
            for match in PRICE_PATTERN.finditer(block):
                raw = match.group(1) if match.group(1) is not None else match.group(2)
                raw = _unescape(raw).strip()
                if raw:
                    candidates.append(ExtractionCandidate(raw_text=raw, source=PriceSource.JSON_LD))
        return candidates

    def extract_image_candidates(self, document: PageDocument) -> List[ImageCandidate]:
        """
        Extract every image URL.

        Handles "image" as a string, as an array of strings, and as an
        ImageObject (or array of them) carrying "url" / "contentUrl".

        Returns:
            Candidates in document order, duplicates removed
        """
        candidates = []
        seen = set()
        for block in self.blocks(document):
            for match in IMAGE_PATTERN.finditer(block):
                raw = next(g for g in match.groups() if g is not None)
                url = _unescape(raw).strip()
                if url and url not in seen:
                    seen.add(url)
                    candidates.append(ImageCandidate(url=url, source=ImageSource.JSON_LD))
        return candidates

    def has_data(self, document: PageDocument) -> bool:
        """Check whether the page carries any JSON-LD at all."""
        return bool(self.blocks(document))
