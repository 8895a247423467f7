"""
Heuristic Text Parser

Last-resort extraction over raw markup, used only when JSON-LD, Open Graph
and microdata gave nothing usable.

Price rules are an ordered list, most specific first: known marketplace
price classes, then any element labeled "price", then data-price
attributes, then bare currency tokens. Generic currency patterns come last
because they can latch onto unrelated numbers; every match still goes
through the same plausibility check as the structured sources.
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, Tuple
from urllib.parse import urlparse

from ...models import ExtractionCandidate, ImageCandidate, ImageSource, PriceSource
from .document import PageDocument

# Amount with optional thousands groups and up to two decimals
_AMOUNT = r'(?<![\d.,])((?:\d{1,3}(?:[ \u00a0\u202f.,]\d{3})+|\d+)(?:[.,]\d{1,2})?)(?![\d])'
_EURO = r'(?:€|&euro;|&#8364;|&#x20ac;)'


@dataclass(frozen=True)
class HeuristicRule:
    """One regex rule; ``template`` builds the raw token from the groups."""
    name: str
    pattern: re.Pattern
    template: str = r'\1'

    def matches(self, html: str) -> Iterator[str]:
        for match in self.pattern.finditer(html):
            yield match.expand(self.template).strip()


def _rule(name: str, pattern: str, template: str = r'\1') -> HeuristicRule:
    return HeuristicRule(name, re.compile(pattern, re.IGNORECASE | re.DOTALL), template)


PRICE_RULES: Tuple[HeuristicRule, ...] = (
    # Amazon: screen-reader copy of the displayed price
    _rule('amazon-offscreen',
          r'<span[^>]*class="[^"]*\ba-offscreen\b[^"]*"[^>]*>\s*([^<]+?)\s*<'),
    # Amazon: split whole / fraction display
    _rule('amazon-whole-fraction',
          r'class="a-price-whole"[^>]*>\s*([\d.,\u00a0 ]+?)\s*(?:<span class="a-price-decimal"[^>]*>[.,]?</span>)?\s*</span>'
          r'\s*<span class="a-price-fraction"[^>]*>\s*(\d{2})\s*<',
          r'\1,\2'),
    # Amazon: legacy price blocks
    _rule('amazon-priceblock',
          r'id="priceblock_(?:ourprice|dealprice|saleprice)"[^>]*>\s*([^<]+?)\s*<'),
    # Fnac
    _rule('fnac-pricebox',
          r'class="[^"]*\bf-faPriceBox__price\b[^"]*"[^>]*>\s*([^<]+?)\s*<'),
    # Cdiscount
    _rule('cdiscount-fpprice',
          r'class="[^"]*\bfpPrice\b[^"]*"[^>]*>\s*([^<]+?)\s*<'),
    # Any element whose class or id mentions "price" and whose own text has a digit
    _rule('labeled-price-container',
          r'<[a-z][a-z0-9]*\s[^>]*?\b(?:class|id)="[^"]*price[^"]*"[^>]*>\s*([^<]*?\d[^<]*?)\s*<'),
    # data-price="49.99"
    _rule('data-price-attribute',
          r'\bdata-price(?:-amount|-value)?\s*=\s*["\']\s*([^"\']*?\d[^"\']*?)\s*["\']'),
    # €49,99
    _rule('euro-prefix', _EURO + r'\s*' + _AMOUNT),
    # 49,99 €
    _rule('euro-suffix', _AMOUNT + r'\s*' + _EURO),
    # 49 EUR
    _rule('eur-code', _AMOUNT + r'\s*EUR\b'),
)


class HeuristicTextParser:
    """
    Regex rules over raw HTML.

    Usage:
        parser = HeuristicTextParser()
        for candidate in parser.iter_price_candidates(document):
            ...
    """

    # Words marking decoration rather than product photos, matched whole
    # so "coque-silicone" or "flagship" still pass
    IMAGE_EXCLUDE_WORDS = (
        'icon', 'favicon', 'logo', 'sprite', 'pixel', 'spacer', 'placeholder',
        'loader', 'avatar', 'badge', 'flag', 'tracking',
    )
    IMAGE_EXCLUDE_PATTERN = re.compile(
        r'(?<![a-z])(?:' + '|'.join(IMAGE_EXCLUDE_WORDS) + r')s?(?![a-z])'
    )
    IMAGE_EXCLUDE_SUFFIXES = ('.svg', 'blank.gif')
    IMAGE_ATTRIBUTES = ('data-old-hires', 'data-src', 'data-lazy-src', 'src')
    MAX_IMAGE_CANDIDATES = 5

    def __init__(self, rules: Tuple[HeuristicRule, ...] = PRICE_RULES):
        self.rules = rules

    def iter_price_candidates(self, document: PageDocument) -> Iterator[ExtractionCandidate]:
        """
        Yield raw price tokens rule by rule, each rule's matches in
        document order.

        A generator, so the caller stops scanning at the first token that
        normalizes into range.
        """
        for rule in self.rules:
            for raw in rule.matches(document.html):
                if raw:
                    yield ExtractionCandidate(raw_text=raw, source=PriceSource.HTML_HEURISTIC)

    def rule_names(self) -> List[str]:
        return [rule.name for rule in self.rules]

    def extract_image_candidates(self, document: PageDocument) -> List[ImageCandidate]:
        """
        Pick likely product photos from <img> tags.

        Returns:
            Up to MAX_IMAGE_CANDIDATES candidates in document order
        """
        candidates = []
        seen = set()
        for img in document.soup.find_all('img'):
            url = ""
            for attribute in self.IMAGE_ATTRIBUTES:
                value = (img.get(attribute) or "").strip()
                if value:
                    url = value
                    break

            if not self._is_product_image(url) or url in seen:
                continue

            seen.add(url)
            candidates.append(ImageCandidate(url=url, source=ImageSource.IMG_TAG))
            if len(candidates) >= self.MAX_IMAGE_CANDIDATES:
                break

        return candidates

    def _is_product_image(self, url: str) -> bool:
        """Check if URL looks like a product image (not icon/logo)."""
        if not url or url.startswith('data:'):
            return False
        path = urlparse(url).path.lower()
        if any(path.endswith(suffix) for suffix in self.IMAGE_EXCLUDE_SUFFIXES):
            return False
        return self.IMAGE_EXCLUDE_PATTERN.search(url.lower()) is None
