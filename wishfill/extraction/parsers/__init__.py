"""
Source-specific parsers for product metadata.

Each parser handles one data source and only returns raw candidates;
ranking and validation happen in the orchestrator:
- StructuredDataParser: JSON-LD structured data (schema.org)
- SocialTagParser: Open Graph and Twitter Card meta tags
- MicrodataParser: schema.org itemprop attributes
- HeuristicTextParser: regex rules over raw markup and <img> tags
- UrlPriceParser: price tokens in the product URL itself
"""

from .document import PageDocument
from .heuristic_text import PRICE_RULES, HeuristicRule, HeuristicTextParser
from .microdata import MicrodataParser
from .social_tags import SocialTagParser
from .structured_data import StructuredDataParser
from .url_price import UrlPriceParser

__all__ = [
    'PageDocument',
    'StructuredDataParser',
    'SocialTagParser',
    'MicrodataParser',
    'HeuristicTextParser',
    'HeuristicRule',
    'PRICE_RULES',
    'UrlPriceParser',
]
