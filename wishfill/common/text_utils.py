"""
Text Utilities

Helper functions for text processing and cleanup.
"""

import html
import re

# Cut points for brand suffixes, in priority order
TITLE_SEPARATORS = (" - ", " | ", " • ")

_URL_IN_TEXT = re.compile(r'(https?://[^\s]+)')


def clean_text(text: str) -> str:
    """Unescape HTML entities and collapse whitespace."""
    if not text:
        return ""
    return ' '.join(html.unescape(text).split()).strip()


def clean_title(title: str) -> str:
    """
    Strip the site name sites append to their page titles.

    "Chaise Design - MaBoutique" -> "Chaise Design". The first separator
    found in TITLE_SEPARATORS order is the cut point; a title without any
    separator is returned as is (after whitespace cleanup).

    Args:
        title: Raw page or product title

    Returns:
        Cleaned title, possibly empty
    """
    cleaned = clean_text(title)

    for separator in TITLE_SEPARATORS:
        idx = cleaned.find(separator)
        if idx != -1:
            cleaned = cleaned[:idx]
            break

    return cleaned.strip()


def extract_url_from_text(text: str):
    """
    Find the first http(s) URL in shared free text.

    Share sheets often send "Product name... https://shop/item" instead of
    a bare URL.

    Returns:
        URL string or None
    """
    if not text:
        return None
    match = _URL_IN_TEXT.search(text)
    return match.group(1) if match else None
