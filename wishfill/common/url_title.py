"""
URL Title Fallback

Builds a human-readable title from the URL alone, for when no metadata
fetch is possible or timely (quick add past its deadline, empty pages).
"""

import re
from typing import Dict, Optional
from urllib.parse import unquote, urlparse

from .config_loader import load_known_hosts
from .constants import URL_TITLE_MAX_LENGTH

_PAGE_EXTENSION = re.compile(r'\.(?:html?|php|aspx?|jsp)$', re.IGNORECASE)


def _bare_host(url: str) -> str:
    host = (urlparse(url).hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    return host


def _known_label(host: str, known_hosts: Dict[str, str]) -> Optional[str]:
    for known, label in known_hosts.items():
        if host == known or host.endswith("." + known):
            return label
    return None


def _title_from_path(path: str) -> str:
    segments = [unquote(s) for s in path.split("/") if s]
    segments = [_PAGE_EXTENSION.sub("", s) for s in segments]
    candidates = [s for s in segments if len(s) > 3]
    if not candidates:
        return ""

    # max() keeps the first of equally long segments
    segment = max(candidates, key=len)
    words = segment.replace("-", " ").replace("_", " ").split()
    title = " ".join(word.capitalize() for word in words)

    if len(title) > URL_TITLE_MAX_LENGTH:
        title = title[:URL_TITLE_MAX_LENGTH].rstrip() + "..."
    return title


def title_from_url(url: str, known_hosts: Optional[Dict[str, str]] = None) -> str:
    """
    Derive a fallback product title from a URL.

    Order: canned label for a well-known retailer, then the longest path
    segment longer than 3 characters made readable, then
    "Produit sur <domain>".

    Args:
        url: Product URL
        known_hosts: Host -> label mapping (if None, loads from config)

    Returns:
        Non-empty title
    """
    if known_hosts is None:
        known_hosts = load_known_hosts()

    host = _bare_host(url)

    label = _known_label(host, known_hosts) if host else None
    if label:
        return label

    title = _title_from_path(urlparse(url).path)
    if title:
        return title

    if host:
        return f"Produit sur {host}"
    return "Produit sans nom"
