"""
Page Document

One fetched page as every extraction strategy sees it: the raw markup
(for regex tiers) and a lazily built BeautifulSoup tree (for tag queries).
"""

from bs4 import BeautifulSoup


class PageDocument:
    """
    Fetched HTML plus its URL.

    Usage:
        document = PageDocument(url, html)
        document.soup.select_one('meta[property="og:title"]')
    """

    def __init__(self, url: str, html: str):
        self.url = url
        self.html = html or ""
        self._soup = None

    @property
    def soup(self) -> BeautifulSoup:
        if self._soup is None:
            self._soup = BeautifulSoup(self.html, "lxml")
        return self._soup

    def meta_content(self, *keys: str) -> list:
        """
        Content of <meta> tags whose property or name is one of ``keys``.

        Values come back in ``keys`` order, then document order; empty
        contents are skipped.
        """
        values = []
        for key in keys:
            for attribute in ("property", "name"):
                for tag in self.soup.find_all("meta", attrs={attribute: key}):
                    content = (tag.get("content") or "").strip()
                    if content and content not in values:
                        values.append(content)
        return values
