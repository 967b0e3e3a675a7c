"""
Content Surface - Uniform queryable view over an acquired page
"""

from typing import List

from bs4 import BeautifulSoup, Tag

EMPTY_DOCUMENT = "<!DOCTYPE html><html><head><title></title></head><body></body></html>"


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string the same way for every engine"""
    return BeautifulSoup(html, 'html.parser')


class ContentSurface:
    """Read-only wrapper around a parsed document"""

    def __init__(self, document: BeautifulSoup):
        self.document = document

    @classmethod
    def from_html(cls, html: str) -> 'ContentSurface':
        return cls(parse_html(html))

    @classmethod
    def empty(cls) -> 'ContentSurface':
        """Surface for a page that could not be acquired"""
        return cls(parse_html(EMPTY_DOCUMENT))

    def title(self) -> str:
        if self.document.title is None:
            return ''
        return self.document.title.get_text().strip()

    def meta_tags(self) -> List[Tag]:
        return self.document.find_all('meta')

    def html(self) -> str:
        """Serialize the whole document"""
        return str(self.document)

    def root_html(self) -> str:
        """Serialize the <html> element, or the whole document if there is none"""
        root = self.document.find('html')
        if root is None:
            return self.html()
        return str(root)
