"""
HTML Transformer - Sanitizes a document and absolutizes its URLs
"""

import asyncio
import copy
import logging
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Comment

logger = logging.getLogger(__name__)

# Never part of readable output
STRIPPED_TAGS = ['script', 'style', 'noscript', 'meta', 'link', 'head', 'iframe', 'svg', 'template']

URL_ATTRIBUTES = ['href', 'src', 'poster', 'action']

UNRESOLVED_PREFIXES = ('#', 'data:', 'javascript:', 'mailto:', 'tel:')


def _decompose_all(tags):
    """Remove tags from their tree, skipping ones already removed with a parent"""
    for tag in tags:
        if not tag.decomposed:
            tag.decompose()


@dataclass
class TransformOptions:
    """How to filter and rewrite a document"""
    base_url: str
    include_tags: Optional[List[str]] = None
    exclude_tags: Optional[List[str]] = None
    transform_relative_urls: bool = True


class HTMLTransformer:
    """Turns a parsed page into sanitized HTML"""

    async def transform_html(self, document: BeautifulSoup, options: TransformOptions) -> str:
        """Return sanitized inner HTML of the document body

        Runs in a worker thread; the caller's document is never modified.
        """
        return await asyncio.to_thread(self._transform, document, options)

    def _transform(self, document: BeautifulSoup, options: TransformOptions) -> str:
        soup = copy.copy(document)

        for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
            comment.extract()
        _decompose_all(soup.find_all(STRIPPED_TAGS))

        if options.exclude_tags:
            for selector in options.exclude_tags:
                _decompose_all(self._select(soup, selector))

        if options.include_tags:
            container = BeautifulSoup('', 'html.parser')
            for selector in options.include_tags:
                for tag in self._select(soup, selector):
                    container.append(copy.copy(tag))
            root = container
        else:
            root = soup.body or soup

        if options.transform_relative_urls:
            self._absolutize_urls(root, options.base_url)

        return root.decode_contents().strip()

    @staticmethod
    def _select(soup: BeautifulSoup, selector: str):
        try:
            return soup.select(selector)
        except Exception as e:
            logger.warning(f"Ignoring invalid selector {selector!r}: {e}")
            return []

    @staticmethod
    def _absolutize_urls(root, base_url: str):
        for attribute in URL_ATTRIBUTES:
            for tag in root.find_all(attrs={attribute: True}):
                value = tag[attribute].strip()
                if value and not value.lower().startswith(UNRESOLVED_PREFIXES):
                    tag[attribute] = urljoin(base_url, value)

        for tag in root.find_all(attrs={'srcset': True}):
            candidates = []
            for candidate in tag['srcset'].split(','):
                parts = candidate.strip().split()
                if not parts:
                    continue
                parts[0] = urljoin(base_url, parts[0])
                candidates.append(' '.join(parts))
            tag['srcset'] = ', '.join(candidates)
