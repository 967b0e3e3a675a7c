"""
Converters - HTML to Markdown and plain text
"""

import re

from bs4 import BeautifulSoup
from markdownify import markdownify

_EXCESS_BLANK_LINES = re.compile(r'\n{3,}')
_TRAILING_SPACES = re.compile(r'[ \t]+\n')


def process_markdown(html: str) -> str:
    """Render sanitized HTML as Markdown"""
    content = markdownify(
        html,
        heading_style='ATX',
        strip=['script', 'style'],
        bullets='-',
        escape_asterisks=False,
        escape_underscores=False,
    )
    content = _TRAILING_SPACES.sub('\n', content)
    content = _EXCESS_BLANK_LINES.sub('\n\n', content)
    return content.strip()


def html_to_text(html: str) -> str:
    """Readable text of an HTML document, one block per line"""
    if not html:
        return ''
    soup = BeautifulSoup(html, 'html.parser')
    for tag in soup(['script', 'style', 'noscript', 'template']):
        if not tag.decomposed:
            tag.decompose()
    if soup.head is not None:
        soup.head.decompose()
    return soup.get_text(separator='\n', strip=True)
