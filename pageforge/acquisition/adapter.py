"""
Acquisition Adapter - Normalizes engine output into a ContentSurface

Nothing in this module raises: each read is wrapped in a fallback accessor
that logs at DEBUG level and hands back a default.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from .result import CrawlContext
from .surface import ContentSurface, parse_html

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass
class BaseContent:
    """Content available without any format derivation"""
    url: str
    title: str
    raw_html: str
    extra: Dict[str, Any] = field(default_factory=dict)


async def read_or_default(read: Callable[[], Awaitable[T]], default: T, what: str) -> T:
    """Await read() and return its value, or default if it fails"""
    try:
        return await read()
    except Exception as e:
        logger.debug(f"Failed to {what}: {e}")
        return default


def _read_title(surface: ContentSurface) -> str:
    try:
        return surface.title()
    except Exception as e:
        logger.debug(f"Failed to read title: {e}")
        return ''


async def acquire(context: CrawlContext) -> ContentSurface:
    """Build the content surface for a job, falling back to an empty document"""
    acquisition = context.acquisition

    document = await read_or_default(acquisition.parse_structured, None, "parse structured document")
    if document is not None:
        return ContentSurface(document)

    html = await read_or_default(acquisition.get_html, None, "get page content")
    if html is not None:
        try:
            return ContentSurface(parse_html(html))
        except Exception as e:
            logger.debug(f"Failed to parse page content: {e}")

    return ContentSurface.empty()


async def extract_base_content(context: CrawlContext, surface: ContentSurface) -> BaseContent:
    """Read url, title and raw HTML for a job

    Raw HTML comes from the engine's own source when it has one; the parsed
    surface is only re-serialized when the engine supplied no source at all.
    """
    acquisition = context.acquisition
    raw_html: Optional[str] = ''

    try:
        raw_html = await acquisition.get_html()
    except Exception as e:
        logger.debug(f"Failed to extract raw HTML: {e}")
        raw_html = ''

    if raw_html is None:
        try:
            raw_html = surface.root_html()
        except Exception as e:
            logger.debug(f"Failed to serialize parsed document: {e}")
            raw_html = ''

    return BaseContent(
        url=context.url,
        title=_read_title(surface),
        raw_html=raw_html,
    )
