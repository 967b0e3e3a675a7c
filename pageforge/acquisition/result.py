"""
Acquisition Result - What an engine hands to the extraction pipeline

An acquisition is either a static response body or a live rendered page.
Both variants answer the same questions so the pipeline never has to probe
for engine-specific attributes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional

from bs4 import BeautifulSoup

from ..errors import PageClosedError
from ..options import JobOptions
from .surface import parse_html

# Engine capture capability: (page, full_page) -> image bytes
SnapshotFn = Callable[[Any, bool], Awaitable[bytes]]


class AcquisitionResult(ABC):
    """Base interface for engine output"""

    @abstractmethod
    async def parse_structured(self) -> Optional[BeautifulSoup]:
        """Return a ready parsed document, or None if the engine has none"""

    @abstractmethod
    async def get_html(self) -> Optional[str]:
        """Return the page HTML, or None if there is no direct source"""

    def is_closed(self) -> bool:
        return False

    def can_snapshot(self) -> bool:
        return False


class StaticBody(AcquisitionResult):
    """Response body from the static engine"""

    def __init__(self, body: Optional[bytes] = None, document: Optional[BeautifulSoup] = None):
        self.body = body
        self.document = document

    async def parse_structured(self) -> Optional[BeautifulSoup]:
        return self.document

    async def get_html(self) -> Optional[str]:
        if self.body is None:
            return None
        return self.body.decode('utf-8', errors='replace')


class RenderedPage(AcquisitionResult):
    """Live page from the browser engine

    page must provide ``async content()`` and ``is_closed()``; a Playwright
    Page does.
    """

    def __init__(self, page: Any, snapshot: Optional[SnapshotFn] = None):
        self.page = page
        self.snapshot = snapshot

    def is_closed(self) -> bool:
        return bool(self.page.is_closed())

    def can_snapshot(self) -> bool:
        return self.snapshot is not None

    async def get_html(self) -> Optional[str]:
        if self.is_closed():
            raise PageClosedError("Page is closed")
        return await self.page.content()

    async def parse_structured(self) -> Optional[BeautifulSoup]:
        html = await self.get_html()
        return parse_html(html)


@dataclass
class JobUserData:
    """Job-scoped data attached by the queue layer"""
    job_id: Optional[str]
    options: JobOptions
    queue_name: Optional[str] = None

    @property
    def formats(self) -> List[str]:
        return self.options.formats


@dataclass
class CrawlContext:
    """Everything the pipeline needs for one job"""
    url: str
    acquisition: AcquisitionResult
    user_data: JobUserData

    @property
    def options(self) -> JobOptions:
        return self.user_data.options
