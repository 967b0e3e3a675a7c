"""
Screenshot Transformer - Captures a live page and stores the image
"""

import logging
from typing import Any, List

from ..acquisition.result import CrawlContext
from ..errors import ScreenshotError
from ..storage import FileStorage

logger = logging.getLogger(__name__)


class ScreenshotTransformer:
    """Delegates capture to the engine and persists the result"""

    def __init__(self, storage: FileStorage):
        self.storage = storage

    async def capture_and_store_screenshot(self, context: CrawlContext, page: Any,
                                           formats: List[str]) -> str:
        """Capture the page and return the stored file path

        Captures the full page when 'screenshot@fullPage' was requested.
        """
        acquisition = context.acquisition
        if not acquisition.can_snapshot():
            raise ScreenshotError("Engine has no snapshot capability")

        full_page = 'screenshot@fullPage' in formats
        try:
            image = await acquisition.snapshot(page, full_page)
        except Exception as e:
            raise ScreenshotError(f"Screenshot capture failed for {context.url}: {e}") from e

        if not image:
            raise ScreenshotError(f"Screenshot capture returned no data for {context.url}")

        name = context.user_data.job_id or FileStorage.page_id(context.url)
        if full_page:
            name = f"{name}_full"

        path = await self.storage.save_screenshot(context.url, image, name)
        if path is None:
            raise ScreenshotError(f"Failed to store screenshot for {context.url}")

        logger.debug(f"Saved screenshot for {context.url} to {path}")
        return path
