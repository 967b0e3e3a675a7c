"""
Browser Engine - Renders pages in headless Chromium with Playwright
"""

import asyncio
import logging
from typing import Any

from playwright.async_api import async_playwright

from ..acquisition.result import RenderedPage
from ..errors import FetchError
from ..options import JobOptions

logger = logging.getLogger(__name__)

BROWSER_ARGS = [
    '--no-sandbox',
    '--disable-dev-shm-usage',
    '--disable-gpu',
]


async def capture_page(page: Any, full_page: bool) -> bytes:
    """Snapshot capability handed to the extraction pipeline"""
    return await page.screenshot(full_page=full_page, type='png')


class BrowserEngine:
    """Renders pages and hands back the live page"""

    def __init__(self, headless: bool = True, viewport_width: int = 1920, viewport_height: int = 1080,
                 user_agent: str = 'Mozilla/5.0 (compatible; Pageforge/1.0 Webkit) AppleWebKit/537.36'):
        self.headless = headless
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height
        self.user_agent = user_agent
        self.playwright = None
        self.browser = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self):
        """Launch the browser"""
        if self.browser is not None:
            return
        try:
            self.playwright = await async_playwright().start()
            self.browser = await self.playwright.chromium.launch(
                headless=self.headless,
                args=BROWSER_ARGS
            )
        except Exception as e:
            logger.error(f"Failed to start browser: {e}")
            await self.close()
            raise

    async def close(self):
        """Clean up browser resources"""
        try:
            if self.browser:
                await self.browser.close()
            if self.playwright:
                await self.playwright.stop()
        except Exception as e:
            logger.warning(f"Error closing browser: {e}")
        finally:
            self.browser = None
            self.playwright = None

    async def render(self, options: JobOptions) -> RenderedPage:
        """Open options.url in a fresh context and return the live page"""
        await self.start()

        context_options = {
            'viewport': {'width': self.viewport_width, 'height': self.viewport_height},
            'user_agent': self.user_agent,
        }
        if options.proxy:
            context_options['proxy'] = {'server': options.proxy}

        context = await self.browser.new_context(**context_options)
        try:
            page = await context.new_page()
            response = await page.goto(options.url, wait_until='networkidle', timeout=options.timeout)
            if response is not None and response.status >= 400:
                raise FetchError(options.url, f"HTTP {response.status}", response.status)
            if options.wait_for:
                await page.wait_for_timeout(options.wait_for)
        except BaseException as e:
            # Also reached when the job timeout cancels us mid-render
            await self._close_context(context)
            if isinstance(e, Exception) and not isinstance(e, FetchError):
                raise FetchError(options.url, str(e)) from e
            raise

        return RenderedPage(page, snapshot=capture_page)

    @staticmethod
    async def _close_context(context):
        try:
            await asyncio.shield(context.close())
        except Exception as e:
            logger.warning(f"Error closing browser context: {e}")

    async def release(self, rendered: RenderedPage):
        """Close the page and its browser context"""
        try:
            await rendered.page.context.close()
        except Exception as e:
            logger.warning(f"Error closing page: {e}")
