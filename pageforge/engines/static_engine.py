"""
Static Engine - Plain HTTP fetch with aiohttp
"""

import time
import logging
import aiohttp

from ..acquisition.result import StaticBody
from ..acquisition.surface import parse_html
from ..errors import FetchError
from ..options import JobOptions

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = 'Mozilla/5.0 (compatible; Pageforge/1.0; +https://github.com/pageforge)'


class StaticEngine:
    """Fetches pages without executing JavaScript"""

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT):
        self.user_agent = user_agent
        self.session = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self):
        if self.session is None:
            self.session = aiohttp.ClientSession(headers={'User-Agent': self.user_agent})

    async def close(self):
        if self.session:
            await self.session.close()
            self.session = None

    async def fetch(self, options: JobOptions) -> StaticBody:
        """Fetch options.url and return its body with a parsed document"""
        await self.start()
        start_time = time.time()
        timeout = aiohttp.ClientTimeout(total=options.timeout / 1000)

        try:
            async with self.session.get(options.url, timeout=timeout, proxy=options.proxy) as response:
                response_time = time.time() - start_time
                if response.status != 200:
                    raise FetchError(options.url, f"HTTP {response.status}", response.status)

                body = await response.read()
                logger.debug(f"Fetched {options.url} in {response_time:.2f}s ({len(body)} bytes)")
        except aiohttp.ClientError as e:
            raise FetchError(options.url, str(e)) from e

        return StaticBody(body=body, document=parse_html(body.decode('utf-8', errors='replace')))
