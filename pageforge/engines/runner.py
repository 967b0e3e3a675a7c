"""
Job Runner - Runs a job on its engine and feeds the extraction pipeline
"""

import asyncio
import logging
import random
import uuid
from typing import Any, Dict, Optional

from ..acquisition.result import CrawlContext, JobUserData, RenderedPage, StaticBody
from ..errors import DataExtractionError, ExtractionConfigError, OptionsValidationError
from ..extraction import DataExtractor
from ..options import Engine, JobOptions
from .browser_engine import BrowserEngine
from .static_engine import StaticEngine

logger = logging.getLogger(__name__)

NON_RETRYABLE = (ExtractionConfigError, OptionsValidationError)


class JobRunner:
    """Owns the engines and runs jobs through the DataExtractor

    Retry applies to the whole job (fetch and extraction), only when the
    job sets retry=True.
    """

    def __init__(self, extractor: DataExtractor, static_engine: Optional[StaticEngine] = None,
                 browser_engine: Optional[BrowserEngine] = None, max_retries: int = 2,
                 base_delay: float = 1.0, queue_name: str = 'default'):
        self.extractor = extractor
        self.static_engine = static_engine or StaticEngine()
        self.browser_engine = browser_engine
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.queue_name = queue_name

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self.static_engine.close()
        if self.browser_engine:
            await self.browser_engine.close()

    def _browser(self) -> BrowserEngine:
        if self.browser_engine is None:
            self.browser_engine = BrowserEngine()
        return self.browser_engine

    async def run(self, options: JobOptions, job_id: Optional[str] = None) -> Dict[str, Any]:
        """Run one job, retrying the whole job if it asks for it"""
        job_id = job_id or uuid.uuid4().hex
        attempts = 1 + (self.max_retries if options.retry else 0)

        for attempt in range(1, attempts + 1):
            try:
                return await self._run_once(options, job_id)
            except DataExtractionError as e:
                if isinstance(e.__cause__, NON_RETRYABLE) or attempt >= attempts:
                    raise
                delay = self.base_delay * (2 ** (attempt - 1)) * (1 + 0.1 * random.random())
                logger.warning(
                    f"[{self.queue_name}] [{job_id}] Attempt {attempt}/{attempts} failed, "
                    f"retrying in {delay:.1f}s"
                )
                await asyncio.sleep(delay)

    async def _run_once(self, options: JobOptions, job_id: str) -> Dict[str, Any]:
        user_data = JobUserData(job_id=job_id, options=options, queue_name=self.queue_name)
        context = CrawlContext(url=options.url, acquisition=StaticBody(), user_data=user_data)

        try:
            return await asyncio.wait_for(self._fetch_and_extract(context), options.timeout / 1000)
        except asyncio.TimeoutError:
            self.extractor.handle_extraction_error(
                context, TimeoutError(f"Job exceeded timeout of {options.timeout}ms")
            )
        except DataExtractionError:
            raise
        except Exception as e:
            self.extractor.handle_extraction_error(context, e)

    async def _fetch_and_extract(self, context: CrawlContext) -> Dict[str, Any]:
        options = context.options

        if options.engine == Engine.BROWSER:
            browser = self._browser()
            rendered: RenderedPage = await browser.render(options)
            context.acquisition = rendered
            try:
                return await self.extractor.extract_data(context)
            finally:
                await browser.release(rendered)

        context.acquisition = await self.static_engine.fetch(options)
        return await self.extractor.extract_data(context)
