"""
Data Extractor - Turns one acquired page into a multi-format result
"""

import json
import logging
import time
import traceback
from typing import Any, Dict, NoReturn, Optional

from ..acquisition.adapter import acquire, extract_base_content
from ..acquisition.result import CrawlContext
from ..config import ExtractorConfig
from ..errors import DataExtractionError
from ..llm.registry import AgentRegistry, default_registry
from ..llm.structured import StructuredExtractor, resolve_model_id
from ..storage import FileStorage
from ..transformers.html_transformer import HTMLTransformer
from ..transformers.screenshot_transformer import ScreenshotTransformer
from .assembler import assemble_data
from .metadata import extract_metadata
from .tasks import FormatTaskGraph

logger = logging.getLogger(__name__)
events_logger = logging.getLogger('pageforge.events')


class DataExtractor:
    """Extraction pipeline for crawl jobs

    One instance can serve many concurrent jobs; per-job state lives in the
    FormatTaskGraph built for each call.
    """

    def __init__(self, config: Optional[ExtractorConfig] = None,
                 html_transformer: Optional[HTMLTransformer] = None,
                 screenshot_transformer: Optional[ScreenshotTransformer] = None,
                 registry: Optional[AgentRegistry] = None):
        self.config = config or ExtractorConfig()
        self.html_transformer = html_transformer or HTMLTransformer()
        if screenshot_transformer is None:
            storage = FileStorage(self.config.storage_dir, compress=self.config.compress_screenshots)
            screenshot_transformer = ScreenshotTransformer(storage)
        self.screenshot_transformer = screenshot_transformer
        self.registry = registry or default_registry()

    def _structured_extractor(self, context: CrawlContext) -> Optional[StructuredExtractor]:
        options = context.options
        if 'json' not in options.formats or options.json_options is None:
            return None
        return StructuredExtractor(self.registry, resolve_model_id(options, self.config))

    async def extract_data(self, context: CrawlContext) -> Dict[str, Any]:
        """Extract every requested format for a job

        Returns the complete result, or raises DataExtractionError if any
        step fails. Never returns a partial result.
        """
        start_time = time.time()
        try:
            # Resolve the model before any page work so a missing one costs nothing
            structured = self._structured_extractor(context)

            surface = await acquire(context)
            base_content = await extract_base_content(context, surface)
            metadata = extract_metadata(surface)

            graph = FormatTaskGraph(
                context, surface, base_content,
                self.html_transformer, self.screenshot_transformer, structured,
            )
            completed = await graph.join(graph.build())
        except Exception as e:
            self.handle_extraction_error(context, e)

        result = assemble_data(context, base_content, metadata, completed)
        self._log_event(context, 'extraction_completed', start_time, sorted(completed))
        return result

    def _log_event(self, context: CrawlContext, event_type: str, start_time: float, formats):
        events_logger.info(json.dumps({
            'event_type': event_type,
            'job_id': context.user_data.job_id,
            'queue_name': context.user_data.queue_name,
            'url': context.url,
            'formats': formats,
            'duration_ms': int((time.time() - start_time) * 1000),
        }))

    def handle_extraction_error(self, context: CrawlContext, error: BaseException) -> NoReturn:
        """Log a fatal error with its job and queue, then raise it wrapped"""
        if isinstance(error, DataExtractionError):
            raise error

        job_id = context.user_data.job_id or 'unknown'
        queue_name = context.user_data.queue_name or 'unknown'

        logger.error(f"[{queue_name}] [{job_id}] Extraction failed: {error}")

        stack = ''.join(traceback.format_exception(type(error), error, error.__traceback__))
        raise DataExtractionError(
            f"Data extraction failed: {error}. Stack: {stack}",
            job_id=job_id,
            queue_name=queue_name,
            stack=stack,
        ) from error
