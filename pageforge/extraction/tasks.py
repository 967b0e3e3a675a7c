"""
Format Task Graph - Concurrent per-format derivations for one job

Each node is an asyncio task created at most once. Dependents await the
shared node instead of recomputing it:

    transform ──> html
        └──────> markdown ──> json
    rawHtml, text, screenshot are independent leaves
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from ..acquisition.adapter import BaseContent
from ..acquisition.result import CrawlContext, RenderedPage
from ..acquisition.surface import ContentSurface
from ..llm.structured import StructuredExtractor
from ..options import SCREENSHOT_FORMATS
from ..transformers.converters import html_to_text, process_markdown
from ..transformers.html_transformer import HTMLTransformer, TransformOptions
from ..transformers.screenshot_transformer import ScreenshotTransformer

logger = logging.getLogger(__name__)


class FormatTaskGraph:
    """Builds and joins the tasks for a job's requested formats"""

    def __init__(self, context: CrawlContext, surface: ContentSurface, base_content: BaseContent,
                 html_transformer: HTMLTransformer, screenshot_transformer: ScreenshotTransformer,
                 structured: Optional[StructuredExtractor] = None):
        self.context = context
        self.surface = surface
        self.base_content = base_content
        self.html_transformer = html_transformer
        self.screenshot_transformer = screenshot_transformer
        self.structured = structured
        self.options = context.options
        self.formats: List[str] = list(self.options.formats)

        self._nodes: Dict[str, asyncio.Future] = {}

    def _node(self, name: str, coro) -> asyncio.Future:
        """Create a named task once; later calls return the same task"""
        if name in self._nodes:
            coro.close()
            return self._nodes[name]
        task = asyncio.create_task(coro, name=f"{self.context.user_data.job_id}:{name}")
        self._nodes[name] = task
        return task

    def _done(self, name: str, value: Any) -> asyncio.Future:
        future = asyncio.get_running_loop().create_future()
        future.set_result(value)
        self._nodes[name] = future
        return future

    # Nodes

    def transform(self) -> asyncio.Future:
        return self._node('transform', self._run_transform())

    def markdown(self) -> asyncio.Future:
        return self._node('markdown', self._run_markdown())

    async def _run_transform(self) -> str:
        logger.debug("[extract_data] Start transform_html")
        transform_options = TransformOptions(
            base_url=self.context.url,
            include_tags=self.options.include_tags,
            exclude_tags=self.options.exclude_tags,
            transform_relative_urls=True,
        )
        html = await self.html_transformer.transform_html(self.surface.document, transform_options)
        logger.debug("[extract_data] Finished transform_html")
        return html

    async def _run_markdown(self) -> str:
        html = await self.transform()
        logger.debug("[extract_data] Start process_markdown")
        markdown = await asyncio.to_thread(process_markdown, html)
        logger.debug("[extract_data] Finished process_markdown")
        return markdown

    async def _run_text(self) -> str:
        return await asyncio.to_thread(html_to_text, self.base_content.raw_html)

    async def _run_screenshot(self) -> str:
        logger.debug("[extract_data] Start screenshot capture")
        acquisition = self.context.acquisition
        path = await self.screenshot_transformer.capture_and_store_screenshot(
            self.context, acquisition.page, self.formats
        )
        logger.debug("[extract_data] Finished screenshot capture")
        return path

    async def _run_json(self) -> Any:
        markdown = await self.markdown()
        return await self.structured.extract(markdown, self.options.json_options)

    # Graph

    def _wants_screenshot(self) -> bool:
        acquisition = self.context.acquisition
        return (
            self.options.wants_screenshot
            and isinstance(acquisition, RenderedPage)
            and acquisition.can_snapshot()
        )

    def _wants_json(self) -> bool:
        return 'json' in self.formats and self.options.json_options is not None

    def build(self) -> Dict[str, asyncio.Future]:
        """Launch a task per requested format and return them keyed by format"""
        if self._wants_json() and self.structured is None:
            raise RuntimeError("json requested without a structured extractor")

        tasks: Dict[str, asyncio.Future] = {}

        if 'html' in self.formats:
            tasks['html'] = self.transform()
        if 'markdown' in self.formats:
            tasks['markdown'] = self.markdown()
        if 'rawHtml' in self.formats:
            tasks['rawHtml'] = self._done('rawHtml', self.base_content.raw_html)
        if 'text' in self.formats:
            tasks['text'] = self._node('text', self._run_text())
        if self._wants_screenshot():
            screenshot = self._node('screenshot', self._run_screenshot())
            for fmt in SCREENSHOT_FORMATS:
                if fmt in self.formats:
                    tasks[fmt] = screenshot
        if self._wants_json():
            tasks['json'] = self._node('json', self._run_json())

        return tasks

    async def join(self, tasks: Dict[str, asyncio.Future]) -> Dict[str, Any]:
        """Wait for every task; the first failure cancels the rest and is raised"""
        keys = list(tasks)
        try:
            results = await asyncio.gather(*(tasks[key] for key in keys))
        except BaseException:
            self.cancel()
            raise
        return dict(zip(keys, results))

    def cancel(self):
        """Cancel every node that is still running"""
        for name, node in self._nodes.items():
            if not node.done():
                logger.debug(f"Cancelling pending task {name}")
                node.cancel()
