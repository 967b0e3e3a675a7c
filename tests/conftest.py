"""Shared fakes for the pipeline tests.

No network or browser is used: live pages are ``FakePage`` objects and the
extraction agent is a ``FakeAgent`` built by the registry factory.
"""

import asyncio
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from pageforge.acquisition import CrawlContext, JobUserData, RenderedPage, StaticBody
from pageforge.config import ExtractorConfig
from pageforge.extraction import DataExtractor
from pageforge.llm import AgentRegistry
from pageforge.options import JobOptions
from pageforge.storage import FileStorage
from pageforge.transformers import HTMLTransformer, ScreenshotTransformer

EXAMPLE_HTML = (
    '<html><head><title>Example</title><meta name="description" content="desc"></head>'
    '<body><p>Hi</p></body></html>'
)

ARTICLE_HTML = """\
<!DOCTYPE html>
<html>
<head>
  <title> Test Article </title>
  <meta name="description" content="  An article about batteries.  ">
  <meta property="og:title" content="OG Title">
  <meta charset="utf-8">
  <meta name="keywords">
  <style>.x { color: red }</style>
</head>
<body>
  <nav><a href="/home">Home</a></nav>
  <main>
    <h1>Batteries</h1>
    <p>Solid-state cells are <a href="/cells">denser</a>.</p>
    <img src="img/cell.png" alt="cell">
  </main>
  <script>console.log('x')</script>
</body>
</html>
"""


class FakePage:
    """Stand-in for a Playwright page"""

    def __init__(self, html: str = EXAMPLE_HTML, closed: bool = False):
        self.html = html
        self.closed = closed
        self.content_calls = 0

    async def content(self) -> str:
        self.content_calls += 1
        return self.html

    def is_closed(self) -> bool:
        return self.closed


class CountingTransformer(HTMLTransformer):
    """HTMLTransformer that records how often it runs"""

    def __init__(self):
        self.calls = 0

    async def transform_html(self, document, options):
        self.calls += 1
        return await super().transform_html(document, options)


class FakeAgent:
    def __init__(self, model_id: str, data: Any = None, error: Optional[Exception] = None):
        self.model_id = model_id
        self.data = data if data is not None else {'name': 'Example'}
        self.error = error
        self.calls: List[tuple] = []

    async def perform(self, markdown, schema, options):
        self.calls.append((markdown, schema, options))
        if self.error:
            raise self.error
        await asyncio.sleep(0)
        return SimpleNamespace(data=self.data)


class FakeAgentFactory:
    def __init__(self, **agent_kwargs):
        self.agent_kwargs = agent_kwargs
        self.created: Dict[str, FakeAgent] = {}

    def __call__(self, model_id: str) -> FakeAgent:
        agent = FakeAgent(model_id, **self.agent_kwargs)
        self.created[model_id] = agent
        return agent


def make_options(formats=None, **overrides) -> JobOptions:
    payload: Dict[str, Any] = {'url': 'https://example.com', 'formats': formats or ['markdown']}
    payload.update(overrides)
    return JobOptions.from_dict(payload)


def make_context(acquisition=None, formats=None, job_id='job-1', queue_name='test-queue',
                 **overrides) -> CrawlContext:
    options = make_options(formats, **overrides)
    if acquisition is None:
        acquisition = StaticBody(body=EXAMPLE_HTML.encode('utf-8'))
    return CrawlContext(
        url=options.url,
        acquisition=acquisition,
        user_data=JobUserData(job_id=job_id, options=options, queue_name=queue_name),
    )


def rendered(html: str = EXAMPLE_HTML, closed: bool = False, snapshot=None) -> RenderedPage:
    return RenderedPage(FakePage(html, closed=closed), snapshot=snapshot)


@pytest.fixture
def storage(tmp_path) -> FileStorage:
    return FileStorage(base_path=str(tmp_path / 'crawl_data'))


@pytest.fixture
def agent_factory() -> FakeAgentFactory:
    return FakeAgentFactory()


@pytest.fixture
def transformer() -> CountingTransformer:
    return CountingTransformer()


@pytest.fixture
def extractor(tmp_path, storage, agent_factory, transformer) -> DataExtractor:
    config = ExtractorConfig(default_extract_model='gpt-4o-mini', storage_dir=str(tmp_path / 'crawl_data'))
    return DataExtractor(
        config,
        html_transformer=transformer,
        screenshot_transformer=ScreenshotTransformer(storage),
        registry=AgentRegistry(factory=agent_factory),
    )
