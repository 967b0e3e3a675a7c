"""Tests for BrowserEngine context handling with a fake Playwright browser."""

import asyncio
from types import SimpleNamespace

import pytest

from pageforge.acquisition import RenderedPage
from pageforge.engines import BrowserEngine
from pageforge.errors import FetchError

from conftest import make_options


class FakeBrowserPage:
    def __init__(self, context, status=200, goto_delay=0.0, goto_error=None):
        self.context = context
        self.status = status
        self.goto_delay = goto_delay
        self.goto_error = goto_error
        self.waited = None

    async def goto(self, url, wait_until=None, timeout=None):
        if self.goto_delay:
            await asyncio.sleep(self.goto_delay)
        if self.goto_error:
            raise self.goto_error
        return SimpleNamespace(status=self.status)

    async def wait_for_timeout(self, ms):
        self.waited = ms


class FakeBrowserContext:
    def __init__(self, page_error=None, **page_kwargs):
        self.page_error = page_error
        self.page_kwargs = page_kwargs
        self.closed = False

    async def new_page(self):
        if self.page_error:
            raise self.page_error
        return FakeBrowserPage(self, **self.page_kwargs)

    async def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self, **context_kwargs):
        self.context_kwargs = context_kwargs
        self.contexts = []
        self.context_options = []

    async def new_context(self, **options):
        context = FakeBrowserContext(**self.context_kwargs)
        self.contexts.append(context)
        self.context_options.append(options)
        return context


def engine_with(browser: FakeBrowser) -> BrowserEngine:
    engine = BrowserEngine()
    engine.browser = browser
    return engine


class TestBrowserEngineRender:
    async def test_returns_live_page(self) -> None:
        browser = FakeBrowser()
        rendered = await engine_with(browser).render(make_options(wait_for=500))

        assert isinstance(rendered, RenderedPage)
        assert rendered.can_snapshot()
        assert rendered.page.waited == 500
        assert not browser.contexts[0].closed

    async def test_proxy_is_passed_to_context(self) -> None:
        browser = FakeBrowser()
        await engine_with(browser).render(make_options(proxy='http://proxy:8080'))
        assert browser.context_options[0]['proxy'] == {'server': 'http://proxy:8080'}

    async def test_error_status_closes_context(self) -> None:
        browser = FakeBrowser(status=404)

        with pytest.raises(FetchError) as exc_info:
            await engine_with(browser).render(make_options())

        assert exc_info.value.status_code == 404
        assert browser.contexts[0].closed

    async def test_goto_failure_closes_context(self) -> None:
        browser = FakeBrowser(goto_error=RuntimeError('net::ERR_NAME_NOT_RESOLVED'))

        with pytest.raises(FetchError, match='ERR_NAME_NOT_RESOLVED'):
            await engine_with(browser).render(make_options())

        assert browser.contexts[0].closed

    async def test_new_page_failure_closes_context(self) -> None:
        browser = FakeBrowser(page_error=RuntimeError('browser has disconnected'))

        with pytest.raises(FetchError):
            await engine_with(browser).render(make_options())

        assert browser.contexts[0].closed

    async def test_timeout_closes_context(self) -> None:
        browser = FakeBrowser(goto_delay=10)

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(engine_with(browser).render(make_options()), 0.05)

        assert browser.contexts[0].closed

    async def test_release_closes_context(self) -> None:
        browser = FakeBrowser()
        engine = engine_with(browser)

        rendered = await engine.render(make_options())
        await engine.release(rendered)

        assert browser.contexts[0].closed
