import io
from contextlib import asynccontextmanager

import pytest
from PIL import Image

from services.models import RasterFrame, SettlePolicy
from services.stabilizer import PageStabilizer

_JPEG_CACHE = {}


def make_jpeg(width: int, height: int, color=(200, 30, 30)) -> bytes:
    key = (width, height, color)
    if key not in _JPEG_CACHE:
        buf = io.BytesIO()
        Image.new("RGB", (width, height), color).save(buf, format="JPEG", quality=70)
        _JPEG_CACHE[key] = buf.getvalue()
    return _JPEG_CACHE[key]


def make_frame(width: int, height: int, index: int, color=(200, 30, 30)) -> RasterFrame:
    return RasterFrame(make_jpeg(width, height, color), width, height, index)


class FakePage:
    """Stands in for PageHandle; records every call in order."""

    def __init__(self, scroll_height=2000, viewport=None, fail_on=None, pending=None):
        viewport = viewport or {"width": 1920, "height": 1080}
        self.scroll_height = scroll_height
        self.viewport_width = viewport["width"]
        self.viewport_height = viewport["height"]
        self.fail_on = fail_on
        self.pending = list(pending or [])
        self.position = 0
        self.calls = []
        self.styles = []

    def _record(self, name, *args):
        self.calls.append((name, args))
        if self.fail_on == name:
            raise RuntimeError(f"{name} rejected by page")

    @property
    def call_names(self):
        return [name for name, _ in self.calls]

    async def strip_lazy_loading(self):
        self._record("strip_lazy_loading")
        return 3

    async def inject_global_style(self, css):
        self._record("inject_global_style", css)
        self.styles.append(css)

    async def force_element_visibility(self, selector, add_class=None):
        self._record("force_element_visibility", selector, add_class)
        return 1

    async def rewrite_positioning(self, matcher, new_value):
        self._record("rewrite_positioning", matcher, new_value)
        return 1

    async def scroll_through(self, step_px, interval_ms, max_steps):
        self._record("scroll_through", step_px, interval_ms, max_steps)
        self.position = max(0, self.scroll_height - self.viewport_height)
        return self.position // step_px + 1

    async def scroll_to(self, y):
        self._record("scroll_to", y)
        self.position = min(y, max(0, self.scroll_height - self.viewport_height))

    async def measure(self):
        self._record("measure")
        return self.scroll_height, self.viewport_height

    async def pending_media(self):
        self._record("pending_media")
        return self.pending.pop(0) if self.pending else 0

    async def screenshot(self, full_page, quality):
        self._record("screenshot", full_page, quality)
        height = self.scroll_height if full_page else self.viewport_height
        return make_jpeg(self.viewport_width, max(1, height))


class FakeResponse:
    def __init__(self, status=200):
        self.status = status


class FakeRawPage:
    """Stands in for a Playwright page before it is wrapped by the page factory."""

    def __init__(self, viewport, goto_error=None):
        self.viewport = viewport
        self.goto_error = goto_error
        self.media = None
        self.goto_calls = []

    async def emulate_media(self, media=None):
        self.media = media

    async def goto(self, url, wait_until=None, timeout=None):
        self.goto_calls.append({"url": url, "wait_until": wait_until, "timeout": timeout})
        if self.goto_error is not None:
            raise self.goto_error
        return FakeResponse()


class FakeContext:
    def __init__(self, browser, options):
        self.browser = browser
        self.options = options

    async def new_page(self):
        page = FakeRawPage(self.options["viewport"], goto_error=self.browser.goto_error)
        self.browser.raw_pages.append(page)
        return page


class FakeBrowser:
    def __init__(self, goto_error=None):
        self.goto_error = goto_error
        self.contexts = []
        self.raw_pages = []

    async def new_context(self, **options):
        context = FakeContext(self, options)
        self.contexts.append(context)
        return context


class FakeLauncher:
    def __init__(self, goto_error=None):
        self.goto_error = goto_error
        self.opened = 0
        self.closed = 0
        self.browsers = []

    @asynccontextmanager
    async def session(self):
        self.opened += 1
        browser = FakeBrowser(goto_error=self.goto_error)
        self.browsers.append(browser)
        try:
            yield browser
        finally:
            self.closed += 1


def page_factory_for(scroll_height, fail_on=None, pages=None):
    """Build a page factory wrapping FakeRawPage into FakePage with the context's viewport."""
    def factory(raw_page):
        page = FakePage(scroll_height=scroll_height, viewport=raw_page.viewport, fail_on=fail_on)
        if pages is not None:
            pages.append(page)
        return page
    return factory


ZERO_SETTLE = SettlePolicy(min_wait=0, max_wait=0, poll_interval=0)


@pytest.fixture
def fast_stabilizer():
    return PageStabilizer(settle_policy=ZERO_SETTLE, scroll_interval_ms=0)


@pytest.fixture
def fast_capture_options():
    return {"frame_settle": SettlePolicy.fixed(0)}
