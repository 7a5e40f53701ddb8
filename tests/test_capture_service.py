import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from conftest import FakeLauncher, page_factory_for
from services.capture_service import CaptureService
from services.device_profiles import MOBILE_USER_AGENT
from services.errors import CaptureFailure, NavigationFailure, StabilizationFailure
from services.models import CaptureRequest, OutputMode


def _service(launcher, scroll_height, fast_stabilizer, fast_capture_options, fail_on=None, pages=None):
    return CaptureService(
        launcher=launcher,
        stabilizer=fast_stabilizer,
        page_factory=page_factory_for(scroll_height, fail_on=fail_on, pages=pages),
        navigation_timeout_ms=90000,
        capture_options=fast_capture_options,
    )


async def test_desktop_pdf_two_viewports(fast_stabilizer, fast_capture_options):
    launcher = FakeLauncher()
    service = _service(launcher, 2000, fast_stabilizer, fast_capture_options)
    request = CaptureRequest.create("https://example.com", device="desktop", mode="pdf")

    document = await service.capture(request)

    assert document.mode == OutputMode.PAGINATED_DOCUMENT
    assert document.content_type == "application/pdf"
    assert [(p.width, p.height) for p in document.pages] == [(1920, 1080), (1920, 1080)]
    assert (launcher.opened, launcher.closed) == (1, 1)

    context = launcher.browsers[0].contexts[0]
    assert context.options["viewport"] == {"width": 1920, "height": 1080}
    assert context.options["is_mobile"] is False
    raw = launcher.browsers[0].raw_pages[0]
    assert raw.media == "screen"
    assert raw.goto_calls == [
        {"url": "https://example.com", "wait_until": "domcontentloaded", "timeout": 90000}
    ]


async def test_mobile_image_single_jpeg(fast_stabilizer, fast_capture_options):
    launcher = FakeLauncher()
    pages = []
    service = _service(launcher, 4000, fast_stabilizer, fast_capture_options, pages=pages)
    request = CaptureRequest.create("https://example.com", device="mobile", mode="image")

    document = await service.capture(request)

    assert document.content_type == "image/jpeg"
    assert document.page_count == 1
    assert (document.pages[0].width, document.pages[0].height) == (390, 4000)

    options = launcher.browsers[0].contexts[0].options
    assert options["is_mobile"] is True
    assert options["has_touch"] is True
    assert options["user_agent"] == MOBILE_USER_AGENT
    # synthetic scroll ran before the full-page shot
    names = pages[0].call_names
    assert names.index("scroll_through") < names.index("screenshot")
    assert (launcher.opened, launcher.closed) == (1, 1)


@pytest.mark.parametrize(
    "error,message",
    [
        (PlaywrightTimeoutError("Timeout 90000ms exceeded"), "timed out"),
        (PlaywrightError("net::ERR_NAME_NOT_RESOLVED"), "ERR_NAME_NOT_RESOLVED"),
    ],
)
async def test_navigation_failure_releases_browser(fast_stabilizer, fast_capture_options, error, message):
    launcher = FakeLauncher(goto_error=error)
    service = _service(launcher, 2000, fast_stabilizer, fast_capture_options)

    with pytest.raises(NavigationFailure) as exc:
        await service.capture(CaptureRequest.create("https://unreachable.invalid"))

    assert message in exc.value.message
    assert (launcher.opened, launcher.closed) == (1, 1)


async def test_stabilization_failure_releases_browser(fast_stabilizer, fast_capture_options):
    launcher = FakeLauncher()
    service = _service(launcher, 2000, fast_stabilizer, fast_capture_options, fail_on="inject_global_style")

    with pytest.raises(StabilizationFailure):
        await service.capture(CaptureRequest.create("https://example.com"))
    assert (launcher.opened, launcher.closed) == (1, 1)


async def test_capture_failure_releases_browser(fast_stabilizer, fast_capture_options):
    launcher = FakeLauncher()
    service = _service(launcher, 2000, fast_stabilizer, fast_capture_options, fail_on="screenshot")

    with pytest.raises(CaptureFailure):
        await service.capture(CaptureRequest.create("https://example.com", mode="image"))
    assert (launcher.opened, launcher.closed) == (1, 1)
