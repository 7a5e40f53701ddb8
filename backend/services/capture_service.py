"""
Capture session orchestration.

request -> device profile -> browser session -> navigate -> stabilize
        -> capture frames -> release browser -> assemble document
"""
import logging
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from core.config import settings
from services.browser import BrowserLauncher
from services.capture_strategy import capture
from services.device_profiles import resolve_device_profile
from services.document_assembler import DocumentAssembler
from services.errors import CaptureError, NavigationFailure
from services.models import CaptureRequest, Document
from services.page_handle import PageHandle
from services.stabilizer import PageStabilizer

# 로깅 설정
logger = logging.getLogger(__name__)


class CaptureService:
    def __init__(
        self,
        launcher: Optional[BrowserLauncher] = None,
        stabilizer: Optional[PageStabilizer] = None,
        assembler: Optional[DocumentAssembler] = None,
        page_factory=PageHandle,
        navigation_timeout_ms: Optional[int] = None,
        capture_options: Optional[dict] = None,
    ):
        self.launcher = launcher or BrowserLauncher()
        self.stabilizer = stabilizer or PageStabilizer()
        self.assembler = assembler or DocumentAssembler()
        self.page_factory = page_factory
        self.navigation_timeout_ms = navigation_timeout_ms or settings.NAVIGATION_TIMEOUT_MS
        self.capture_options = capture_options or {}

    async def capture(self, request: CaptureRequest) -> Document:
        profile = resolve_device_profile(request.device)
        logger.info(f"Capture start: {request.target_url} (device={profile.name}, mode={request.mode.value})")

        try:
            async with self.launcher.session() as browser:
                context = await browser.new_context(
                    viewport=profile.viewport,
                    user_agent=profile.user_agent,
                    is_mobile=profile.is_mobile,
                    has_touch=profile.has_touch,
                    device_scale_factor=1,
                )
                raw_page = await context.new_page()
                await self._navigate(raw_page, request.target_url)

                page = self.page_factory(raw_page)
                await self.stabilizer.stabilize(page, request.mode)
                frames = await capture(page, profile, request.mode, **self.capture_options)
        except CaptureError:
            raise
        except Exception as e:
            logger.error(f"Browser session failed: {e}")
            raise CaptureError(f"Browser session failed: {e}") from e

        document = self.assembler.assemble(frames, request.mode)
        logger.info(f"Capture done: {document.page_count} page(s), {len(document.data)} bytes")
        return document

    async def _navigate(self, raw_page, url: str) -> None:
        # networkidle never fires on pages with long-lived connections; wait for the DOM only
        try:
            await raw_page.emulate_media(media="screen")
            response = await raw_page.goto(url, wait_until="domcontentloaded", timeout=self.navigation_timeout_ms)
        except PlaywrightTimeoutError as e:
            raise NavigationFailure(
                f"Navigation to {url} timed out after {self.navigation_timeout_ms} ms"
            ) from e
        except PlaywrightError as e:
            raise NavigationFailure(f"Navigation to {url} failed: {e}") from e

        if response is not None and response.status >= 400:
            logger.warning(f"{url} answered HTTP {response.status}; capturing anyway")


capture_service = CaptureService()
