"""
Page Stabilizer
Forces a freshly navigated page into a reproducible visual state before capture.

Steps (in order, all in place on the live page):
    0. settle after navigation
    1. lazy-load defeat
    2. animation acceleration (near-zero, never zero, durations)
    3. reveal-library defeat
    4. synthetic top-to-bottom scroll (single image mode only, page left at the bottom)
    5. settle after the scroll
    6. fixed -> absolute, sticky -> static

Any exception raised by a step is fatal and surfaces as StabilizationFailure.
"""
import asyncio
import logging
from typing import Iterable, Optional, Sequence, Tuple

from core.config import settings
from services.errors import CaptureError, StabilizationFailure
from services.models import OutputMode, SettlePolicy

# 로깅 설정
logger = logging.getLogger(__name__)

MAX_ANIMATION_EPSILON_S = 0.01

# (selector, class the library adds once an element has been revealed)
REVEAL_MARKERS: Tuple[Tuple[str, Optional[str]], ...] = (
    ("[data-aos]", "aos-animate"),
    ("[data-sal]", "sal-animate"),
    ("[data-scroll-reveal]", None),
    (".wow", "animated"),
)


def default_settle_policy() -> SettlePolicy:
    return SettlePolicy(
        min_wait=settings.SETTLE_MIN_WAIT_S,
        max_wait=settings.SETTLE_MAX_WAIT_S,
        poll_interval=settings.SETTLE_POLL_INTERVAL_S,
    )


def build_animation_override_css(epsilon_s: float) -> str:
    """Global rule collapsing transitions/animations to epsilon seconds."""
    if not 0 < epsilon_s <= MAX_ANIMATION_EPSILON_S:
        raise ValueError(
            f"Animation epsilon must be in (0, {MAX_ANIMATION_EPSILON_S}] seconds, got {epsilon_s}"
        )
    value = f"{epsilon_s:g}s"
    return (
        "*, *::before, *::after {"
        f" transition-duration: {value} !important;"
        f" transition-delay: {value} !important;"
        f" animation-duration: {value} !important;"
        f" animation-delay: {value} !important;"
        " scroll-behavior: auto !important;"
        " }\n"
        "html, body { scroll-behavior: auto !important; scrollbar-width: none !important; }\n"
        "::-webkit-scrollbar { display: none !important; width: 0 !important; height: 0 !important; }"
    )


async def settle(page, policy: SettlePolicy) -> None:
    """
    Heuristic wait for script-driven animations and late media.

    Always sleeps policy.min_wait. Afterwards polls for images that are still
    loading until none are left or policy.max_wait is reached.
    """
    loop = asyncio.get_running_loop()
    started = loop.time()
    await asyncio.sleep(policy.min_wait)
    if policy.max_wait <= policy.min_wait or policy.poll_interval <= 0:
        return
    while loop.time() - started < policy.max_wait:
        pending = await page.pending_media()
        if not pending:
            return
        logger.debug(f"Waiting on {pending} loading image(s)")
        await asyncio.sleep(policy.poll_interval)


class PageStabilizer:
    def __init__(
        self,
        settle_policy: Optional[SettlePolicy] = None,
        animation_epsilon_s: Optional[float] = None,
        scroll_step_px: Optional[int] = None,
        scroll_interval_ms: Optional[int] = None,
        max_scroll_steps: Optional[int] = None,
        reveal_markers: Optional[Sequence[Tuple[str, Optional[str]]]] = None,
    ):
        self.settle_policy = settle_policy or default_settle_policy()
        epsilon = settings.ANIMATION_EPSILON_S if animation_epsilon_s is None else animation_epsilon_s
        self.animation_css = build_animation_override_css(epsilon)
        self.scroll_step_px = max(1, scroll_step_px or settings.SCROLL_STEP_PX)
        self.scroll_interval_ms = settings.SCROLL_INTERVAL_MS if scroll_interval_ms is None else scroll_interval_ms
        self.max_scroll_steps = settings.MAX_SCROLL_STEPS if max_scroll_steps is None else max_scroll_steps
        self.reveal_markers: Iterable[Tuple[str, Optional[str]]] = (
            REVEAL_MARKERS if reveal_markers is None else tuple(reveal_markers)
        )

    async def stabilize(self, page, mode: OutputMode) -> None:
        try:
            await self._run(page, mode)
        except CaptureError:
            raise
        except Exception as e:
            logger.error(f"Stabilization failed: {e}")
            raise StabilizationFailure(f"Page stabilization failed: {e}") from e

    async def _run(self, page, mode: OutputMode) -> None:
        await settle(page, self.settle_policy)

        stripped = await page.strip_lazy_loading()
        logger.info(f"Removed lazy-loading from {stripped} element(s)")

        await page.inject_global_style(self.animation_css)

        for selector, revealed_class in self.reveal_markers:
            forced = await page.force_element_visibility(selector, revealed_class)
            if forced:
                logger.info(f"Forced {forced} '{selector}' element(s) visible")

        if mode == OutputMode.SINGLE_IMAGE:
            steps = await page.scroll_through(
                self.scroll_step_px, self.scroll_interval_ms, self.max_scroll_steps
            )
            if steps >= self.max_scroll_steps:
                logger.warning(f"Synthetic scroll stopped at step cap ({self.max_scroll_steps})")
            else:
                logger.info(f"Synthetic scroll reached the bottom in {steps} step(s)")
            await settle(page, self.settle_policy)

        fixed = await page.rewrite_positioning("fixed", "absolute")
        sticky = await page.rewrite_positioning("sticky", "static")
        logger.info(f"Neutralized {fixed} fixed and {sticky} sticky element(s)")
