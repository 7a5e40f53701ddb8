"""
Capture strategies, selected by output mode.

- PDF  : incremental scroll capture, one viewport frame per viewport-height step
- IMAGE: a single full-page frame
"""
import io
import logging
from typing import List, Optional, Tuple

from PIL import Image

from core.config import settings
from services.errors import CaptureError, CaptureFailure
from services.models import DeviceProfile, OutputMode, RasterFrame, SettlePolicy
from services.stabilizer import settle

# 로깅 설정
logger = logging.getLogger(__name__)


def _frame_size(image_bytes: bytes) -> Tuple[int, int]:
    with Image.open(io.BytesIO(image_bytes)) as img:
        return img.size


def _make_frame(image_bytes: bytes, index: int) -> RasterFrame:
    width, height = _frame_size(image_bytes)
    return RasterFrame(image_bytes=image_bytes, width=width, height=height, sequence_index=index)


async def capture_incremental(
    page,
    profile: DeviceProfile,
    quality: Optional[int] = None,
    frame_settle: Optional[SettlePolicy] = None,
) -> List[RasterFrame]:
    """
    Scroll one viewport at a time and capture the visible viewport at each stop.

    The last frame can overlap the previous one when the page height is not a
    multiple of the viewport height. That overlap is kept on purpose.
    """
    quality = settings.PAGINATED_JPEG_QUALITY if quality is None else quality
    frame_settle = frame_settle or SettlePolicy.fixed(settings.FRAME_SETTLE_S)

    try:
        total_height, viewport_height = await page.measure()
        if viewport_height <= 0:
            viewport_height = profile.viewport_height
        logger.info(f"Document height {total_height}px, viewport {viewport_height}px")

        frames: List[RasterFrame] = []
        position = 0
        while True:
            await page.scroll_to(position)
            await settle(page, frame_settle)
            shot = await page.screenshot(full_page=False, quality=quality)
            frames.append(_make_frame(shot, len(frames)))
            position += viewport_height
            if position >= total_height:
                break
    except CaptureError:
        raise
    except Exception as e:
        raise CaptureFailure(f"Viewport capture failed: {e}") from e

    logger.info(f"Captured {len(frames)} viewport frame(s)")
    return frames


async def capture_full_page(
    page,
    profile: DeviceProfile,
    quality: Optional[int] = None,
    frame_settle: Optional[SettlePolicy] = None,
) -> List[RasterFrame]:
    """Single raster covering the whole document height."""
    quality = settings.SINGLE_IMAGE_JPEG_QUALITY if quality is None else quality
    try:
        shot = await page.screenshot(full_page=True, quality=quality)
        frame = _make_frame(shot, 0)
    except CaptureError:
        raise
    except Exception as e:
        raise CaptureFailure(f"Full-page capture failed: {e}") from e

    logger.info(f"Captured full-page frame {frame.width}x{frame.height}")
    return [frame]


CAPTURE_STRATEGIES = {
    OutputMode.PAGINATED_DOCUMENT: capture_incremental,
    OutputMode.SINGLE_IMAGE: capture_full_page,
}


async def capture(page, profile: DeviceProfile, mode: OutputMode, **options) -> List[RasterFrame]:
    return await CAPTURE_STRATEGIES[mode](page, profile, **options)
