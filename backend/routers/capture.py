from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response
import logging
from typing import Optional

# Config & Services
from services import capture_service as capture_module
from services.errors import CaptureError, NavigationFailure, ValidationError
from services.models import CaptureRequest, OutputMode

# 로깅 설정
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Capture"])


async def _run_capture(url: Optional[str], device: Optional[str], mode) -> Response:
    # URL 검증은 브라우저 실행 전에
    try:
        request = CaptureRequest.create(url, device=device, mode=mode)
    except ValidationError as e:
        raise HTTPException(400, e.message)

    try:
        document = await capture_module.capture_service.capture(request)
    except NavigationFailure as e:
        logger.error(f"Navigation Error: {e}")
        raise HTTPException(502, e.message)
    except CaptureError as e:
        logger.error(f"Capture Error: {e}")
        raise HTTPException(500, e.message)

    return Response(
        content=document.data,
        media_type=document.content_type,
        headers={"Content-Disposition": f"attachment; filename={document.filename}"},
    )


@router.get("/pdf")
async def capture_pdf(url: Optional[str] = Query(None), device: str = Query("desktop")):
    """뷰포트 단위 스크롤 캡처 -> PDF (캡처 1장 = 페이지 1장)"""
    return await _run_capture(url, device, OutputMode.PAGINATED_DOCUMENT)


@router.get("/screenshot")
async def capture_screenshot(url: Optional[str] = Query(None), device: str = Query("desktop")):
    """전체 페이지 캡처 -> JPEG 1장"""
    return await _run_capture(url, device, OutputMode.SINGLE_IMAGE)


@router.get("/capture")
async def capture_any(
    url: Optional[str] = Query(None),
    device: str = Query("desktop"),
    mode: str = Query(OutputMode.PAGINATED_DOCUMENT.value),
):
    return await _run_capture(url, device, mode)
