import os
from dotenv import load_dotenv

from services.utils import safe_int, safe_float, parse_bool

# backend/core/config.py 위치에서 3단계 올라가야 루트입니다.
# 1. core 폴더
# 2. backend 폴더
# 3. 루트
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# .env 파일 로드
load_dotenv(os.path.join(BASE_DIR, ".env"))

class Settings:
    PROJECT_NAME: str = "PageCaptureAPI"
    VERSION: str = "1.0.0"

    BASE_DIR = BASE_DIR

    # 서버
    HOST = os.getenv("HOST", "127.0.0.1")
    PORT = safe_int(os.getenv("PORT"), 8001)
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # 네비게이션: domcontentloaded 기준, 넉넉한 타임아웃
    NAVIGATION_TIMEOUT_MS = safe_int(os.getenv("NAVIGATION_TIMEOUT_MS"), 90000)

    # Settle 대기 (초)
    SETTLE_MIN_WAIT_S = safe_float(os.getenv("SETTLE_MIN_WAIT_S"), 3.0)
    SETTLE_MAX_WAIT_S = safe_float(os.getenv("SETTLE_MAX_WAIT_S"), 6.0)
    SETTLE_POLL_INTERVAL_S = safe_float(os.getenv("SETTLE_POLL_INTERVAL_S"), 0.25)
    FRAME_SETTLE_S = safe_float(os.getenv("FRAME_SETTLE_S"), 3.0)

    # Synthetic scroll
    SCROLL_STEP_PX = safe_int(os.getenv("SCROLL_STEP_PX"), 100)
    SCROLL_INTERVAL_MS = safe_int(os.getenv("SCROLL_INTERVAL_MS"), 100)
    MAX_SCROLL_STEPS = safe_int(os.getenv("MAX_SCROLL_STEPS"), 500)

    # Never literally zero: a 0s duration can freeze reveal animations on their first keyframe
    ANIMATION_EPSILON_S = safe_float(os.getenv("ANIMATION_EPSILON_S"), 0.001)

    # JPEG quality per output mode
    PAGINATED_JPEG_QUALITY = safe_int(os.getenv("PAGINATED_JPEG_QUALITY"), 90)
    SINGLE_IMAGE_JPEG_QUALITY = safe_int(os.getenv("SINGLE_IMAGE_JPEG_QUALITY"), 80)

    # 브라우저
    BROWSER_EXECUTABLE_PATH = os.getenv("BROWSER_EXECUTABLE_PATH") or None
    HEADLESS = parse_bool(os.getenv("HEADLESS"), True)
    SERVERLESS = parse_bool(os.getenv("SERVERLESS"), False)

settings = Settings()
