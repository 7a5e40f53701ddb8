import uvicorn
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

# Config & Routers
from core.config import settings
from routers import capture

# 로깅 설정
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """서버 수명주기 관리"""
    logger.info("Server starting up...")
    logger.info(f"Usage: GET http://{settings.HOST}:{settings.PORT}/api/pdf?url=https://example.com")
    yield
    logger.info("Server shutting down...")


app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(capture.router)

# 서비스 동작 확인용 루트
@app.get("/", response_class=PlainTextResponse)
async def root():
    return "Page capture API is running. Use /api/pdf?url=... or /api/screenshot?url=..."

if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=True)
