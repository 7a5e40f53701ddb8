"""
Browser acquisition.

Locally an installed Chrome/Edge/Chromium is preferred; otherwise the
Playwright-bundled Chromium is used (with container-friendly flags when
SERVERLESS is set). One browser per request, closed on every exit path.
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional, Sequence

from playwright.async_api import async_playwright

from core.config import settings

# 로깅 설정
logger = logging.getLogger(__name__)

LOCAL_BROWSER_PATHS = [
    r"C:\Program Files\Google\Chrome\Application\chrome.exe",
    r"C:\Program Files (x86)\Google\Chrome\Application\chrome.exe",
    r"C:\Program Files (x86)\Microsoft\Edge\Application\msedge.exe",
    r"C:\Program Files\Microsoft\Edge\Application\msedge.exe",
    "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
    "/usr/bin/google-chrome",
    "/usr/bin/chromium",
    "/usr/bin/chromium-browser",
]

LOCAL_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

SERVERLESS_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--no-zygote",
    "--single-process",
]


def find_local_browser(candidates: Optional[Sequence[str]] = None) -> Optional[str]:
    for path in (LOCAL_BROWSER_PATHS if candidates is None else candidates):
        if os.path.exists(path):
            return path
    return None


class BrowserLauncher:
    def __init__(self, executable_path: Optional[str] = None, headless: Optional[bool] = None,
                 serverless: Optional[bool] = None):
        self.executable_path = executable_path or settings.BROWSER_EXECUTABLE_PATH
        self.headless = settings.HEADLESS if headless is None else headless
        self.serverless = settings.SERVERLESS if serverless is None else serverless

    def launch_options(self) -> dict:
        options = {"headless": self.headless}
        executable = None if self.serverless else (self.executable_path or find_local_browser())
        if executable:
            options["executable_path"] = executable
            options["args"] = list(LOCAL_ARGS)
        else:
            options["args"] = list(SERVERLESS_ARGS if self.serverless else LOCAL_ARGS)
        return options

    @asynccontextmanager
    async def session(self):
        """Launch a dedicated browser and close it exactly once."""
        options = self.launch_options()
        logger.info(f"Launching browser ({options.get('executable_path', 'bundled chromium')})")
        async with async_playwright() as pw:
            browser = await pw.chromium.launch(**options)
            try:
                yield browser
            finally:
                await browser.close()
                logger.info("Browser closed")
