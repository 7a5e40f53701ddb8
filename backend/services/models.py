"""
Data model for the capture pipeline.
Requests, device profiles, frames and documents are immutable once built.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union
from urllib.parse import urlparse

from services.errors import ValidationError


class DeviceSelector(str, Enum):
    DESKTOP = "desktop"
    MOBILE = "mobile"

    @classmethod
    def parse(cls, value: Union["DeviceSelector", str, None]) -> "DeviceSelector":
        """Unknown or missing selectors fall back to desktop."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value == text:
                return member
        return cls.DESKTOP


class OutputMode(str, Enum):
    PAGINATED_DOCUMENT = "pdf"
    SINGLE_IMAGE = "image"

    @classmethod
    def parse(cls, value: Union["OutputMode", str]) -> "OutputMode":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value == text:
                return member
        raise ValidationError(f"Unknown output mode: {value!r} (expected 'pdf' or 'image')")


def normalize_url(url: Optional[str]) -> str:
    """
    Validate the target URL.

    Scheme-less input like "example.com" gets https:// prepended.
    Raises ValidationError when the URL is empty or not an http(s) URL with a host.
    """
    text = (url or "").strip()
    if not text:
        raise ValidationError("Missing URL")
    if not re.match(r"^[a-z][a-z0-9+.\-]*://", text, flags=re.I):
        text = "https://" + text
    parsed = urlparse(text)
    if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
        raise ValidationError(f"Invalid URL '{url}'")
    return text


@dataclass(frozen=True)
class CaptureRequest:
    target_url: str
    mode: OutputMode
    device: DeviceSelector = DeviceSelector.DESKTOP

    @classmethod
    def create(cls, url: Optional[str], device=None, mode=OutputMode.PAGINATED_DOCUMENT) -> "CaptureRequest":
        return cls(
            target_url=normalize_url(url),
            mode=OutputMode.parse(mode),
            device=DeviceSelector.parse(device),
        )


@dataclass(frozen=True)
class DeviceProfile:
    name: str
    viewport_width: int
    viewport_height: int
    is_mobile: bool = False
    has_touch: bool = False
    user_agent: Optional[str] = None

    @property
    def viewport(self) -> dict:
        return {"width": self.viewport_width, "height": self.viewport_height}


@dataclass(frozen=True)
class RasterFrame:
    image_bytes: bytes
    width: int
    height: int
    sequence_index: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Frame dimensions must be positive, got {self.width}x{self.height}")
        if self.sequence_index < 0:
            raise ValueError(f"sequence_index must be >= 0, got {self.sequence_index}")


@dataclass(frozen=True)
class DocumentPage:
    width: int
    height: int
    image_bytes: bytes


@dataclass(frozen=True)
class Document:
    mode: OutputMode
    pages: Tuple[DocumentPage, ...]
    data: bytes
    content_type: str
    filename: str

    @property
    def page_count(self) -> int:
        return len(self.pages)


@dataclass(frozen=True)
class SettlePolicy:
    """
    Timed settle heuristic.

    min_wait is always slept. After that, while media is still loading,
    the page is polled every poll_interval until max_wait has elapsed.
    """
    min_wait: float
    max_wait: float
    poll_interval: float

    @classmethod
    def fixed(cls, seconds: float) -> "SettlePolicy":
        return cls(min_wait=seconds, max_wait=seconds, poll_interval=seconds)
