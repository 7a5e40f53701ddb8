import math
from typing import Any

def safe_int(value, default: int = 0) -> int:
    """Safely convert a value to int, falling back to default on errors."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return default

def safe_float(value, default: float = 0.0) -> float:
    """Safely convert a value to float, handling NaN and infinity."""
    try:
        result = float(value)
        if math.isnan(result) or math.isinf(result):
            return default
        return result
    except (TypeError, ValueError):
        return default

def parse_bool(value: Any, default: bool = False) -> bool:
    """Interpret common truthy/falsy strings ("1", "true", "no", ...)."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    return default
