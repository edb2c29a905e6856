"""
Configuration for the Takeout metadata applier.

Every value is read from the environment once, at import time. Command line
flags override these defaults per run.
"""
import logging
import os
import sys

from .utils import env_bool

logger = logging.getLogger(__name__)


def _env_raw(*names: str, default: str | None = None) -> str | None:
    for name in names:
        if not name:
            continue
        val = os.getenv(name)
        if val is not None and str(val).strip() != "":
            return str(val).strip()
    return default


def _env_int(default: int, *names: str, min_value: int | None = None, max_value: int | None = None) -> int:
    raw = _env_raw(*names)
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid integer for %s=%r, using default=%s", names[0] if names else "<unknown>", raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, max_value)
        value = max_value
    return value


def _env_float(default: float, *names: str, min_value: float | None = None, max_value: float | None = None) -> float:
    raw = _env_raw(*names)
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid float for %s=%r, using default=%s", names[0] if names else "<unknown>", raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, max_value)
        value = max_value
    return value


def _env_bool(default: bool, *names: str) -> bool:
    for name in names:
        if name and name in os.environ:
            return env_bool(name, default)
    return default

# Platform detection
IS_WINDOWS = sys.platform == "win32"

# External tool override (portable vs. system-wide)
EXIFTOOL_BIN = _env_raw("GPM_EXIFTOOL_PATH", "GPM_EXIFTOOL_BIN", default="exiftool")
EXIFTOOL_MIN_VERSION = str(_env_raw("GPM_EXIFTOOL_MIN_VERSION", default="") or "").strip()

# Large videos can take a while to rewrite in place.
EXIFTOOL_TIMEOUT = _env_int(120, "GPM_EXIFTOOL_TIMEOUT", min_value=1, max_value=3600)

# Offset (hours) used when a file carries no usable SubSecDateTimeOriginal.
# 9 is JST; fractional values such as 5.5 are allowed.
DEFAULT_TZ_OFFSET_HOURS = _env_float(9.0, "GPM_TZ_OFFSET_HOURS", min_value=-12.0, max_value=14.0)

# Parallel files in flight during a directory migration.
MIGRATE_CONCURRENCY = _env_int(4, "GPM_MIGRATE_CONCURRENCY", min_value=1, max_value=64)

# Rename and retry once when ExifTool reports that the extension is wrong.
FIX_WRONG_EXTENSIONS = _env_bool(True, "GPM_FIX_WRONG_EXTENSIONS")
