"""
Tool detection helpers for ExifTool.
Cached detection to avoid repeated subprocess calls.
"""
import re
import shutil
import subprocess
from typing import Dict, Optional, Tuple

from .config import EXIFTOOL_BIN, EXIFTOOL_MIN_VERSION
from .shared import get_logger

logger = get_logger(__name__)

# Cache tool availability (None = not checked, True/False = result)
_TOOL_CACHE: Dict[str, Optional[bool]] = {"exiftool": None}

# Cache tool versions
_TOOL_VERSIONS: Dict[str, Optional[str]] = {"exiftool": None}


def parse_tool_version(value: Optional[str]) -> Tuple[int, ...]:
    if not value:
        return ()
    return tuple(int(part) for part in re.findall(r"\d+", value))


def version_satisfies_minimum(actual: Optional[str], minimum: str) -> bool:
    if not minimum:
        return True
    minimum_parts = parse_tool_version(minimum)
    if not minimum_parts:
        return True
    actual_parts = parse_tool_version(actual or "")
    if not actual_parts:
        return False
    length = max(len(actual_parts), len(minimum_parts))
    padded_actual = list(actual_parts) + [0] * (length - len(actual_parts))
    padded_minimum = list(minimum_parts) + [0] * (length - len(minimum_parts))
    return tuple(padded_actual) >= tuple(padded_minimum)


def _run_command(cmd: list[str]) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        timeout=5,
        check=False,
    )


def has_exiftool(bin_name: Optional[str] = None, minimum: Optional[str] = None) -> bool:
    """Check if ExifTool is available and new enough."""
    if _TOOL_CACHE["exiftool"] is not None:
        return bool(_TOOL_CACHE["exiftool"])

    exiftool_bin = bin_name or EXIFTOOL_BIN or "exiftool"
    min_version = EXIFTOOL_MIN_VERSION if minimum is None else minimum
    if shutil.which(exiftool_bin) is None:
        logger.debug("ExifTool binary not found in PATH: %s", exiftool_bin)
    try:
        result = _run_command([exiftool_bin, "-ver"])
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.warning("ExifTool detection failed: %s", exc)
        _TOOL_CACHE["exiftool"] = False
        return False

    available = result.returncode == 0
    _TOOL_CACHE["exiftool"] = available
    if not available:
        logger.warning("ExifTool not found or failed to start: %s", result.stderr.strip())
        return False

    version = result.stdout.strip()
    _TOOL_VERSIONS["exiftool"] = version
    if not version_satisfies_minimum(version, min_version):
        logger.warning(
            "ExifTool version %s does not meet minimum required %s",
            version or "<unknown>",
            min_version,
        )
        _TOOL_CACHE["exiftool"] = False
        return False
    logger.info("ExifTool detected: version %s", version)
    return True


def reset_tool_cache() -> None:
    """Reset tool detection cache (for testing or manual refresh)."""
    _TOOL_CACHE["exiftool"] = None
    _TOOL_VERSIONS["exiftool"] = None
