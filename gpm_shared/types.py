"""
Shared types, enums, and constants.
"""
import os
from enum import Enum
from typing import Final, Optional


# Error codes
class ErrorCode(str, Enum):
    """Standardized error codes (string enum)."""

    # Client / validation
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_JSON = "INVALID_JSON"
    NOT_FOUND = "NOT_FOUND"

    # Tool availability
    TOOL_MISSING = "TOOL_MISSING"
    TIMEOUT = "TIMEOUT"

    # Metadata application
    MISSING_META = "MISSING_META"
    WRONG_EXTENSION = "WRONG_EXTENSION"
    RENAME_FAILED = "RENAME_FAILED"

    # Tool / parsing
    EXIFTOOL_ERROR = "EXIFTOOL_ERROR"
    PARSE_ERROR = "PARSE_ERROR"


class MetaType(str, Enum):
    """Embedded-tag vocabulary a media container supports."""

    EXIF = "exif"
    QUICKTIME = "quicktime"
    NONE = "none"


# File extensions by tag vocabulary
EXTENSIONS: Final[dict[MetaType, frozenset[str]]] = {
    MetaType.EXIF: frozenset({
        ".jpg", ".jpeg", ".jpe", ".heic", ".heif", ".tif", ".tiff",
        ".png", ".webp", ".dng", ".avif",
    }),
    MetaType.QUICKTIME: frozenset({".mp4", ".mov", ".m4v", ".3gp", ".3g2", ".qt"}),
    MetaType.NONE: frozenset({".gif", ".bmp", ".avi", ".mkv", ".wmv", ".mpg", ".mpeg"}),
}

def classify_extension(filename: str) -> Optional[MetaType]:
    """
    Classify a file by extension.

    Args:
        filename: File name or path

    Returns:
        MetaType for supported media, None for anything else
    """
    ext = os.path.splitext(filename)[1].lower()

    for meta_type, exts in EXTENSIONS.items():
        if ext in exts:
            return meta_type

    return None
