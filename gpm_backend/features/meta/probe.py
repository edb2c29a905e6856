from __future__ import annotations

from typing import Protocol

from ...adapters.tools.exiftool import ExifTool
from ...shared import Result

PROBE_TAG = "SubSecDateTimeOriginal"


class TimestampProbe(Protocol):
    """Returns the raw text of a file's embedded original-time tag."""

    def __call__(self, path: str) -> Result[str]: ...


class ExifToolTimestampProbe:
    """`exiftool -SubSecDateTimeOriginal <path>`"""

    def __init__(self, exiftool: ExifTool, tag: str = PROBE_TAG):
        self._exiftool = exiftool
        self.tag = tag

    def __call__(self, path: str) -> Result[str]:
        return self._exiftool.read_text(path, [self.tag])
