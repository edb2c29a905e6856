"""
Typed outcomes of apply_meta_file().

They are returned, not raised, so a batch caller can keep going:

- MissingMetaError: sidecar lacks a required field; skip and report.
- WrongExtensionError: content disagrees with the extension; rename and retry.
- ExifToolError: anything else ExifTool (or the file touch) reported; log and skip.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, ClassVar

from ...shared import ErrorCode, Result
from ..media import MediaFile

WRONG_EXTENSION_PATTERN = re.compile(r"Not a valid (?P<current>\w+) \(looks more like a (?P<actual>\w+)\)")


@dataclass(frozen=True)
class ApplyMetaError:
    media_file: MediaFile

    code: ClassVar[ErrorCode] = ErrorCode.EXIFTOOL_ERROR

    @property
    def message(self) -> str:
        return f"Failed to apply metadata to {self.media_file.path}"

    def details(self) -> dict[str, Any]:
        return {}

    def to_result(self) -> Result[Any]:
        return Result.Err(self.code, self.message, path=self.media_file.path, **self.details())


@dataclass(frozen=True)
class MissingMetaError(ApplyMetaError):
    key: str = "photoTakenTime"
    reason: str = ""

    code: ClassVar[ErrorCode] = ErrorCode.MISSING_META

    @property
    def message(self) -> str:
        base = f"Missing '{self.key}' in {self.media_file.json_path}"
        return f"{base}: {self.reason}" if self.reason else base

    def details(self) -> dict[str, Any]:
        return {"key": self.key, "json_path": self.media_file.json_path}


@dataclass(frozen=True)
class WrongExtensionError(ApplyMetaError):
    current: str = ""
    actual: str = ""

    code: ClassVar[ErrorCode] = ErrorCode.WRONG_EXTENSION

    @property
    def message(self) -> str:
        return f"{self.media_file.name} is not a {self.current} file (looks more like {self.actual})"

    def details(self) -> dict[str, Any]:
        return {"current": self.current, "actual": self.actual}


@dataclass(frozen=True)
class ExifToolError(ApplyMetaError):
    reason: str = ""

    code: ClassVar[ErrorCode] = ErrorCode.EXIFTOOL_ERROR

    @property
    def message(self) -> str:
        return f"ExifTool failed for {self.media_file.name}: {self.reason}"


def map_write_failure(media_file: MediaFile, failure: object) -> ApplyMetaError:
    """Turn a failed write (exception, error message or any other value) into a typed error."""
    message = str(failure)
    match = WRONG_EXTENSION_PATTERN.search(message)
    if match:
        return WrongExtensionError(
            media_file,
            current=f".{match.group('current').lower()}",
            actual=f".{match.group('actual').lower()}",
        )
    return ExifToolError(media_file, reason=message)
