"""Backend-facing alias for shared utilities."""

from __future__ import annotations

from gpm_shared import (
    EXTENSIONS,
    ErrorCode,
    MetaType,
    Result,
    classify_extension,
    get_logger,
    log_structured,
    log_success,
    timer,
)

__all__ = [
    "EXTENSIONS",
    "ErrorCode",
    "MetaType",
    "Result",
    "classify_extension",
    "get_logger",
    "log_structured",
    "log_success",
    "timer",
]
