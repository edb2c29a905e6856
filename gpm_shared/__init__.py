"""Shared utilities for the Google Takeout metadata applier."""
from .log import get_logger, log_structured, log_success
from .result import Result
from .time import timer
from .types import EXTENSIONS, ErrorCode, MetaType, classify_extension

__all__ = [
    "Result",
    "get_logger",
    "log_success",
    "log_structured",
    "timer",
    "ErrorCode",
    "MetaType",
    "EXTENSIONS",
    "classify_extension",
]
