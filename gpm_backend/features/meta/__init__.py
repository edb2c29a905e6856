"""Apply Takeout sidecar metadata to one media file."""
from .apply import apply_meta_file
from .errors import (
    ApplyMetaError,
    ExifToolError,
    MissingMetaError,
    WrongExtensionError,
    map_write_failure,
)
from .google_meta import GeoData, GoogleMetadata, read_google_metadata
from .probe import ExifToolTimestampProbe, TimestampProbe
from .tags import WRITE_ARGS, build_tags, classification_time_tags

__all__ = [
    "apply_meta_file",
    "ApplyMetaError",
    "ExifToolError",
    "MissingMetaError",
    "WrongExtensionError",
    "map_write_failure",
    "GeoData",
    "GoogleMetadata",
    "read_google_metadata",
    "ExifToolTimestampProbe",
    "TimestampProbe",
    "WRITE_ARGS",
    "build_tags",
    "classification_time_tags",
]
