"""Media file model and sidecar discovery."""
from .media_file import MediaFile, MediaFileExtension, media_extension
from .sidecar import find_sidecar, sidecar_candidates

__all__ = [
    "MediaFile",
    "MediaFileExtension",
    "media_extension",
    "find_sidecar",
    "sidecar_candidates",
]
