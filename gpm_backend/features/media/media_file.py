from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from ...shared import MetaType, classify_extension


@dataclass(frozen=True)
class MediaFileExtension:
    """Lower-case, dot-prefixed suffix and the tag vocabulary it supports."""

    suffix: str
    meta_type: MetaType


@dataclass(frozen=True)
class MediaFile:
    """A media file paired with its Takeout JSON sidecar."""

    path: str
    json_path: str
    ext: MediaFileExtension

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def with_path(self, path: str) -> "MediaFile":
        """Same sidecar, new location; the extension is re-classified from `path`."""
        ext = media_extension(path) or self.ext
        return replace(self, path=path, ext=ext)


def media_extension(path: str | Path) -> Optional[MediaFileExtension]:
    p = Path(str(path))
    meta_type = classify_extension(p.name)
    if meta_type is None:
        return None
    return MediaFileExtension(suffix=p.suffix.lower(), meta_type=meta_type)
