"""
Locate the Takeout JSON sidecar for a media file.

Takeout names sidecars after the full media file name (`IMG_1.jpg.json`);
newer exports use `IMG_1.jpg.supplemental-metadata.json`, older ones
sometimes drop the media extension (`IMG_1.json`). Edited copies
(`IMG_1-edited.jpg`) share the sidecar of the original.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

SUPPLEMENTAL_SUFFIX = ".supplemental-metadata.json"
EDITED_SUFFIXES = ("-edited", "-bearbeitet", "-modifié")


def _candidates_for_name(directory: Path, name: str) -> list[Path]:
    stem = Path(name).stem
    return [
        directory / f"{name}.json",
        directory / f"{name}{SUPPLEMENTAL_SUFFIX}",
        directory / f"{stem}.json",
    ]


def _original_name(name: str) -> Optional[str]:
    stem, suffix = Path(name).stem, Path(name).suffix
    lowered = stem.lower()
    for marker in EDITED_SUFFIXES:
        if lowered.endswith(marker):
            return f"{stem[: -len(marker)]}{suffix}"
    return None


def sidecar_candidates(media_path: str | Path) -> list[Path]:
    """Ordered candidate sidecar paths for `media_path` (existence not checked)."""
    p = Path(str(media_path))
    out = _candidates_for_name(p.parent, p.name)
    original = _original_name(p.name)
    if original:
        out.extend(_candidates_for_name(p.parent, original))
    return out


def find_sidecar(media_path: str | Path) -> Optional[Path]:
    """First existing sidecar for `media_path`, or None."""
    for candidate in sidecar_candidates(media_path):
        if candidate.is_file():
            return candidate
    return None
