"""
Directory traversal for a Takeout export.
"""
from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

from ...shared import classify_extension, get_logger

logger = get_logger(__name__)


def is_supported_file(path: Path) -> bool:
    return classify_extension(path.name) is not None


def _next_dir(entry: os.DirEntry) -> Path | None:
    try:
        if entry.is_dir(follow_symlinks=False):
            return Path(entry.path)
    except OSError:
        return None
    return None


def _candidate(entry: os.DirEntry) -> Path | None:
    try:
        if not entry.is_file(follow_symlinks=True):
            return None
    except OSError:
        return None
    file_path = Path(entry.path)
    return file_path if is_supported_file(file_path) else None


def iter_media_files(directory: Path, recursive: bool = False) -> Iterator[Path]:
    """
    Yield supported media files under `directory`, sidecars excluded.

    Symlinked files are followed; symlinked directories are not descended into.
    """
    stack: list[Path] = [directory]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as exc:
            logger.warning("Cannot list %s: %s", current, exc)
            continue
        for entry in entries:
            next_dir = _next_dir(entry)
            if next_dir is not None:
                if recursive:
                    stack.append(next_dir)
                continue
            file_path = _candidate(entry)
            if file_path is not None:
                yield file_path
