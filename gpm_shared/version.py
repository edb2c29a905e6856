from __future__ import annotations

import re
from importlib import metadata
from pathlib import Path

_DIST_NAME = "gpm-meta"


def _find_pyproject_version() -> str:
    try:
        root = Path(__file__).resolve().parent.parent
        pyproject_path = root / "pyproject.toml"
        if not pyproject_path.exists():
            return ""
        raw = pyproject_path.read_text(encoding="utf-8")
        match = re.search(r'^version\s*=\s*"(.*?)"', raw, flags=re.MULTILINE)
        if match:
            return match.group(1).strip()
    except OSError:
        pass
    return ""


def get_version() -> str:
    """Version from a source checkout first, then from installed metadata."""
    version = _find_pyproject_version()
    if version:
        return version
    try:
        return metadata.version(_DIST_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"
