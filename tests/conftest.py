import json
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from gpm_backend.features.media import MediaFile, media_extension  # noqa: E402
from gpm_backend.features.migrate import MigrationContext  # noqa: E402
from gpm_backend.shared import ErrorCode, Result  # noqa: E402

# 2023-08-01T08:15:30Z
TAKEN_TS = 1690877730


class FakeExifTool:
    """Records writes; `respond` decides the Result (or raises) per call."""

    def __init__(self, respond: Optional[Callable[[str, dict, list], Result[bool]]] = None):
        self.writes: list[tuple[str, dict[str, Any], list[str]]] = []
        self._respond = respond

    def is_available(self) -> bool:
        return True

    def read_text(self, path, tags):
        return Result.Err(ErrorCode.EXIFTOOL_ERROR, "no probe in tests")

    async def awrite(self, path, metadata, args=None):
        self.writes.append((path, dict(metadata), list(args or [])))
        if self._respond is not None:
            return self._respond(path, metadata, list(args or []))
        return Result.Ok(True)


def probe_returning(text: str):
    calls: list[str] = []

    def _probe(path: str) -> Result[str]:
        calls.append(path)
        return Result.Ok(text)

    _probe.calls = calls  # type: ignore[attr-defined]
    return _probe


def failing_probe(path: str) -> Result[str]:
    return Result.Err(ErrorCode.EXIFTOOL_ERROR, "exiftool exploded")


def sidecar_payload(
    timestamp: Optional[str] = str(TAKEN_TS),
    description: Optional[str] = None,
    geo: Optional[dict] = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"title": "photo"}
    if timestamp is not None:
        payload["photoTakenTime"] = {"timestamp": timestamp, "formatted": "Aug 1, 2023"}
    if description is not None:
        payload["description"] = description
    if geo is not None:
        payload["geoData"] = geo
    return payload


@pytest.fixture
def fake_exiftool() -> FakeExifTool:
    return FakeExifTool()


@pytest.fixture
def make_media(tmp_path: Path):
    """Create `<name>` plus `<name>.json` and return the paired MediaFile."""

    def _make(name: str = "photo.jpg", payload: Optional[dict] = None, content: bytes = b"data") -> MediaFile:
        media_path = tmp_path / name
        media_path.write_bytes(content)
        json_path = tmp_path / f"{name}.json"
        json_path.write_text(json.dumps(payload if payload is not None else sidecar_payload()), encoding="utf-8")
        ext = media_extension(media_path)
        assert ext is not None
        return MediaFile(path=str(media_path), json_path=str(json_path), ext=ext)

    return _make


@pytest.fixture
def make_ctx(fake_exiftool: FakeExifTool):
    def _make(probe=failing_probe, offset: float = 9.0, exiftool=None, **kwargs) -> MigrationContext:
        return MigrationContext(
            exiftool=exiftool if exiftool is not None else fake_exiftool,
            probe=probe,
            default_offset_hours=offset,
            **kwargs,
        )

    return _make
