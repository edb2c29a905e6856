import asyncio
import subprocess
from pathlib import Path

import pytest

from gpm_backend.adapters.tools import exiftool as m
from gpm_backend.shared import ErrorCode


def _mk_completed(returncode=0, stdout=b"", stderr=b""):
    return subprocess.CompletedProcess(args=["x"], returncode=returncode, stdout=stdout, stderr=stderr)


def test_decode_bytes_best_effort_variants():
    assert m._decode_bytes_best_effort(None) == ("", False)
    assert m._decode_bytes_best_effort("x") == ("x", False)
    assert m._decode_bytes_best_effort(b"abc")[0] == "abc"
    assert m._decode_bytes_best_effort("caf\xe9".encode("cp1252")) == ("café", False)


def test_tag_validation_helpers():
    assert m._is_safe_exiftool_tag("Caption-Abstract") is True
    assert m._is_safe_exiftool_tag("QuickTime:CreateDate") is True
    assert m._is_safe_exiftool_tag("-bad") is False
    assert m._is_safe_exiftool_tag("bad tag") is False

    ok = m._validate_exiftool_tags(["SubSecDateTimeOriginal"])
    assert ok.ok and ok.data == ["SubSecDateTimeOriginal"]
    bad = m._validate_exiftool_tags(["bad tag"])
    assert bad.code == ErrorCode.INVALID_INPUT


@pytest.fixture
def ex(monkeypatch):
    monkeypatch.setattr(m.ExifTool, "_check_available", lambda self: True)
    return m.ExifTool(bin_name="exiftool", timeout=1.0)


@pytest.fixture
def media(tmp_path: Path) -> Path:
    p = tmp_path / "a.jpg"
    p.write_bytes(b"x")
    return p


def test_executable_resolution_helpers(monkeypatch, tmp_path: Path):
    exep = tmp_path / "exiftool"
    exep.write_text("x")

    monkeypatch.setattr(m.shutil, "which", lambda raw: str(exep) if raw == "exiftool" else None)
    assert m.ExifTool._is_safe_executable_name("exiftool") is True
    assert m.ExifTool._is_safe_executable_name("bad|x") is False
    assert m.ExifTool._resolve_executable_path("exiftool") == str(exep)
    assert m.ExifTool._looks_like_exiftool_name(str(exep)) is True
    assert m.ExifTool._looks_like_exiftool_name("/usr/bin/rm") is False


def test_trusted_dirs(monkeypatch, tmp_path: Path):
    d = tmp_path / "bin"
    d.mkdir()
    f = d / "exiftool"
    f.write_text("x")
    other = tmp_path / "exiftool"
    other.write_text("x")
    monkeypatch.setenv("GPM_EXIFTOOL_TRUSTED_DIRS", str(d))
    assert m.ExifTool._is_under_trusted_dirs(str(f)) is True
    assert m.ExifTool._is_under_trusted_dirs(str(other)) is False


def test_unavailable_tool_returns_tool_missing(monkeypatch, media: Path):
    monkeypatch.setattr(m.shutil, "which", lambda raw: None)
    tool = m.ExifTool(bin_name="definitely-not-here")
    assert tool.is_available() is False
    assert tool.write(str(media), {"ModifyDate": "x"}).code == ErrorCode.TOOL_MISSING
    assert tool.read_text(str(media), ["SubSecDateTimeOriginal"]).code == ErrorCode.TOOL_MISSING


def test_append_target_args_windows(monkeypatch):
    monkeypatch.setattr(m.os, "name", "nt")
    cmd, stdin_input = m.ExifTool._append_target_args(["exiftool"], "C:/a.jpg")
    assert cmd[-2:] == ["-@", "-"]
    assert stdin_input == "C:/a.jpg\n"


def test_write_builds_command(ex, media: Path, monkeypatch):
    seen = {}

    def _run(cmd, stdin_input):
        seen["cmd"] = cmd
        return _mk_completed(0, b"    1 image files updated\n")

    monkeypatch.setattr(ex, "_run", _run)
    res = ex.write(
        str(media),
        {"Caption-Abstract": "hi", "GPSAltitude": 12.5, "Keywords": None},
        ["-overwrite_original", "-api", "quicktimeutc"],
    )
    assert res.ok and res.data is True
    assert seen["cmd"] == [
        "exiftool",
        "-overwrite_original",
        "-api",
        "quicktimeutc",
        "-Caption-Abstract=hi",
        "-GPSAltitude=12.5",
        "-Keywords=",
        str(media),
    ]


def test_write_error_carries_stderr(ex, media: Path, monkeypatch):
    stderr = b"Error: Not a valid JPEG (looks more like a PNG) - a.jpg\n"
    monkeypatch.setattr(ex, "_run", lambda cmd, stdin_input: _mk_completed(1, b"", stderr))
    res = ex.write(str(media), {"ModifyDate": "x"})
    assert res.code == ErrorCode.EXIFTOOL_ERROR
    assert "Not a valid JPEG (looks more like a PNG)" in res.error
    assert res.meta["return_code"] == 1


def test_write_validation(ex, media: Path, tmp_path: Path):
    assert ex.write(str(media), {"bad tag": 1}).code == ErrorCode.INVALID_INPUT
    assert ex.write(str(tmp_path / "missing.jpg"), {"ModifyDate": 1}).code == ErrorCode.NOT_FOUND
    assert ex.write("", {"ModifyDate": 1}).code == ErrorCode.INVALID_INPUT


def test_write_timeout(ex, media: Path, monkeypatch):
    def _to(*_a, **_k):
        raise subprocess.TimeoutExpired(cmd="x", timeout=1)

    monkeypatch.setattr(ex, "_run", _to)
    assert ex.write(str(media), {"ModifyDate": "x"}).code == ErrorCode.TIMEOUT


def test_read_text(ex, media: Path, monkeypatch):
    seen = {}

    def _run(cmd, stdin_input):
        seen["cmd"] = cmd
        return _mk_completed(0, b"Date/Time Original : 2023:08:01 10:15:30+02:00\n")

    monkeypatch.setattr(ex, "_run", _run)
    res = ex.read_text(str(media), ["SubSecDateTimeOriginal"])
    assert res.ok and "2023:08:01" in res.data
    assert seen["cmd"] == ["exiftool", "-SubSecDateTimeOriginal", str(media)]

    monkeypatch.setattr(ex, "_run", lambda cmd, stdin_input: _mk_completed(1, b"", b"boom"))
    assert ex.read_text(str(media), ["SubSecDateTimeOriginal"]).error == "boom"
    assert ex.read_text(str(media), ["-x"]).code == ErrorCode.INVALID_INPUT


def test_async_write_wrapper(ex, media: Path, monkeypatch):
    monkeypatch.setattr(ex, "_run", lambda cmd, stdin_input: _mk_completed(0, b"ok"))
    assert asyncio.run(ex.awrite(str(media), {"ModifyDate": "x"}, ["-overwrite_original"])).ok
