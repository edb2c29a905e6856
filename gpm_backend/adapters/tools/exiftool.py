"""
ExifTool adapter for probing and writing metadata.
"""
import asyncio
import os
import re
import shutil
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ...config import EXIFTOOL_BIN, EXIFTOOL_TIMEOUT
from ...shared import ErrorCode, Result, get_logger

logger = get_logger(__name__)

_TAG_SAFE_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_:-]*$")


def _decode_bytes_best_effort(blob: Optional[bytes]) -> Tuple[str, bool]:
    """
    Decode subprocess bytes robustly across Windows code pages.

    Returns:
      (text, had_replacement_chars)
    """
    if blob is None:
        return "", False
    if not isinstance(blob, (bytes, bytearray)):
        text = str(blob)
        return text, ("�" in text)

    raw = bytes(blob)
    if not raw:
        return "", False

    for enc in ("utf-8", "utf-8-sig"):
        try:
            return raw.decode(enc, errors="strict"), False
        except UnicodeDecodeError:
            pass

    # Windows consoles may emit stderr in the local codepage.
    try:
        return raw.decode("cp1252", errors="strict"), False
    except UnicodeDecodeError:
        pass

    utf_text = raw.decode("utf-8", errors="replace")
    return utf_text, "�" in utf_text


def _is_safe_exiftool_tag(tag: str) -> bool:
    """
    Return True if a tag/key looks safe to pass to ExifTool as `-TAG` / `-TAG=...`.

    ExifTool tags commonly contain:
      - group separators: `QuickTime:CreateDate`
      - dashes: `Caption-Abstract`
      - underscores

    Whitespace and other special characters are rejected so a tag name can
    never turn into an unintended option.
    """
    if not tag or not isinstance(tag, str):
        return False
    s = tag.strip()
    if not s:
        return False
    if "\x00" in s or "\n" in s or "\r" in s or "\t" in s:
        return False
    if s.startswith("-"):
        return False
    return bool(_TAG_SAFE_PATTERN.match(s))


def _validate_exiftool_tags(tags: Optional[Sequence[str]]) -> Result[List[str]]:
    """
    Validate a tag list and return a cleaned list, or Err on any invalid tags.
    """
    if tags is None:
        return Result.Ok([])

    cleaned: List[str] = []
    invalid: List[str] = []
    for t in tags:
        if not isinstance(t, str):
            invalid.append(str(t))
            continue
        s = t.strip()
        if not _is_safe_exiftool_tag(s):
            invalid.append(s)
            continue
        cleaned.append(s)

    if invalid:
        return Result.Err(
            ErrorCode.INVALID_INPUT,
            "Invalid ExifTool tag format",
            invalid_tags=invalid,
        )
    return Result.Ok(cleaned)


def _format_tag_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


class ExifTool:
    """
    ExifTool wrapper for metadata operations.

    Never raises exceptions - always returns Result.
    """

    def __init__(self, bin_name: Optional[str] = None, timeout: Optional[float] = None):
        """
        Initialize ExifTool adapter.

        Args:
            bin_name: ExifTool binary name or path (defaults to GPM_EXIFTOOL_PATH)
            timeout: Command timeout in seconds
        """
        self.bin = bin_name or EXIFTOOL_BIN or "exiftool"
        self.timeout = float(timeout) if timeout is not None else float(EXIFTOOL_TIMEOUT)
        self._available = self._check_available()

    def _resolve_executable(self, bin_name: str) -> Optional[str]:
        """
        Resolve and validate the exiftool executable.

        Rejects configuration values that look like command strings rather
        than an actual exiftool binary.
        """
        raw = (bin_name or "").strip()
        if not self._is_safe_executable_name(raw):
            return None
        resolved = self._resolve_executable_path(raw)
        if not resolved:
            return None
        if not self._is_under_trusted_dirs(resolved):
            return None
        return resolved if self._looks_like_exiftool_name(resolved) else None

    @staticmethod
    def _is_safe_executable_name(raw: str) -> bool:
        if not raw:
            return False
        if "\x00" in raw or "\n" in raw or "\r" in raw:
            return False
        return not any(ch in raw for ch in ("&", "|", ";", ">", "<"))

    @staticmethod
    def _resolve_executable_path(raw: str) -> Optional[str]:
        resolved = shutil.which(raw)
        if resolved:
            return resolved
        try:
            candidate = Path(raw)
            if candidate.is_file():
                return str(candidate.resolve(strict=True))
        except (OSError, RuntimeError, ValueError):
            return None
        return None

    @staticmethod
    def _is_under_trusted_dirs(resolved: str) -> bool:
        trusted_dirs_raw = str(os.getenv("GPM_EXIFTOOL_TRUSTED_DIRS", "") or "").strip()
        if not trusted_dirs_raw:
            return True
        try:
            resolved_path = Path(resolved).resolve(strict=True)
        except (OSError, RuntimeError):
            return False
        trusted_roots = ExifTool._trusted_roots(trusted_dirs_raw)
        if not trusted_roots:
            return True
        return any(resolved_path == root or root in resolved_path.parents for root in trusted_roots)

    @staticmethod
    def _trusted_roots(trusted_dirs_raw: str) -> List[Path]:
        roots: List[Path] = []
        for item in trusted_dirs_raw.split(os.pathsep):
            item = item.strip()
            if not item:
                continue
            try:
                roots.append(Path(item).expanduser().resolve(strict=True))
            except (OSError, RuntimeError):
                continue
        return roots

    @staticmethod
    def _looks_like_exiftool_name(resolved: str) -> bool:
        return Path(resolved).name.lower().startswith("exiftool")

    def _check_available(self) -> bool:
        """Check if ExifTool is available in PATH."""
        resolved = self._resolve_executable(self.bin)
        if not resolved:
            logger.warning("ExifTool not found: %s", self.bin)
            return False
        self.bin = resolved
        return True

    def is_available(self) -> bool:
        """Check if ExifTool is available."""
        return self._available

    def _availability_error(self) -> Optional[Result[Any]]:
        if self._available:
            return None
        return Result.Err(ErrorCode.TOOL_MISSING, "ExifTool not found in PATH")

    @staticmethod
    def _validate_file_path(path: str) -> Optional[Result[Any]]:
        if not path or "\x00" in str(path):
            return Result.Err(ErrorCode.INVALID_INPUT, "Invalid file path")
        file_path = Path(str(path))
        if not file_path.exists() or not file_path.is_file():
            return Result.Err(ErrorCode.NOT_FOUND, f"File not found: {path}")
        return None

    @staticmethod
    def _append_target_args(cmd: List[str], path: str) -> Tuple[List[str], Optional[str]]:
        # Windows command lines mangle non-ASCII paths; feed them through stdin instead.
        if os.name == "nt":
            cmd.extend(["-charset", "filename=utf8", "-@", "-"])
            return cmd, f"{path}\n"
        cmd.append(path)
        return cmd, None

    def _run(self, cmd: List[str], stdin_input: Optional[str]) -> subprocess.CompletedProcess:
        return subprocess.run(
            cmd,
            capture_output=True,
            text=False,
            check=False,
            timeout=self.timeout,
            input=(stdin_input.encode("utf-8", errors="replace") if stdin_input is not None else None),
            shell=False,
        )

    # ------------------------------------------------------------------
    # Probe (human readable output)
    # ------------------------------------------------------------------

    def _build_read_text_command(self, path: str, tags: List[str]) -> Tuple[List[str], Optional[str]]:
        cmd = [self.bin]
        cmd.extend(f"-{tag}" for tag in tags)
        return self._append_target_args(cmd, path)

    def read_text(self, path: str, tags: Sequence[str]) -> Result[str]:
        """
        Run `exiftool -TAG... <path>` and return its plain text output.

        Equivalent to the shell call `exiftool -SubSecDateTimeOriginal "<path>"`
        when given that single tag.

        Args:
            path: File path
            tags: Tag names to print

        Returns:
            Result with stdout text or error
        """
        availability_error = self._availability_error()
        if availability_error is not None:
            return availability_error
        path_error = self._validate_file_path(path)
        if path_error is not None:
            return path_error
        tags_res = _validate_exiftool_tags(tags)
        if not tags_res.ok:
            return Result.Err(tags_res.code, tags_res.error or "Invalid tags", **tags_res.meta)

        cmd, stdin_input = self._build_read_text_command(path, tags_res.data or [])
        try:
            process = self._run(cmd, stdin_input)
        except subprocess.TimeoutExpired:
            logger.error("ExifTool timeout for %s", path)
            return Result.Err(ErrorCode.TIMEOUT, f"ExifTool timeout after {self.timeout}s")
        except OSError as e:
            logger.error("ExifTool could not be started: %s", e)
            return Result.Err(ErrorCode.EXIFTOOL_ERROR, str(e))

        stdout, _ = _decode_bytes_best_effort(process.stdout)
        stderr, _ = _decode_bytes_best_effort(process.stderr)
        if process.returncode != 0:
            stderr_msg = stderr.strip()
            logger.warning("ExifTool error for %s: %s", path, stderr_msg)
            return Result.Err(
                ErrorCode.EXIFTOOL_ERROR,
                stderr_msg or "ExifTool command failed",
                return_code=int(process.returncode),
            )
        return Result.Ok(stdout)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @staticmethod
    def _invalid_write_keys(metadata: Dict[str, Any]) -> List[str]:
        invalid_keys: List[str] = []
        for key in (metadata or {}).keys():
            if not isinstance(key, str):
                invalid_keys.append(str(key))
                continue
            if not _is_safe_exiftool_tag(key.strip()):
                invalid_keys.append(key.strip())
        return invalid_keys

    @staticmethod
    def _append_metadata_write_args(cmd: List[str], metadata: Dict[str, Any]) -> None:
        for key, value in (metadata or {}).items():
            if value is None:
                cmd.append(f"-{key}=")
                continue
            cmd.append(f"-{key}={_format_tag_value(value)}")

    def _build_write_command(
        self,
        path: str,
        metadata: Dict[str, Any],
        args: Sequence[str],
    ) -> Tuple[List[str], Optional[str]]:
        cmd = [self.bin]
        cmd.extend(str(a) for a in args)
        self._append_metadata_write_args(cmd, metadata)
        return self._append_target_args(cmd, path)

    def _handle_write_process_result(self, process: subprocess.CompletedProcess, path: str) -> Result[bool]:
        stdout, stdout_rep = _decode_bytes_best_effort(process.stdout)
        stderr, stderr_rep = _decode_bytes_best_effort(process.stderr)
        if stdout_rep or stderr_rep:
            logger.warning("ExifTool write output contained decoding replacement characters for %s", path)
        if process.returncode != 0:
            stderr_msg = stderr.strip() or stdout.strip()
            logger.warning("ExifTool write error for %s: %s", path, stderr_msg)
            return Result.Err(
                ErrorCode.EXIFTOOL_ERROR,
                stderr_msg or "ExifTool write failed",
                return_code=int(process.returncode),
            )
        logger.debug("Metadata written to %s", path)
        return Result.Ok(True)

    def write(self, path: str, metadata: Dict[str, Any], args: Optional[Sequence[str]] = None) -> Result[bool]:
        """
        Write metadata to file using ExifTool.

        Args:
            path: File path
            metadata: Tag name -> value pairs; None clears the tag
            args: Extra command line options placed before the tag assignments,
                e.g. ["-overwrite_original", "-api", "quicktimeutc"]

        Returns:
            Result with success boolean
        """
        availability_error = self._availability_error()
        if availability_error is not None:
            return availability_error
        path_error = self._validate_file_path(path)
        if path_error is not None:
            return path_error

        invalid_keys = self._invalid_write_keys(metadata)
        if invalid_keys:
            return Result.Err(
                ErrorCode.INVALID_INPUT,
                "Invalid ExifTool tag format",
                invalid_tags=invalid_keys,
            )

        cmd, stdin_input = self._build_write_command(path, metadata, args or ())
        try:
            process = self._run(cmd, stdin_input)
            return self._handle_write_process_result(process, path)
        except subprocess.TimeoutExpired:
            logger.error("ExifTool write timeout for %s", path)
            return Result.Err(
                ErrorCode.TIMEOUT,
                f"ExifTool write timeout after {self.timeout}s"
            )
        except OSError as e:
            logger.error("ExifTool write error: %s", e)
            return Result.Err(
                ErrorCode.EXIFTOOL_ERROR,
                str(e)
            )

    async def awrite(
        self, path: str, metadata: Dict[str, Any], args: Optional[Sequence[str]] = None
    ) -> Result[bool]:
        """Async wrapper for write() executed off the event loop thread."""
        return await asyncio.to_thread(self.write, path, metadata, args)
