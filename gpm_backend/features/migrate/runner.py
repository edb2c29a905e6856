"""
Apply sidecar metadata to every media file of a Takeout directory.

Files are processed with bounded concurrency; a failing file is recorded in
the report and never aborts the run.
"""
from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from ...shared import ErrorCode, Result, get_logger, log_structured, log_success, timer
from ..media import MediaFile, find_sidecar, media_extension
from ..meta import ApplyMetaError, ExifToolError, WrongExtensionError, apply_meta_file
from .context import MigrationContext
from .walker import iter_media_files

logger = get_logger(__name__)


@dataclass(frozen=True)
class NoSidecarError:
    """A media file without any JSON sidecar next to it."""

    path: str

    code = ErrorCode.NOT_FOUND

    @property
    def message(self) -> str:
        return f"No sidecar JSON found for {self.path}"

    def to_result(self) -> Result[Any]:
        return Result.Err(self.code, self.message, path=self.path)


MigrationError = Union[ApplyMetaError, NoSidecarError]


@dataclass
class MigrationReport:
    total: int = 0
    applied: list[str] = field(default_factory=list)
    renamed: list[tuple[str, str]] = field(default_factory=list)
    errors: list[MigrationError] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.errors)

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> dict[str, int]:
        return {
            "total": self.total,
            "applied": len(self.applied),
            "renamed": len(self.renamed),
            "failed": self.failed,
        }


def pair_media_files(paths: Iterable[Path]) -> tuple[list[MediaFile], list[NoSidecarError]]:
    """Attach a sidecar to each supported media path."""
    media: list[MediaFile] = []
    missing: list[NoSidecarError] = []
    for path in paths:
        ext = media_extension(path)
        if ext is None:
            continue
        sidecar = find_sidecar(path)
        if sidecar is None:
            missing.append(NoSidecarError(str(path)))
            continue
        media.append(MediaFile(path=str(path), json_path=str(sidecar), ext=ext))
    return media, missing


def rename_to_actual_extension(media_file: MediaFile, err: WrongExtensionError) -> Result[MediaFile]:
    """Rename `photo.jpeg` to `photo.png` when ExifTool says it is a PNG."""
    source = Path(media_file.path)
    target = source.with_suffix(err.actual)
    if target.exists():
        return Result.Err(ErrorCode.RENAME_FAILED, f"Target already exists: {target}")
    try:
        os.rename(source, target)
    except OSError as exc:
        return Result.Err(ErrorCode.RENAME_FAILED, f"Could not rename {source.name}: {exc}")
    logger.info("Renamed %s -> %s", source.name, target.name)
    return Result.Ok(media_file.with_path(str(target)))


async def migrate_file(
    media_file: MediaFile,
    ctx: MigrationContext,
) -> tuple[Optional[ApplyMetaError], MediaFile]:
    """
    Apply metadata to one file, renaming and retrying once on a wrong extension.

    Returns:
        (error or None, the file as it now exists on disk)
    """
    err = await apply_meta_file(media_file, ctx)
    if not isinstance(err, WrongExtensionError) or not ctx.fix_wrong_extensions:
        return err, media_file

    renamed = rename_to_actual_extension(media_file, err)
    if not renamed.ok or renamed.data is None:
        logger.warning("%s (%s)", err.message, renamed.error)
        return err, media_file
    return await apply_meta_file(renamed.data, ctx), renamed.data


async def migrate_files(media_files: list[MediaFile], ctx: MigrationContext, report: MigrationReport) -> None:
    sem = asyncio.Semaphore(max(1, min(ctx.concurrency, len(media_files) or 1)))

    async def _one(media_file: MediaFile) -> None:
        async with sem:
            try:
                err, final = await migrate_file(media_file, ctx)
            except Exception as exc:
                logger.error("Unexpected error for %s: %s", media_file.path, exc)
                report.errors.append(ExifToolError(media_file, reason=str(exc)))
                return
        if final.path != media_file.path:
            report.renamed.append((media_file.path, final.path))
        if err is None:
            report.applied.append(final.path)
            return
        logger.warning("%s", err.message)
        report.errors.append(err)

    await asyncio.gather(*[_one(m) for m in media_files])


async def migrate_flat(ctx: MigrationContext, directory: str | Path, recursive: bool = False) -> MigrationReport:
    """
    Apply every sidecar found in `directory`.

    Args:
        ctx: Migration context (ExifTool, probe, offset, concurrency)
        directory: Takeout album folder (or the whole export with recursive=True)
        recursive: Descend into sub-directories

    Returns:
        MigrationReport with per-file errors
    """
    root = Path(str(directory))
    report = MigrationReport()
    with timer(f"Migration of {root}", logger):
        paths = await asyncio.to_thread(lambda: list(iter_media_files(root, recursive)))
        media_files, missing = pair_media_files(paths)
        report.total = len(paths)
        report.errors.extend(missing)
        for miss in missing:
            logger.warning("%s", miss.message)

        logger.info("Applying metadata to %d files (%d without sidecar)", len(media_files), len(missing))
        await migrate_files(media_files, ctx, report)

    log_structured(logger, logging.DEBUG, "migration finished", directory=str(root), **report.summary())
    if report.ok:
        log_success(logger, f"Applied metadata to {len(report.applied)} files")
    else:
        logger.warning("%d of %d files failed", report.failed, report.total)
    return report
