"""
Apply one Takeout sidecar to its media file.

read sidecar -> capture instant -> probe local offset -> build tags
-> ExifTool write -> touch atime/mtime.
"""
from __future__ import annotations

import asyncio
import os
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from ...shared import get_logger
from ..media import MediaFile
from .errors import ApplyMetaError, ExifToolError, MissingMetaError, map_write_failure
from .google_meta import read_google_metadata
from .tags import WRITE_ARGS, build_tags
from .timestamps import capture_instant, format_tz_offset, local_from_probe, local_from_utc

if TYPE_CHECKING:
    from ..migrate.context import MigrationContext

logger = get_logger(__name__)


async def _resolve_local_timestamp(
    media_file: MediaFile,
    ctx: "MigrationContext",
    time_taken: datetime,
) -> str:
    """
    Prefer the offset the camera recorded in SubSecDateTimeOriginal.

    Never fails: any probe problem falls back to UTC + default offset.
    """
    default_offset = format_tz_offset(ctx.default_offset_hours)

    logger.debug("Probing SubSecDateTimeOriginal for %s", media_file.path)
    try:
        probe_res = await asyncio.to_thread(ctx.probe, media_file.path)
    except Exception as exc:
        logger.warning("Timestamp probe raised for %s, using default time zone: %s", media_file.name, exc)
        probe_res = None

    if probe_res is not None:
        if probe_res.ok:
            local = local_from_probe(probe_res.data or "", default_offset)
            if local:
                logger.debug("Local capture time for %s from file: %s", media_file.name, local)
                return local
            logger.info("No SubSecDateTimeOriginal in %s, using default time zone", media_file.name)
        else:
            logger.warning(
                "Failed to read SubSecDateTimeOriginal for %s, using default time zone: %s",
                media_file.name,
                probe_res.error,
            )

    local = local_from_utc(time_taken, ctx.default_offset_hours)
    logger.debug("Local capture time for %s from sidecar: %s", media_file.name, local)
    return local


async def _write_tags(
    media_file: MediaFile,
    ctx: "MigrationContext",
    tags: dict[str, Any],
) -> Optional[ApplyMetaError]:
    try:
        res = await ctx.exiftool.awrite(media_file.path, tags, list(WRITE_ARGS))
    except Exception as exc:
        return map_write_failure(media_file, exc)
    if not res.ok:
        return map_write_failure(media_file, res.error or "ExifTool write failed")
    return None


async def apply_meta_file(media_file: MediaFile, ctx: "MigrationContext") -> Optional[ApplyMetaError]:
    """
    Stamp capture time, description and GPS from the sidecar onto `media_file`.

    Args:
        media_file: Media file with its sidecar and classification
        ctx: Holds the ExifTool handle, the timestamp probe and the default offset

    Returns:
        None on success, otherwise MissingMetaError, WrongExtensionError or ExifToolError.
    """
    meta_res = read_google_metadata(media_file.json_path)
    if not meta_res.ok or meta_res.data is None:
        return MissingMetaError(media_file, key="photoTakenTime", reason=meta_res.error or "")
    meta = meta_res.data

    if meta.photo_taken_timestamp is None:
        return MissingMetaError(media_file, key="photoTakenTime")
    try:
        time_taken = capture_instant(meta.photo_taken_timestamp)
    except (ValueError, OverflowError, OSError) as exc:
        return MissingMetaError(media_file, key="photoTakenTime", reason=f"invalid timestamp: {exc}")

    try:
        local_timestamp = await _resolve_local_timestamp(media_file, ctx, time_taken)
    except OverflowError as exc:
        return MissingMetaError(media_file, key="photoTakenTime", reason=f"timestamp out of range: {exc}")
    tags = build_tags(meta, media_file.ext.meta_type, local_timestamp)

    failure = await _write_tags(media_file, ctx, tags)
    if failure is not None:
        return failure

    epoch = time_taken.timestamp()
    try:
        os.utime(media_file.path, (epoch, epoch))
    except OSError as exc:
        return ExifToolError(media_file, reason=f"Could not set file times: {exc}")

    logger.debug("Applied %d tags to %s", len(tags), media_file.name)
    return None
