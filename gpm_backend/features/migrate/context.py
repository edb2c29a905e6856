from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...adapters.tools.exiftool import ExifTool
from ...config import DEFAULT_TZ_OFFSET_HOURS, FIX_WRONG_EXTENSIONS, MIGRATE_CONCURRENCY
from ..meta.probe import ExifToolTimestampProbe, TimestampProbe


@dataclass
class MigrationContext:
    """Everything apply_meta_file() needs besides the file itself."""

    exiftool: ExifTool
    probe: TimestampProbe
    default_offset_hours: float = DEFAULT_TZ_OFFSET_HOURS
    concurrency: int = MIGRATE_CONCURRENCY
    fix_wrong_extensions: bool = FIX_WRONG_EXTENSIONS

    @classmethod
    def from_config(
        cls,
        exiftool: Optional[ExifTool] = None,
        *,
        default_offset_hours: Optional[float] = None,
        concurrency: Optional[int] = None,
        fix_wrong_extensions: Optional[bool] = None,
    ) -> "MigrationContext":
        """Build a context from GPM_* settings; explicit arguments win."""
        tool = exiftool if exiftool is not None else ExifTool()
        return cls(
            exiftool=tool,
            probe=ExifToolTimestampProbe(tool),
            default_offset_hours=(
                DEFAULT_TZ_OFFSET_HOURS if default_offset_hours is None else float(default_offset_hours)
            ),
            concurrency=max(1, int(concurrency if concurrency is not None else MIGRATE_CONCURRENCY)),
            fix_wrong_extensions=(
                FIX_WRONG_EXTENSIONS if fix_wrong_extensions is None else bool(fix_wrong_extensions)
            ),
        )
