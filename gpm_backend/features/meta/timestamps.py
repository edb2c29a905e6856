"""
Capture time helpers.

The local timestamp written into files is either taken from the file's own
SubSecDateTimeOriginal (which keeps the camera's offset) or derived from the
sidecar's UTC timestamp plus a default offset.
"""
from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

# 2023:08:01 10:15:30.500+02:00, offset and fraction optional
PROBE_PATTERN = re.compile(r"(\d{4}:\d{2}:\d{2}) (\d{2}:\d{2}:\d{2}(?:\.\d+)?)([+\-]\d{2}:\d{2})?")
LEADING_INT_PATTERN = re.compile(r"\s*([+\-]?\d+)")


def format_tz_offset(offset_hours: float) -> str:
    """9 -> "+09:00", -3.5 -> "-03:30", 0 -> "+00:00"."""
    sign = "+" if offset_hours >= 0 else "-"
    total_minutes = int(round(abs(offset_hours) * 60))
    hours, minutes = divmod(total_minutes, 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def capture_instant(timestamp: str) -> datetime:
    """
    UTC datetime for a Unix-seconds string.

    Only the leading integer is read ("1690877730.0" and "12abc" both parse);
    raises ValueError when there is none.
    """
    match = LEADING_INT_PATTERN.match(str(timestamp))
    if not match:
        raise ValueError(f"not a Unix timestamp: {timestamp!r}")
    seconds = int(match.group(1))
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def local_from_probe(output: str, default_offset: str) -> Optional[str]:
    """
    Build "YYYY-MM-DD HH:MM:SS[.fff]±HH:MM" from probe output.

    The time part is kept verbatim; the offset falls back to `default_offset`
    when the tag carries none. Returns None if nothing matched.
    """
    match = PROBE_PATTERN.search(output or "")
    if not match:
        return None
    date_part, time_part, offset = match.group(1), match.group(2), match.group(3)
    return f"{date_part.replace(':', '-')} {time_part}{offset or default_offset}"


def local_from_utc(instant: datetime, offset_hours: float) -> str:
    """Shift the UTC instant by `offset_hours`: "YYYY-MM-DD HH:MM:SS±HH:MM"."""
    adjusted = instant.astimezone(timezone.utc) + timedelta(hours=offset_hours)
    return adjusted.strftime("%Y-%m-%d %H:%M:%S") + format_tz_offset(offset_hours)
