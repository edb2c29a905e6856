"""
Tag map assembly.

Every time tag receives the same local timestamp string; the set of tags
depends on the container's MetaType.
"""
from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, assert_never

from ...shared import MetaType
from .google_meta import GoogleMetadata

WRITE_ARGS: tuple[str, ...] = (
    "-overwrite_original",
    "-api",
    "quicktimeutc",
    "-api",
    "largefilesupport=1",
)

SUBSEC_TIME_TAGS: tuple[str, ...] = (
    "SubSecDateTimeOriginal",
    "SubSecCreateDate",
    "SubSecModifyDate",
)

QUICKTIME_TIME_TAGS: tuple[str, ...] = (
    "DateTimeOriginal",
    "CreateDate",
    "ModifyDate",
    "TrackCreateDate",
    "TrackModifyDate",
    "MediaCreateDate",
    "MediaModifyDate",
)

MODIFY_DATE_TAG = "ModifyDate"

DESCRIPTION_TAGS: tuple[str, ...] = ("Description", "Caption-Abstract", "ImageDescription")

# "1e-07" -> "1e-7"
EXPONENT_PATTERN = re.compile(r"e([+\-])0*(\d)")


def classification_time_tags(meta_type: MetaType) -> tuple[str, ...]:
    """Time tags specific to a container vocabulary."""
    match meta_type:
        case MetaType.EXIF:
            return SUBSEC_TIME_TAGS
        case MetaType.QUICKTIME:
            return QUICKTIME_TIME_TAGS
        case MetaType.NONE:
            return ()
        case _:
            assert_never(meta_type)


def _stringify_number(value: float) -> str:
    """
    Render a coordinate the way the sidecar writer prints numbers.

    12.0 -> "12", 0.00001 -> "0.00001", 1e-07 -> "1e-7", 1e21 -> "1e+21".
    """
    if not isinstance(value, float):
        return str(value)
    if value.is_integer() and abs(value) < 2**53:
        return str(int(value))
    if 1e-6 <= abs(value) < 1e21:
        return format(Decimal(repr(value)), "f")
    return EXPONENT_PATTERN.sub(r"e\1\2", repr(value))


def build_tags(meta: GoogleMetadata, meta_type: MetaType, local_timestamp: str) -> dict[str, Any]:
    tags: dict[str, Any] = {}

    for tag in SUBSEC_TIME_TAGS:
        tags[tag] = local_timestamp
    for tag in classification_time_tags(meta_type):
        tags[tag] = local_timestamp
    tags[MODIFY_DATE_TAG] = local_timestamp

    if meta.description is not None:
        for tag in DESCRIPTION_TAGS:
            tags[tag] = meta.description

    geo = meta.geo
    if geo.complete:
        # The *Ref tags carry the stringified value, not a hemisphere letter.
        # ExifTool derives the reference from the sign of the value it is given.
        tags["GPSAltitude"] = geo.altitude
        tags["GPSAltitudeRef"] = _stringify_number(geo.altitude)
        tags["GPSLatitude"] = geo.latitude
        tags["GPSLatitudeRef"] = _stringify_number(geo.latitude)
        tags["GPSLongitude"] = geo.longitude
        tags["GPSLongitudeRef"] = _stringify_number(geo.longitude)

    return tags
