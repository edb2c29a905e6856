"""
Subset of the Google Takeout sidecar consumed by the applier.

    {
      "photoTakenTime": {"timestamp": "1690877730"},
      "description": "...",
      "geoData": {"altitude": 12.0, "latitude": 35.6, "longitude": 139.7}
    }
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ...shared import ErrorCode, Result, get_logger

logger = get_logger(__name__)


def _number_or_none(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


@dataclass(frozen=True)
class GeoData:
    altitude: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def complete(self) -> bool:
        return None not in (self.altitude, self.latitude, self.longitude)


@dataclass(frozen=True)
class GoogleMetadata:
    photo_taken_timestamp: Optional[str] = None
    description: Optional[str] = None
    geo: GeoData = field(default_factory=GeoData)

    @classmethod
    def from_json(cls, payload: Any) -> "GoogleMetadata":
        if not isinstance(payload, dict):
            return cls()

        taken = payload.get("photoTakenTime")
        timestamp = taken.get("timestamp") if isinstance(taken, dict) else None
        if timestamp is not None and not isinstance(timestamp, str):
            timestamp = str(timestamp)

        description = payload.get("description")
        if description is not None and not isinstance(description, str):
            description = str(description)

        geo_raw = payload.get("geoData")
        geo = GeoData()
        if isinstance(geo_raw, dict):
            geo = GeoData(
                altitude=_number_or_none(geo_raw.get("altitude")),
                latitude=_number_or_none(geo_raw.get("latitude")),
                longitude=_number_or_none(geo_raw.get("longitude")),
            )
        return cls(photo_taken_timestamp=timestamp, description=description, geo=geo)


def read_google_metadata(json_path: str | Path) -> Result[GoogleMetadata]:
    """Read and parse a sidecar file."""
    try:
        raw = Path(str(json_path)).read_text(encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not read sidecar %s: %s", json_path, exc)
        return Result.Err(ErrorCode.NOT_FOUND, f"Could not read sidecar: {exc}")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("Invalid JSON in sidecar %s: %s", json_path, exc)
        return Result.Err(ErrorCode.INVALID_JSON, f"Invalid sidecar JSON: {exc}")
    return Result.Ok(GoogleMetadata.from_json(payload))
