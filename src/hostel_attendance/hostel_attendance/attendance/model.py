from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from math import floor
from typing import Any, Mapping, Optional

from ..common.validators import optional_coordinate, require_bool, require_date, require_non_empty
from ..core.constants import NO_GPS_SENTINEL
from ..core.exceptions import ValidationError
from ..geofence.model import GeoPoint


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: an accepted attendance marking. Never updated in place."""

    attendance_id: int
    subject_id: str
    calendar_date: date
    is_present: bool
    captured_point: Optional[GeoPoint]
    marked_at: datetime
    claimed_hostel: Optional[str] = None
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "subjectId": self.subject_id,
            "date": self.calendar_date.isoformat(),
            "isPresent": self.is_present,
            "latitude": self.captured_point.latitude if self.captured_point else None,
            "longitude": self.captured_point.longitude if self.captured_point else None,
            "claimedHostel": self.claimed_hostel,
            "reason": self.reason,
            "markedAt": self.marked_at.isoformat(),
        }


@dataclass(frozen=True)
class AttendanceStats:
    """Per-subject totals. ``leave`` is always 0: leave is not recorded by this service."""

    present: int
    absent: int
    leave: int = 0

    @property
    def percentage(self) -> int:
        total = self.present + self.absent
        if total == 0:
            return 0
        # half-up, not banker's rounding
        return int(floor(self.present * 100 / total + 0.5))

    def to_dict(self) -> dict:
        return {
            "present": self.present,
            "absent": self.absent,
            "leave": self.leave,
            "percentage": self.percentage,
        }


def _is_sentinel(value: Any) -> bool:
    return isinstance(value, str) and value.strip().lower() == NO_GPS_SENTINEL


@dataclass(frozen=True)
class CheckInRequest:
    """Validated body of ``POST /attendance``."""

    subject_id: str
    calendar_date: date
    is_present: bool
    captured_point: Optional[GeoPoint]
    claimed_hostel: Optional[str] = None
    photo: Optional[str] = None
    reason: Optional[str] = None

    @property
    def gps_bypassed(self) -> bool:
        return self.captured_point is None

    @classmethod
    def from_json(cls, body: Optional[Mapping[str, Any]]) -> "CheckInRequest":
        if not isinstance(body, Mapping):
            raise ValidationError("Request body must be a JSON object")

        subject_id = require_non_empty(body.get("subjectId"), "subjectId")
        calendar_date = require_date(body.get("date"), "date")
        is_present = require_bool(body.get("isPresent", True), "isPresent")

        raw_lat = body.get("latitude")
        raw_lon = body.get("longitude")
        if _is_sentinel(raw_lat) or _is_sentinel(raw_lon):
            point = None
        else:
            lat = optional_coordinate(raw_lat, "latitude", low=-90.0, high=90.0)
            lon = optional_coordinate(raw_lon, "longitude", low=-180.0, high=180.0)
            if lat is None or lon is None:
                raise ValidationError(f"latitude and longitude are required (or '{NO_GPS_SENTINEL}')")
            point = GeoPoint(latitude=lat, longitude=lon)

        photo = body.get("photo") or body.get("photoUrl")
        if photo is not None and not isinstance(photo, str):
            raise ValidationError("photo must be a base64 string")
        if is_present and not photo:
            raise ValidationError("photo is required when marking present")

        hostel = body.get("claimedHostel") or body.get("selectedHostel")
        reason = body.get("reason")

        return cls(
            subject_id=subject_id,
            calendar_date=calendar_date,
            is_present=is_present,
            captured_point=point,
            claimed_hostel=str(hostel).strip() if hostel else None,
            photo=photo or None,
            reason=str(reason).strip()[:255] if reason else None,
        )
