from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Optional, Protocol, Sequence

from ..geofence.model import GeoPoint
from .model import AttendanceRecord


class AttendanceLedger(Protocol):
    """Durable store of attendance records, keyed by (subject_id, calendar_date)."""

    def has_marked_today(self, subject_id: str, calendar_date: date) -> bool:
        """True when a present record exists for the subject on that day."""

        raise NotImplementedError

    def commit(
        self,
        *,
        subject_id: str,
        calendar_date: date,
        is_present: bool,
        captured_point: Optional[GeoPoint],
        marked_at: datetime,
        claimed_hostel: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> AttendanceRecord:
        """Insert a record if none exists for the key, else raise ``DuplicateRecordError``.

        Must be a single atomic conditional write; callers do not re-check.
        """

        raise NotImplementedError

    def delete_for_subject_and_date(self, subject_id: str, calendar_date: date) -> int:
        raise NotImplementedError

    def get_for_subject_and_date(self, subject_id: str, calendar_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_subject(self, subject_id: str, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_date(self, calendar_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_by_presence(self, subject_id: str) -> Dict[bool, int]:
        """Number of records per ``is_present`` value; missing keys mean zero."""

        raise NotImplementedError
