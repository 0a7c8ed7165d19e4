from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional, Sequence, Tuple

import mysql.connector

from ..core.exceptions import DuplicateRecordError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from ..geofence.model import GeoPoint
from .model import AttendanceRecord
from .repository import AttendanceLedger

_COLUMNS = """
    attendance_id, subject_id, calendar_date, is_present,
    latitude, longitude, claimed_hostel, reason, marked_at
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    point = None
    if r.get("latitude") is not None and r.get("longitude") is not None:
        point = GeoPoint(latitude=float(r["latitude"]), longitude=float(r["longitude"]))
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        subject_id=str(r["subject_id"]),
        calendar_date=r["calendar_date"],
        is_present=bool(r["is_present"]),
        captured_point=point,
        marked_at=r["marked_at"],
        claimed_hostel=r.get("claimed_hostel"),
        reason=r.get("reason"),
    )


class MySQLAttendanceLedger(AttendanceLedger):
    """MySQL ledger; the UNIQUE(subject_id, calendar_date) key makes ``commit`` atomic.

    ``slack_days`` widens the window used by ``has_marked_today`` and
    ``delete_for_subject_and_date`` by that many days on each side.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, slack_days: int = 0):
        self._conn_factory = conn_factory
        self._slack = timedelta(days=max(0, int(slack_days)))

    def _window(self, calendar_date: date) -> Tuple[date, date]:
        return calendar_date - self._slack, calendar_date + self._slack

    def has_marked_today(self, subject_id: str, calendar_date: date) -> bool:
        start, end = self._window(calendar_date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS hit
                FROM attendance_records
                WHERE subject_id=%s AND is_present=1 AND calendar_date BETWEEN %s AND %s
                LIMIT 1
                """,
                (subject_id, start, end),
            )
            return fetchone(cur) is not None

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        subject_id, calendar_date, is_present, latitude, longitude,
                        claimed_hostel, reason, marked_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        subject_id,
                        calendar_date,
                        1 if is_present else 0,
                        captured_point.latitude if captured_point else None,
                        captured_point.longitude if captured_point else None,
                        claimed_hostel,
                        reason,
                        marked_at,
                    ),
                )
                attendance_id = int(cur.lastrowid)
        except mysql.connector.Error as e:
            if is_duplicate_key(e):
                raise DuplicateRecordError(subject_id, calendar_date) from e
            raise

        return AttendanceRecord(
            attendance_id=attendance_id,
            subject_id=subject_id,
            calendar_date=calendar_date,
            is_present=is_present,
            captured_point=captured_point,
            marked_at=marked_at,
            claimed_hostel=claimed_hostel,
            reason=reason,
        )

    def delete_for_subject_and_date(self, subject_id: str, calendar_date: date) -> int:
        start, end = self._window(calendar_date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance_records WHERE subject_id=%s AND calendar_date BETWEEN %s AND %s",
                (subject_id, start, end),
            )
            return int(cur.rowcount)

    def get_for_subject_and_date(self, subject_id: str, calendar_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE subject_id=%s AND calendar_date=%s",
                (subject_id, calendar_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_subject(self, subject_id: str, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE subject_id=%s
                ORDER BY calendar_date DESC
                LIMIT %s
                """,
                (subject_id, int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, calendar_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE calendar_date=%s
                ORDER BY marked_at ASC
                """,
                (calendar_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_by_presence(self, subject_id: str) -> Dict[bool, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT is_present, COUNT(*) AS total
                FROM attendance_records
                WHERE subject_id=%s
                GROUP BY is_present
                """,
                (subject_id,),
            )
            return {bool(r["is_present"]): int(r["total"]) for r in fetchall(cur)}
