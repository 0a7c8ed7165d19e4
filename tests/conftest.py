from __future__ import annotations

import threading
from datetime import date, datetime
from typing import Optional

import pytest

from hostel_attendance.attendance.model import AttendanceRecord
from hostel_attendance.core.exceptions import DuplicateRecordError
from hostel_attendance.geofence.registry import HostelRegistry
from hostel_attendance.subjects.model import Subject

CENTER = {"latitude": 11.14407, "longitude": 77.32565}

HOSTELS = {
    "Valluvar Mens Hostel": {"center": CENTER, "radius": 2000},
    "Kaveri Ladies Hostel": {
        "points": [
            {"latitude": 11.0, "longitude": 77.0},
            {"latitude": 11.0, "longitude": 77.01},
            {"latitude": 11.01, "longitude": 77.01},
            {"latitude": 11.01, "longitude": 77.0},
        ]
    },
}


class InMemorySubjects:
    def __init__(self, *subjects: Subject):
        self._by_id = {s.subject_id: s for s in subjects}

    def get_by_id(self, subject_id: str) -> Optional[Subject]:
        return self._by_id.get(subject_id)

    def set_face_embedding(self, subject_id, embedding, *, enrolled_at) -> bool:
        current = self._by_id.get(subject_id)
        if not current:
            return False
        self._by_id[subject_id] = Subject(
            subject_id=current.subject_id,
            name=current.name,
            hostel_block=current.hostel_block,
            face_embedding=tuple(embedding),
        )
        return True


class InMemoryLedger:
    """Conditional insert under a lock, like the UNIQUE key of the MySQL table."""

    def __init__(self):
        self._lock = threading.Lock()
        self._by_key: dict[tuple[str, date], AttendanceRecord] = {}
        self._id = 0
        self.commit_calls = 0

    def has_marked_today(self, subject_id: str, calendar_date: date) -> bool:
        rec = self._by_key.get((subject_id, calendar_date))
        return bool(rec and rec.is_present)

    def commit(self, *, subject_id, calendar_date, is_present, captured_point, marked_at, claimed_hostel=None, reason=None):
        with self._lock:
            self.commit_calls += 1
            if (subject_id, calendar_date) in self._by_key:
                raise DuplicateRecordError(subject_id, calendar_date)
            self._id += 1
            rec = AttendanceRecord(
                attendance_id=self._id,
                subject_id=subject_id,
                calendar_date=calendar_date,
                is_present=is_present,
                captured_point=captured_point,
                marked_at=marked_at,
                claimed_hostel=claimed_hostel,
                reason=reason,
            )
            self._by_key[(subject_id, calendar_date)] = rec
            return rec

    def delete_for_subject_and_date(self, subject_id: str, calendar_date: date) -> int:
        with self._lock:
            return 1 if self._by_key.pop((subject_id, calendar_date), None) else 0

    def get_for_subject_and_date(self, subject_id: str, calendar_date: date):
        return self._by_key.get((subject_id, calendar_date))

    def list_for_subject(self, subject_id: str, limit: int):
        items = [r for r in self._by_key.values() if r.subject_id == subject_id]
        items.sort(key=lambda r: r.calendar_date, reverse=True)
        return items[:limit]

    def list_for_date(self, calendar_date: date):
        return [r for r in self._by_key.values() if r.calendar_date == calendar_date]

    def count_by_presence(self, subject_id: str):
        counts: dict[bool, int] = {}
        for r in self._by_key.values():
            if r.subject_id == subject_id:
                counts[r.is_present] = counts.get(r.is_present, 0) + 1
        return counts

    def __len__(self) -> int:
        return len(self._by_key)


class StubEmbedder:
    """Returns a fixed vector and counts calls."""

    def __init__(self, vector=(0.8, 0.6), *, error: Exception | None = None):
        self.vector = tuple(vector)
        self.error = error
        self.calls = 0

    def embed(self, photo: str):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.vector


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 7, 45, 0)


@pytest.fixture
def hostels() -> HostelRegistry:
    return HostelRegistry.from_mapping(HOSTELS)


@pytest.fixture
def enrolled_subject() -> Subject:
    return Subject(
        subject_id="stu-1",
        name="Arun",
        hostel_block="Valluvar Mens Hostel",
        face_embedding=(1.0, 0.0),
    )


@pytest.fixture
def unenrolled_subject() -> Subject:
    return Subject(subject_id="stu-2", name="Divya", hostel_block="Kaveri Ladies Hostel")
