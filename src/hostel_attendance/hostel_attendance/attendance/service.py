from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional, Sequence, Tuple, TypeVar

from ..biometrics.generator import EmbeddingGenerator
from ..biometrics.similarity import SimilarityGate
from ..common.datetime_utils import now_local, today_local
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import (
    DomainError,
    DuplicateRecordError,
    EmbeddingServiceError,
    OutsideGeofenceError,
    StorageError,
    SubjectNotFoundError,
    ValidationError,
)
from ..core.logging import get_logger
from ..geofence import evaluator
from ..geofence.registry import HostelRegistry
from ..subjects.model import Subject
from ..subjects.repository import SubjectRepository
from .model import AttendanceRecord, AttendanceStats, CheckInRequest
from .repository import AttendanceLedger

logger = get_logger(__name__)

T = TypeVar("T")


def _storage_call(action: str, fn: Callable[..., T], *args, **kwargs) -> T:
    """Run a storage call, mapping driver failures to ``StorageError``."""
    try:
        return fn(*args, **kwargs)
    except DomainError:
        raise
    except Exception as e:
        logger.error("Storage failure during %s: %s", action, e, exc_info=True)
        raise StorageError(f"Storage failure during {action}") from e


class VerificationOrchestrator:
    """Decide a single check-in request.

    Gates run in a fixed order and the first failure ends the request:

    1. subject lookup (unknown subject -> ``SubjectNotFoundError``)
    2. duplicate check against the ledger
    3. geofence check for the claimed hostel (skipped for the no-GPS sentinel)
    4. biometric check (present markings only)
    5. commit; the ledger's conditional insert settles concurrent requests

    No gate is retried and nothing is written unless every gate passed.
    """

    def __init__(
        self,
        ledger: AttendanceLedger,
        subjects: SubjectRepository,
        hostels: HostelRegistry,
        embedder: EmbeddingGenerator,
        *,
        gate: SimilarityGate | None = None,
    ):
        self._ledger = ledger
        self._subjects = subjects
        self._hostels = hostels
        self._embedder = embedder
        self._gate = gate or SimilarityGate()

    def check_in(self, request: CheckInRequest, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()

        subject = _storage_call("subject lookup", self._subjects.get_by_id, request.subject_id)
        if not subject:
            logger.info("Subject not found: %s", request.subject_id)
            raise SubjectNotFoundError(request.subject_id)

        logger.info(
            "Checking attendance for %s on %s (present=%s, enrolled=%s)",
            subject.subject_id,
            request.calendar_date,
            request.is_present,
            subject.enrollment is not None,
        )

        self._check_duplicate(subject, request.calendar_date)
        hostel = self._check_geofence(subject, request)
        if request.is_present:
            self._check_face(subject, request)

        return self._commit(subject, request, hostel=hostel, now=now)

    def _check_duplicate(self, subject: Subject, calendar_date: date) -> None:
        marked = _storage_call("duplicate check", self._ledger.has_marked_today, subject.subject_id, calendar_date)
        if marked:
            logger.info("Rejected %s: already marked for %s", subject.subject_id, calendar_date)
            raise DuplicateRecordError(subject.subject_id, calendar_date)

        # any record for the day, absences included
        existing = _storage_call(
            "duplicate check", self._ledger.get_for_subject_and_date, subject.subject_id, calendar_date
        )
        if existing is not None:
            logger.info(
                "Rejected %s: %s already recorded for %s",
                subject.subject_id,
                "presence" if existing.is_present else "absence",
                calendar_date,
            )
            raise DuplicateRecordError(subject.subject_id, calendar_date)

    def _check_geofence(self, subject: Subject, request: CheckInRequest) -> Optional[str]:
        hostel = request.claimed_hostel or subject.hostel_block
        if request.gps_bypassed:
            logger.info("Geofence skipped for %s: no GPS available", subject.subject_id)
            return hostel

        if not hostel:
            raise ValidationError("claimedHostel is required")
        boundary = self._hostels.get(hostel)
        if boundary is None:
            raise ValidationError(f"No boundary configured for hostel '{hostel}'")

        result = evaluator.evaluate(request.captured_point, boundary)
        if result.distance_meters is not None:
            logger.info(
                "Distance from %s center: %.2fm (inside=%s)", hostel, result.distance_meters, result.inside
            )
        if not result.inside:
            logger.info("Rejected %s: outside %s", subject.subject_id, hostel)
            raise OutsideGeofenceError(hostel, result.distance_meters)
        return hostel

    def _check_face(self, subject: Subject, request: CheckInRequest) -> None:
        enrollment = self._gate.require_enrollment(subject.enrollment)
        if not request.photo:
            raise ValidationError("photo is required when marking present")

        started = now_local()
        try:
            probe = self._embedder.embed(request.photo)
        except DomainError:
            raise
        except Exception as e:
            logger.error("Embedding generator failed for %s: %s", subject.subject_id, e, exc_info=True)
            raise EmbeddingServiceError("Face verification service error. Please try again.") from e
        elapsed_ms = (now_local() - started).total_seconds() * 1000

        decision = self._gate.verify(enrollment, probe)
        logger.info(
            "Face ID verified for %s: %.2f%% similarity (%.0fms)", subject.subject_id, decision.score, elapsed_ms
        )

    def _commit(self, subject: Subject, request: CheckInRequest, *, hostel: Optional[str], now: datetime) -> AttendanceRecord:
        try:
            record = _storage_call(
                "commit",
                self._ledger.commit,
                subject_id=subject.subject_id,
                calendar_date=request.calendar_date,
                is_present=request.is_present,
                captured_point=request.captured_point,
                marked_at=now,
                claimed_hostel=hostel,
                reason=request.reason,
            )
        except DuplicateRecordError:
            logger.info("Rejected %s: concurrent request committed first", subject.subject_id)
            raise
        logger.info("Attendance %s committed for %s on %s", record.attendance_id, subject.subject_id, record.calendar_date)
        return record


class AttendanceService:
    """Read and administrative operations over the ledger."""

    def __init__(self, ledger: AttendanceLedger, subjects: SubjectRepository, *, history_limit: int = DEFAULT_HISTORY_LIMIT):
        self._ledger = ledger
        self._subjects = subjects
        self._history_limit = int(history_limit)

    def _require_subject(self, subject_id: str) -> Subject:
        subject = _storage_call("subject lookup", self._subjects.get_by_id, subject_id)
        if not subject:
            raise SubjectNotFoundError(subject_id)
        return subject

    def check(self, subject_id: str, calendar_date: date) -> Tuple[bool, Optional[AttendanceRecord]]:
        """Whether the day is taken for the subject, plus that day's record if any."""
        record = _storage_call("check", self._ledger.get_for_subject_and_date, subject_id, calendar_date)
        if record is not None:
            return True, record
        marked = _storage_call("check", self._ledger.has_marked_today, subject_id, calendar_date)
        return marked, None

    def history(self, subject_id: str, *, limit: int | None = None) -> Sequence[AttendanceRecord]:
        self._require_subject(subject_id)
        return _storage_call("history", self._ledger.list_for_subject, subject_id, limit or self._history_limit)

    def for_date(self, calendar_date: date) -> Sequence[AttendanceRecord]:
        return _storage_call("list by date", self._ledger.list_for_date, calendar_date)

    def today(self) -> Sequence[AttendanceRecord]:
        return self.for_date(today_local())

    def stats(self, subject_id: str) -> AttendanceStats:
        self._require_subject(subject_id)
        counts = _storage_call("stats", self._ledger.count_by_presence, subject_id)
        return AttendanceStats(present=counts.get(True, 0), absent=counts.get(False, 0))

    def delete(self, subject_id: str, calendar_date: date) -> int:
        deleted = _storage_call(
            "delete", self._ledger.delete_for_subject_and_date, subject_id, calendar_date
        )
        logger.info("Deleted %d attendance record(s) for %s on %s", deleted, subject_id, calendar_date)
        return deleted
