from __future__ import annotations

from typing import Any, Dict, Optional

from .enums import RejectionKind


class DomainError(Exception):
    """Base exception for business rule violations.

    Each subclass carries a ``kind`` and an HTTP status so the controller layer
    can render a structured rejection without inspecting the message text.
    """

    kind: RejectionKind = RejectionKind.VALIDATION_ERROR
    status_code: int = 400

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"kind": self.kind.value, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class SubjectNotFoundError(DomainError):
    kind = RejectionKind.SUBJECT_NOT_FOUND
    status_code = 404

    def __init__(self, subject_id: str):
        super().__init__(f"Subject '{subject_id}' not found", details={"subjectId": subject_id})
        self.subject_id = subject_id


class DuplicateRecordError(DomainError):
    """Attendance already exists for the subject and date."""

    kind = RejectionKind.DUPLICATE_RECORD

    def __init__(self, subject_id: str, calendar_date):
        super().__init__(
            "Attendance already marked for this date.",
            details={"subjectId": subject_id, "date": calendar_date.isoformat()},
        )
        self.subject_id = subject_id
        self.calendar_date = calendar_date


class OutsideGeofenceError(DomainError):
    kind = RejectionKind.OUTSIDE_GEOFENCE

    def __init__(self, hostel: str, distance_meters: Optional[float] = None):
        message = f"Location validation failed. You are outside {hostel} boundaries."
        details: Dict[str, Any] = {"hostel": hostel}
        if distance_meters is not None:
            message = f"{message} Distance from center: {distance_meters:.1f}m."
            details["distanceMeters"] = round(distance_meters, 2)
        super().__init__(message, details=details)
        self.hostel = hostel
        self.distance_meters = distance_meters


class MissingEnrollmentError(DomainError):
    kind = RejectionKind.MISSING_ENROLLMENT

    def __init__(self, subject_id: Optional[str] = None):
        super().__init__(
            "Face ID not registered. Please register your Face ID first.",
            details={"subjectId": subject_id} if subject_id else None,
        )


class FaceMismatchError(DomainError):
    kind = RejectionKind.FACE_MISMATCH

    def __init__(self, score: float):
        super().__init__(
            f"Face mismatch! Similarity: {score:.1f}%. Please ensure it's you.",
            details={"score": round(score, 2)},
        )
        self.score = score


class EmbeddingServiceError(DomainError):
    """The face embedding generator failed, timed out or found no face. Retryable."""

    kind = RejectionKind.EMBEDDING_SERVICE_ERROR


class StorageError(DomainError):
    """Unexpected failure of the persistence layer."""

    kind = RejectionKind.STORAGE_ERROR
    status_code = 500
