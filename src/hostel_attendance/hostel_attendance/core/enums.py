from __future__ import annotations

from enum import Enum


class RejectionKind(str, Enum):
    """Discriminator sent to clients so they can map a failure to a form field."""

    DUPLICATE_RECORD = "duplicate_record"
    OUTSIDE_GEOFENCE = "outside_geofence"
    MISSING_ENROLLMENT = "missing_enrollment"
    FACE_MISMATCH = "face_mismatch"
    EMBEDDING_SERVICE_ERROR = "embedding_service_error"
    SUBJECT_NOT_FOUND = "subject_not_found"
    VALIDATION_ERROR = "validation_error"
    STORAGE_ERROR = "storage_error"


class BoundaryMode(str, Enum):
    POLYGON = "polygon"
    RADIUS = "radius"
