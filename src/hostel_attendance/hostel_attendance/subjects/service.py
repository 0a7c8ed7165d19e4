from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..biometrics.generator import EmbeddingGenerator
from ..common.validators import require_non_empty
from ..core.exceptions import EmbeddingServiceError, SubjectNotFoundError
from ..core.logging import get_logger
from .model import Subject
from .repository import SubjectRepository

logger = get_logger(__name__)


class EnrollmentService:
    """Use case: register a subject's face so later check-ins can be verified."""

    def __init__(self, subjects: SubjectRepository, embedder: EmbeddingGenerator):
        self._subjects = subjects
        self._embedder = embedder

    def get_subject(self, subject_id: str) -> Subject:
        subject = self._subjects.get_by_id(subject_id)
        if not subject:
            raise SubjectNotFoundError(subject_id)
        return subject

    def is_enrolled(self, subject_id: str) -> bool:
        return self.get_subject(subject_id).enrollment is not None

    def enroll(self, subject_id: str, photo: Optional[str], *, now: datetime | None = None) -> int:
        """Store the embedding of ``photo``; returns the vector length."""
        subject = self.get_subject(subject_id)
        photo = require_non_empty(photo, "photo")

        embedding = self._embedder.embed(photo)
        if len(embedding) == 0:
            raise EmbeddingServiceError("Face embedding service returned an empty vector")

        replaced = subject.enrollment is not None
        self._subjects.set_face_embedding(subject.subject_id, embedding, enrolled_at=now or datetime.now())
        logger.info(
            "Face ID %s for %s (%d dims)",
            "re-enrolled" if replaced else "enrolled",
            subject.subject_id,
            len(embedding),
        )
        return len(embedding)
