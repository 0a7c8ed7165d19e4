from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Subject


class SubjectRepository(Protocol):
    """Repository interface for subjects; services depend on this, not on MySQL."""

    def get_by_id(self, subject_id: str) -> Optional[Subject]:
        raise NotImplementedError

    def set_face_embedding(self, subject_id: str, embedding: Sequence[float], *, enrolled_at: datetime) -> bool:
        raise NotImplementedError
