from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..biometrics.model import EnrollmentProfile


@dataclass(frozen=True)
class Subject:
    """A student who can mark attendance.

    Note: account data (credentials, room, roles) lives in the surrounding
    system; only what verification needs is modelled here.
    """

    subject_id: str
    name: str
    hostel_block: Optional[str] = None
    face_embedding: Optional[Tuple[float, ...]] = None

    @property
    def enrollment(self) -> Optional[EnrollmentProfile]:
        if not self.face_embedding:
            return None
        return EnrollmentProfile(subject_id=self.subject_id, embedding=self.face_embedding)
