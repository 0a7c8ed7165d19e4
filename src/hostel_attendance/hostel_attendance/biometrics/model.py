from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class EnrollmentProfile:
    """Stored face embedding of a subject. A subject without one is simply not enrolled."""

    subject_id: str
    embedding: Tuple[float, ...]


@dataclass(frozen=True)
class MatchDecision:
    """Accepted biometric comparison; ``score`` is cosine similarity on a 0..100 scale."""

    score: float
