from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from ..core.constants import FACE_MATCH_THRESHOLD
from ..core.exceptions import EmbeddingServiceError, FaceMismatchError, MissingEnrollmentError
from .model import EnrollmentProfile, MatchDecision


def cosine_similarity_score(stored: Sequence[float], probe: Sequence[float]) -> float:
    """Cosine similarity scaled to 0..100 (negative similarity is clamped to 0)."""
    a = np.asarray(stored, dtype=np.float64)
    b = np.asarray(probe, dtype=np.float64)
    if a.shape != b.shape or a.ndim != 1:
        raise EmbeddingServiceError(
            f"Embedding size mismatch (stored {a.size}, probe {b.size})"
        )
    if not (np.isfinite(a).all() and np.isfinite(b).all()):
        raise EmbeddingServiceError("Embedding contains non-finite values")

    norm = float(np.linalg.norm(a) * np.linalg.norm(b))
    if norm == 0.0:
        return 0.0
    similarity = float(np.dot(a, b)) / norm
    if not np.isfinite(similarity):
        raise EmbeddingServiceError("Similarity score is not a finite number")
    return max(0.0, min(100.0, similarity * 100.0))


class SimilarityGate:
    """Compare a stored enrollment against a freshly generated probe embedding."""

    def require_enrollment(self, enrollment: Optional[EnrollmentProfile]) -> EnrollmentProfile:
        # Checked before the probe embedding is generated so callers can skip that work.
        if enrollment is None or len(enrollment.embedding) == 0:
            raise MissingEnrollmentError(enrollment.subject_id if enrollment else None)
        return enrollment

    def accepts(self, score: float) -> bool:
        return score >= FACE_MATCH_THRESHOLD

    def verify(self, enrollment: Optional[EnrollmentProfile], probe: Sequence[float]) -> MatchDecision:
        profile = self.require_enrollment(enrollment)
        score = cosine_similarity_score(profile.embedding, probe)
        if not self.accepts(score):
            raise FaceMismatchError(score)
        return MatchDecision(score=score)
