from math import sqrt

import pytest

from hostel_attendance.biometrics.model import EnrollmentProfile
from hostel_attendance.biometrics.similarity import SimilarityGate, cosine_similarity_score
from hostel_attendance.core.constants import FACE_MATCH_THRESHOLD
from hostel_attendance.core.exceptions import EmbeddingServiceError, FaceMismatchError, MissingEnrollmentError


def _profile(*values: float) -> EnrollmentProfile:
    return EnrollmentProfile(subject_id="stu-1", embedding=tuple(values))


def test_threshold_boundary():
    gate = SimilarityGate()

    assert gate.accepts(50.0) is True
    assert gate.accepts(49.99) is False


def test_identical_vectors_score_100():
    assert cosine_similarity_score([0.3, -0.2, 0.9], [0.3, -0.2, 0.9]) == pytest.approx(100.0)


def test_scale_does_not_change_score():
    assert cosine_similarity_score([1.0, 2.0], [10.0, 20.0]) == pytest.approx(100.0)


def test_opposite_vectors_clamp_to_zero():
    assert cosine_similarity_score([1.0, 0.0], [-1.0, 0.0]) == 0.0


def test_zero_vector_scores_zero():
    assert cosine_similarity_score([0.0, 0.0], [1.0, 0.0]) == 0.0


def test_verify_accepts_80_percent_match():
    decision = SimilarityGate().verify(_profile(1.0, 0.0), (0.8, 0.6))

    assert decision.score == pytest.approx(80.0)


def test_verify_rejects_below_threshold_with_score():
    probe = (0.4999, sqrt(1 - 0.4999**2))

    with pytest.raises(FaceMismatchError) as exc:
        SimilarityGate().verify(_profile(1.0, 0.0), probe)

    assert exc.value.score == pytest.approx(49.99)
    assert exc.value.to_dict()["details"]["score"] == pytest.approx(49.99)


def test_missing_enrollment_is_rejected():
    gate = SimilarityGate()

    with pytest.raises(MissingEnrollmentError):
        gate.require_enrollment(None)
    with pytest.raises(MissingEnrollmentError):
        gate.verify(None, (1.0, 0.0))
    with pytest.raises(MissingEnrollmentError):
        gate.verify(_profile(), (1.0, 0.0))


def test_dimension_mismatch_is_an_embedding_error():
    with pytest.raises(EmbeddingServiceError):
        SimilarityGate().verify(_profile(1.0, 0.0, 0.0), (1.0, 0.0))


@pytest.mark.parametrize(
    "probe",
    [(float("nan"), 0.0), (float("inf"), 0.0), (1.0, float("-inf"))],
)
def test_non_finite_probe_is_an_embedding_error_not_a_match(probe):
    with pytest.raises(EmbeddingServiceError):
        SimilarityGate().verify(_profile(1.0, 0.0), probe)


def test_non_finite_stored_embedding_is_an_embedding_error():
    with pytest.raises(EmbeddingServiceError):
        cosine_similarity_score([float("nan"), 1.0], [1.0, 1.0])


def test_overflowing_vectors_do_not_score():
    # finite components whose norms overflow to inf
    with pytest.raises(EmbeddingServiceError):
        cosine_similarity_score([1e308, 1e308], [1e308, 1e308])


def test_threshold_is_not_configurable():
    with pytest.raises(TypeError):
        SimilarityGate(threshold=10.0)

    assert SimilarityGate().accepts(FACE_MATCH_THRESHOLD) is True
