from datetime import datetime

import pytest

from hostel_attendance.core.exceptions import EmbeddingServiceError, SubjectNotFoundError, ValidationError
from hostel_attendance.subjects.service import EnrollmentService

from conftest import InMemorySubjects, StubEmbedder


@pytest.fixture
def subjects(enrolled_subject, unenrolled_subject):
    return InMemorySubjects(enrolled_subject, unenrolled_subject)


def test_enroll_stores_embedding(subjects):
    service = EnrollmentService(subjects, StubEmbedder((0.1, 0.2, 0.3)))

    assert service.is_enrolled("stu-2") is False
    dims = service.enroll("stu-2", "data:image/jpeg;base64,AAAA", now=datetime(2026, 2, 1, 7, 0))

    assert dims == 3
    assert service.is_enrolled("stu-2") is True
    assert subjects.get_by_id("stu-2").face_embedding == (0.1, 0.2, 0.3)


def test_re_enroll_replaces_embedding(subjects):
    service = EnrollmentService(subjects, StubEmbedder((0.0, 1.0)))

    service.enroll("stu-1", "photo")

    assert subjects.get_by_id("stu-1").face_embedding == (0.0, 1.0)


def test_unknown_subject(subjects):
    service = EnrollmentService(subjects, StubEmbedder())

    with pytest.raises(SubjectNotFoundError):
        service.enroll("ghost", "photo")
    with pytest.raises(SubjectNotFoundError):
        service.is_enrolled("ghost")


def test_photo_is_required(subjects):
    embedder = StubEmbedder()
    service = EnrollmentService(subjects, embedder)

    with pytest.raises(ValidationError):
        service.enroll("stu-2", "   ")
    assert embedder.calls == 0


def test_empty_vector_is_rejected(subjects):
    service = EnrollmentService(subjects, StubEmbedder(()))

    with pytest.raises(EmbeddingServiceError):
        service.enroll("stu-2", "photo")
    assert subjects.get_by_id("stu-2").face_embedding is None
