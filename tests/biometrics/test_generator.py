import threading

import pytest

from hostel_attendance.biometrics.generator import BoundedEmbeddingGenerator
from hostel_attendance.core.exceptions import EmbeddingServiceError, ValidationError


class SlowGenerator:
    def __init__(self):
        self.release = threading.Event()

    def embed(self, photo):
        self.release.wait(5)
        return (1.0, 0.0)


class FailingGenerator:
    def __init__(self, error):
        self.error = error

    def embed(self, photo):
        raise self.error


class FixedGenerator:
    def embed(self, photo):
        return (0.1, 0.2, 0.3)


def test_returns_generator_output():
    bounded = BoundedEmbeddingGenerator(FixedGenerator(), timeout_seconds=1)
    try:
        assert bounded.embed("data") == (0.1, 0.2, 0.3)
    finally:
        bounded.shutdown()


def test_timeout_becomes_embedding_service_error():
    slow = SlowGenerator()
    bounded = BoundedEmbeddingGenerator(slow, timeout_seconds=0.05, max_workers=1)
    try:
        with pytest.raises(EmbeddingServiceError, match="timed out"):
            bounded.embed("data")
    finally:
        slow.release.set()
        bounded.shutdown()


def test_unexpected_failure_becomes_embedding_service_error():
    bounded = BoundedEmbeddingGenerator(FailingGenerator(RuntimeError("model crashed")), timeout_seconds=1)
    try:
        with pytest.raises(EmbeddingServiceError) as exc:
            bounded.embed("data")
        assert isinstance(exc.value.__cause__, RuntimeError)
    finally:
        bounded.shutdown()


def test_domain_errors_pass_through():
    bounded = BoundedEmbeddingGenerator(FailingGenerator(ValidationError("bad photo")), timeout_seconds=1)
    try:
        with pytest.raises(ValidationError):
            bounded.embed("data")
    finally:
        bounded.shutdown()
