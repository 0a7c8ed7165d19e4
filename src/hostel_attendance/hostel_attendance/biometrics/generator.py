from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Protocol, Sequence

from ..core.constants import DEFAULT_EMBEDDING_TIMEOUT_SECONDS, DEFAULT_EMBEDDING_WORKERS
from ..core.exceptions import DomainError, EmbeddingServiceError
from ..core.logging import get_logger

logger = get_logger(__name__)


class EmbeddingGenerator(Protocol):
    """Image -> fixed-length face vector. The model behind it is opaque to the core."""

    def embed(self, photo: str) -> Sequence[float]:
        raise NotImplementedError


class BoundedEmbeddingGenerator:
    """Run a generator on a small worker pool and give up after ``timeout_seconds``.

    A timed-out call keeps running in its worker until the model returns; the
    request is answered with ``EmbeddingServiceError`` immediately.
    """

    def __init__(
        self,
        generator: EmbeddingGenerator,
        *,
        timeout_seconds: float = DEFAULT_EMBEDDING_TIMEOUT_SECONDS,
        max_workers: int = DEFAULT_EMBEDDING_WORKERS,
    ):
        self._generator = generator
        self._timeout = float(timeout_seconds)
        self._pool = ThreadPoolExecutor(max_workers=int(max_workers), thread_name_prefix="embedding")

    def embed(self, photo: str) -> Sequence[float]:
        future = self._pool.submit(self._generator.embed, photo)
        try:
            return future.result(timeout=self._timeout)
        except FutureTimeout:
            future.cancel()
            logger.warning("Embedding generation timed out after %.1fs", self._timeout)
            raise EmbeddingServiceError("Face verification timed out. Please try again.") from None
        except DomainError:
            raise
        except Exception as e:
            logger.error("Embedding generation failed: %s", e, exc_info=True)
            raise EmbeddingServiceError("Face verification service error. Please try again.") from e

    def shutdown(self) -> None:
        self._pool.shutdown(wait=False)
