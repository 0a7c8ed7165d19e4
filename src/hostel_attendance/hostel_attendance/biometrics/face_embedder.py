from __future__ import annotations

from typing import Tuple

import face_recognition

from ..core.exceptions import EmbeddingServiceError
from ..core.logging import get_logger
from .images import decode_image

logger = get_logger(__name__)


def _box_area(box) -> int:
    top, right, bottom, left = box
    return max(0, bottom - top) * max(0, right - left)


class FaceRecognitionEmbedder:
    """128-d dlib face encodings via the ``face_recognition`` package."""

    def __init__(self, *, detection_model: str = "hog", num_jitters: int = 1):
        self._detection_model = detection_model
        self._num_jitters = int(num_jitters)

    def embed(self, photo: str) -> Tuple[float, ...]:
        rgb = decode_image(photo)

        boxes = face_recognition.face_locations(rgb, model=self._detection_model)
        if not boxes:
            raise EmbeddingServiceError("No face detected in the captured photo. Please try again.")
        if len(boxes) > 1:
            logger.info("Detected %d faces, using the largest", len(boxes))
        box = max(boxes, key=_box_area)

        encodings = face_recognition.face_encodings(rgb, [box], num_jitters=self._num_jitters)
        if not encodings:
            raise EmbeddingServiceError("Could not encode the detected face. Please try again.")
        return tuple(float(v) for v in encodings[0])
