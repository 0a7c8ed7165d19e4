from __future__ import annotations

import base64
import binascii

import cv2
import numpy as np

from ..core.exceptions import ValidationError

_B64_MARKER = "base64,"


def sanitize_data_url(photo: str) -> str:
    """Collapse a doubled data-URL prefix (``data:a;base64,data:b;base64,...``).

    Some clients prepend their own prefix to an already prefixed payload; only
    the last base64 segment is image data.
    """
    parts = photo.split(_B64_MARKER)
    if len(parts) > 2:
        return f"data:image/jpeg;base64,{parts[-1]}"
    return photo


def decode_base64_payload(photo: str) -> bytes:
    payload = sanitize_data_url(photo.strip())
    if _B64_MARKER in payload:
        payload = payload.split(_B64_MARKER, 1)[1]
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Photo is not valid base64 data") from None


def decode_image(photo: str) -> np.ndarray:
    """Decode a base64 photo into a contiguous RGB uint8 array."""
    nparr = np.frombuffer(decode_base64_payload(photo), np.uint8)
    img = cv2.imdecode(nparr, cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ValidationError("Photo could not be decoded as an image")

    # RGBA (PNG) -> BGR
    if len(img.shape) == 3 and img.shape[2] == 4:
        img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
    # Grayscale -> BGR
    elif len(img.shape) == 2:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)

    rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
    return np.ascontiguousarray(rgb, dtype=np.uint8)
