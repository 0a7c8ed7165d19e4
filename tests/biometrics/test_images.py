import base64

import cv2
import numpy as np
import pytest

from hostel_attendance.biometrics.images import decode_base64_payload, decode_image, sanitize_data_url
from hostel_attendance.core.exceptions import ValidationError


def _png_data_url(img: np.ndarray) -> str:
    ok, buf = cv2.imencode(".png", img)
    assert ok
    return "data:image/png;base64," + base64.b64encode(buf.tobytes()).decode("ascii")


def test_double_prefix_is_collapsed():
    doubled = "data:image/jpeg;base64,data:image/png;base64,QUJD"

    assert sanitize_data_url(doubled) == "data:image/jpeg;base64,QUJD"
    assert decode_base64_payload(doubled) == b"ABC"


def test_single_prefix_is_untouched():
    assert sanitize_data_url("data:image/png;base64,QUJD") == "data:image/png;base64,QUJD"


def test_bare_base64_is_accepted():
    assert decode_base64_payload("QUJD") == b"ABC"


def test_invalid_base64_is_a_validation_error():
    with pytest.raises(ValidationError):
        decode_base64_payload("data:image/png;base64,@@@not-base64@@@")


def test_non_image_bytes_are_rejected():
    with pytest.raises(ValidationError):
        decode_image("data:image/png;base64," + base64.b64encode(b"plain text").decode("ascii"))


def test_bgr_image_is_returned_as_rgb():
    bgr = np.zeros((4, 6, 3), dtype=np.uint8)
    bgr[:, :, 0] = 255  # blue channel

    rgb = decode_image(_png_data_url(bgr))

    assert rgb.shape == (4, 6, 3)
    assert rgb.dtype == np.uint8
    assert rgb[0, 0].tolist() == [0, 0, 255]


def test_grayscale_image_gets_three_channels():
    gray = np.full((5, 5), 128, dtype=np.uint8)

    rgb = decode_image(_png_data_url(gray))

    assert rgb.shape == (5, 5, 3)
