"""Tests for image capture decoding and normalization."""

import base64
import io

import pytest
from PIL import Image

from calorie_tracker.domain.capture import CapturedImage
from calorie_tracker.domain.errors import CaptureError
from calorie_tracker.services.capture import (
    MAX_IMAGE_BYTES,
    capture_from_payload,
    decode_image_payload,
    normalize_capture,
)
from tests.conftest import make_data_url, make_image_bytes

JPEG_MAGIC = b"\xff\xd8\xff"


def test_png_data_url_becomes_jpeg() -> None:
    image = capture_from_payload(make_data_url("PNG", "RGBA"))

    assert image.mime_type == "image/jpeg"
    assert image.data.startswith(JPEG_MAGIC)
    decoded = Image.open(io.BytesIO(image.data))
    assert decoded.mode == "RGB"
    assert decoded.size == (8, 8)


def test_bare_base64_with_mime_type() -> None:
    encoded = base64.b64encode(make_image_bytes("JPEG", "RGB")).decode()

    image = capture_from_payload(encoded, "image/jpeg")

    assert image.data.startswith(JPEG_MAGIC)


@pytest.mark.parametrize("mode", ["L", "P", "LA"])
def test_other_modes_are_converted(mode: str) -> None:
    output = io.BytesIO()
    Image.new(mode, (4, 4)).save(output, format="PNG")

    image = normalize_capture(output.getvalue())

    assert Image.open(io.BytesIO(image.data)).mode == "RGB"


def test_non_image_mime_is_rejected() -> None:
    encoded = base64.b64encode(b"%PDF-1.4").decode()

    with pytest.raises(CaptureError, match="application/pdf"):
        decode_image_payload(f"data:application/pdf;base64,{encoded}")


def test_invalid_base64_is_rejected() -> None:
    with pytest.raises(CaptureError, match="base64"):
        decode_image_payload("data:image/png;base64,not base64!!")


def test_empty_payload_is_rejected() -> None:
    with pytest.raises(CaptureError, match="empty"):
        decode_image_payload("data:image/png;base64,")


def test_oversized_payload_is_rejected() -> None:
    encoded = base64.b64encode(b"\x00" * (MAX_IMAGE_BYTES + 1)).decode()

    with pytest.raises(CaptureError, match="too large"):
        decode_image_payload(encoded)


def test_unreadable_image_is_rejected() -> None:
    with pytest.raises(CaptureError, match="Could not read the image"):
        normalize_capture(b"definitely not an image")


def test_captured_image_data_url() -> None:
    image = CapturedImage(data=b"fake")

    assert image.base64 == "ZmFrZQ=="
    assert image.data_url == "data:image/jpeg;base64,ZmFrZQ=="
