"""Decoding and normalizing captured images."""

import base64
import binascii
import io
import logging

from PIL import Image, UnidentifiedImageError

from calorie_tracker.domain.capture import CapturedImage
from calorie_tracker.domain.errors import CaptureError

logger = logging.getLogger(__name__)

JPEG_QUALITY = 95
MAX_IMAGE_BYTES = 10 * 1024 * 1024


def decode_image_payload(image: str, mime_type: str | None = None) -> bytes:
    """Decode a data URL or bare base64 string into raw bytes."""
    payload = image.strip()
    if payload.startswith("data:"):
        header, _, payload = payload.partition(",")
        declared = header[len("data:") :].split(";", maxsplit=1)[0]
        mime_type = declared or mime_type
    if mime_type and not mime_type.startswith("image/"):
        raise CaptureError(f"Unsupported file type: {mime_type}")
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise CaptureError("Image payload is not valid base64.") from exc
    if not data:
        raise CaptureError("Image payload is empty.")
    if len(data) > MAX_IMAGE_BYTES:
        raise CaptureError("Image is too large.")
    return data


def normalize_capture(raw: bytes) -> CapturedImage:
    """Re-encode any readable image as an RGB JPEG."""
    try:
        img = Image.open(io.BytesIO(raw))
        img.load()
    except (UnidentifiedImageError, OSError) as exc:
        logger.warning("Rejected unreadable image (%d bytes)", len(raw))
        raise CaptureError("Could not read the image. Try another photo.") from exc

    if img.mode in ("RGBA", "LA", "P"):
        if img.mode == "P":
            img = img.convert("RGBA")
        background = Image.new("RGB", img.size, (255, 255, 255))
        background.paste(img, mask=img.split()[-1])
        img = background
    elif img.mode != "RGB":
        img = img.convert("RGB")

    output = io.BytesIO()
    img.save(output, format="JPEG", quality=JPEG_QUALITY)
    return CapturedImage(data=output.getvalue(), mime_type="image/jpeg")


def capture_from_payload(image: str, mime_type: str | None = None) -> CapturedImage:
    """Decode an uploaded payload and normalize it for analysis."""
    return normalize_capture(decode_image_payload(image, mime_type))
