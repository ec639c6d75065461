"""Domain model for captured images."""

import base64
from dataclasses import dataclass


@dataclass(frozen=True)
class CapturedImage:
    """Image ready to be previewed and sent for analysis."""

    data: bytes
    mime_type: str = "image/jpeg"

    @property
    def base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    @property
    def data_url(self) -> str:
        return to_data_url(self.data, self.mime_type)


def to_data_url(image_bytes: bytes, mime_type: str) -> str:
    """Convert bytes to a base64 data URL for image input."""
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"
