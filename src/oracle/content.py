"""Reference content sniffing.

References arrive as opaque bytes. Before a message can be built the client
needs to know whether a payload is an image (and which codec) or should be
treated as text; this module is the only place that makes that call.
"""

from __future__ import annotations

import base64
import io
from dataclasses import dataclass
from enum import Enum
from typing import Final

from PIL import Image

SUPPORTED_IMAGE_FORMATS: Final[tuple[str, ...]] = ("PNG", "JPEG", "GIF", "WEBP")
TEXT_MEDIA_TYPE: Final[str] = "text/plain"


class ContentKind(str, Enum):
    """Kind of content carried by a reference."""

    IMAGE = "image"
    TEXT = "text"


@dataclass(frozen=True)
class Classification:
    """Result of sniffing a reference payload.

    Attributes:
        kind: Whether the payload decoded as an image.
        media_type: Detected MIME type (``text/plain`` for non-images).
    """

    kind: ContentKind
    media_type: str = TEXT_MEDIA_TYPE

    @property
    def is_image(self) -> bool:
        return self.kind is ContentKind.IMAGE


TEXT = Classification(kind=ContentKind.TEXT)


def classify(data: bytes) -> Classification:
    """Classify a payload by attempting to decode it as a raster image.

    Unrecognised or corrupt payloads are classified as text; this never raises.
    """

    if not data:
        return TEXT
    try:
        with Image.open(io.BytesIO(data), formats=SUPPORTED_IMAGE_FORMATS) as image:
            image.load()
            image_format = image.format
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError):
        return TEXT
    if image_format is None:
        return TEXT
    media_type = Image.MIME.get(image_format, f"image/{image_format.lower()}")
    return Classification(kind=ContentKind.IMAGE, media_type=media_type)


def is_image(data: bytes) -> bool:
    """Return True when ``data`` decodes as a supported image format."""

    return classify(data).is_image


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def to_data_uri(data: bytes, media_type: str) -> str:
    """Return a ``data:`` URI embedding ``data`` as base64."""

    return f"data:{media_type};base64,{encode_base64(data)}"
