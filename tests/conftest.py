from __future__ import annotations

import io

import pytest
from PIL import Image


def _encode_image(fmt: str) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (1, 1), (255, 0, 0)).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return _encode_image("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return _encode_image("JPEG")


class FailingReader:
    """Readable reference whose read always fails."""

    def __init__(self, message: str = "disk on fire") -> None:
        self._message = message

    def read(self) -> bytes:
        raise OSError(self._message)


@pytest.fixture
def failing_reader() -> FailingReader:
    return FailingReader()
