"""Test configuration and fixtures for cl_thumbnailer.

This module provides:
- Synthetic image fixtures (encoded bytes generated with PIL)
- Storage fixtures (LocalFileStorage rooted in tmp_path)
- A loguru sink fixture for asserting on log output
- A FastAPI TestClient with the thumbnail router mounted
"""

import struct
import zlib
from collections.abc import Callable, Iterator
from io import BytesIO
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from loguru import logger
from PIL import Image, ImageDraw

ImageFactory = Callable[..., bytes]


# ============================================================================
# Synthetic Images
# ============================================================================


def _draw_pattern(img: Image.Image) -> None:
    draw = ImageDraw.Draw(img)
    width, height = img.size
    step = max(1, min(width, height) // 8)
    for i in range(0, width, step):
        draw.line([(i, 0), (i, height)], fill="white", width=1)
    for i in range(0, height, step):
        draw.line([(0, i), (width, i)], fill="white", width=1)
    draw.ellipse(
        [width // 4, height // 4, 3 * width // 4, 3 * height // 4],
        fill="red",
    )


@pytest.fixture
def make_image() -> ImageFactory:
    """Factory producing encoded synthetic images.

    Usage:
        data = make_image(4000, 2000, format="JPEG")
    """

    def factory(
        width: int,
        height: int,
        *,
        mode: str = "RGB",
        format: str = "PNG",
        color: object = (73, 109, 137),
    ) -> bytes:
        img = Image.new(mode, (width, height), color=color)
        if mode in ("RGB", "RGBA", "L"):
            _draw_pattern(img)
        buffer = BytesIO()
        img.save(buffer, format=format)
        img.close()
        return buffer.getvalue()

    return factory


@pytest.fixture
def sample_jpeg(make_image: ImageFactory) -> bytes:
    """800x600 JPEG photograph stand-in."""
    return make_image(800, 600, format="JPEG")


@pytest.fixture
def transparent_png(make_image: ImageFactory) -> bytes:
    """400x400 RGBA PNG drawn over a transparent black background."""
    return make_image(400, 400, mode="RGBA", color=(0, 0, 0, 0))


def _png_chunk(tag: bytes, payload: bytes) -> bytes:
    crc = zlib.crc32(tag + payload)
    return struct.pack(">I", len(payload)) + tag + payload + struct.pack(">I", crc)


@pytest.fixture
def huge_png_header() -> bytes:
    """PNG whose IHDR declares 30000x30000 RGB over a tiny pixel stream.

    The header reads fine. Decoding the pixels would need gigabytes.
    """
    ihdr = struct.pack(">IIBBBBB", 30000, 30000, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", ihdr)
        + _png_chunk(b"IDAT", zlib.compress(b"\x00" * 16))
        + _png_chunk(b"IEND", b"")
    )


@pytest.fixture
def grey16_png() -> Callable[[int, int, int], bytes]:
    """Factory for flat 16-bit greyscale PNGs: grey16_png(width, height, value)."""

    def factory(width: int, height: int, value: int) -> bytes:
        img = Image.new("I;16", (width, height), color=value)
        buffer = BytesIO()
        img.save(buffer, format="PNG")
        img.close()
        return buffer.getvalue()

    return factory


# ============================================================================
# Storage
# ============================================================================


@pytest.fixture
def file_storage(tmp_path: Path):
    """Provide LocalFileStorage rooted in a temp directory."""
    from cl_thumbnailer.common.file_storage_impl import LocalFileStorage

    return LocalFileStorage(base_dir=tmp_path / "file_storage")


# ============================================================================
# Logging
# ============================================================================


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


# ============================================================================
# API
# ============================================================================


@pytest.fixture
def api_client() -> TestClient:
    """Provide FastAPI TestClient with the thumbnail router mounted."""
    from cl_thumbnailer import create_router

    app = FastAPI()
    app.include_router(create_router())

    return TestClient(app)
