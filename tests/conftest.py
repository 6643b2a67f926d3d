import io
import struct
import zlib

import httpx
import pytest
from PIL import Image


@pytest.fixture
def sample_image():
    """Small RGB image with a gradient so JPEG output is non-trivial."""
    img = Image.new("RGB", (64, 48))
    for x in range(64):
        for y in range(48):
            img.putpixel((x, y), (x * 4, y * 5, 128))
    return img


@pytest.fixture
def sample_image_bytes(sample_image):
    """PNG encoding of ``sample_image``."""
    buf = io.BytesIO()
    sample_image.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "ImageCache"


@pytest.fixture
def make_client():
    """Build an AsyncClient whose requests are answered by ``handler``."""
    clients: list[httpx.AsyncClient] = []

    def _make(handler, **kwargs) -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), **kwargs)
        clients.append(client)
        return client

    return _make


def _png_chunk(tag: bytes, data: bytes) -> bytes:
    crc = zlib.crc32(tag + data) & 0xFFFFFFFF
    return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", crc)


@pytest.fixture
def oversized_png_bytes():
    """PNG header claiming 20000x20000 pixels, past Pillow's bomb limit."""
    header = struct.pack(">IIBBBBB", 20000, 20000, 8, 2, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + _png_chunk(b"IHDR", header) + _png_chunk(b"IEND", b"")
