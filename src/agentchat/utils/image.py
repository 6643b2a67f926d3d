"""Image decoding, JPEG compression and thumbnail fitting."""

from __future__ import annotations

import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from agentchat.errors.exceptions import DecodeFailure

_JPEG_COMPATIBLE_MODES = {"RGB", "L", "CMYK"}


def decode_image(data: bytes, source: str = "") -> Image.Image:
    """Decode encoded image bytes into a fully loaded PIL image."""
    if not data:
        raise DecodeFailure("Empty image data", source=source)
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise DecodeFailure(f"Not a valid image: {e}", source=source) from e
    return img


def open_image(path: str | Path) -> Image.Image:
    """Open and fully load an image file. Raises OSError or DecodeFailure."""
    try:
        with Image.open(path) as img:
            img.load()
            return img.copy()
    except (UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise DecodeFailure(f"Not a valid image: {e}", source=str(path)) from e


def compress_image(image: Image.Image, quality: float = 0.7) -> bytes:
    """Encode an image as JPEG.

    ``quality`` is a 0-1 fraction, mapped onto Pillow's 1-95 scale.
    """
    if image.width < 1 or image.height < 1:
        raise DecodeFailure("Cannot compress an empty image")
    img = image if image.mode in _JPEG_COMPATIBLE_MODES else _flatten(image)
    buf = io.BytesIO()
    try:
        img.save(buf, format="JPEG", quality=_jpeg_quality(quality))
    except (OSError, ValueError) as e:
        raise DecodeFailure(f"JPEG encoding failed: {e}") from e
    return buf.getvalue()


def fit_size(source: tuple[int, int], box: tuple[int, int]) -> tuple[int, int]:
    """Scale ``source`` to fit inside ``box`` keeping its aspect ratio."""
    width, height = source
    if width <= 0 or height <= 0 or box[0] <= 0 or box[1] <= 0:
        return (0, 0)
    ratio = min(box[0] / width, box[1] / height)
    # very elongated sources still get a one-pixel edge
    return (max(1, round(width * ratio)), max(1, round(height * ratio)))


def generate_thumbnail(image: Image.Image, size: tuple[int, int] = (150, 150)) -> Image.Image:
    """Render an aspect-preserving thumbnail that fits inside ``size``."""
    target = fit_size(image.size, size)
    if target[0] < 1 or target[1] < 1:
        raise DecodeFailure(f"Thumbnail target {size} yields an empty image")
    return image.resize(target, Image.Resampling.LANCZOS)


def estimate_size(image: Image.Image) -> int:
    """Approximate in-memory cost of a decoded image, in bytes."""
    bands = len(image.getbands()) or 1
    return image.width * image.height * bands


def _flatten(image: Image.Image) -> Image.Image:
    # JPEG has no alpha channel: composite onto white
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return image.convert("RGB")


def _jpeg_quality(fraction: float) -> int:
    return max(1, min(95, round(fraction * 100)))
