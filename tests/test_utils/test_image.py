"""Tests for image helpers."""

import io

import pytest
from PIL import Image

from agentchat.errors.exceptions import DecodeFailure
from agentchat.utils.image import (
    compress_image,
    decode_image,
    estimate_size,
    fit_size,
    generate_thumbnail,
    open_image,
)


class TestDecodeImage:
    def test_decodes_png(self, sample_image_bytes):
        img = decode_image(sample_image_bytes)
        assert img.size == (64, 48)

    def test_empty_bytes(self):
        with pytest.raises(DecodeFailure):
            decode_image(b"")

    def test_garbage(self):
        with pytest.raises(DecodeFailure) as exc_info:
            decode_image(b"garbage", source="https://x/y.jpg")
        assert exc_info.value.source == "https://x/y.jpg"

    def test_oversized_header(self, oversized_png_bytes):
        with pytest.raises(DecodeFailure):
            decode_image(oversized_png_bytes)


class TestOpenImage:
    def test_open(self, tmp_path, sample_image):
        path = tmp_path / "a.png"
        sample_image.save(path)
        assert open_image(path).size == (64, 48)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            open_image(tmp_path / "missing.png")

    def test_not_an_image(self, tmp_path):
        path = tmp_path / "a.png"
        path.write_text("text")
        with pytest.raises(DecodeFailure):
            open_image(path)

    def test_oversized_header(self, tmp_path, oversized_png_bytes):
        path = tmp_path / "huge.png"
        path.write_bytes(oversized_png_bytes)
        with pytest.raises(DecodeFailure):
            open_image(path)


class TestCompressImage:
    def test_produces_jpeg(self, sample_image):
        data = compress_image(sample_image, 0.7)
        with Image.open(io.BytesIO(data)) as img:
            assert img.format == "JPEG"
            assert img.size == sample_image.size

    def test_lower_quality_is_smaller(self, sample_image):
        assert len(compress_image(sample_image, 0.1)) < len(compress_image(sample_image, 0.95))

    def test_palette_and_alpha_modes(self):
        for mode in ("RGBA", "LA", "P"):
            assert compress_image(Image.new(mode, (8, 8)))


class TestThumbnail:
    @pytest.mark.parametrize(
        "source,box,expected",
        [
            ((300, 150), (150, 150), (150, 75)),
            ((150, 300), (150, 150), (75, 150)),
            ((50, 50), (150, 150), (150, 150)),
            ((100, 100), (0, 0), (0, 0)),
            ((0, 10), (150, 150), (0, 0)),
            ((1000, 3), (150, 150), (150, 1)),
            ((3, 1000), (150, 150), (1, 150)),
        ],
    )
    def test_fit_size(self, source, box, expected):
        assert fit_size(source, box) == expected

    def test_generate(self, sample_image):
        thumb = generate_thumbnail(sample_image, (32, 32))
        assert thumb.size == (32, 24)

    def test_zero_box_fails(self, sample_image):
        with pytest.raises(DecodeFailure):
            generate_thumbnail(sample_image, (0, 0))

    def test_elongated_source_keeps_one_pixel(self):
        thumb = generate_thumbnail(Image.new("RGB", (1000, 3)), (150, 150))
        assert thumb.size == (150, 1)


class TestEstimateSize:
    def test_rgb(self):
        assert estimate_size(Image.new("RGB", (10, 10))) == 300

    def test_rgba(self):
        assert estimate_size(Image.new("RGBA", (10, 10))) == 400
