"""
Unit tests for the image format boundary and previews
"""

import base64

import pytest

from core.constants import Colors
from core.exceptions import ImageDecodeError
from core.image.converters import (
    decode_image,
    decode_image_from_base64,
    encode_image,
    encode_image_to_base64,
    from_base64,
    to_base64,
)
from core.image.processors import create_preview, fit_scale, magnify
from core.pixel_buffer import PixelBuffer


class TestImageConverters:
    """Test encoding and decoding of pixel buffers"""

    @pytest.fixture
    def translucent_buffer(self, gradient_buffer):
        gradient_buffer.set_pixel(1, 1, 0x80102030)
        gradient_buffer.set_pixel(2, 1, 0x00000000)
        return gradient_buffer

    def test_png_round_trip(self, translucent_buffer):
        """Test PNG keeps every channel including alpha"""
        data = encode_image(translucent_buffer, ".png")

        assert data[:8] == b"\x89PNG\r\n\x1a\n"
        assert decode_image(data) == translucent_buffer

    def test_bmp_encode(self, gradient_buffer):
        data = encode_image(gradient_buffer, ".bmp")

        assert data[:2] == b"BM"
        assert decode_image(data).size == gradient_buffer.size

    def test_jpeg_encode(self, gradient_buffer):
        data = encode_image(gradient_buffer, ".jpg")

        assert data[:2] == b"\xff\xd8"
        decoded = decode_image(data)
        assert decoded.size == (64, 48)
        assert decoded.get_pixel(0, 0) >> 24 == 0xFF

    def test_decode_empty(self):
        with pytest.raises(ImageDecodeError):
            decode_image(b"")

    def test_decode_garbage(self):
        with pytest.raises(ImageDecodeError):
            decode_image(b"not an image at all")

    def test_base64_round_trip(self, red_buffer):
        encoded = encode_image_to_base64(red_buffer)

        assert decode_image_from_base64(encoded) == red_buffer

    def test_data_url_prefix(self):
        payload = to_base64(b"\x01\x02\x03")

        assert from_base64(f"data:image/png;base64,{payload}") == b"\x01\x02\x03"

    def test_invalid_base64(self):
        with pytest.raises(ImageDecodeError):
            from_base64("not*base64!")


class TestPreview:
    """Test magnification and preview creation"""

    def test_magnify(self, gradient_buffer):
        enlarged = magnify(gradient_buffer, 3)

        assert enlarged.size == (192, 144)
        assert enlarged.get_pixel(0, 0) == gradient_buffer.get_pixel(0, 0)
        assert enlarged.get_pixel(5, 5) == gradient_buffer.get_pixel(1, 1)
        assert enlarged.get_pixel(191, 143) == gradient_buffer.get_pixel(63, 47)

    def test_magnify_one_copies(self, red_buffer):
        copy = magnify(red_buffer, 1)

        assert copy == red_buffer
        assert copy is not red_buffer

    def test_magnify_invalid_scale(self, red_buffer):
        with pytest.raises(ValueError):
            magnify(red_buffer, 0)

    def test_fit_scale(self):
        assert fit_scale(PixelBuffer(4, 4), 512) == 16
        assert fit_scale(PixelBuffer(100, 50), 512) == 5
        assert fit_scale(PixelBuffer(600, 10), 512) == 1

    def test_create_preview(self, red_buffer):
        image_base64, size = create_preview(red_buffer, 4)

        assert size == (16, 16)
        preview = decode_image(base64.b64decode(image_base64))
        assert preview.size == (16, 16)
        assert preview.get_pixel(15, 15) == Colors.RED
