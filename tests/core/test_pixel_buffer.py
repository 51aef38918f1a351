"""
Unit tests for PixelBuffer
"""

import numpy as np
import pytest

from core.color_model import HslColor, RgbColor
from core.constants import Colors
from core.exceptions import DimensionMismatchError, InvalidDimensionsError, PixelOutOfRangeError
from core.pixel_buffer import PixelBuffer


class TestPixelBuffer:
    """Test PixelBuffer storage and access"""

    def test_initialization(self, small_buffer):
        """Test new buffers are transparent black"""
        assert small_buffer.width == 8
        assert small_buffer.height == 6
        assert small_buffer.size == (8, 6)
        assert small_buffer.data.shape == (48,)
        assert small_buffer.data.dtype == np.uint32
        assert not small_buffer.data.any()

    @pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (-1, 3)])
    def test_invalid_dimensions(self, width, height):
        """Test non-positive dimensions are rejected"""
        with pytest.raises(InvalidDimensionsError):
            PixelBuffer(width, height)

    def test_set_get_pixel(self, small_buffer):
        """Test pixel round trip and row-major indexing"""
        small_buffer.set_pixel(3, 2, 0x80112233)

        assert small_buffer.get_pixel(3, 2) == 0x80112233
        assert small_buffer.data[2 * 8 + 3] == 0x80112233
        assert small_buffer.pixels[2, 3] == 0x80112233

    def test_set_pixel_color_objects(self, small_buffer):
        """Test RgbColor and HslColor are packed on write"""
        small_buffer.set_pixel(0, 0, RgbColor(1, 2, 3, 4))
        small_buffer.set_pixel(1, 0, HslColor(0.0, 1.0, 0.5))

        assert small_buffer.get_pixel(0, 0) == 0x04010203
        assert small_buffer.get_pixel(1, 0) == Colors.RED

    def test_set_rgba_masks_channels(self, small_buffer):
        """Test raw components are masked to 8 bits"""
        small_buffer.set_rgba(0, 0, 0x1FF, 0, 0x100)

        assert small_buffer.get_pixel(0, 0) == 0xFFFF0000

    def test_out_of_range_access(self, small_buffer):
        """Test checked access outside the buffer raises"""
        with pytest.raises(PixelOutOfRangeError):
            small_buffer.get_pixel(8, 0)
        with pytest.raises(IndexError):
            small_buffer.set_pixel(0, -1, Colors.WHITE)

    def test_set_pixel_safe_clips(self, small_buffer):
        """Test safe writes outside the buffer are ignored"""
        assert small_buffer.set_pixel_safe(7, 5, Colors.WHITE) is True
        assert small_buffer.set_pixel_safe(-1, 0, Colors.WHITE) is False
        assert small_buffer.set_pixel_safe(0, 6, Colors.WHITE) is False

        assert int(np.count_nonzero(small_buffer.data)) == 1

    def test_fill(self, small_buffer):
        """Test fill sets every pixel"""
        small_buffer.fill(Colors.BLUE)

        assert np.all(small_buffer.data == Colors.BLUE)

    def test_copy_is_independent(self, red_buffer):
        """Test copies do not share storage"""
        clone = red_buffer.copy()
        clone.set_pixel(0, 0, Colors.BLACK)

        assert red_buffer.get_pixel(0, 0) == Colors.RED
        assert clone != red_buffer

    def test_copy_from(self, red_buffer):
        """Test copying pixels between equal-size buffers"""
        target = PixelBuffer(4, 4)
        target.copy_from(red_buffer)

        assert target == red_buffer

    def test_copy_from_size_mismatch(self, red_buffer, small_buffer):
        """Test copying between different sizes raises"""
        with pytest.raises(DimensionMismatchError) as exc_info:
            small_buffer.copy_from(red_buffer)

        assert "8x6" in str(exc_info.value)
        assert "4x4" in str(exc_info.value)

    def test_channels_round_trip(self, gradient_buffer):
        """Test splitting into planes and packing back is lossless"""
        a, r, g, b = gradient_buffer.channels()
        rebuilt = PixelBuffer.from_channels(a, r, g, b)

        assert rebuilt == gradient_buffer
        assert r.shape == (48, 64)
        assert r.dtype == np.uint8

    def test_rgba_array_order(self):
        """Test RGBA export order and opaque default on RGB import"""
        buffer = PixelBuffer(1, 1)
        buffer.set_pixel(0, 0, 0x40102030)

        assert buffer.to_rgba_array()[0, 0].tolist() == [0x10, 0x20, 0x30, 0x40]

        rgb = np.array([[[1, 2, 3]]], dtype=np.uint8)
        imported = PixelBuffer.from_rgba_array(rgb)
        assert imported.get_pixel(0, 0) == 0xFF010203

    def test_from_grayscale_array(self):
        """Test 2D arrays import as opaque gray"""
        gray = np.array([[0, 128]], dtype=np.uint8)
        imported = PixelBuffer.from_rgba_array(gray)

        assert imported.size == (2, 1)
        assert imported.get_pixel(1, 0) == 0xFF808080

    def test_unsupported_array_shape(self):
        """Test arrays with the wrong channel count are rejected"""
        with pytest.raises(ValueError):
            PixelBuffer.from_rgba_array(np.zeros((2, 2, 2), dtype=np.uint8))
