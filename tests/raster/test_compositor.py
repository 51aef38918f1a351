"""
Unit tests for rotation and alpha compositing
"""

import numpy as np
import pytest

from core.constants import Colors
from core.pixel_buffer import PixelBuffer
from raster.compositor import (
    clock_hand_angles,
    compose_clock,
    compose_rotated,
    composite,
    rotate,
    sample_bilinear,
)


def assert_close(actual, expected, tolerance=1):
    """Compare packed colors channel by channel"""
    for shift in (24, 16, 8, 0):
        assert abs(((actual >> shift) & 0xFF) - ((expected >> shift) & 0xFF)) <= tolerance


class TestBilinearSampling:
    """Test fractional-coordinate sampling"""

    @pytest.fixture
    def ramp(self):
        """2x1 packed image: opaque black then opaque white"""
        return np.array([[Colors.BLACK, Colors.WHITE]], dtype=np.uint32)

    def test_integer_coordinates(self, ramp):
        result = sample_bilinear(ramp, np.array([0.0, 1.0]), np.array([0.0, 0.0]))

        assert result.tolist() == [Colors.BLACK, Colors.WHITE]

    def test_midpoint_truncates(self, ramp):
        """Test channels are interpolated and truncated"""
        result = sample_bilinear(ramp, np.array([0.5]), np.array([0.0]))

        assert int(result[0]) == 0xFF7F7F7F

    def test_outside_clamps_to_border(self, ramp):
        result = sample_bilinear(ramp, np.array([-3.0, 7.5]), np.array([-2.0, 4.0]))

        assert result.tolist() == [Colors.BLACK, Colors.WHITE]

    def test_alpha_is_interpolated(self):
        pixels = np.array([[0x00000000, 0xC8000000]], dtype=np.uint32)
        result = sample_bilinear(pixels, np.array([0.5]), np.array([0.0]))

        assert int(result[0]) >> 24 == 100


class TestRotate:
    """Test rotation about the buffer center"""

    def test_zero_angle_is_identity(self, gradient_buffer):
        rotated = rotate(gradient_buffer, 0.0)

        assert rotated == gradient_buffer
        assert rotated is not gradient_buffer

    def test_source_unchanged(self, gradient_buffer):
        before = gradient_buffer.copy()
        rotate(gradient_buffer, 33.0)

        assert gradient_buffer == before

    def test_uniform_buffer_stays_uniform(self, red_buffer):
        """Test border clamping keeps a uniform image uniform at any angle"""
        rotated = rotate(red_buffer, 90.0)

        assert rotated.size == red_buffer.size
        assert np.all(rotated.data == Colors.RED)

    def test_center_pixel_fixed(self):
        """Test the pixel at the rotation center keeps its color"""
        buffer = PixelBuffer(9, 9)
        buffer.fill(Colors.BLACK)
        buffer.set_pixel(4, 4, Colors.WHITE)
        buffer.set_pixel(8, 4, Colors.RED)

        rotated = rotate(buffer, 180.0)

        assert rotated.width == 9
        # Center is (4.5, 4.5); (5, 5) samples source (4, 4)
        assert_close(rotated.get_pixel(5, 5), Colors.WHITE)
        assert_close(rotated.get_pixel(1, 5), Colors.RED)


class TestComposite:
    """Test alpha blending of layers"""

    @pytest.fixture
    def background(self, gradient_buffer):
        return gradient_buffer

    def test_transparent_foreground_is_identity(self, background):
        before = background.copy()
        covered = composite(background, PixelBuffer(20, 10), 5, 5)

        assert covered == 200
        assert background == before

    def test_opaque_foreground_replaces(self, background):
        layer = PixelBuffer(4, 4)
        layer.fill(Colors.BLUE)

        composite(background, layer, 10, 20)

        assert background.get_pixel(10, 20) == Colors.BLUE
        assert background.get_pixel(13, 23) == Colors.BLUE
        assert background.get_pixel(14, 20) != Colors.BLUE

    def test_half_alpha_blends(self, black_buffer):
        layer = PixelBuffer(2, 2)
        layer.fill(0x80FFFFFF)

        composite(black_buffer, layer)
        a, r, g, b = (int(c[0, 0]) for c in black_buffer.channels())

        assert a == 255
        assert r in (127, 128)
        assert r == g == b

    def test_alpha_is_maximum(self):
        background = PixelBuffer(2, 2)
        background.fill(0x40000000)
        layer = PixelBuffer(2, 2)
        layer.fill(0x80000000)

        composite(background, layer)

        assert background.get_pixel(0, 0) >> 24 == 0x80

    def test_clipped_offsets(self, black_buffer):
        """Test layers partially or fully outside are clipped"""
        layer = PixelBuffer(4, 4)
        layer.fill(Colors.WHITE)

        assert composite(black_buffer, layer, -2, -2) == 4
        assert black_buffer.get_pixel(1, 1) == Colors.WHITE
        assert black_buffer.get_pixel(2, 2) == Colors.BLACK
        assert composite(black_buffer, layer, 30, 31) == 2
        assert composite(black_buffer, layer, 40, 0) == 0
        assert composite(black_buffer, layer, 0, -4) == 0

    def test_compose_rotated_centers_layer(self, black_buffer):
        layer = PixelBuffer(3, 3)
        layer.fill(Colors.WHITE)

        compose_rotated(black_buffer, layer, 0.0, 16, 16)

        # Top-left lands at int(16 - 1.5) = 14
        assert black_buffer.get_pixel(14, 14) == Colors.WHITE
        assert black_buffer.get_pixel(16, 16) == Colors.WHITE
        assert black_buffer.get_pixel(13, 14) == Colors.BLACK
        assert black_buffer.get_pixel(17, 16) == Colors.BLACK


class TestClock:
    """Test analog clock composition"""

    @pytest.mark.parametrize(
        "time,angles",
        [
            ((3, 0, 0), (90.0, 0.0, 0.0)),
            ((15, 30, 0), (105.0, 180.0, 0.0)),
            ((0, 0, 30), (0.25, 3.0, 180.0)),
            ((12, 59, 59), (29.5 + 59 * 0.5 / 60, 359.9, 354.0)),
        ],
    )
    def test_hand_angles(self, time, angles):
        assert clock_hand_angles(*time) == pytest.approx(angles)

    def test_transparent_hands_leave_dial(self, gradient_buffer):
        hands = [PixelBuffer(8, 8) for _ in range(3)]
        result = compose_clock(gradient_buffer, *hands, 10, 10, 10)

        assert result == gradient_buffer
        assert result is not gradient_buffer

    def test_hands_are_drawn(self, black_buffer):
        """Test an upward second hand at 15 seconds points right"""
        transparent = PixelBuffer(21, 21)
        second_hand = PixelBuffer(21, 21)
        second_hand.pixels[0:11, 10] = Colors.WHITE

        result = compose_clock(black_buffer, transparent, transparent, second_hand, 0, 0, 15)

        assert np.all(black_buffer.data == Colors.BLACK)
        around_center = result.pixels[13:18]
        assert np.count_nonzero(around_center[:, 18:26] != Colors.BLACK) > 0
        assert np.count_nonzero(around_center[:, 0:14] != Colors.BLACK) == 0
