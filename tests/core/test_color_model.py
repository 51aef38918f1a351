"""
Unit tests for RGB/HSL conversion and luminance
"""

import numpy as np
import pytest

from core.color_model import (
    HslColor,
    RgbColor,
    hsl_to_rgb,
    hsl_to_rgb_arrays,
    luminance,
    normalize_hue,
    pack_argb,
    rgb_to_hsl,
    rgb_to_hsl_arrays,
    unpack_argb,
)


class TestColorModel:
    """Test scalar and vectorized color conversions"""

    @pytest.fixture
    def sample_colors(self):
        """Deterministic spread of RGB triples"""
        rng = np.random.default_rng(7)
        colors = rng.integers(0, 256, size=(300, 3)).tolist()
        colors += [[0, 0, 0], [255, 255, 255], [128, 128, 128], [255, 0, 1], [1, 0, 255]]
        return colors

    def test_pack_unpack(self):
        """Test packing puts alpha in the high byte"""
        argb = pack_argb(0x12, 0x34, 0x56, 0x78)

        assert argb == 0x78123456
        assert unpack_argb(argb) == (0x12, 0x34, 0x56, 0x78)

    def test_pure_red(self, red_buffer):
        """Test a red pixel maps to hue 0, full saturation, half lightness"""
        r, g, b, a = unpack_argb(red_buffer.get_pixel(2, 2))
        hsl = rgb_to_hsl(r, g, b, a)

        assert hsl.h == pytest.approx(0.0)
        assert hsl.s == pytest.approx(1.0)
        assert hsl.l == pytest.approx(0.5)
        assert hsl.a == pytest.approx(1.0)
        assert luminance(r, g, b) == 76

    @pytest.mark.parametrize(
        "rgb,hue",
        [((0, 255, 0), 120.0), ((0, 0, 255), 240.0), ((255, 255, 0), 60.0), ((255, 0, 255), 300.0)],
    )
    def test_primary_hues(self, rgb, hue):
        """Test hue sectors for primary and secondary colors"""
        assert rgb_to_hsl(*rgb).h == pytest.approx(hue)

    def test_gray_is_achromatic(self):
        """Test equal channels give zero hue and saturation"""
        hsl = rgb_to_hsl(100, 100, 100)

        assert hsl.h == 0.0
        assert hsl.s == 0.0
        assert hsl.l == pytest.approx(100 / 255.0)

    def test_round_trip_within_one(self, sample_colors):
        """Test RGB -> HSL -> RGB is within one unit per channel"""
        for r, g, b in sample_colors:
            back = hsl_to_rgb(rgb_to_hsl(r, g, b))
            assert abs(back.r - r) <= 1
            assert abs(back.g - g) <= 1
            assert abs(back.b - b) <= 1

    def test_alpha_round_trip(self):
        """Test alpha survives conversion"""
        assert hsl_to_rgb(rgb_to_hsl(10, 20, 30, 77)).a == 77

    def test_hsl_normalization(self):
        """Test hue wraps and the other components clamp"""
        hsl = HslColor(370.0, 2.0, -0.5, 3.0)

        assert hsl.h == pytest.approx(10.0)
        assert hsl.s == 1.0
        assert hsl.l == 0.0
        assert hsl.a == 1.0

    def test_negative_hue_wraps(self):
        """Test negative hues land in [0, 360)"""
        assert HslColor(-30.0, 0.5, 0.5).h == pytest.approx(330.0)

    def test_tiny_negative_hue_folds_to_zero(self):
        """Test hues that round up to 360.0 fold back to 0.0"""
        assert HslColor(-1e-20, 0.5, 0.5).h == 0.0
        assert normalize_hue(-1e-20) == 0.0
        assert normalize_hue(720.0) == 0.0

    def test_array_hue_stays_below_360(self):
        h = np.array([-1e-20, 360.0, 359.5])
        r, g, b = hsl_to_rgb_arrays(h, np.full(3, 1.0), np.full(3, 0.5))

        assert (int(r[0]), int(g[0]), int(b[0])) == (255, 0, 0)
        assert (int(r[1]), int(g[1]), int(b[1])) == (255, 0, 0)

    def test_rgb_color_validation(self):
        """Test channel values outside 0-255 are rejected"""
        with pytest.raises(ValueError):
            RgbColor(256, 0, 0)

    def test_rgb_color_conversions(self):
        """Test RgbColor helpers agree with the module functions"""
        color = RgbColor.from_argb(0xFF00FF00)

        assert color == RgbColor(0, 255, 0)
        assert color.to_hsl().h == pytest.approx(120.0)
        assert HslColor.from_argb(0xFF00FF00).to_argb() == 0xFF00FF00

    def test_vectorized_matches_scalar(self, sample_colors):
        """Test array conversions give the scalar results"""
        rgb = np.array(sample_colors, dtype=np.uint8)
        h, s, lightness = rgb_to_hsl_arrays(rgb[:, 0], rgb[:, 1], rgb[:, 2])
        r2, g2, b2 = hsl_to_rgb_arrays(h, s, lightness)

        for i, (r, g, b) in enumerate(sample_colors):
            scalar = rgb_to_hsl(r, g, b)
            assert h[i] == pytest.approx(scalar.h, abs=1e-9)
            assert s[i] == pytest.approx(scalar.s, abs=1e-9)
            assert lightness[i] == pytest.approx(scalar.l, abs=1e-9)

            back = hsl_to_rgb(scalar)
            assert (int(r2[i]), int(g2[i]), int(b2[i])) == (back.r, back.g, back.b)

    def test_luminance_arrays(self):
        """Test luminance works on integer arrays"""
        r = np.array([255, 0, 0, 255], dtype=np.int32)
        g = np.array([0, 255, 0, 255], dtype=np.int32)
        b = np.array([0, 0, 255, 255], dtype=np.int32)

        assert luminance(r, g, b).tolist() == [76, 149, 28, 255]
