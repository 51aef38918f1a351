"""
Color model conversions.

Handles conversions between color representations:
- Packed 32-bit ARGB integers
- RgbColor (8-bit channels)
- HslColor (hue in degrees, saturation/lightness/alpha in [0, 1])
- Luminance (integer approximation of 0.299/0.587/0.114)

Scalar functions operate on single colors; the *_arrays variants apply the
same formulas to whole numpy channel planes.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from core.constants import ColorConstants, PixelConstants

_ONE_SIXTH = 1.0 / 6.0
_ONE_THIRD = 1.0 / 3.0
_TWO_THIRDS = 2.0 / 3.0


def pack_argb(r: int, g: int, b: int, a: int = 255) -> int:
    """Pack 8-bit channels into a 32-bit ARGB value (alpha in the high byte)."""
    return ((a & 0xFF) << 24) | ((r & 0xFF) << 16) | ((g & 0xFF) << 8) | (b & 0xFF)


def unpack_argb(argb: int) -> Tuple[int, int, int, int]:
    """Split a packed ARGB value into (r, g, b, a)."""
    argb = int(argb)
    return (argb >> 16) & 0xFF, (argb >> 8) & 0xFF, argb & 0xFF, (argb >> 24) & 0xFF


def luminance(r, g, b):
    """
    Integer luminance (77*R + 150*G + 29*B) >> 8.

    Works on plain ints or numpy integer arrays.
    """
    return (
        PixelConstants.LUMA_RED * r + PixelConstants.LUMA_GREEN * g + PixelConstants.LUMA_BLUE * b
    ) >> PixelConstants.LUMA_SHIFT


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def normalize_hue(h: float) -> float:
    """Fold a hue in degrees into [0, 360)."""
    h = float(h) % ColorConstants.HUE_DEGREES
    # Tiny negative hues round up to exactly 360.0
    return 0.0 if h >= ColorConstants.HUE_DEGREES else h


def _normalize_hue_array(h: np.ndarray) -> np.ndarray:
    h = np.mod(h, ColorConstants.HUE_DEGREES)
    return np.where(h >= ColorConstants.HUE_DEGREES, 0.0, h)


def _to_byte(value: float) -> int:
    return int(_clamp(math.floor(value * 255.0 + 0.5), 0, 255))


@dataclass(frozen=True)
class HslColor:
    """HSL color: hue normalized into [0, 360), other components clamped to [0, 1]."""

    h: float
    s: float
    l: float  # noqa: E741
    a: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, "h", normalize_hue(self.h))
        object.__setattr__(self, "s", _clamp(float(self.s), 0.0, 1.0))
        object.__setattr__(self, "l", _clamp(float(self.l), 0.0, 1.0))
        object.__setattr__(self, "a", _clamp(float(self.a), 0.0, 1.0))

    @classmethod
    def from_argb(cls, argb: int) -> "HslColor":
        """Derive HSL from a packed pixel."""
        r, g, b, a = unpack_argb(argb)
        return rgb_to_hsl(r, g, b, a)

    def to_rgb(self) -> "RgbColor":
        return hsl_to_rgb(self)

    def to_argb(self) -> int:
        return hsl_to_rgb(self).to_argb()


@dataclass(frozen=True)
class RgbColor:
    """8-bit RGBA color."""

    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self):
        for name in ("r", "g", "b", "a"):
            value = int(getattr(self, name))
            if not 0 <= value <= 255:
                raise ValueError(f"Channel {name}={value} outside 0-255")
            object.__setattr__(self, name, value)

    @classmethod
    def from_argb(cls, argb: int) -> "RgbColor":
        r, g, b, a = unpack_argb(argb)
        return cls(r, g, b, a)

    @classmethod
    def from_hsl(cls, hsl: HslColor) -> "RgbColor":
        return hsl_to_rgb(hsl)

    def to_argb(self) -> int:
        return pack_argb(self.r, self.g, self.b, self.a)

    def to_hsl(self) -> HslColor:
        return rgb_to_hsl(self.r, self.g, self.b, self.a)


def rgb_to_hsl(r: int, g: int, b: int, a: int = 255) -> HslColor:
    """
    Convert 8-bit RGBA to HSL.

    Args:
        r, g, b: Color channels (0-255)
        a: Alpha channel (0-255)

    Returns:
        HslColor with hue in degrees
    """
    rf, gf, bf = r / 255.0, g / 255.0, b / 255.0

    c_max = max(rf, gf, bf)
    c_min = min(rf, gf, bf)
    delta = c_max - c_min

    lightness = (c_max + c_min) / 2.0
    hue = 0.0
    saturation = 0.0

    if delta >= ColorConstants.ACHROMATIC_EPSILON:
        if lightness < 0.5:
            saturation = delta / (c_max + c_min)
        else:
            saturation = delta / (2.0 - c_max - c_min)

        if abs(c_max - rf) < ColorConstants.CHANNEL_MATCH_EPSILON:
            sector = (gf - bf) / delta + (6.0 if gf < bf else 0.0)
        elif abs(c_max - gf) < ColorConstants.CHANNEL_MATCH_EPSILON:
            sector = (bf - rf) / delta + 2.0
        else:
            sector = (rf - gf) / delta + 4.0

        hue = (sector / 6.0) * ColorConstants.HUE_DEGREES

    return HslColor(hue, saturation, lightness, a / 255.0)


def hue_to_channel(p: float, q: float, t: float) -> float:
    """Evaluate one RGB channel of the HSL inverse mapping."""
    if t < 0.0:
        t += 1.0
    if t > 1.0:
        t -= 1.0
    if t < _ONE_SIXTH:
        return p + (q - p) * 6.0 * t
    if t < 0.5:
        return q
    if t < _TWO_THIRDS:
        return p + (q - p) * (_TWO_THIRDS - t) * 6.0
    return p


def hsl_to_rgb(hsl: HslColor) -> RgbColor:
    """
    Convert HSL back to 8-bit RGBA.

    Args:
        hsl: Source color

    Returns:
        RgbColor with rounded channels
    """
    if hsl.s < ColorConstants.ACHROMATIC_EPSILON:
        r = g = b = hsl.l
    else:
        if hsl.l < 0.5:
            q = hsl.l * (1.0 + hsl.s)
        else:
            q = hsl.l + hsl.s - hsl.l * hsl.s
        p = 2.0 * hsl.l - q
        hk = hsl.h / ColorConstants.HUE_DEGREES

        r = hue_to_channel(p, q, hk + _ONE_THIRD)
        g = hue_to_channel(p, q, hk)
        b = hue_to_channel(p, q, hk - _ONE_THIRD)

    return RgbColor(_to_byte(r), _to_byte(g), _to_byte(b), _to_byte(hsl.a))


def rgb_to_hsl_arrays(
    r: np.ndarray, g: np.ndarray, b: np.ndarray
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Vectorized RGB -> HSL over channel planes.

    Args:
        r, g, b: uint8 (or integer) arrays of equal shape

    Returns:
        Tuple of float64 arrays (hue degrees, saturation, lightness)
    """
    rf = r.astype(np.float64) / 255.0
    gf = g.astype(np.float64) / 255.0
    bf = b.astype(np.float64) / 255.0

    c_max = np.maximum(np.maximum(rf, gf), bf)
    c_min = np.minimum(np.minimum(rf, gf), bf)
    delta = c_max - c_min
    lightness = (c_max + c_min) / 2.0
    chromatic = delta >= ColorConstants.ACHROMATIC_EPSILON

    with np.errstate(divide="ignore", invalid="ignore"):
        saturation = np.where(
            lightness < 0.5, delta / (c_max + c_min), delta / (2.0 - c_max - c_min)
        )
        sector_r = (gf - bf) / delta + np.where(gf < bf, 6.0, 0.0)
        sector_g = (bf - rf) / delta + 2.0
        sector_b = (rf - gf) / delta + 4.0

    eps = ColorConstants.CHANNEL_MATCH_EPSILON
    sector = np.where(
        np.abs(c_max - rf) < eps,
        sector_r,
        np.where(np.abs(c_max - gf) < eps, sector_g, sector_b),
    )

    hue = np.where(chromatic, (sector / 6.0) * ColorConstants.HUE_DEGREES, 0.0)
    hue = _normalize_hue_array(hue)
    saturation = np.where(chromatic, saturation, 0.0)
    return hue, saturation, lightness


def _hue_to_channel_array(p: np.ndarray, q: np.ndarray, t: np.ndarray) -> np.ndarray:
    t = np.where(t < 0.0, t + 1.0, t)
    t = np.where(t > 1.0, t - 1.0, t)
    return np.select(
        [t < _ONE_SIXTH, t < 0.5, t < _TWO_THIRDS],
        [p + (q - p) * 6.0 * t, q, p + (q - p) * (_TWO_THIRDS - t) * 6.0],
        default=p,
    )


def hsl_to_rgb_arrays(
    h: np.ndarray, s: np.ndarray, lightness: np.ndarray
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Vectorized HSL -> RGB over planes.

    Args:
        h: Hue in degrees (normalized into [0, 360) here)
        s: Saturation (clamped to [0, 1])
        lightness: Lightness (clamped to [0, 1])

    Returns:
        Tuple of uint8 arrays (r, g, b)
    """
    h = _normalize_hue_array(np.asarray(h, dtype=np.float64))
    s = np.clip(np.asarray(s, dtype=np.float64), 0.0, 1.0)
    lightness = np.clip(np.asarray(lightness, dtype=np.float64), 0.0, 1.0)

    q = np.where(lightness < 0.5, lightness * (1.0 + s), lightness + s - lightness * s)
    p = 2.0 * lightness - q
    hk = h / ColorConstants.HUE_DEGREES

    achromatic = s < ColorConstants.ACHROMATIC_EPSILON
    channels = []
    for offset in (_ONE_THIRD, 0.0, -_ONE_THIRD):
        value = np.where(achromatic, lightness, _hue_to_channel_array(p, q, hk + offset))
        channels.append(np.clip(np.floor(value * 255.0 + 0.5), 0, 255).astype(np.uint8))

    return channels[0], channels[1], channels[2]
