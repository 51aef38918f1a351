"""
Whole-buffer color adjustments.

All adjustments work in place on channel planes and preserve alpha.
"""

import logging

import numpy as np

from core.color_model import hsl_to_rgb_arrays, luminance, rgb_to_hsl_arrays
from core.constants import RedEyeConstants
from core.exceptions import DimensionMismatchError
from core.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


def _luminance_plane(buffer: PixelBuffer) -> np.ndarray:
    _, r, g, b = buffer.channels()
    return luminance(r.astype(np.int32), g.astype(np.int32), b.astype(np.int32)).astype(np.uint8)


def grayscale(buffer: PixelBuffer) -> PixelBuffer:
    """Replace every pixel by its integer luminance, keeping alpha."""
    alpha = buffer.channels()[0]
    gray = _luminance_plane(buffer)
    buffer.set_channels(alpha, gray, gray, gray)
    return buffer


def to_grayscale_bytes(buffer: PixelBuffer) -> bytes:
    """Row-major single-channel luminance stream (one byte per pixel)."""
    return _luminance_plane(buffer).tobytes()


def from_grayscale_bytes(buffer: PixelBuffer, data: bytes) -> PixelBuffer:
    """
    Fill buffer with opaque gray pixels from a single-channel byte stream.

    Raises:
        DimensionMismatchError: If len(data) != width * height
    """
    expected = buffer.width * buffer.height
    if len(data) != expected:
        raise DimensionMismatchError((expected,), (len(data),))

    gray = np.frombuffer(bytes(data), dtype=np.uint8).reshape(buffer.height, buffer.width)
    alpha = np.full(gray.shape, 255, dtype=np.uint8)
    buffer.set_channels(alpha, gray, gray, gray)
    return buffer


def saturate(buffer: PixelBuffer, ratio: float) -> PixelBuffer:
    """Scale HSL saturation by ratio (result clamped to [0, 1])."""
    a, r, g, b = buffer.channels()
    h, s, lightness = rgb_to_hsl_arrays(r, g, b)
    buffer.set_channels(a, *hsl_to_rgb_arrays(h, np.clip(s * ratio, 0.0, 1.0), lightness))
    return buffer


def hue_shift(buffer: PixelBuffer, degrees: float) -> PixelBuffer:
    """Rotate the HSL hue of every pixel by the given number of degrees."""
    a, r, g, b = buffer.channels()
    h, s, lightness = rgb_to_hsl_arrays(r, g, b)
    buffer.set_channels(a, *hsl_to_rgb_arrays(h + degrees, s, lightness))
    return buffer


def red_eye_mask(
    buffer: PixelBuffer,
    saturation_threshold: float = RedEyeConstants.DEFAULT_SATURATION_THRESHOLD,
    min_red: int = RedEyeConstants.DEFAULT_MIN_RED,
) -> np.ndarray:
    """
    Boolean (height, width) mask of pixels classified as red-eye.

    A pixel qualifies when its hue is red (<= 40 or >= 330 degrees), it is
    saturated above the threshold, neither too dark nor too light, and red is
    its dominant channel with a value above min_red.
    """
    _, r, g, b = buffer.channels()
    h, s, lightness = rgb_to_hsl_arrays(r, g, b)
    r = r.astype(np.int32)
    g = g.astype(np.int32)
    b = b.astype(np.int32)

    red_hue = (h <= RedEyeConstants.HUE_LOW_MAX) | (h >= RedEyeConstants.HUE_HIGH_MIN)
    return (
        red_hue
        & (s > saturation_threshold)
        & (lightness > RedEyeConstants.MIN_LIGHTNESS)
        & (lightness < RedEyeConstants.MAX_LIGHTNESS)
        & (r > g)
        & (r > b)
        & (r > min_red)
    )


def remove_red_eye(
    buffer: PixelBuffer,
    saturation_threshold: float = RedEyeConstants.DEFAULT_SATURATION_THRESHOLD,
    min_red: int = RedEyeConstants.DEFAULT_MIN_RED,
) -> int:
    """
    Recolor red-eye pixels in place.

    Matching pixels move to a fixed blue-cyan hue with slightly reduced
    saturation; lightness and alpha are kept so the iris shading survives.

    Returns:
        Number of pixels recolored
    """
    mask = red_eye_mask(buffer, saturation_threshold, min_red)
    count = int(mask.sum())
    if count == 0:
        return 0

    a, r, g, b = buffer.channels()
    _, s, lightness = rgb_to_hsl_arrays(r, g, b)
    new_r, new_g, new_b = hsl_to_rgb_arrays(
        np.full(s.shape, RedEyeConstants.TARGET_HUE),
        s * RedEyeConstants.SATURATION_FACTOR,
        lightness,
    )
    buffer.set_channels(
        a,
        np.where(mask, new_r, r),
        np.where(mask, new_g, g),
        np.where(mask, new_b, b),
    )
    logger.debug(f"Red-eye removal recolored {count} pixels")
    return count
