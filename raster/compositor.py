"""
Layer rotation and alpha compositing.

Rotation inverse-maps every destination pixel into the source and samples it
bilinearly; compositing blends a foreground layer over a background at an
integer offset. Both operate on whole numpy planes at once.
"""

import logging
import math
from typing import Tuple

import numpy as np

from core.pixel_buffer import PixelBuffer
from core.utils.decorators import log_duration

logger = logging.getLogger(__name__)


def _split(pixels: np.ndarray) -> Tuple[np.ndarray, ...]:
    """(a, r, g, b) float planes of a packed uint32 array."""
    pixels = pixels.astype(np.uint32)
    return tuple(
        ((pixels >> shift) & 0xFF).astype(np.float64) for shift in (24, 16, 8, 0)
    )


def _pack(a: np.ndarray, r: np.ndarray, g: np.ndarray, b: np.ndarray) -> np.ndarray:
    channels = [np.clip(c, 0, 255).astype(np.uint32) for c in (a, r, g, b)]
    return (channels[0] << 24) | (channels[1] << 16) | (channels[2] << 8) | channels[3]


def _lerp_colors(c1: np.ndarray, c2: np.ndarray, t: np.ndarray) -> np.ndarray:
    """Per-channel interpolation of packed colors, truncated to whole bytes."""
    first = _split(c1)
    second = _split(c2)
    return _pack(*(np.trunc(p + (q - p) * t) for p, q in zip(first, second)))


def sample_bilinear(pixels: np.ndarray, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """
    Bilinear sampling of a packed (height, width) image at fractional coordinates.

    All four channels, alpha included, are interpolated in x then y. Neighbour
    coordinates outside the image clamp to the border.

    Args:
        pixels: (height, width) uint32 packed ARGB array
        xs: Sample x coordinates (any shape)
        ys: Sample y coordinates (same shape as xs)

    Returns:
        uint32 array of sampled packed colors, shaped like xs
    """
    height, width = pixels.shape
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)

    x_floor = np.floor(xs)
    y_floor = np.floor(ys)
    fx = xs - x_floor
    fy = ys - y_floor

    x0 = np.clip(x_floor.astype(np.int64), 0, width - 1)
    x1 = np.clip(x_floor.astype(np.int64) + 1, 0, width - 1)
    y0 = np.clip(y_floor.astype(np.int64), 0, height - 1)
    y1 = np.clip(y_floor.astype(np.int64) + 1, 0, height - 1)

    top = _lerp_colors(pixels[y0, x0], pixels[y0, x1], fx)
    bottom = _lerp_colors(pixels[y1, x0], pixels[y1, x1], fx)
    return _lerp_colors(top, bottom, fy)


@log_duration
def rotate(buffer: PixelBuffer, angle_degrees: float) -> PixelBuffer:
    """
    Rotate a buffer about its center into a new buffer of the same size.

    Positive angles turn the image clockwise on screen (y grows downward).

    Args:
        buffer: Source buffer (not modified)
        angle_degrees: Rotation angle in degrees

    Returns:
        New rotated buffer
    """
    angle = math.radians(angle_degrees)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    center_x = buffer.width / 2.0
    center_y = buffer.height / 2.0

    ys, xs = np.mgrid[0 : buffer.height, 0 : buffer.width].astype(np.float64)
    dx = xs - center_x
    dy = ys - center_y
    src_x = dx * cos_a + dy * sin_a + center_x
    src_y = -dx * sin_a + dy * cos_a + center_y

    result = PixelBuffer(buffer.width, buffer.height)
    result.pixels[:, :] = sample_bilinear(buffer.pixels, src_x, src_y)

    return result


def composite(
    background: PixelBuffer, foreground: PixelBuffer, offset_x: int = 0, offset_y: int = 0
) -> int:
    """
    Alpha-blend foreground over background in place.

    Each channel becomes bg*(1-a) + fg*a with a = fgA/255; resulting alpha is
    max(bgA, fgA). Fully transparent foreground pixels leave the background
    untouched. Foreground pixels falling outside the background are clipped.

    Args:
        background: Buffer modified in place
        foreground: Layer to blend (not modified)
        offset_x, offset_y: Position of the foreground's top-left corner

    Returns:
        Number of foreground pixels that landed inside the background
    """
    offset_x = int(offset_x)
    offset_y = int(offset_y)

    dst_x0 = max(0, offset_x)
    dst_y0 = max(0, offset_y)
    dst_x1 = min(background.width, offset_x + foreground.width)
    dst_y1 = min(background.height, offset_y + foreground.height)
    if dst_x0 >= dst_x1 or dst_y0 >= dst_y1:
        logger.debug("Composite layer lies entirely outside the background")
        return 0

    src_x0 = dst_x0 - offset_x
    src_y0 = dst_y0 - offset_y
    src = foreground.pixels[
        src_y0 : src_y0 + (dst_y1 - dst_y0), src_x0 : src_x0 + (dst_x1 - dst_x0)
    ]
    dst = background.pixels[dst_y0:dst_y1, dst_x0:dst_x1]

    bg_a, bg_r, bg_g, bg_b = _split(dst)
    fg_a, fg_r, fg_g, fg_b = _split(src)
    alpha = fg_a / 255.0
    inverse = 1.0 - alpha

    blended = _pack(
        np.maximum(bg_a, fg_a),
        np.trunc(bg_r * inverse + fg_r * alpha),
        np.trunc(bg_g * inverse + fg_g * alpha),
        np.trunc(bg_b * inverse + fg_b * alpha),
    )
    dst[:, :] = np.where(fg_a > 0, blended, dst)
    return int(src.size)


def compose_rotated(
    background: PixelBuffer,
    layer: PixelBuffer,
    angle_degrees: float,
    center_x: float,
    center_y: float,
) -> None:
    """
    Rotate a layer about its own center and composite it centered on a pivot.

    The layer's top-left lands at (int(center_x - w/2), int(center_y - h/2)).
    """
    rotated = rotate(layer, angle_degrees)
    offset_x = int(center_x - rotated.width / 2.0)
    offset_y = int(center_y - rotated.height / 2.0)
    composite(background, rotated, offset_x, offset_y)


def clock_hand_angles(hours: int, minutes: int, seconds: int) -> Tuple[float, float, float]:
    """
    Clockwise hand angles in degrees for a 12-hour analog clock.

    Returns:
        (hour_angle, minute_angle, second_angle)
    """
    hour_angle = (hours % 12) * 30.0 + minutes * 0.5 + seconds * (0.5 / 60.0)
    minute_angle = minutes * 6.0 + seconds * 0.1
    second_angle = seconds * 6.0
    return hour_angle, minute_angle, second_angle


def compose_clock(
    dial: PixelBuffer,
    hour_hand: PixelBuffer,
    minute_hand: PixelBuffer,
    second_hand: PixelBuffer,
    hours: int,
    minutes: int,
    seconds: int,
) -> PixelBuffer:
    """
    Render an analog clock face by rotating each hand layer over the dial.

    Hands are drawn hour, minute, second, each rotated about the dial center.

    Returns:
        New buffer; the dial and hand buffers are not modified
    """
    result = dial.copy()
    center_x = dial.width / 2.0
    center_y = dial.height / 2.0
    angles = clock_hand_angles(hours, minutes, seconds)

    for hand, angle in zip((hour_hand, minute_hand, second_hand), angles):
        compose_rotated(result, hand, angle, center_x, center_y)

    logger.debug(f"Composed clock at {hours:02d}:{minutes:02d}:{seconds:02d}")
    return result
