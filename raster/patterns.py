"""
Procedural test patterns.

Small generators used to produce known images for previews and smoke tests.
"""

import logging
import math

import numpy as np

from core.constants import Colors
from core.enums import LineAlgorithm, PatternType
from core.geometry import Point
from core.pixel_buffer import PixelBuffer
from core.utils.decorators import log_duration
from raster.curves import draw_control_polygon, draw_spline
from raster.rasterizer import draw_line

logger = logging.getLogger(__name__)

# Spline demo control points laid out on an 800x500 canvas
SPLINE_DEMO_POINTS = [
    Point(50, 300),
    Point(150, 100),
    Point(300, 400),
    Point(450, 150),
    Point(600, 350),
    Point(750, 200),
]
SPLINE_DEMO_CANVAS = (800.0, 500.0)


def gradient_pattern(width: int, height: int) -> PixelBuffer:
    """
    RGB gradient: red follows the row, green falls along the column, blue is 128.

    Channel values wrap modulo 256 on buffers larger than 256 pixels.
    """
    buffer = PixelBuffer(width, height)
    ys, xs = np.mgrid[0:height, 0:width]
    red = (ys & 0xFF).astype(np.uint8)
    green = ((255 - xs) & 0xFF).astype(np.uint8)
    blue = np.full((height, width), 128, dtype=np.uint8)
    alpha = np.full((height, width), 255, dtype=np.uint8)
    buffer.set_channels(alpha, red, green, blue)
    return buffer


def star_pattern(
    width: int,
    height: int,
    rays: int = 16,
    algorithm: LineAlgorithm = LineAlgorithm.BRESENHAM,
    color: int = Colors.WHITE,
) -> PixelBuffer:
    """
    Evenly spaced rays from the center on a black background.

    Rays reach min(width, height) // 3 pixels, so every line direction the
    algorithm has to handle appears once.
    """
    if rays < 1:
        raise ValueError(f"Star pattern needs at least one ray, got {rays}")

    buffer = PixelBuffer(width, height)
    buffer.fill(Colors.BLACK)
    center_x = width // 2
    center_y = height // 2
    radius = min(width, height) // 3

    for i in range(rays):
        angle = i * 2.0 * math.pi / rays
        end_x = center_x + int(math.cos(angle) * radius)
        end_y = center_y + int(math.sin(angle) * radius)
        draw_line(buffer, (center_x, center_y), (end_x, end_y), color, algorithm)

    return buffer


def spline_demo(width: int, height: int) -> PixelBuffer:
    """Black anti-aliased spline through six points on white, with red markers."""
    buffer = PixelBuffer(width, height)
    buffer.fill(Colors.WHITE)

    scale_x = width / SPLINE_DEMO_CANVAS[0]
    scale_y = height / SPLINE_DEMO_CANVAS[1]
    points = [Point(p.x * scale_x, p.y * scale_y) for p in SPLINE_DEMO_POINTS]

    draw_spline(buffer, points, Colors.BLACK)
    draw_control_polygon(buffer, points, Colors.RED)
    return buffer


@log_duration
def render_pattern(pattern: PatternType, width: int, height: int, **options) -> PixelBuffer:
    """Dispatch to a pattern generator by name."""
    pattern = PatternType(pattern)
    logger.debug(f"Rendering {pattern.value} pattern {width}x{height}")

    if pattern == PatternType.GRADIENT:
        return gradient_pattern(width, height)
    if pattern == PatternType.STAR:
        return star_pattern(width, height, **options)
    if pattern == PatternType.SPLINE:
        return spline_demo(width, height)
    raise ValueError(f"Unknown pattern: {pattern}")
