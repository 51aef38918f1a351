"""
Line scan conversion.

Every pixel write goes through PixelBuffer.set_pixel_safe or plot_alpha, so
primitives that extend past the buffer are clipped silently.
"""

import logging
import math
from typing import Sequence, Tuple

from core.constants import CurveConstants
from core.enums import LineAlgorithm
from core.geometry import Point
from core.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


def _round(value: float) -> int:
    return int(round(value))


def fill_disc(buffer: PixelBuffer, cx: int, cy: int, radius: int, color: int) -> None:
    """Stamp a filled disc of the given radius centered on (cx, cy)."""
    radius_sq = radius * radius
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            if dx * dx + dy * dy <= radius_sq:
                buffer.set_pixel_safe(cx + dx, cy + dy, color)


def draw_line_dda(buffer: PixelBuffer, x0: int, y0: int, x1: int, y1: int, color: int) -> None:
    """
    Digital Differential Analyzer line.

    Steps max(|dx|, |dy|) times along the line, rounding the floating
    position to the nearest pixel at each step.
    """
    x0, y0, x1, y1 = _round(x0), _round(y0), _round(x1), _round(y1)
    dx = x1 - x0
    dy = y1 - y0
    steps = max(abs(dx), abs(dy))

    if steps == 0:
        buffer.set_pixel_safe(x0, y0, color)
        return

    x_increment = dx / steps
    y_increment = dy / steps

    for i in range(steps + 1):
        buffer.set_pixel_safe(_round(x0 + i * x_increment), _round(y0 + i * y_increment), color)


def draw_line_bresenham(
    buffer: PixelBuffer, x0: int, y0: int, x1: int, y1: int, color: int, radius: int = 0
) -> None:
    """
    Bresenham line using only integer arithmetic.

    Args:
        buffer: Target buffer
        x0, y0, x1, y1: Endpoints (rounded to integers)
        color: Packed ARGB color
        radius: Disc radius stamped at every step (0 = single pixel)
    """
    x0, y0, x1, y1 = _round(x0), _round(y0), _round(x1), _round(y1)
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy

    while True:
        if radius > 0:
            fill_disc(buffer, x0, y0, radius, color)
        else:
            buffer.set_pixel_safe(x0, y0, color)

        if x0 == x1 and y0 == y1:
            break

        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x0 += sx
        if e2 < dx:
            err += dx
            y0 += sy


def plot_alpha(buffer: PixelBuffer, x: int, y: int, coverage: float, color: int) -> None:
    """
    Blend color into one pixel with the given coverage.

    Effective opacity is coverage * colorAlpha / 255; the resulting alpha is
    the max of the existing and the new alpha. Zero coverage is a no-op.
    """
    if coverage <= 0.0 or not buffer.in_bounds(x, y):
        return

    coverage = min(coverage, 1.0)
    idx = y * buffer.width + x
    existing = int(buffer.data[idx])

    new_a = (color >> 24) & 0xFF
    new_r = (color >> 16) & 0xFF
    new_g = (color >> 8) & 0xFF
    new_b = color & 0xFF

    old_a = (existing >> 24) & 0xFF
    old_r = (existing >> 16) & 0xFF
    old_g = (existing >> 8) & 0xFF
    old_b = existing & 0xFF

    blend = coverage * (new_a / 255.0)
    r = int(new_r * blend + old_r * (1.0 - blend))
    g = int(new_g * blend + old_g * (1.0 - blend))
    b = int(new_b * blend + old_b * (1.0 - blend))
    a = max(new_a, old_a)

    buffer.data[idx] = (a << 24) | (r << 16) | (g << 8) | b


def _fpart(value: float) -> float:
    return value - math.floor(value)


def _rfpart(value: float) -> float:
    return 1.0 - _fpart(value)


def draw_line_wu(
    buffer: PixelBuffer, x0: float, y0: float, x1: float, y1: float, color: int
) -> None:
    """
    Xiaolin Wu anti-aliased line with fractional endpoints.

    Works in transposed space for steep lines; every sample column covers
    the two pixels bracketing the exact y-intercept, weighted by distance.
    """
    steep = abs(y1 - y0) > abs(x1 - x0)
    if steep:
        x0, y0 = y0, x0
        x1, y1 = y1, x1
    if x0 > x1:
        x0, x1 = x1, x0
        y0, y1 = y1, y0

    dx = x1 - x0
    dy = y1 - y0
    gradient = dy / dx if dx != 0.0 else 1.0

    def plot(px: int, py: int, coverage: float) -> None:
        if steep:
            plot_alpha(buffer, py, px, coverage, color)
        else:
            plot_alpha(buffer, px, py, coverage, color)

    # First endpoint
    x_end = round(x0)
    y_end = y0 + gradient * (x_end - x0)
    x_gap = _rfpart(x0 + 0.5)
    x_pixel1 = int(x_end)
    y_pixel1 = math.floor(y_end)
    plot(x_pixel1, y_pixel1, _rfpart(y_end) * x_gap)
    plot(x_pixel1, y_pixel1 + 1, _fpart(y_end) * x_gap)
    intery = y_end + gradient

    # Second endpoint
    x_end = round(x1)
    y_end = y1 + gradient * (x_end - x1)
    x_gap = _fpart(x1 + 0.5)
    x_pixel2 = int(x_end)
    y_pixel2 = math.floor(y_end)
    plot(x_pixel2, y_pixel2, _rfpart(y_end) * x_gap)
    plot(x_pixel2, y_pixel2 + 1, _fpart(y_end) * x_gap)

    for x in range(x_pixel1 + 1, x_pixel2):
        y = math.floor(intery)
        plot(x, y, _rfpart(intery))
        plot(x, y + 1, _fpart(intery))
        intery += gradient


def draw_line(
    buffer: PixelBuffer,
    start: Sequence[float],
    end: Sequence[float],
    color: int,
    algorithm: LineAlgorithm = LineAlgorithm.BRESENHAM,
    radius: int = 0,
) -> None:
    """
    Draw a line with the selected algorithm.

    Integer algorithms round fractional endpoints; Wu uses them as given.
    The radius only applies to Bresenham.
    """
    (x0, y0), (x1, y1) = start, end
    algorithm = LineAlgorithm(algorithm)

    if algorithm == LineAlgorithm.DDA:
        draw_line_dda(buffer, x0, y0, x1, y1, color)
    elif algorithm == LineAlgorithm.BRESENHAM:
        draw_line_bresenham(buffer, x0, y0, x1, y1, color, radius)
    elif algorithm == LineAlgorithm.WU:
        draw_line_wu(buffer, float(x0), float(y0), float(x1), float(y1), color)
    else:
        raise ValueError(f"Unknown line algorithm: {algorithm}")


def draw_polyline(
    buffer: PixelBuffer,
    points: Sequence[Tuple[float, float]],
    color: int,
    algorithm: LineAlgorithm = LineAlgorithm.BRESENHAM,
    radius: int = 0,
) -> int:
    """
    Draw consecutive points as connected line segments.

    Returns:
        Number of segments drawn
    """
    for start, end in zip(points, points[1:]):
        draw_line(buffer, start, end, color, algorithm, radius)
    return max(0, len(points) - 1)


def draw_control_point(
    buffer: PixelBuffer,
    point: Sequence[float],
    color: int,
    radius: int = CurveConstants.CONTROL_POINT_RADIUS,
) -> None:
    """Mark a control point with a filled disc."""
    cx, cy = Point(*point).rounded()
    fill_disc(buffer, cx, cy, radius, color)
