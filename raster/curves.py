"""
Bézier curve evaluation and rendering.

Curves are sampled into polylines and handed to the rasterizer. Two sampling
strategies are available:
- fixed step: t advances by a constant step and always ends exactly at 1.0
- adaptive: cubic segments are bisected until their control polygon is flat
  enough to be drawn as a single straight segment
"""

import logging
from typing import List, Optional, Sequence, Tuple

from core.constants import CurveConstants
from core.enums import LineAlgorithm
from core.geometry import Point, to_points
from core.pixel_buffer import PixelBuffer
from raster.rasterizer import draw_control_point, draw_line, draw_polyline

logger = logging.getLogger(__name__)

CubicSegment = Tuple[Point, Point, Point, Point]


def lerp(a: Point, b: Point, t: float) -> Point:
    """Linear interpolation between two points."""
    return Point(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)


def evaluate_quadratic(p0: Point, p1: Point, p2: Point, t: float) -> Point:
    """Quadratic Bernstein form: (1-t)^2 P0 + 2(1-t)t P1 + t^2 P2."""
    u = 1.0 - t
    w0 = u * u
    w1 = 2.0 * u * t
    w2 = t * t
    return Point(
        w0 * p0.x + w1 * p1.x + w2 * p2.x,
        w0 * p0.y + w1 * p1.y + w2 * p2.y,
    )


def evaluate_cubic(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """Cubic Bernstein form."""
    u = 1.0 - t
    w0 = u * u * u
    w1 = 3.0 * u * u * t
    w2 = 3.0 * u * t * t
    w3 = t * t * t
    return Point(
        w0 * p0.x + w1 * p1.x + w2 * p2.x + w3 * p3.x,
        w0 * p0.y + w1 * p1.y + w2 * p2.y + w3 * p3.y,
    )


def evaluate_de_casteljau(points: Sequence[Point], t: float) -> Point:
    """
    Evaluate a Bézier curve of any degree by repeated interpolation.

    Args:
        points: Control points (at least one)
        t: Curve parameter in [0, 1]

    Raises:
        ValueError: If no control points are given
    """
    if not points:
        raise ValueError("De Casteljau evaluation needs at least one control point")

    work = list(to_points(points))
    for level in range(len(work) - 1, 0, -1):
        for i in range(level):
            work[i] = lerp(work[i], work[i + 1], t)
    return work[0]


def split_cubic(
    p0: Point, p1: Point, p2: Point, p3: Point, t: float = 0.5
) -> Tuple[CubicSegment, CubicSegment]:
    """Split a cubic at t into two cubics covering [0, t] and [t, 1]."""
    p01 = lerp(p0, p1, t)
    p12 = lerp(p1, p2, t)
    p23 = lerp(p2, p3, t)
    p012 = lerp(p01, p12, t)
    p123 = lerp(p12, p23, t)
    mid = lerp(p012, p123, t)
    return (p0, p01, p012, mid), (mid, p123, p23, p3)


def parameter_steps(step: float) -> List[float]:
    """
    Parameter samples 0, step, 2*step, ... ending exactly at 1.0.

    Raises:
        ValueError: If step is not in (0, 1]
    """
    if not 0.0 < step <= 1.0:
        raise ValueError(f"Curve step must be in (0, 1], got {step}")

    values = []
    i = 0
    t = 0.0
    # A multiple of step that rounds onto 1.0 is replaced by the exact endpoint
    while t < 1.0 - CurveConstants.PARAMETER_EPSILON:
        values.append(t)
        i += 1
        t = i * step
    values.append(1.0)
    return values


def _evaluate(points: List[Point], t: float) -> Point:
    if len(points) == 3:
        return evaluate_quadratic(points[0], points[1], points[2], t)
    if len(points) == 4:
        return evaluate_cubic(points[0], points[1], points[2], points[3], t)
    return evaluate_de_casteljau(points, t)


def sample_bezier(points: Sequence[Point], step: float = CurveConstants.DEFAULT_STEP) -> List[Point]:
    """
    Sample a Bézier curve at fixed parameter steps.

    Quadratic and cubic curves use the closed forms, other degrees De Casteljau.
    """
    control = to_points(points)
    if not control:
        raise ValueError("Bézier curve needs at least one control point")
    return [_evaluate(control, t) for t in parameter_steps(step)]


def draw_bezier(
    buffer: PixelBuffer,
    points: Sequence[Point],
    color: int,
    step: float = CurveConstants.DEFAULT_STEP,
    algorithm: LineAlgorithm = LineAlgorithm.BRESENHAM,
) -> int:
    """
    Render a Bézier curve as a fixed-step polyline.

    Returns:
        Number of line segments drawn
    """
    samples = sample_bezier(points, step)
    return draw_polyline(buffer, samples, color, algorithm)


def draw_bezier_quadratic(
    buffer: PixelBuffer,
    p0: Point,
    p1: Point,
    p2: Point,
    color: int,
    step: float = CurveConstants.DEFAULT_STEP,
    algorithm: LineAlgorithm = LineAlgorithm.BRESENHAM,
) -> int:
    return draw_bezier(buffer, [p0, p1, p2], color, step, algorithm)


def draw_bezier_cubic(
    buffer: PixelBuffer,
    p0: Point,
    p1: Point,
    p2: Point,
    p3: Point,
    color: int,
    step: float = CurveConstants.DEFAULT_STEP,
    algorithm: LineAlgorithm = LineAlgorithm.BRESENHAM,
) -> int:
    return draw_bezier(buffer, [p0, p1, p2, p3], color, step, algorithm)


def draw_bezier_general(
    buffer: PixelBuffer,
    points: Sequence[Point],
    color: int,
    step: float = CurveConstants.DEFAULT_STEP,
    algorithm: LineAlgorithm = LineAlgorithm.BRESENHAM,
) -> int:
    """Render a curve of arbitrary degree, always through De Casteljau."""
    control = to_points(points)
    if not control:
        raise ValueError("Bézier curve needs at least one control point")
    samples = [evaluate_de_casteljau(control, t) for t in parameter_steps(step)]
    return draw_polyline(buffer, samples, color, algorithm)


def distance_to_line(point: Point, a: Point, b: Point) -> float:
    """
    Perpendicular distance from point to the infinite line through a and b.

    A (near) zero-length chord is treated as a point.
    """
    point, a, b = to_points([point, a, b])
    dx = b.x - a.x
    dy = b.y - a.y
    length_sq = dx * dx + dy * dy
    if length_sq < CurveConstants.DEGENERATE_CHORD_LENGTH_SQ:
        return point.distance_to(a)
    cross = dx * (a.y - point.y) - dy * (a.x - point.x)
    return abs(cross) / length_sq ** 0.5


def cubic_flatness(p0: Point, p1: Point, p2: Point, p3: Point) -> float:
    """Maximum distance of the inner control points from the chord p0-p3."""
    return max(distance_to_line(p1, p0, p3), distance_to_line(p2, p0, p3))


def flatten_cubic(
    p0: Point,
    p1: Point,
    p2: Point,
    p3: Point,
    tolerance: float = CurveConstants.DEFAULT_FLATNESS_TOLERANCE,
    max_depth: int = CurveConstants.MAX_SUBDIVISION_DEPTH,
) -> List[Point]:
    """
    Adaptive flattening of a cubic into a polyline.

    Segments are bisected at t=0.5 until flat within tolerance (or max_depth is
    reached). An explicit worklist keeps left halves ahead of right halves so
    the output runs from p0 to p3.

    Returns:
        Polyline vertices, starting with p0 and ending with p3
    """
    if tolerance <= 0:
        raise ValueError(f"Flatness tolerance must be positive, got {tolerance}")

    p0, p1, p2, p3 = to_points([p0, p1, p2, p3])
    polyline = [p0]
    worklist = [((p0, p1, p2, p3), 0)]

    while worklist:
        segment, depth = worklist.pop()
        if depth >= max_depth or cubic_flatness(*segment) < tolerance:
            polyline.append(segment[3])
            continue
        left, right = split_cubic(*segment)
        worklist.append((right, depth + 1))
        worklist.append((left, depth + 1))

    return polyline


def elevate_quadratic(p0: Point, p1: Point, p2: Point) -> CubicSegment:
    """Exact cubic representation of a quadratic curve."""
    p0, p1, p2 = to_points([p0, p1, p2])
    c1 = lerp(p0, p1, 2.0 / 3.0)
    c2 = lerp(p2, p1, 2.0 / 3.0)
    return p0, c1, c2, p2


def flatten_quadratic(
    p0: Point,
    p1: Point,
    p2: Point,
    tolerance: float = CurveConstants.DEFAULT_FLATNESS_TOLERANCE,
    max_depth: int = CurveConstants.MAX_SUBDIVISION_DEPTH,
) -> List[Point]:
    return flatten_cubic(*elevate_quadratic(p0, p1, p2), tolerance, max_depth)


def draw_bezier_adaptive(
    buffer: PixelBuffer,
    points: Sequence[Point],
    color: int,
    tolerance: float = CurveConstants.DEFAULT_FLATNESS_TOLERANCE,
    algorithm: LineAlgorithm = LineAlgorithm.BRESENHAM,
) -> int:
    """
    Render a quadratic or cubic curve with adaptive subdivision.

    Args:
        buffer: Target buffer
        points: Three or four control points
        color: Packed ARGB color
        tolerance: Maximum allowed flatness per drawn segment
        algorithm: Line algorithm for the straight segments

    Returns:
        Number of line segments drawn
    """
    control = to_points(points)
    if len(control) == 3:
        polyline = flatten_quadratic(*control, tolerance=tolerance)
    elif len(control) == 4:
        polyline = flatten_cubic(*control, tolerance=tolerance)
    else:
        raise ValueError(
            f"Adaptive rendering supports 3 or 4 control points, got {len(control)}"
        )
    return draw_polyline(buffer, polyline, color, algorithm)


def spline_segments(points: Sequence[Point]) -> List[CubicSegment]:
    """
    Cubic Bézier segments of a C1 spline passing through every point.

    The first and last points are duplicated as virtual neighbours; each point
    gets tangent controls offset by one sixth of (next - previous).
    Fewer than three points produce no segments.
    """
    anchors = to_points(points)
    if len(anchors) < 3:
        return []

    extended = [anchors[0]] + anchors + [anchors[-1]]
    divisor = CurveConstants.SPLINE_TANGENT_DIVISOR
    left_controls = []
    right_controls = []
    for i in range(1, len(extended) - 1):
        prev_point, point, next_point = extended[i - 1], extended[i], extended[i + 1]
        tx = (next_point.x - prev_point.x) / divisor
        ty = (next_point.y - prev_point.y) / divisor
        left_controls.append(Point(point.x - tx, point.y - ty))
        right_controls.append(Point(point.x + tx, point.y + ty))

    return [
        (anchors[i], right_controls[i], left_controls[i + 1], anchors[i + 1])
        for i in range(len(anchors) - 1)
    ]


def draw_spline(
    buffer: PixelBuffer,
    points: Sequence[Point],
    color: int,
    step: float = CurveConstants.DEFAULT_SPLINE_STEP,
    adaptive: bool = False,
    tolerance: float = CurveConstants.DEFAULT_FLATNESS_TOLERANCE,
    algorithm: LineAlgorithm = LineAlgorithm.WU,
) -> int:
    """
    Draw a smooth spline through the given points.

    Returns:
        Number of cubic segments drawn
    """
    segments = spline_segments(points)
    if not segments:
        logger.warning(f"Spline needs at least 3 points, got {len(points)}; nothing drawn")
        return 0

    for segment in segments:
        if adaptive:
            draw_polyline(buffer, flatten_cubic(*segment, tolerance=tolerance), color, algorithm)
        else:
            draw_bezier_cubic(buffer, *segment, color, step, algorithm)

    logger.debug(f"Drew spline with {len(segments)} segments")
    return len(segments)


def draw_bezier_surface(
    buffer: PixelBuffer,
    grid: Sequence[Sequence[Point]],
    color: int,
    u_segments: int = 10,
    v_segments: int = 10,
    step: float = CurveConstants.DEFAULT_STEP,
    algorithm: LineAlgorithm = LineAlgorithm.BRESENHAM,
) -> int:
    """
    Draw a tensor-product Bézier patch as a mesh of iso-parameter curves.

    Args:
        buffer: Target buffer
        grid: Rows of control points (every row the same length)
        color: Packed ARGB color
        u_segments: Number of intervals along the row direction
        v_segments: Number of intervals along the column direction
        step: Parameter step for each iso-curve
        algorithm: Line algorithm

    Returns:
        Number of iso-curves drawn
    """
    rows = [to_points(row) for row in grid]
    if not rows or not rows[0]:
        raise ValueError("Bézier surface needs a non-empty control grid")
    if any(len(row) != len(rows[0]) for row in rows):
        raise ValueError("Bézier surface control grid must be rectangular")
    if u_segments < 1 or v_segments < 1:
        raise ValueError("Bézier surface needs at least one segment in each direction")

    columns = [list(column) for column in zip(*rows)]
    curves = 0

    # Fixed u: collapse every column, then sweep v along the collapsed row
    for i in range(u_segments + 1):
        u = i / u_segments
        collapsed = [evaluate_de_casteljau(column, u) for column in columns]
        draw_polyline(buffer, sample_bezier(collapsed, step), color, algorithm)
        curves += 1

    for j in range(v_segments + 1):
        v = j / v_segments
        collapsed = [evaluate_de_casteljau(row, v) for row in rows]
        draw_polyline(buffer, sample_bezier(collapsed, step), color, algorithm)
        curves += 1

    return curves


def draw_control_polygon(
    buffer: PixelBuffer,
    points: Sequence[Point],
    point_color: int,
    line_color: Optional[int] = None,
    radius: int = CurveConstants.CONTROL_POINT_RADIUS,
) -> None:
    """Mark control points and optionally connect them with straight lines."""
    control = to_points(points)
    if line_color is not None:
        for start, end in zip(control, control[1:]):
            draw_line(buffer, start, end, line_color, LineAlgorithm.BRESENHAM)
    for point in control:
        draw_control_point(buffer, point, point_color, radius)
