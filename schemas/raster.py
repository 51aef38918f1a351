"""
Raster operation API models.

This module contains request models for operations on stored buffers:
- Color adjustments, convolution and red-eye removal
- Line, Bézier, spline and pattern drawing
- Rotation, compositing and clock composition
"""

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from core.constants import ConvolutionConstants, StoreConstants
from core.enums import ColorAdjustment, ConvolutionMode, KernelName, LineAlgorithm, PatternType

from .common import ColorParam, Point


class AdjustRequest(BaseModel):
    """Whole-buffer color adjustment"""

    adjustment: ColorAdjustment
    ratio: float = Field(1.0, ge=0.0, le=10.0, description="Saturation multiplier")
    degrees: float = Field(0.0, description="Hue rotation in degrees")


class RedEyeRequest(BaseModel):
    """Red-eye removal thresholds (server defaults when omitted)"""

    saturation_threshold: Optional[float] = Field(None, ge=0.0, le=1.0)
    min_red: Optional[int] = Field(None, ge=0, le=255)


class LineRequest(ColorParam):
    """Draw one straight line"""

    start: Point
    end: Point
    algorithm: LineAlgorithm = LineAlgorithm.BRESENHAM
    radius: int = Field(0, ge=0, le=64, description="Disc radius for thick Bresenham lines")


class PolylineRequest(ColorParam):
    """Draw connected line segments"""

    points: List[Point] = Field(..., min_length=2)
    algorithm: LineAlgorithm = LineAlgorithm.BRESENHAM
    radius: int = Field(0, ge=0, le=64)


class BezierRequest(ColorParam):
    """Draw one Bézier curve from its control points"""

    points: List[Point] = Field(..., min_length=1)
    step: Optional[float] = Field(None, gt=0.0, le=1.0, description="Fixed parameter step")
    adaptive: bool = Field(False, description="Adaptive subdivision (3 or 4 points only)")
    tolerance: Optional[float] = Field(None, gt=0.0, description="Flatness tolerance in pixels")
    algorithm: LineAlgorithm = LineAlgorithm.BRESENHAM
    show_control_points: bool = False

    @model_validator(mode="after")
    def check_adaptive_degree(self):
        if self.adaptive and len(self.points) not in (3, 4):
            raise ValueError("Adaptive rendering needs 3 or 4 control points")
        return self


class SplineRequest(ColorParam):
    """Draw a smooth spline through points"""

    points: List[Point] = Field(..., min_length=1)
    step: Optional[float] = Field(None, gt=0.0, le=1.0)
    adaptive: bool = False
    tolerance: Optional[float] = Field(None, gt=0.0)
    algorithm: LineAlgorithm = LineAlgorithm.WU
    show_control_points: bool = False


class SurfaceRequest(ColorParam):
    """Draw a Bézier patch as a mesh of iso-curves"""

    grid: List[List[Point]] = Field(..., min_length=1)
    u_segments: int = Field(10, ge=1, le=100)
    v_segments: int = Field(10, ge=1, le=100)
    step: Optional[float] = Field(None, gt=0.0, le=1.0)
    algorithm: LineAlgorithm = LineAlgorithm.BRESENHAM


class PatternRequest(BaseModel):
    """Create a new buffer holding a procedural pattern"""

    pattern: PatternType
    width: int = Field(256, gt=0, le=StoreConstants.MAX_DIMENSION)
    height: int = Field(256, gt=0, le=StoreConstants.MAX_DIMENSION)
    rays: int = Field(16, ge=1, le=360, description="Star pattern ray count")
    algorithm: LineAlgorithm = LineAlgorithm.BRESENHAM
    name: Optional[str] = Field(None, max_length=128)


class RotateRequest(BaseModel):
    """Rotate a buffer about its center"""

    angle: float = Field(..., description="Clockwise angle in degrees")
    as_new: bool = Field(False, description="Store the result as a new buffer")


class CompositeRequest(BaseModel):
    """Alpha-blend another stored buffer onto this one"""

    foreground_id: str
    offset_x: int = 0
    offset_y: int = 0
    angle: Optional[float] = Field(
        None, description="Rotate the foreground first and center it on (offset_x, offset_y)"
    )


class ClockRequest(BaseModel):
    """Compose an analog clock from a dial and three hand layers"""

    dial_id: str
    hour_hand_id: str
    minute_hand_id: str
    second_hand_id: str
    hours: int = Field(..., ge=0, le=23)
    minutes: int = Field(..., ge=0, le=59)
    seconds: int = Field(..., ge=0, le=59)
    name: Optional[str] = Field(None, max_length=128)


class ConvolveRequest(BaseModel):
    """Convolution request (mirrors ConvolutionParams with server defaults)"""

    mode: ConvolutionMode = ConvolutionMode.NORMALIZED
    kernel: KernelName = KernelName.BOX_BLUR_3X3
    weights: Optional[List[List[int]]] = Field(None, description="Custom kernel weights")
    threshold: Optional[int] = Field(
        None,
        ge=ConvolutionConstants.MIN_THRESHOLD,
        le=ConvolutionConstants.MAX_THRESHOLD,
    )
