"""
Schemas Package

This package contains all Pydantic schemas for request validation and response
serialization, organized by domain:
- common: Points, colors, buffer descriptions, operation results
- buffer: Buffer lifecycle requests and responses
- raster: Filter, drawing and compositing requests
- codec: Run-length codec requests and responses
"""

from core.enums import ColorAdjustment, ConvolutionMode, KernelName, LineAlgorithm, PatternType

from .buffer import (
    BufferCreateRequest,
    BufferListResponse,
    BufferUploadRequest,
    PixelResponse,
    PreviewResponse,
)
from .codec import RleDecodeRequest, RleEncodeRequest, RleEncodeResponse
from .common import BufferInfo, ColorParam, OperationResponse, Point, format_color, parse_color
from .raster import (
    AdjustRequest,
    BezierRequest,
    ClockRequest,
    CompositeRequest,
    ConvolveRequest,
    LineRequest,
    PatternRequest,
    PolylineRequest,
    RedEyeRequest,
    RotateRequest,
    SplineRequest,
    SurfaceRequest,
)

__all__ = [
    # Enums
    "ColorAdjustment",
    "ConvolutionMode",
    "KernelName",
    "LineAlgorithm",
    "PatternType",
    # Common
    "BufferInfo",
    "ColorParam",
    "OperationResponse",
    "Point",
    "format_color",
    "parse_color",
    # Buffer
    "BufferCreateRequest",
    "BufferListResponse",
    "BufferUploadRequest",
    "PixelResponse",
    "PreviewResponse",
    # Raster
    "AdjustRequest",
    "BezierRequest",
    "ClockRequest",
    "CompositeRequest",
    "ConvolveRequest",
    "LineRequest",
    "PatternRequest",
    "PolylineRequest",
    "RedEyeRequest",
    "RotateRequest",
    "SplineRequest",
    "SurfaceRequest",
    # Codec
    "RleDecodeRequest",
    "RleEncodeRequest",
    "RleEncodeResponse",
]
