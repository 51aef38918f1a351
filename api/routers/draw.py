"""
Draw API Router - Lines, curves and procedural patterns
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_raster_service
from api.exceptions import safe_endpoint
from schemas import (
    BezierRequest,
    LineRequest,
    OperationResponse,
    PatternRequest,
    PolylineRequest,
    SplineRequest,
    SurfaceRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/pattern")
@safe_endpoint
async def create_pattern(
    request: PatternRequest, service=Depends(get_raster_service)
) -> OperationResponse:
    """Render a test pattern into a new buffer"""
    return service.create_pattern(request)


@router.post("/{buffer_id}/line")
@safe_endpoint
async def draw_line(
    buffer_id: str, request: LineRequest, service=Depends(get_raster_service)
) -> OperationResponse:
    """Draw a line (DDA, Bresenham or Wu)"""
    return service.draw_line(buffer_id, request)


@router.post("/{buffer_id}/polyline")
@safe_endpoint
async def draw_polyline(
    buffer_id: str, request: PolylineRequest, service=Depends(get_raster_service)
) -> OperationResponse:
    """Draw connected line segments"""
    return service.draw_polyline(buffer_id, request)


@router.post("/{buffer_id}/bezier")
@safe_endpoint
async def draw_bezier(
    buffer_id: str, request: BezierRequest, service=Depends(get_raster_service)
) -> OperationResponse:
    """Draw a Bézier curve (fixed step or adaptive)"""
    return service.draw_bezier(buffer_id, request)


@router.post("/{buffer_id}/spline")
@safe_endpoint
async def draw_spline(
    buffer_id: str, request: SplineRequest, service=Depends(get_raster_service)
) -> OperationResponse:
    """Draw a smooth spline through the given points"""
    return service.draw_spline(buffer_id, request)


@router.post("/{buffer_id}/surface")
@safe_endpoint
async def draw_surface(
    buffer_id: str, request: SurfaceRequest, service=Depends(get_raster_service)
) -> OperationResponse:
    """Draw a Bézier patch mesh"""
    return service.draw_surface(buffer_id, request)
