"""
Compose API Router - Rotation, alpha compositing and clock composition
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_raster_service
from api.exceptions import safe_endpoint
from schemas import ClockRequest, CompositeRequest, OperationResponse, RotateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/clock")
@safe_endpoint
async def compose_clock(
    request: ClockRequest, service=Depends(get_raster_service)
) -> OperationResponse:
    """Compose an analog clock into a new buffer"""
    return service.compose_clock(request)


@router.post("/{buffer_id}/rotate")
@safe_endpoint
async def rotate(
    buffer_id: str, request: RotateRequest, service=Depends(get_raster_service)
) -> OperationResponse:
    """Rotate about the center with bilinear resampling"""
    return service.rotate(buffer_id, request)


@router.post("/{buffer_id}/composite")
@safe_endpoint
async def composite(
    buffer_id: str, request: CompositeRequest, service=Depends(get_raster_service)
) -> OperationResponse:
    """Alpha-blend another buffer onto this one"""
    return service.composite(buffer_id, request)
