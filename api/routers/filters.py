"""
Filters API Router - Color adjustments, convolution and red-eye removal
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_raster_service
from api.exceptions import safe_endpoint
from core.kernel import KERNEL_CATALOG
from schemas import AdjustRequest, ConvolveRequest, OperationResponse, RedEyeRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/kernels")
async def list_kernels() -> dict:
    """Predefined convolution kernels"""
    return {
        "kernels": [
            {
                "name": name.value,
                "width": kernel.width,
                "height": kernel.height,
                "weight_sum": kernel.weight_sum,
                "weights": kernel.weights.tolist(),
            }
            for name, kernel in KERNEL_CATALOG.items()
        ]
    }


@router.post("/{buffer_id}/adjust")
@safe_endpoint
async def adjust(
    buffer_id: str, request: AdjustRequest, service=Depends(get_raster_service)
) -> OperationResponse:
    """Grayscale, saturation or hue shift"""
    return service.adjust(buffer_id, request)


@router.post("/{buffer_id}/convolve")
@safe_endpoint
async def convolve(
    buffer_id: str, request: ConvolveRequest, service=Depends(get_raster_service)
) -> OperationResponse:
    """Kernel convolution (normalized, threshold smoothing or Laplacian edges)"""
    return service.convolve(buffer_id, request)


@router.post("/{buffer_id}/red-eye")
@safe_endpoint
async def remove_red_eye(
    buffer_id: str, request: RedEyeRequest, service=Depends(get_raster_service)
) -> OperationResponse:
    """Recolor red-eye pixels"""
    return service.remove_red_eye(buffer_id, request)
