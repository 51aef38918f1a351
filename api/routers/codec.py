"""
Codec API Router - Run-length encoding of buffer luminance
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_raster_service
from api.exceptions import safe_endpoint
from schemas import RleDecodeRequest, RleEncodeRequest, RleEncodeResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/rle/decode")
@safe_endpoint
async def rle_decode(request: RleDecodeRequest, service=Depends(get_raster_service)) -> dict:
    """Rebuild a grayscale buffer from a (count, value) stream"""
    info, processing_time_ms = service.rle_decode(request)
    return {"buffer": info.model_dump(), "processing_time_ms": processing_time_ms}


@router.post("/{buffer_id}/rle")
@safe_endpoint
async def rle_encode(
    buffer_id: str, request: RleEncodeRequest, service=Depends(get_raster_service)
) -> RleEncodeResponse:
    """Encode the buffer's luminance channel, optionally quantized first"""
    return service.rle_encode(buffer_id, request.levels)
