"""
Buffers API Router - Buffer lifecycle, inspection and export
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from api.dependencies import get_raster_service
from api.exceptions import safe_endpoint
from core.constants import StoreConstants
from schemas import (
    BufferCreateRequest,
    BufferInfo,
    BufferListResponse,
    BufferUploadRequest,
    PixelResponse,
    PreviewResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

DOWNLOAD_FORMATS = {
    "png": (".png", "image/png"),
    "bmp": (".bmp", "image/bmp"),
    "jpg": (".jpg", "image/jpeg"),
}


@router.post("")
@safe_endpoint
async def create_buffer(
    request: BufferCreateRequest, service=Depends(get_raster_service)
) -> BufferInfo:
    """Create a blank buffer"""
    return service.create_buffer(request.width, request.height, request.fill, request.name)


@router.post("/upload")
@safe_endpoint
async def upload_buffer(
    request: BufferUploadRequest, service=Depends(get_raster_service)
) -> BufferInfo:
    """Decode a base64 encoded image into a new buffer"""
    return service.upload_buffer(request.image_base64, request.name)


@router.get("")
@safe_endpoint
async def list_buffers(service=Depends(get_raster_service)) -> BufferListResponse:
    """List stored buffers (newest first)"""
    buffers = service.list_buffers()
    return BufferListResponse(buffers=buffers, count=len(buffers))


@router.get("/{buffer_id}")
@safe_endpoint
async def get_buffer(buffer_id: str, service=Depends(get_raster_service)) -> BufferInfo:
    """Get buffer description"""
    return service.get_info(buffer_id)


@router.get("/{buffer_id}/pixel")
@safe_endpoint
async def get_pixel(
    buffer_id: str,
    x: int = Query(..., ge=0),
    y: int = Query(..., ge=0),
    service=Depends(get_raster_service),
) -> PixelResponse:
    """Read a single pixel"""
    return service.get_pixel(buffer_id, x, y)


@router.get("/{buffer_id}/preview")
@safe_endpoint
async def get_preview(
    buffer_id: str,
    scale: Optional[int] = Query(None, ge=1, le=StoreConstants.MAX_PREVIEW_SCALE),
    service=Depends(get_raster_service),
) -> PreviewResponse:
    """PNG preview, nearest-neighbour magnified"""
    return service.preview(buffer_id, scale)


@router.get("/{buffer_id}/download")
@safe_endpoint
async def download_buffer(
    buffer_id: str,
    format: str = Query("png", pattern="^(png|bmp|jpg)$"),
    service=Depends(get_raster_service),
) -> Response:
    """Download the buffer as an encoded image file"""
    extension, media_type = DOWNLOAD_FORMATS[format]
    content = service.download(buffer_id, extension)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{buffer_id}{extension}"'},
    )


@router.delete("/{buffer_id}")
@safe_endpoint
async def delete_buffer(buffer_id: str, service=Depends(get_raster_service)) -> dict:
    """Delete a buffer"""
    service.delete_buffer(buffer_id)
    return {"success": True, "message": f"Buffer {buffer_id} deleted"}
