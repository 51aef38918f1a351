"""
Buffer management API models.

This module contains models for buffer lifecycle operations:
- Creation (blank or uploaded)
- Listing, pixel inspection and previews
"""

from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from core.constants import StoreConstants

from .common import BufferInfo, parse_color


class BufferCreateRequest(BaseModel):
    """Request to create a blank buffer"""

    width: int = Field(..., gt=0, le=StoreConstants.MAX_DIMENSION)
    height: int = Field(..., gt=0, le=StoreConstants.MAX_DIMENSION)
    fill: Optional[Union[int, str]] = Field(
        None, description="Fill color (default transparent black)"
    )
    name: Optional[str] = Field(None, max_length=128)

    @field_validator("fill")
    @classmethod
    def validate_fill(cls, value):
        return None if value is None else parse_color(value)


class BufferUploadRequest(BaseModel):
    """Request to decode an encoded image into a new buffer"""

    image_base64: str = Field(..., min_length=1, description="Base64 encoded PNG/BMP/JPEG")
    name: Optional[str] = Field(None, max_length=128)


class BufferListResponse(BaseModel):
    """Response listing stored buffers"""

    buffers: List[BufferInfo]
    count: int


class PixelResponse(BaseModel):
    """Single pixel value"""

    x: int
    y: int
    argb: int
    hex: str
    r: int
    g: int
    b: int
    a: int


class PreviewResponse(BaseModel):
    """PNG preview of a buffer"""

    buffer_id: str
    width: int
    height: int
    scale: int
    image_base64: str
