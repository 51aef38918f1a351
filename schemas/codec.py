"""
Run-length codec API models.

This module contains models for encoding a buffer's luminance channel and
rebuilding a buffer from an encoded stream.
"""

from typing import Optional

from pydantic import BaseModel, Field

from core.constants import StoreConstants


class RleEncodeRequest(BaseModel):
    """Encode the luminance channel of a stored buffer"""

    levels: Optional[int] = Field(
        None, description="Quantization levels applied first (1-256, omitted = lossless)"
    )


class RleEncodeResponse(BaseModel):
    """Encoded run-length stream"""

    buffer_id: str
    width: int
    height: int
    original_length: int
    run_count: int
    encoded_length: int
    compression_ratio: float
    levels: Optional[int] = None
    lossless: bool
    stream_base64: str = Field(..., description="(count, value) byte pairs, base64 encoded")
    processing_time_ms: int


class RleDecodeRequest(BaseModel):
    """Rebuild a grayscale buffer from an encoded stream"""

    width: int = Field(..., gt=0, le=StoreConstants.MAX_DIMENSION)
    height: int = Field(..., gt=0, le=StoreConstants.MAX_DIMENSION)
    stream_base64: str
    name: Optional[str] = Field(None, max_length=128)
