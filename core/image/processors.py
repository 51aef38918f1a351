"""
Presentation helpers.

Handles buffer preparation for display:
- Integer magnification (pixel-exact, nearest neighbour)
- Preview encoding for API responses
"""

import logging
from typing import Tuple

import cv2

from core.constants import StoreConstants
from core.image.converters import encode_image_to_base64
from core.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


def magnify(buffer: PixelBuffer, scale: int) -> PixelBuffer:
    """
    Enlarge a buffer by an integer factor without smoothing.

    Args:
        buffer: Source buffer
        scale: Magnification factor (1 returns a copy)

    Returns:
        New buffer of size (width*scale, height*scale)
    """
    if scale < 1:
        raise ValueError(f"Magnification scale must be >= 1, got {scale}")
    if scale == 1:
        return buffer.copy()

    rgba = buffer.to_rgba_array()
    enlarged = cv2.resize(
        rgba,
        (buffer.width * scale, buffer.height * scale),
        interpolation=cv2.INTER_NEAREST,
    )
    return PixelBuffer.from_rgba_array(enlarged)


def fit_scale(buffer: PixelBuffer, max_dimension: int) -> int:
    """Largest integer scale keeping both sides within max_dimension (at least 1)."""
    longest = max(buffer.width, buffer.height)
    return max(1, min(StoreConstants.MAX_PREVIEW_SCALE, max_dimension // longest))


def create_preview(
    buffer: PixelBuffer, scale: int = StoreConstants.DEFAULT_PREVIEW_SCALE
) -> Tuple[str, Tuple[int, int]]:
    """
    Create a PNG preview of a buffer.

    Args:
        buffer: Buffer to preview
        scale: Nearest-neighbour magnification factor

    Returns:
        Tuple of (PNG as base64 string, (width, height) of the preview)
    """
    try:
        preview = magnify(buffer, scale)
        return encode_image_to_base64(preview, ".png"), preview.size
    except Exception as e:
        logger.error(f"Failed to create preview for {buffer!r}: {e}")
        raise

