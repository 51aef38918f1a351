"""
Image boundary utilities.

This package isolates everything that touches external image formats:
- converters: Decode/encode between PixelBuffer and image bytes, base64
- processors: Presentation helpers (magnification, previews)
"""

from core.image.converters import (
    decode_image,
    decode_image_from_base64,
    encode_image,
    encode_image_to_base64,
)
from core.image.processors import create_preview, magnify

__all__ = [
    "decode_image",
    "decode_image_from_base64",
    "encode_image",
    "encode_image_to_base64",
    "create_preview",
    "magnify",
]
