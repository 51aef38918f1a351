"""
Image format boundary.

Handles conversions between PixelBuffer and external representations:
- Encoded image bytes (PNG, BMP, ...) decoded with PIL
- Encoded image bytes produced by OpenCV
- Base64 encoded strings for JSON transport
"""

import base64
import binascii
import io
import logging

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from core.exceptions import ImageDecodeError
from core.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


def decode_image(data: bytes) -> PixelBuffer:
    """
    Decode encoded image bytes into a PixelBuffer.

    Any mode PIL can read is converted to RGBA first, so images without an
    alpha channel come out fully opaque.

    Args:
        data: Encoded image file contents

    Returns:
        Decoded buffer

    Raises:
        ImageDecodeError: If the bytes are not a readable image
    """
    if not data:
        raise ImageDecodeError("Empty image data")

    try:
        with Image.open(io.BytesIO(data)) as image:
            rgba = np.array(image.convert("RGBA"))
    except (UnidentifiedImageError, OSError) as e:
        logger.error(f"Failed to decode image ({len(data)} bytes): {e}")
        raise ImageDecodeError(f"Cannot decode image: {e}") from e

    return PixelBuffer.from_rgba_array(rgba)


def pixel_buffer_to_bgra(buffer: PixelBuffer) -> np.ndarray:
    """(height, width, 4) uint8 array in OpenCV BGRA channel order."""
    a, r, g, b = buffer.channels()
    return np.dstack([b, g, r, a])


def encode_image(buffer: PixelBuffer, format: str = ".png") -> bytes:
    """
    Encode a PixelBuffer with OpenCV.

    Args:
        buffer: Buffer to encode
        format: OpenCV extension ('.png', '.bmp', ...); alpha survives for PNG

    Returns:
        Encoded image bytes
    """
    bgra = pixel_buffer_to_bgra(buffer)
    if format.lower() in (".jpg", ".jpeg"):
        # JPEG has no alpha channel
        bgra = cv2.cvtColor(bgra, cv2.COLOR_BGRA2BGR)

    success, encoded = cv2.imencode(format, bgra)
    if not success:
        logger.error(f"Failed to encode {buffer!r} as {format}")
        raise ValueError(f"OpenCV could not encode image as {format}")
    return encoded.tobytes()


def to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("utf-8")


def from_base64(base64_string: str) -> bytes:
    """
    Decode a base64 string, tolerating a data-URL prefix.

    Raises:
        ImageDecodeError: If the string is not valid base64
    """
    if base64_string.startswith("data:") and "," in base64_string:
        base64_string = base64_string.split(",", 1)[1]
    try:
        return base64.b64decode(base64_string, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Invalid base64 data: {e}") from e


def encode_image_to_base64(buffer: PixelBuffer, format: str = ".png") -> str:
    """Encode buffer and return it as a base64 string."""
    return to_base64(encode_image(buffer, format))


def decode_image_from_base64(base64_string: str) -> PixelBuffer:
    return decode_image(from_base64(base64_string))
