"""
PixelBuffer - flat packed-pixel store.

Owns a single contiguous row-major numpy array of width*height packed
32-bit ARGB values. Every algorithm reads and writes pixels through it,
either by coordinate or through the raw flat/2D views for bulk work.
"""

import logging
from typing import Tuple, Union

import numpy as np

from core.color_model import HslColor, RgbColor, hsl_to_rgb, pack_argb
from core.exceptions import DimensionMismatchError, InvalidDimensionsError, PixelOutOfRangeError

logger = logging.getLogger(__name__)

PixelValue = Union[int, RgbColor, HslColor]


class PixelBuffer:
    """Mutable width x height buffer of packed ARGB pixels."""

    def __init__(self, width: int, height: int):
        """
        Create a zero-initialized (transparent black) buffer.

        Args:
            width: Buffer width in pixels (> 0)
            height: Buffer height in pixels (> 0)

        Raises:
            InvalidDimensionsError: If either dimension is not positive
        """
        if int(width) <= 0 or int(height) <= 0:
            raise InvalidDimensionsError(width, height)

        self._width = int(width)
        self._height = int(height)
        self._data = np.zeros(self._width * self._height, dtype=np.uint32)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height)"""
        return self._width, self._height

    @property
    def data(self) -> np.ndarray:
        """Flat uint32 pixel array (shares storage)."""
        return self._data

    @property
    def pixels(self) -> np.ndarray:
        """(height, width) view of the pixel array (shares storage)."""
        return self._data.reshape(self._height, self._width)

    def index(self, x: int, y: int) -> int:
        return y * self._width + x

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def _check(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise PixelOutOfRangeError(x, y, self._width, self._height)

    def get_pixel(self, x: int, y: int) -> int:
        """Packed ARGB value at (x, y)."""
        self._check(x, y)
        return int(self._data[y * self._width + x])

    def set_pixel(self, x: int, y: int, color: PixelValue) -> None:
        """
        Write one pixel.

        Args:
            x, y: Pixel coordinates (must be inside the buffer)
            color: Packed ARGB int, RgbColor or HslColor
        """
        self._check(x, y)
        self._data[y * self._width + x] = _to_argb(color)

    def set_rgba(self, x: int, y: int, r: int, g: int, b: int, a: int = 255) -> None:
        """Write one pixel from raw channel components (masked to 8 bits)."""
        self._check(x, y)
        self._data[y * self._width + x] = pack_argb(r, g, b, a)

    def set_pixel_safe(self, x: int, y: int, argb: int) -> bool:
        """
        Bounds-checked write used by rasterization.

        Returns:
            True if the pixel was written, False if (x, y) was clipped
        """
        if x < 0 or y < 0 or x >= self._width or y >= self._height:
            return False
        self._data[y * self._width + x] = argb & 0xFFFFFFFF
        return True

    def fill(self, color: PixelValue) -> None:
        self._data.fill(_to_argb(color))

    def copy(self) -> "PixelBuffer":
        clone = PixelBuffer(self._width, self._height)
        clone._data[:] = self._data
        return clone

    def copy_from(self, source: "PixelBuffer") -> None:
        """
        Copy all pixels from a buffer of identical size.

        Raises:
            DimensionMismatchError: If the sizes differ
        """
        if source.size != self.size:
            raise DimensionMismatchError(self.size, source.size)
        self._data[:] = source._data

    def channels(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """
        Split into (a, r, g, b) uint8 planes of shape (height, width).
        """
        pixels = self.pixels
        a = ((pixels >> 24) & 0xFF).astype(np.uint8)
        r = ((pixels >> 16) & 0xFF).astype(np.uint8)
        g = ((pixels >> 8) & 0xFF).astype(np.uint8)
        b = (pixels & 0xFF).astype(np.uint8)
        return a, r, g, b

    def set_channels(self, a: np.ndarray, r: np.ndarray, g: np.ndarray, b: np.ndarray) -> None:
        """Pack (a, r, g, b) planes back into this buffer."""
        packed = (
            (np.asarray(a, dtype=np.uint32) << 24)
            | (np.asarray(r, dtype=np.uint32) << 16)
            | (np.asarray(g, dtype=np.uint32) << 8)
            | np.asarray(b, dtype=np.uint32)
        )
        if packed.shape != (self._height, self._width):
            raise DimensionMismatchError(self.size, (packed.shape[-1], packed.shape[0]))
        self.pixels[:, :] = packed

    @classmethod
    def from_channels(
        cls, a: np.ndarray, r: np.ndarray, g: np.ndarray, b: np.ndarray
    ) -> "PixelBuffer":
        height, width = np.shape(r)
        buffer = cls(width, height)
        buffer.set_channels(a, r, g, b)
        return buffer

    def to_rgba_array(self) -> np.ndarray:
        """(height, width, 4) uint8 array in RGBA channel order."""
        a, r, g, b = self.channels()
        return np.dstack([r, g, b, a])

    @classmethod
    def from_rgba_array(cls, array: np.ndarray) -> "PixelBuffer":
        """
        Build a buffer from an RGBA (h, w, 4), RGB (h, w, 3) or gray (h, w) array.

        Missing alpha is treated as fully opaque.
        """
        array = np.asarray(array)
        if array.ndim == 2:
            r = g = b = array
            a = np.full(array.shape, 255, dtype=np.uint8)
        elif array.ndim == 3 and array.shape[2] in (3, 4):
            r, g, b = array[:, :, 0], array[:, :, 1], array[:, :, 2]
            if array.shape[2] == 4:
                a = array[:, :, 3]
            else:
                a = np.full(array.shape[:2], 255, dtype=np.uint8)
        else:
            raise ValueError(f"Unsupported array shape {array.shape}")

        return cls.from_channels(a, r, g, b)

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, PixelBuffer)
            and self.size == other.size
            and np.array_equal(self._data, other._data)
        )

    def __repr__(self) -> str:
        return f"PixelBuffer({self._width}x{self._height})"


def _to_argb(color: PixelValue) -> int:
    if isinstance(color, RgbColor):
        return color.to_argb()
    if isinstance(color, HslColor):
        return hsl_to_rgb(color).to_argb()
    return int(color) & 0xFFFFFFFF
