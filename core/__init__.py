"""
Core modules for Raster Flow
"""

from .buffer_store import BufferStore, StoredBuffer
from .color_model import HslColor, RgbColor
from .geometry import Point
from .kernel import Kernel
from .pixel_buffer import PixelBuffer

__all__ = [
    "PixelBuffer",
    "RgbColor",
    "HslColor",
    "Kernel",
    "Point",
    "BufferStore",
    "StoredBuffer",
]
