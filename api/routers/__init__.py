"""
API routers for Raster Flow
"""

from . import buffers, codec, compose, draw, filters, system

__all__ = ["buffers", "codec", "compose", "draw", "filters", "system"]
