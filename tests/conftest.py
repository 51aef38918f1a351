"""
Pytest configuration and fixtures for Raster Flow tests
"""

import pytest

from core.buffer_store import BufferStore
from core.constants import Colors
from core.pixel_buffer import PixelBuffer
from raster.patterns import gradient_pattern
from services.raster_service import RasterService


@pytest.fixture
def small_buffer():
    """Transparent 8x6 buffer"""
    return PixelBuffer(8, 6)


@pytest.fixture
def red_buffer():
    """Opaque pure red 4x4 buffer"""
    buffer = PixelBuffer(4, 4)
    buffer.fill(Colors.RED)
    return buffer


@pytest.fixture
def black_buffer():
    """Opaque black 32x32 canvas for drawing tests"""
    buffer = PixelBuffer(32, 32)
    buffer.fill(Colors.BLACK)
    return buffer


@pytest.fixture
def gradient_buffer():
    """64x48 RGB gradient with varying content in every channel but blue"""
    return gradient_pattern(64, 48)


@pytest.fixture
def buffer_store():
    """Create BufferStore instance for testing"""
    store = BufferStore(max_buffers=10)
    yield store
    # Cleanup
    store.clear()


@pytest.fixture
def raster_service(buffer_store):
    """Create RasterService instance for testing"""
    return RasterService(buffer_store=buffer_store, workers=2, max_dimension=1024)
