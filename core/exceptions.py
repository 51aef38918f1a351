"""
Exception hierarchy for the raster engine.

All engine errors derive from RasterError so callers (service and API layers)
can map them to a response in one place.
"""


class RasterError(Exception):
    """Base class for raster engine errors"""


def _format_size(size: tuple) -> str:
    return "x".join(str(v) for v in size)


class InvalidDimensionsError(RasterError, ValueError):
    """Buffer created with non-positive width or height"""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        super().__init__(f"Invalid buffer dimensions {width}x{height}")


class DimensionMismatchError(RasterError, ValueError):
    """Two buffers of incompatible size used together"""

    def __init__(self, expected: tuple, actual: tuple):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Buffer dimensions must match: expected {_format_size(expected)}, "
            f"got {_format_size(actual)}"
        )


class PixelOutOfRangeError(RasterError, IndexError):
    """Direct (unchecked) access outside the buffer"""

    def __init__(self, x: int, y: int, width: int, height: int):
        self.x = x
        self.y = y
        super().__init__(f"Pixel ({x}, {y}) outside {width}x{height} buffer")


class InvalidKernelError(RasterError, ValueError):
    """Kernel cannot be used for the requested convolution"""


class RleFormatError(RasterError, ValueError):
    """Malformed run-length byte stream"""


class ImageDecodeError(RasterError, ValueError):
    """Bytes could not be decoded into a pixel buffer"""


class BufferNotFoundError(RasterError, KeyError):
    """Requested buffer id is not in the store"""

    def __init__(self, buffer_id: str):
        self.buffer_id = buffer_id
        super().__init__(buffer_id)

    def __str__(self) -> str:
        return f"Buffer {self.buffer_id} not found"
