"""
Constants and configuration values for the Raster Flow system.
Centralizes all magic numbers and configuration constants.
"""


# Pixel format constants
class PixelConstants:
    """Packed ARGB pixel math."""

    # Integer luminance: (77*R + 150*G + 29*B) >> 8
    LUMA_RED = 77
    LUMA_GREEN = 150
    LUMA_BLUE = 29
    LUMA_SHIFT = 8


# Color model constants
class ColorConstants:
    """Constants for RGB/HSL conversion."""

    ACHROMATIC_EPSILON = 1e-10
    CHANNEL_MATCH_EPSILON = 1e-5
    HUE_DEGREES = 360.0


# Convolution constants
class ConvolutionConstants:
    """Constants for kernel convolution."""

    DEFAULT_SMOOTHING_THRESHOLD = 20
    MIN_THRESHOLD = 0
    MAX_THRESHOLD = 255
    MAX_KERNEL_SIZE = 15


# Curve constants
class CurveConstants:
    """Constants for Bezier evaluation and flattening."""

    DEFAULT_STEP = 0.02
    DEFAULT_SPLINE_STEP = 0.01
    DEFAULT_FLATNESS_TOLERANCE = 1.0
    MAX_SUBDIVISION_DEPTH = 16
    PARAMETER_EPSILON = 1e-9
    DEGENERATE_CHORD_LENGTH_SQ = 1e-4
    SPLINE_TANGENT_DIVISOR = 6.0
    CONTROL_POINT_RADIUS = 4


# Red-eye policy
class RedEyeConstants:
    """Fixed-target-hue red-eye correction policy."""

    HUE_LOW_MAX = 40.0
    HUE_HIGH_MIN = 330.0
    MIN_LIGHTNESS = 0.1
    MAX_LIGHTNESS = 0.9
    DEFAULT_SATURATION_THRESHOLD = 0.3
    DEFAULT_MIN_RED = 50
    TARGET_HUE = 200.0
    SATURATION_FACTOR = 0.85


# RLE constants
class RleConstants:
    """Run-length codec constants."""

    MAX_RUN = 255
    MIN_LEVELS = 1
    MAX_LEVELS = 256


# Buffer storage constants
class StoreConstants:
    """Constants related to in-memory buffer storage."""

    DEFAULT_MAX_BUFFERS = 50
    MIN_BUFFERS = 1
    MAX_BUFFERS = 1000
    MAX_DIMENSION = 4096
    # Drawing coordinates may lie off-canvas, up to this distance from the origin
    MAX_COORDINATE = 4 * MAX_DIMENSION
    DEFAULT_PREVIEW_SCALE = 1
    MAX_PREVIEW_SCALE = 16


# System Constants
class SystemConstants:
    """Constants for system operations."""

    # Logging
    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Threading
    THREAD_POOL_SIZE = 4


# Color Constants (packed ARGB)
class Colors:
    """Standard colors for drawing operations (packed ARGB)."""

    BLACK = 0xFF000000
    WHITE = 0xFFFFFFFF
    RED = 0xFFFF0000
    GREEN = 0xFF00FF00
    BLUE = 0xFF0000FF
    GRAY = 0xFF888888
