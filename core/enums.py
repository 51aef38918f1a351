"""
Centralized enums for the raster engine.

String-valued so they serialize directly in API requests and responses.
"""

from enum import Enum


class ConvolutionMode(str, Enum):
    """Convolution policy applied by the ConvolutionEngine"""

    NORMALIZED = "normalized"
    THRESHOLD = "threshold"
    LAPLACIAN = "laplacian"


class KernelName(str, Enum):
    """Names of the predefined kernels"""

    BOX_BLUR_3X3 = "box_blur_3x3"
    EDGE_DETECT_3X3 = "edge_detect_3x3"
    GAUSSIAN_3X3 = "gaussian_3x3"
    GAUSSIAN_5X5 = "gaussian_5x5"


class LineAlgorithm(str, Enum):
    """Line scan-conversion algorithms"""

    DDA = "dda"
    BRESENHAM = "bresenham"
    WU = "wu"


class ColorAdjustment(str, Enum):
    """Whole-buffer color adjustments"""

    GRAYSCALE = "grayscale"
    SATURATE = "saturate"
    HUE_SHIFT = "hue_shift"


class PatternType(str, Enum):
    """Procedural test patterns"""

    GRADIENT = "gradient"
    STAR = "star"
    SPLINE = "spline"
