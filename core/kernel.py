"""
Convolution kernels.

A Kernel is an immutable grid of signed integer weights. The predefined
catalog covers box blur, Gaussian blur and the 8-in-center edge kernel.
"""

from typing import Dict, Sequence, Tuple

import numpy as np

from core.constants import ConvolutionConstants
from core.enums import KernelName
from core.exceptions import InvalidKernelError


class Kernel:
    """Immutable 2D grid of integer weights, indexed as kernel[y, x]."""

    __slots__ = ("_weights", "_sum")

    def __init__(self, rows: Sequence[Sequence[int]]):
        """
        Create kernel from row-major weights.

        Args:
            rows: Sequence of equal-length rows of integer weights

        Raises:
            InvalidKernelError: If the grid is empty, ragged or oversized
        """
        if len(rows) == 0 or len(rows[0]) == 0:
            raise InvalidKernelError("Kernel must contain at least one weight")

        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise InvalidKernelError("Kernel rows must all have the same length")

        if max(width, len(rows)) > ConvolutionConstants.MAX_KERNEL_SIZE:
            raise InvalidKernelError(
                f"Kernel larger than {ConvolutionConstants.MAX_KERNEL_SIZE} in either dimension"
            )

        weights = np.array(rows, dtype=np.int64)
        weights.setflags(write=False)
        self._weights = weights
        self._sum = int(weights.sum())

    @property
    def width(self) -> int:
        return self._weights.shape[1]

    @property
    def height(self) -> int:
        return self._weights.shape[0]

    @property
    def weight_sum(self) -> int:
        """Sum of all weights (divisor for normalized convolution)."""
        return self._sum

    @property
    def weights(self) -> np.ndarray:
        """Read-only (height, width) weight array."""
        return self._weights

    def __getitem__(self, index: Tuple[int, int]) -> int:
        y, x = index
        return int(self._weights[y, x])

    def __eq__(self, other) -> bool:
        return isinstance(other, Kernel) and np.array_equal(self._weights, other._weights)

    def __hash__(self) -> int:
        return hash(self._weights.tobytes()) ^ hash(self._weights.shape)

    def __repr__(self) -> str:
        return f"Kernel({self._weights.tolist()})"


BOX_BLUR_3X3 = Kernel(
    [
        [1, 1, 1],
        [1, 1, 1],
        [1, 1, 1],
    ]
)

EDGE_DETECT_3X3 = Kernel(
    [
        [-1, -1, -1],
        [-1, 8, -1],
        [-1, -1, -1],
    ]
)

GAUSSIAN_3X3 = Kernel(
    [
        [1, 2, 1],
        [2, 4, 2],
        [1, 2, 1],
    ]
)

GAUSSIAN_5X5 = Kernel(
    [
        [1, 4, 6, 4, 1],
        [4, 16, 24, 16, 4],
        [6, 24, 36, 24, 6],
        [4, 16, 24, 16, 4],
        [1, 4, 6, 4, 1],
    ]
)

KERNEL_CATALOG: Dict[KernelName, Kernel] = {
    KernelName.BOX_BLUR_3X3: BOX_BLUR_3X3,
    KernelName.EDGE_DETECT_3X3: EDGE_DETECT_3X3,
    KernelName.GAUSSIAN_3X3: GAUSSIAN_3X3,
    KernelName.GAUSSIAN_5X5: GAUSSIAN_5X5,
}


def get_kernel(name) -> Kernel:
    """
    Look up a predefined kernel.

    Args:
        name: KernelName or its string value

    Returns:
        Kernel instance

    Raises:
        InvalidKernelError: If the name is not in the catalog
    """
    try:
        return KERNEL_CATALOG[KernelName(name)]
    except ValueError:
        raise InvalidKernelError(f"Unknown kernel: {name}")
