"""
Unit tests for convolution kernels
"""

import pytest

from core.enums import KernelName
from core.exceptions import InvalidKernelError
from core.kernel import (
    BOX_BLUR_3X3,
    EDGE_DETECT_3X3,
    GAUSSIAN_3X3,
    GAUSSIAN_5X5,
    KERNEL_CATALOG,
    Kernel,
    get_kernel,
)


class TestKernel:
    """Test Kernel construction and the predefined catalog"""

    def test_catalog_weight_sums(self):
        """Test divisors of the predefined kernels"""
        assert BOX_BLUR_3X3.weight_sum == 9
        assert GAUSSIAN_3X3.weight_sum == 16
        assert GAUSSIAN_5X5.weight_sum == 256
        assert EDGE_DETECT_3X3.weight_sum == 0

    def test_edge_kernel_center(self):
        """Test the edge kernel has 8 in the center and -1 elsewhere"""
        assert EDGE_DETECT_3X3[1, 1] == 8
        assert EDGE_DETECT_3X3[0, 0] == -1
        assert EDGE_DETECT_3X3[2, 1] == -1

    def test_dimensions(self):
        """Test width and height of a non-square kernel"""
        kernel = Kernel([[1, 2, 3], [4, 5, 6]])

        assert kernel.width == 3
        assert kernel.height == 2
        assert kernel[1, 2] == 6

    def test_weights_are_read_only(self):
        """Test the weight grid cannot be mutated"""
        with pytest.raises(ValueError):
            GAUSSIAN_3X3.weights[0, 0] = 100

    @pytest.mark.parametrize("rows", [[], [[]], [[1, 2], [3]]])
    def test_invalid_grids(self, rows):
        """Test empty and ragged grids are rejected"""
        with pytest.raises(InvalidKernelError):
            Kernel(rows)

    def test_oversized_kernel(self):
        """Test kernels beyond the size limit are rejected"""
        with pytest.raises(InvalidKernelError):
            Kernel([[1] * 16])

    def test_equality(self):
        """Test kernels compare by weights"""
        assert Kernel([[1, 1, 1]] * 3) == BOX_BLUR_3X3
        assert hash(Kernel([[1, 1, 1]] * 3)) == hash(BOX_BLUR_3X3)
        assert BOX_BLUR_3X3 != GAUSSIAN_3X3

    def test_get_kernel(self):
        """Test catalog lookup by enum and by string"""
        assert get_kernel(KernelName.GAUSSIAN_5X5) is GAUSSIAN_5X5
        assert get_kernel("box_blur_3x3") is BOX_BLUR_3X3
        assert len(KERNEL_CATALOG) == len(KernelName)

    def test_get_unknown_kernel(self):
        """Test unknown names raise InvalidKernelError"""
        with pytest.raises(InvalidKernelError):
            get_kernel("sharpen_7x7")
