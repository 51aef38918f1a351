"""
Kernel convolution over pixel buffers.

Three policies share one edge-clamped correlation core:
- normalized: per-channel RGB weighted sum divided by the kernel weight sum
- threshold: luminance smoothing kept only where it stays close to the original
- laplacian: luminance gradient magnitude rescaled by the global maximum
"""

import logging
import threading
from typing import Any, Dict, List, Optional, Union

import numpy as np
from pydantic import BaseModel, Field

from core.color_model import luminance
from core.constants import ConvolutionConstants
from core.enums import ConvolutionMode, KernelName
from core.exceptions import InvalidKernelError
from core.kernel import Kernel, get_kernel
from core.pixel_buffer import PixelBuffer
from core.utils.parallel import run_bands

logger = logging.getLogger(__name__)


class ConvolutionParams(BaseModel):
    """
    Convolution parameters.

    Kernel is referenced by catalog name; custom weights override it when set.
    """

    mode: ConvolutionMode = Field(
        default=ConvolutionMode.NORMALIZED,
        description="Convolution policy (normalized, threshold, laplacian)",
    )
    kernel: KernelName = Field(
        default=KernelName.BOX_BLUR_3X3, description="Predefined kernel name"
    )
    weights: Optional[List[List[int]]] = Field(
        default=None, description="Custom kernel weights (row-major), overrides kernel"
    )
    threshold: int = Field(
        default=ConvolutionConstants.DEFAULT_SMOOTHING_THRESHOLD,
        ge=ConvolutionConstants.MIN_THRESHOLD,
        le=ConvolutionConstants.MAX_THRESHOLD,
        description="Luminance difference limit for threshold smoothing",
    )

    def resolve_kernel(self) -> Kernel:
        if self.weights is not None:
            return Kernel(self.weights)
        return get_kernel(self.kernel)


def _truncating_divide(values: np.ndarray, divisor: int) -> np.ndarray:
    """Integer division rounding toward zero."""
    quotient = np.abs(values) // abs(divisor)
    return np.where((values < 0) != (divisor < 0), -quotient, quotient)


class ConvolutionEngine:
    """Convolution processor with edge-clamp sampling and double buffering."""

    def __init__(self, workers: int = 1):
        """
        Initialize convolution engine.

        Args:
            workers: Number of row-band worker threads (1 = sequential)
        """
        self.workers = max(1, int(workers))

    def apply(
        self,
        buffer: PixelBuffer,
        kernel: Union[Kernel, KernelName, str],
        mode: ConvolutionMode = ConvolutionMode.NORMALIZED,
        threshold: int = ConvolutionConstants.DEFAULT_SMOOTHING_THRESHOLD,
    ) -> Dict[str, Any]:
        """
        Convolve buffer in place.

        Args:
            buffer: Buffer to filter (overwritten with the result)
            kernel: Kernel instance or catalog name
            mode: Convolution policy
            threshold: Luminance threshold (threshold mode only)

        Returns:
            Dictionary describing the applied operation
        """
        if not isinstance(kernel, Kernel):
            kernel = get_kernel(kernel)
        mode = ConvolutionMode(mode)

        if mode == ConvolutionMode.NORMALIZED:
            self._convolve_normalized(buffer, kernel)
            result = {}
        elif mode == ConvolutionMode.THRESHOLD:
            self._smooth_with_threshold(buffer, kernel, threshold)
            result = {"threshold": threshold}
        elif mode == ConvolutionMode.LAPLACIAN:
            result = {"max_magnitude": self._detect_gradient(buffer, kernel)}
        else:
            raise ValueError(f"Unknown convolution mode: {mode}")

        logger.debug(
            f"Applied {mode.value} convolution ({kernel.width}x{kernel.height}) "
            f"to {buffer.width}x{buffer.height} buffer"
        )
        return {"mode": mode, "kernel_size": (kernel.width, kernel.height), **result}

    def apply_params(self, buffer: PixelBuffer, params: ConvolutionParams) -> Dict[str, Any]:
        """Convolve using a validated parameter model."""
        return self.apply(buffer, params.resolve_kernel(), params.mode, params.threshold)

    @staticmethod
    def _pad(plane: np.ndarray, kernel: Kernel) -> np.ndarray:
        """Edge-clamp padding so every footprint sample maps to a border pixel."""
        half_h = kernel.height // 2
        half_w = kernel.width // 2
        return np.pad(
            plane.astype(np.int64),
            ((half_h, kernel.height - 1 - half_h), (half_w, kernel.width - 1 - half_w)),
            mode="edge",
        )

    @staticmethod
    def _correlate(padded: np.ndarray, kernel: Kernel, start: int, stop: int) -> np.ndarray:
        """Weighted footprint sums for output rows [start, stop)."""
        width = padded.shape[1] - kernel.width + 1
        acc = np.zeros((stop - start, width), dtype=np.int64)
        weights = kernel.weights
        for ky in range(kernel.height):
            for kx in range(kernel.width):
                weight = int(weights[ky, kx])
                if weight == 0:
                    continue
                acc += weight * padded[start + ky : stop + ky, kx : kx + width]
        return acc

    def _convolve_normalized(self, buffer: PixelBuffer, kernel: Kernel) -> None:
        divisor = kernel.weight_sum
        if divisor == 0:
            raise InvalidKernelError(
                "Normalized convolution requires a non-zero kernel weight sum"
            )

        _, r, g, b = buffer.channels()
        padded = [self._pad(plane, kernel) for plane in (r, g, b)]
        output = [np.empty(r.shape, dtype=np.uint8) for _ in range(3)]

        def process_band(start: int, stop: int) -> None:
            for source, target in zip(padded, output):
                acc = self._correlate(source, kernel, start, stop)
                target[start:stop] = np.clip(_truncating_divide(acc, divisor), 0, 255)

        run_bands(buffer.height, process_band, self.workers)

        alpha = np.full(r.shape, 255, dtype=np.uint8)
        buffer.set_channels(alpha, *output)

    def _smooth_with_threshold(self, buffer: PixelBuffer, kernel: Kernel, threshold: int) -> None:
        divisor = kernel.weight_sum
        if divisor == 0:
            raise InvalidKernelError("Threshold smoothing requires a non-zero kernel weight sum")

        _, r, g, b = buffer.channels()
        gray = luminance(r.astype(np.int64), g.astype(np.int64), b.astype(np.int64))
        padded = self._pad(gray, kernel)
        output = np.empty(gray.shape, dtype=np.uint8)

        def process_band(start: int, stop: int) -> None:
            original = gray[start:stop]
            smoothed = _truncating_divide(self._correlate(padded, kernel, start, stop), divisor)
            keep_smoothed = np.abs(smoothed - original) < threshold
            output[start:stop] = np.clip(np.where(keep_smoothed, smoothed, original), 0, 255)

        run_bands(buffer.height, process_band, self.workers)

        alpha = np.full(gray.shape, 255, dtype=np.uint8)
        buffer.set_channels(alpha, output, output, output)

    def _detect_gradient(self, buffer: PixelBuffer, kernel: Kernel) -> int:
        """
        Laplacian magnitude with full-image normalization.

        First sweep accumulates |response| and the global maximum; the second
        sweep starts only after every band has merged its local maximum.

        Returns:
            Maximum magnitude observed before rescaling
        """
        _, r, g, b = buffer.channels()
        gray = luminance(r.astype(np.int64), g.astype(np.int64), b.astype(np.int64))
        padded = self._pad(gray, kernel)
        magnitude = np.empty(gray.shape, dtype=np.int64)

        lock = threading.Lock()
        shared = {"max": 0}

        def magnitude_band(start: int, stop: int) -> None:
            band = np.abs(self._correlate(padded, kernel, start, stop))
            magnitude[start:stop] = band
            local_max = int(band.max()) if band.size else 0
            with lock:
                if local_max > shared["max"]:
                    shared["max"] = local_max

        run_bands(buffer.height, magnitude_band, self.workers)

        max_magnitude = shared["max"]
        output = np.zeros(gray.shape, dtype=np.uint8)

        if max_magnitude > 0:

            def rescale_band(start: int, stop: int) -> None:
                output[start:stop] = magnitude[start:stop] * 255 // max_magnitude

            run_bands(buffer.height, rescale_band, self.workers)

        alpha = np.full(gray.shape, 255, dtype=np.uint8)
        buffer.set_channels(alpha, output, output, output)
        return max_magnitude


def apply_kernel(buffer: PixelBuffer, kernel: Union[Kernel, KernelName, str]) -> PixelBuffer:
    """Normalized convolution (box/Gaussian blur) in place."""
    ConvolutionEngine().apply(buffer, kernel, ConvolutionMode.NORMALIZED)
    return buffer


def smooth_with_threshold(
    buffer: PixelBuffer, kernel: Union[Kernel, KernelName, str], threshold: int
) -> PixelBuffer:
    """Edge-preserving luminance smoothing in place."""
    ConvolutionEngine().apply(buffer, kernel, ConvolutionMode.THRESHOLD, threshold)
    return buffer


def detect_edges(
    buffer: PixelBuffer, kernel: Union[Kernel, KernelName, str] = KernelName.EDGE_DETECT_3X3
) -> PixelBuffer:
    """Laplacian edge magnitude (grayscale, rescaled to 0-255) in place."""
    ConvolutionEngine().apply(buffer, kernel, ConvolutionMode.LAPLACIAN)
    return buffer
