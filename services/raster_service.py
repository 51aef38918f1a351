"""
Raster Service - Business logic for operations on stored buffers.

This service resolves buffer IDs through the BufferStore, runs the raster
algorithms on them and reports timing, so routers stay thin.
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from config import RasterConfig
from core.buffer_store import BufferStore, StoredBuffer
from core.color_model import unpack_argb
from core.constants import StoreConstants, SystemConstants
from core.enums import ColorAdjustment, PatternType
from core.exceptions import InvalidDimensionsError
from core.image.converters import decode_image, encode_image, from_base64, to_base64
from core.image.processors import create_preview, fit_scale
from core.pixel_buffer import PixelBuffer
from core.utils.decorators import timer
from raster import adjustments, compositor, curves, rasterizer, rle
from raster.convolution import ConvolutionEngine, ConvolutionParams
from raster.patterns import render_pattern
from schemas import (
    AdjustRequest,
    BezierRequest,
    BufferInfo,
    ClockRequest,
    CompositeRequest,
    ConvolveRequest,
    LineRequest,
    OperationResponse,
    PatternRequest,
    PixelResponse,
    PolylineRequest,
    PreviewResponse,
    RedEyeRequest,
    RleDecodeRequest,
    RleEncodeResponse,
    RotateRequest,
    SplineRequest,
    SurfaceRequest,
    format_color,
)

logger = logging.getLogger(__name__)


class RasterService:
    """
    Service for raster operations.

    Every mutating operation runs in place on the stored buffer unless it is
    documented to produce a new one; results are reported as
    OperationResponse with the processing time.
    """

    def __init__(
        self,
        buffer_store: BufferStore,
        raster_config: Optional[RasterConfig] = None,
        workers: int = SystemConstants.THREAD_POOL_SIZE,
        max_dimension: int = StoreConstants.MAX_DIMENSION,
    ):
        """
        Initialize raster service.

        Args:
            buffer_store: Store holding the buffers
            raster_config: Algorithm defaults (library defaults when omitted)
            workers: Row-band threads for convolution
            max_dimension: Largest accepted buffer side
        """
        self.buffer_store = buffer_store
        self.config = raster_config or RasterConfig()
        self.max_dimension = max_dimension
        self.convolution = ConvolutionEngine(workers=workers)

    # Buffer lifecycle

    def _check_dimensions(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0 or width > self.max_dimension or height > self.max_dimension:
            raise InvalidDimensionsError(width, height)

    @staticmethod
    def _info(record: StoredBuffer) -> BufferInfo:
        return BufferInfo(**record.describe())

    def create_buffer(
        self, width: int, height: int, fill: Optional[int] = None, name: Optional[str] = None
    ) -> BufferInfo:
        self._check_dimensions(width, height)
        buffer = PixelBuffer(width, height)
        if fill is not None:
            buffer.fill(fill)

        buffer_id = self.buffer_store.add(buffer, name=name, metadata={"source": "blank"})
        logger.info(f"Created buffer {buffer_id} ({width}x{height})")
        return self._info(self.buffer_store.get(buffer_id))

    def upload_buffer(self, image_base64: str, name: Optional[str] = None) -> BufferInfo:
        """Decode a base64 image into a new stored buffer."""
        buffer = decode_image(from_base64(image_base64))
        self._check_dimensions(buffer.width, buffer.height)

        buffer_id = self.buffer_store.add(buffer, name=name, metadata={"source": "upload"})
        logger.info(f"Uploaded buffer {buffer_id} ({buffer.width}x{buffer.height})")
        return self._info(self.buffer_store.get(buffer_id))

    def get_info(self, buffer_id: str) -> BufferInfo:
        return self._info(self.buffer_store.get(buffer_id))

    def list_buffers(self):
        return [self._info(record) for record in self.buffer_store.list()]

    def delete_buffer(self, buffer_id: str) -> None:
        self.buffer_store.delete(buffer_id)

    def get_pixel(self, buffer_id: str, x: int, y: int) -> PixelResponse:
        argb = self.buffer_store.get_buffer(buffer_id).get_pixel(x, y)
        r, g, b, a = unpack_argb(argb)
        return PixelResponse(x=x, y=y, argb=argb, hex=format_color(argb), r=r, g=g, b=b, a=a)

    def preview(self, buffer_id: str, scale: Optional[int] = None) -> PreviewResponse:
        """
        PNG preview of a buffer.

        Without an explicit scale, small buffers are magnified to roughly
        512 pixels on the longest side.
        """
        buffer = self.buffer_store.get_buffer(buffer_id)
        if scale is None:
            scale = fit_scale(buffer, 512)
        image_base64, (width, height) = create_preview(buffer, scale)
        return PreviewResponse(
            buffer_id=buffer_id, width=width, height=height, scale=scale, image_base64=image_base64
        )

    def download(self, buffer_id: str, format: str = ".png") -> bytes:
        return encode_image(self.buffer_store.get_buffer(buffer_id), format)

    # Operation template

    def _execute(
        self,
        buffer_id: str,
        operation: str,
        func: Callable[[PixelBuffer], Optional[Dict[str, Any]]],
    ) -> OperationResponse:
        """
        Template method for in-place operations.

        Resolves the buffer, times func(buffer), marks the record as updated
        and wraps whatever details func returns.
        """
        buffer = self.buffer_store.get_buffer(buffer_id)
        with timer() as t:
            details = func(buffer) or {}

        self.buffer_store.touch(buffer_id, {"last_operation": operation})
        logger.debug(f"{operation} on {buffer_id} took {t['ms']} ms")
        return OperationResponse(
            buffer_id=buffer_id,
            operation=operation,
            processing_time_ms=t["ms"],
            details=details,
        )

    def _store_result(
        self,
        buffer: PixelBuffer,
        operation: str,
        processing_time_ms: int,
        name: Optional[str],
        details: Dict[str, Any],
    ) -> OperationResponse:
        buffer_id = self.buffer_store.add(buffer, name=name, metadata={"source": operation})
        return OperationResponse(
            buffer_id=buffer_id,
            operation=operation,
            processing_time_ms=processing_time_ms,
            details=details,
        )

    # Filters

    def adjust(self, buffer_id: str, request: AdjustRequest) -> OperationResponse:
        def apply(buffer: PixelBuffer):
            if request.adjustment == ColorAdjustment.GRAYSCALE:
                adjustments.grayscale(buffer)
                return {}
            if request.adjustment == ColorAdjustment.SATURATE:
                adjustments.saturate(buffer, request.ratio)
                return {"ratio": request.ratio}
            adjustments.hue_shift(buffer, request.degrees)
            return {"degrees": request.degrees}

        return self._execute(buffer_id, request.adjustment.value, apply)

    def convolve(self, buffer_id: str, request: ConvolveRequest) -> OperationResponse:
        threshold = request.threshold
        if threshold is None:
            threshold = self.config.smoothing_threshold
        params = ConvolutionParams(
            mode=request.mode, kernel=request.kernel, weights=request.weights, threshold=threshold
        )

        def apply(buffer: PixelBuffer):
            result = self.convolution.apply_params(buffer, params)
            result["mode"] = result["mode"].value
            result["kernel"] = "custom" if params.weights is not None else params.kernel.value
            return result

        return self._execute(buffer_id, f"convolve_{request.mode.value}", apply)

    def remove_red_eye(self, buffer_id: str, request: RedEyeRequest) -> OperationResponse:
        saturation_threshold = request.saturation_threshold
        if saturation_threshold is None:
            saturation_threshold = self.config.red_eye_saturation_threshold
        min_red = request.min_red if request.min_red is not None else self.config.red_eye_min_red

        def apply(buffer: PixelBuffer):
            count = adjustments.remove_red_eye(buffer, saturation_threshold, min_red)
            return {"pixels_changed": count}

        return self._execute(buffer_id, "red_eye", apply)

    # Drawing

    def draw_line(self, buffer_id: str, request: LineRequest) -> OperationResponse:
        def apply(buffer: PixelBuffer):
            rasterizer.draw_line(
                buffer,
                request.start.to_tuple(),
                request.end.to_tuple(),
                request.color,
                request.algorithm,
                request.radius,
            )
            return {"algorithm": request.algorithm.value}

        return self._execute(buffer_id, "line", apply)

    def draw_polyline(self, buffer_id: str, request: PolylineRequest) -> OperationResponse:
        def apply(buffer: PixelBuffer):
            points = [p.to_tuple() for p in request.points]
            segments = rasterizer.draw_polyline(
                buffer, points, request.color, request.algorithm, request.radius
            )
            return {"segments": segments}

        return self._execute(buffer_id, "polyline", apply)

    def draw_bezier(self, buffer_id: str, request: BezierRequest) -> OperationResponse:
        points = [p.to_geometry() for p in request.points]

        def apply(buffer: PixelBuffer):
            if request.adaptive:
                tolerance = request.tolerance or self.config.flatness_tolerance
                segments = curves.draw_bezier_adaptive(
                    buffer, points, request.color, tolerance, request.algorithm
                )
                details = {"mode": "adaptive", "tolerance": tolerance}
            else:
                step = request.step or self.config.curve_step
                segments = curves.draw_bezier(buffer, points, request.color, step, request.algorithm)
                details = {"mode": "fixed_step", "step": step}

            if request.show_control_points:
                curves.draw_control_polygon(buffer, points, request.color)
            return {"segments": segments, "degree": len(points) - 1, **details}

        return self._execute(buffer_id, "bezier", apply)

    def draw_spline(self, buffer_id: str, request: SplineRequest) -> OperationResponse:
        points = [p.to_geometry() for p in request.points]

        def apply(buffer: PixelBuffer):
            segments = curves.draw_spline(
                buffer,
                points,
                request.color,
                step=request.step or self.config.spline_step,
                adaptive=request.adaptive,
                tolerance=request.tolerance or self.config.flatness_tolerance,
                algorithm=request.algorithm,
            )
            if request.show_control_points:
                curves.draw_control_polygon(buffer, points, request.color)
            return {"segments": segments}

        return self._execute(buffer_id, "spline", apply)

    def draw_surface(self, buffer_id: str, request: SurfaceRequest) -> OperationResponse:
        grid = [[p.to_geometry() for p in row] for row in request.grid]

        def apply(buffer: PixelBuffer):
            count = curves.draw_bezier_surface(
                buffer,
                grid,
                request.color,
                request.u_segments,
                request.v_segments,
                request.step or self.config.curve_step,
                request.algorithm,
            )
            return {"curves": count}

        return self._execute(buffer_id, "surface", apply)

    def create_pattern(self, request: PatternRequest) -> OperationResponse:
        """Render a procedural pattern into a new stored buffer."""
        self._check_dimensions(request.width, request.height)
        options = {}
        if request.pattern == PatternType.STAR:
            options = {"rays": request.rays, "algorithm": request.algorithm}

        with timer() as t:
            buffer = render_pattern(request.pattern, request.width, request.height, **options)

        return self._store_result(
            buffer,
            f"pattern_{request.pattern.value}",
            t["ms"],
            request.name,
            {"width": request.width, "height": request.height},
        )

    # Compositing

    def rotate(self, buffer_id: str, request: RotateRequest) -> OperationResponse:
        source = self.buffer_store.get_buffer(buffer_id)
        with timer() as t:
            rotated = compositor.rotate(source, request.angle)

        if request.as_new:
            return self._store_result(
                rotated, "rotate", t["ms"], None, {"angle": request.angle, "source_id": buffer_id}
            )

        def apply(buffer: PixelBuffer):
            buffer.copy_from(rotated)
            return {"angle": request.angle}

        return self._execute(buffer_id, "rotate", apply)

    def composite(self, buffer_id: str, request: CompositeRequest) -> OperationResponse:
        foreground = self.buffer_store.get_buffer(request.foreground_id)

        def apply(buffer: PixelBuffer):
            if request.angle is None:
                covered = compositor.composite(
                    buffer, foreground, request.offset_x, request.offset_y
                )
                return {"foreground_id": request.foreground_id, "pixels_covered": covered}

            compositor.compose_rotated(
                buffer, foreground, request.angle, request.offset_x, request.offset_y
            )
            return {"foreground_id": request.foreground_id, "angle": request.angle}

        return self._execute(buffer_id, "composite", apply)

    def compose_clock(self, request: ClockRequest) -> OperationResponse:
        dial = self.buffer_store.get_buffer(request.dial_id)
        hands = [
            self.buffer_store.get_buffer(hand_id)
            for hand_id in (request.hour_hand_id, request.minute_hand_id, request.second_hand_id)
        ]

        with timer() as t:
            result = compositor.compose_clock(
                dial, *hands, request.hours, request.minutes, request.seconds
            )

        angles = compositor.clock_hand_angles(request.hours, request.minutes, request.seconds)
        return self._store_result(
            result,
            "clock",
            t["ms"],
            request.name,
            {
                "time": f"{request.hours:02d}:{request.minutes:02d}:{request.seconds:02d}",
                "angles": {"hour": angles[0], "minute": angles[1], "second": angles[2]},
            },
        )

    # Codec

    def rle_encode(self, buffer_id: str, levels: Optional[int] = None) -> RleEncodeResponse:
        """
        Run-length encode a buffer's luminance channel.

        Quantization runs first when levels is given; levels outside 1-256
        leave the data unchanged.
        """
        buffer = self.buffer_store.get_buffer(buffer_id)
        with timer() as t:
            data = adjustments.to_grayscale_bytes(buffer)
            if levels is not None:
                data = rle.quantize(data, levels)
            runs = rle.compress(data)
            stream = rle.runs_to_bytes(runs)

        return RleEncodeResponse(
            buffer_id=buffer_id,
            width=buffer.width,
            height=buffer.height,
            original_length=len(data),
            run_count=len(runs),
            encoded_length=len(stream),
            compression_ratio=round(rle.compression_ratio(len(data), runs), 4),
            levels=levels,
            lossless=not rle.is_lossy(levels),
            stream_base64=to_base64(stream),
            processing_time_ms=t["ms"],
        )

    def rle_decode(self, request: RleDecodeRequest) -> Tuple[BufferInfo, int]:
        """
        Rebuild a grayscale buffer from an encoded stream.

        Returns:
            Tuple of (new buffer info, processing time in ms)
        """
        self._check_dimensions(request.width, request.height)
        with timer() as t:
            runs = rle.runs_from_bytes(from_base64(request.stream_base64))
            data = rle.decompress(runs, request.width * request.height)
            buffer = adjustments.from_grayscale_bytes(
                PixelBuffer(request.width, request.height), data
            )

        buffer_id = self.buffer_store.add(
            buffer, name=request.name, metadata={"source": "rle_decode", "runs": len(runs)}
        )
        return self._info(self.buffer_store.get(buffer_id)), t["ms"]
