"""
Run-length coding of single-channel byte streams.

compress/decompress are lossless; quantize is an optional lossy pre-pass that
reduces the number of distinct byte values so runs get longer.
"""

import logging
from typing import Iterable, List, NamedTuple, Optional, Sequence, Union

import numpy as np

from core.constants import RleConstants
from core.exceptions import RleFormatError

logger = logging.getLogger(__name__)

ByteData = Union[bytes, bytearray, memoryview, Sequence[int], np.ndarray]


class RleRun(NamedTuple):
    """One (count, value) pair; count is in [1, 255]."""

    count: int
    value: int


def _as_array(data: ByteData) -> np.ndarray:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return np.frombuffer(bytes(data), dtype=np.uint8)
    array = np.asarray(data)
    if array.size and (array.min() < 0 or array.max() > 255):
        raise ValueError("Byte data values must be in the range 0-255")
    return array.astype(np.uint8).ravel()


def compress(data: ByteData) -> List[RleRun]:
    """
    Encode bytes as runs of identical values.

    Runs longer than 255 are split into consecutive runs of the same value.

    Example:
        >>> compress(b"\\x00" * 300)
        [RleRun(count=255, value=0), RleRun(count=45, value=0)]
    """
    values = _as_array(data)
    if values.size == 0:
        return []

    # Indices where the value changes mark the start of a new run
    starts = np.concatenate(([0], np.flatnonzero(values[1:] != values[:-1]) + 1))
    lengths = np.diff(np.concatenate((starts, [values.size])))

    runs = []
    for start, length in zip(starts.tolist(), lengths.tolist()):
        value = int(values[start])
        while length > 0:
            count = min(length, RleConstants.MAX_RUN)
            runs.append(RleRun(count, value))
            length -= count
    return runs


def decompress(runs: Iterable[RleRun], expected_length: int) -> bytes:
    """
    Expand runs back into exactly expected_length bytes.

    Output stops once expected_length bytes are produced; if the runs are too
    short the remainder stays zero.
    """
    if expected_length < 0:
        raise ValueError(f"Expected length must be non-negative, got {expected_length}")

    output = bytearray(expected_length)
    position = 0
    for count, value in runs:
        if position >= expected_length:
            break
        end = min(position + int(count), expected_length)
        output[position:end] = bytes([int(value) & 0xFF]) * (end - position)
        position = end

    if position < expected_length:
        logger.debug(f"RLE stream covered {position} of {expected_length} bytes, zero-filled rest")
    return bytes(output)


def is_lossy(levels: Optional[int]) -> bool:
    """Whether quantize(data, levels) can change any byte."""
    return levels is not None and RleConstants.MIN_LEVELS <= levels < RleConstants.MAX_LEVELS


def quantize(data: ByteData, levels: int) -> bytes:
    """
    Reduce each byte to floor(byte / step) * step with step = 256 // levels.

    Levels outside [1, 256] leave the data unchanged.
    """
    values = _as_array(data)
    if not RleConstants.MIN_LEVELS <= levels <= RleConstants.MAX_LEVELS:
        logger.debug(f"Quantization levels {levels} out of range, data left unchanged")
        return values.tobytes()

    step = 256 // levels
    return ((values.astype(np.int32) // step) * step).astype(np.uint8).tobytes()


def runs_to_bytes(runs: Iterable[RleRun]) -> bytes:
    """Serialize runs as a header-less stream of (count, value) byte pairs."""
    stream = bytearray()
    for count, value in runs:
        if not 1 <= count <= RleConstants.MAX_RUN:
            raise RleFormatError(f"Run count {count} outside 1-{RleConstants.MAX_RUN}")
        stream.append(count)
        stream.append(value & 0xFF)
    return bytes(stream)


def runs_from_bytes(stream: Union[bytes, bytearray]) -> List[RleRun]:
    """
    Parse a (count, value) byte-pair stream.

    Raises:
        RleFormatError: On odd stream length or a zero count
    """
    if len(stream) % 2 != 0:
        raise RleFormatError(f"RLE stream length {len(stream)} is not a multiple of 2")

    runs = []
    for i in range(0, len(stream), 2):
        count, value = stream[i], stream[i + 1]
        if count == 0:
            raise RleFormatError(f"Zero-length run at byte offset {i}")
        runs.append(RleRun(count, value))
    return runs


def encoded_length(runs: Sequence[RleRun]) -> int:
    """Total number of bytes the runs expand to."""
    return sum(run.count for run in runs)


def compression_ratio(original_length: int, runs: Sequence[RleRun]) -> float:
    """original size / encoded stream size (0.0 for empty input)."""
    encoded = len(runs) * 2
    if encoded == 0:
        return 0.0
    return original_length / encoded
