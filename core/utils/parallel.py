"""
Row-band work distribution.

Splits a buffer height into contiguous bands and runs a band function on each,
optionally on a thread pool. Band functions must only write their own slice of
a shared output array.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def row_bands(height: int, workers: int) -> List[Tuple[int, int]]:
    """
    Split [0, height) into at most `workers` contiguous (start, stop) bands.

    Example:
        >>> row_bands(10, 3)
        [(0, 4), (4, 7), (7, 10)]
    """
    workers = max(1, min(int(workers), height))
    base, extra = divmod(height, workers)
    bands = []
    start = 0
    for i in range(workers):
        stop = start + base + (1 if i < extra else 0)
        bands.append((start, stop))
        start = stop
    return bands


def run_bands(height: int, band_func: Callable[[int, int], T], workers: int = 1) -> List[T]:
    """
    Run band_func(start, stop) over every band and collect results in band order.

    Args:
        height: Number of rows to cover
        band_func: Callable processing rows [start, stop)
        workers: Number of threads (1 = run inline)

    Returns:
        List of per-band results
    """
    bands = row_bands(height, workers)
    if len(bands) == 1:
        return [band_func(*bands[0])]

    logger.debug(f"Running {len(bands)} row bands on {workers} workers")
    with ThreadPoolExecutor(max_workers=len(bands)) as executor:
        futures = [executor.submit(band_func, start, stop) for start, stop in bands]
        return [future.result() for future in futures]
