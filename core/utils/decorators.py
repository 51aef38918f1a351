"""
Utility decorators and context managers.
"""

import functools
import logging
import time
from contextlib import contextmanager

logger = logging.getLogger(__name__)


@contextmanager
def timer():
    """
    Measure elapsed wall time of a block.

    Yields a dict whose "ms" key is filled in when the block exits.

    Example:
        >>> with timer() as t:
        ...     do_work()
        >>> t["ms"]
    """
    result = {"ms": 0}
    start = time.perf_counter()
    try:
        yield result
    finally:
        result["ms"] = max(1, int((time.perf_counter() - start) * 1000))


def log_duration(func):
    """Log how long the wrapped call took at debug level."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with timer() as t:
            result = func(*args, **kwargs)
        logger.debug(f"{func.__qualname__} took {t['ms']} ms")
        return result

    return wrapper
