"""
Utility modules for core functionality.

Modules:
- decorators: Timing helpers (timer, log_duration)
- parallel: Row-band work distribution over a thread pool
"""

from .decorators import log_duration, timer
from .parallel import row_bands, run_bands

__all__ = ["timer", "log_duration", "row_bands", "run_bands"]
