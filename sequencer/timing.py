"""
Wall-clock timing for sequencing runs.
"""

import logging
import time
from typing import Optional


logger = logging.getLogger(__name__)


class Stopwatch:
    """
    Scoped stopwatch measuring the wall-clock time of a block.

    Usage:
        with Stopwatch("schrage") as watch:
            run_greedy(jobs)
        watch.elapsed_ms

    Args:
        label: Name used when the duration is logged
    """

    def __init__(self, label: str = "block"):
        self.label = label
        self._start: Optional[float] = None
        self._stop: Optional[float] = None

    def __enter__(self) -> 'Stopwatch':
        self._start = time.perf_counter()
        self._stop = None
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._stop = time.perf_counter()
        logger.debug(f"{self.label} took {self.elapsed_ms:.3f} ms")
        return False

    @property
    def elapsed_ms(self) -> float:
        """Milliseconds since entering, or the full span once exited."""
        if self._start is None:
            return 0.0
        end = self._stop if self._stop is not None else time.perf_counter()
        return (end - self._start) * 1000.0
