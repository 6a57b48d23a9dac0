"""
Execution timing utilities.

Each dispatched call records how long its pipeline stages took. Kernels
that run on a GPU copy their output back to host memory before returning,
so wall-clock sections already include device work.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Accumulating stage timer.

    Usage:
        timer = Timer()
        timer.start()

        with timer.section('validate'):
            validate_bounds(...)

        with timer.section('kernel'):
            status = routine(config, *operands)

        timer.stop()
        timer.result()
        # {'total_seconds': 0.0004, 'validate': 0.0001, 'kernel': 0.0003}
    """

    def __init__(self) -> None:
        self._sections: dict[str, float] = {}
        self._start_time: float | None = None
        self._total: float | None = None

    def start(self) -> None:
        """Start the overall timer."""
        self._start_time = time.perf_counter()

    def stop(self) -> None:
        """Stop the overall timer."""
        if self._start_time is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = time.perf_counter() - self._start_time

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """
        Time a named section.

        Sections called repeatedly accumulate. A section that raises is
        still recorded.
        """
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self._sections[name] = self._sections.get(name, 0.0) + elapsed

    def result(self) -> dict[str, float]:
        """
        Get timing results.

        Returns:
            Dictionary with 'total_seconds' and all section timings

        Raises:
            RuntimeError: If called before stop()
        """
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")

        result = {'total_seconds': self._total}
        result.update(self._sections)
        return result
