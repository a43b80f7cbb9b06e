"""Timing capture for in-process benchmark operations.

Two steps, both strictly sequential on the calling thread:

1. :func:`calibrate` finds how many back-to-back invocations of an
   operation are needed for one sample to last at least
   ``min_sample_duration`` seconds.
2. :func:`sample` runs that many invocations per sample, for a fixed
   number of samples, and records the mean per-invocation duration of
   each batch.

The clock is any zero-argument callable returning fractional seconds;
``time.perf_counter`` by default. Nothing is logged inside a timed
region.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from chronobench.bench.results import BenchmarkResult

log = logging.getLogger("chronobench")

Clock = Callable[[], float]
Operation = Callable[[], object]

DEFAULT_CLOCK: Clock = time.perf_counter
DEFAULT_MAX_ITERATIONS = 10_000_000


class CalibrationFailed(RuntimeError):
    """Calibration hit its iteration cap before reaching the minimum duration.

    Raised when the clock never advances far enough, e.g. a broken or
    mocked clock that always returns the same value.
    """

    def __init__(self, operation: str, iterations: int, elapsed: float, target: float) -> None:
        super().__init__(
            f"Calibration of {operation} gave up after {iterations} iterations: "
            f"{elapsed:.3g}s measured, {target:.3g}s required."
        )
        self.operation = operation
        self.iterations = iterations
        self.elapsed = elapsed
        self.target = target


def operation_name(operation: Operation) -> str:
    """A readable name for *operation*, for messages."""
    return getattr(operation, "__qualname__", None) or repr(operation)


# ---------------------------------------------------------------------------
# Calibration
# ---------------------------------------------------------------------------


def calibrate(
    operation: Operation,
    min_sample_duration: float,
    *,
    clock: Clock | None = None,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> int:
    """Return how many invocations make up one sample.

    The operation is timed once. If that alone meets
    *min_sample_duration* the answer is 1. Otherwise single invocations
    are timed and added to a running total until the total meets the
    minimum; the number of invocations is the answer.

    A first measurement of exactly zero means the clock cannot resolve
    one call. In that case the clock is restarted and the cumulative
    time of repeated calls is measured from that fresh start instead.

    Args:
        operation: Zero-argument callable. Exceptions propagate.
        min_sample_duration: Target duration of one sample, in seconds.
        clock: Time source; defaults to ``time.perf_counter``.
        max_iterations: Upper bound on invocations counted towards one
            sample.

    Raises:
        CalibrationFailed: If *max_iterations* is exceeded.
        ValueError: On a non-positive duration or iteration cap.
    """
    if min_sample_duration <= 0:
        raise ValueError(f"min_sample_duration must be positive (got {min_sample_duration}).")
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be at least 1 (got {max_iterations}).")
    now = clock or DEFAULT_CLOCK

    start = now()
    operation()
    first = max(now() - start, 0.0)

    if first >= min_sample_duration:
        return 1

    if first == 0:
        count = 0
        start = now()
        while True:
            operation()
            count += 1
            elapsed = now() - start
            if elapsed >= min_sample_duration:
                return count
            if count >= max_iterations:
                raise CalibrationFailed(
                    operation_name(operation), count, max(elapsed, 0.0), min_sample_duration
                )

    total = first
    count = 1
    while total < min_sample_duration:
        if count >= max_iterations:
            raise CalibrationFailed(
                operation_name(operation), count, total, min_sample_duration
            )
        start = now()
        operation()
        total += max(now() - start, 0.0)
        count += 1
    return count


# ---------------------------------------------------------------------------
# Sampling
# ---------------------------------------------------------------------------


def sample(
    operation: Operation,
    iterations_per_sample: int,
    sample_count: int,
    *,
    clock: Clock | None = None,
) -> BenchmarkResult:
    """Collect *sample_count* samples of *iterations_per_sample* invocations each.

    Each sample is the elapsed time of the whole batch divided by
    *iterations_per_sample*.

    Raises:
        ValueError: If either count is not positive.
    """
    if iterations_per_sample < 1:
        raise ValueError(
            f"iterations_per_sample must be at least 1 (got {iterations_per_sample})."
        )
    if sample_count < 1:
        raise ValueError(f"sample_count must be at least 1 (got {sample_count}).")
    now = clock or DEFAULT_CLOCK

    samples: list[float] = []
    for _ in range(sample_count):
        start = now()
        for _ in range(iterations_per_sample):
            operation()
        elapsed = now() - start
        samples.append(max(elapsed, 0.0) / iterations_per_sample)

    return BenchmarkResult(samples, iterations_per_sample=iterations_per_sample)
