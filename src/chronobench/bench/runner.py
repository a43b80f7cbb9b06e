"""Benchmark execution engine.

Orchestrates, for each named operation:

1. Calibration (how many invocations per sample)
2. Sampling (a fixed number of samples)
3. Storing the result in the suite, in registration order
4. Progress reporting, always outside timed regions

If the operation raises, the exception propagates unchanged and the
suite is left exactly as it was.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable

from chronobench.bench.results import (
    DEFAULT_MIN_SAMPLE_DURATION,
    DEFAULT_SAMPLE_COUNT,
    BenchmarkResult,
    Suite,
)
from chronobench.bench.timing import (
    DEFAULT_MAX_ITERATIONS,
    Clock,
    Operation,
    calibrate,
    sample,
)

log = logging.getLogger("chronobench")


# ---------------------------------------------------------------------------
# Progress callback
# ---------------------------------------------------------------------------


@dataclass
class BenchProgress:
    """Progress info passed to the callback."""

    phase: str  # "calibrate", "calibrated", "sample", "done"
    benchmark: str
    iterations_per_sample: int = 0
    sample_count: int = 0
    mean_s: float = 0.0
    detail: str = ""


ProgressCallback = Callable[[BenchProgress], None]


def new_suite(
    min_sample_duration: float = DEFAULT_MIN_SAMPLE_DURATION,
    sample_count: int = DEFAULT_SAMPLE_COUNT,
    verbose: bool = False,
    *,
    name: str = "",
) -> Suite:
    """Create an empty suite with the given sampling configuration."""
    if min_sample_duration <= 0:
        raise ValueError(f"min_sample_duration must be positive (got {min_sample_duration}).")
    if sample_count < 1:
        raise ValueError(f"sample_count must be at least 1 (got {sample_count}).")
    return Suite(
        name=name,
        min_sample_duration=min_sample_duration,
        sample_count=sample_count,
        verbose=verbose,
    )


def run_benchmark(
    suite: Suite,
    name: str,
    operation: Operation,
    *,
    clock: Clock | None = None,
    progress: ProgressCallback | None = None,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> BenchmarkResult:
    """Calibrate and sample *operation*, storing the result as *name*.

    Args:
        suite: Destination suite; supplies duration and sample count.
        name: Benchmark label, unique within the suite.
        operation: Zero-argument callable to measure.
        clock: Time source for calibration and sampling.
        progress: Optional callback receiving :class:`BenchProgress`.
        max_iterations: Calibration iteration cap.

    Returns:
        The new BenchmarkResult.

    Raises:
        ValueError: If *name* is already in the suite.
        CalibrationFailed: If calibration exceeds *max_iterations*.
    """
    if name in suite:
        raise ValueError(f"Benchmark '{name}' is already in the suite.")

    started = time.strftime("%Y-%m-%dT%H:%M:%S")

    _report(suite, progress, BenchProgress(phase="calibrate", benchmark=name))
    iterations = calibrate(
        operation,
        suite.min_sample_duration,
        clock=clock,
        max_iterations=max_iterations,
    )
    _report(
        suite,
        progress,
        BenchProgress(phase="calibrated", benchmark=name, iterations_per_sample=iterations),
    )

    _report(
        suite,
        progress,
        BenchProgress(
            phase="sample",
            benchmark=name,
            iterations_per_sample=iterations,
            sample_count=suite.sample_count,
        ),
    )
    result = sample(operation, iterations, suite.sample_count, clock=clock)

    suite.add(name, result)
    if not suite.start_time:
        suite.start_time = started
    suite.end_time = time.strftime("%Y-%m-%dT%H:%M:%S")
    _report(
        suite,
        progress,
        BenchProgress(
            phase="done",
            benchmark=name,
            iterations_per_sample=iterations,
            sample_count=result.count,
            mean_s=result.mean,
        ),
    )
    return result


def run_all(
    suite: Suite,
    benchmarks: Iterable[tuple[str, Operation]],
    **kwargs: object,
) -> Suite:
    """Run each ``(name, operation)`` pair in order into *suite*."""
    for name, operation in benchmarks:
        run_benchmark(suite, name, operation, **kwargs)  # type: ignore[arg-type]
    return suite


def _report(suite: Suite, callback: ProgressCallback | None, event: BenchProgress) -> None:
    if callback is not None:
        callback(event)
    if suite.verbose:
        log.info("%s", _describe_progress(event))
    else:
        log.debug("%s", _describe_progress(event))


def _describe_progress(event: BenchProgress) -> str:
    if event.phase == "calibrate":
        return f"[{event.benchmark}] calibrating"
    if event.phase == "calibrated":
        return f"[{event.benchmark}] {event.iterations_per_sample} iterations per sample"
    if event.phase == "sample":
        return (
            f"[{event.benchmark}] collecting {event.sample_count} samples "
            f"of {event.iterations_per_sample} iterations"
        )
    if event.phase == "done":
        return (
            f"[{event.benchmark}] done: mean {event.mean_s:.3e}s "
            f"over {event.sample_count} samples"
        )
    return f"[{event.benchmark}] {event.phase} {event.detail}".rstrip()
