"""chronobench — calibrated micro-benchmarks with significance testing.

Typical use::

    from chronobench import new_suite, run_benchmark, compare_suites

    suite = new_suite(min_sample_duration=0.2, sample_count=30)
    run_benchmark(suite, "join", lambda: ",".join(map(str, range(100))))
"""

__version__ = "0.1.0"

from chronobench.bench.compare import (
    ComparisonRecord,
    ComparisonReport,
    Direction,
    compare_suites,
    summarize,
)
from chronobench.bench.results import (
    Benchmark,
    BenchmarkResult,
    Suite,
    load_suite,
    save_suite,
)
from chronobench.bench.runner import BenchProgress, new_suite, run_benchmark
from chronobench.bench.stats import is_different, pooled_ttest
from chronobench.bench.timing import CalibrationFailed, calibrate, sample

__all__ = [
    "__version__",
    "Benchmark",
    "BenchmarkResult",
    "BenchProgress",
    "CalibrationFailed",
    "ComparisonRecord",
    "ComparisonReport",
    "Direction",
    "Suite",
    "calibrate",
    "compare_suites",
    "is_different",
    "load_suite",
    "new_suite",
    "pooled_ttest",
    "run_benchmark",
    "sample",
    "save_suite",
    "summarize",
]
