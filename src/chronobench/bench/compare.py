"""Benchmark comparison analysis.

Compares the benchmarks of a current suite against a previously
captured suite, producing one structured record per current benchmark
(significance, direction, percent change and magnitude ratio) and an
aggregate report.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass, field

from chronobench.bench.results import BenchmarkResult, Suite
from chronobench.bench.stats import TTestResult, pooled_ttest

log = logging.getLogger("chronobench")


class Direction(str, enum.Enum):
    """Outcome of comparing a benchmark with its previous result."""

    FASTER = "faster"
    SLOWER = "slower"
    NO_CHANGE = "no change"
    UNKNOWN = "unknown"


# ---------------------------------------------------------------------------
# Per-benchmark comparison record
# ---------------------------------------------------------------------------


@dataclass
class ComparisonRecord:
    """Comparison of one benchmark between the current and previous suite."""

    name: str
    current: BenchmarkResult
    previous: BenchmarkResult | None
    significant: bool
    direction: Direction
    percent_difference: float | None
    ttest: TTestResult | None = None

    @property
    def ratio(self) -> float | None:
        """max(mean) / min(mean) of the two results, for "~N.Nx" phrasing."""
        if self.previous is None:
            return None
        return magnitude_ratio(self.current.mean, self.previous.mean)


def magnitude_ratio(mean_a: float, mean_b: float) -> float:
    """Ratio of the larger mean to the smaller; 1.0 for two zeros."""
    hi, lo = max(mean_a, mean_b), min(mean_a, mean_b)
    if lo == 0:
        return 1.0 if hi == 0 else float("inf")
    return hi / lo


def percent_difference(new_mean: float, old_mean: float) -> float:
    """100 * (new - old) / old.

    With an old mean of zero the change is 0.0 if the new mean is also
    zero, and +inf otherwise.
    """
    if old_mean == 0:
        return 0.0 if new_mean == 0 else math.inf
    return 100.0 * (new_mean - old_mean) / old_mean


def compare_results(
    name: str,
    current: BenchmarkResult,
    previous: BenchmarkResult | None,
) -> ComparisonRecord:
    """Build the comparison record for one benchmark."""
    if previous is None:
        return ComparisonRecord(
            name=name,
            current=current,
            previous=None,
            significant=False,
            direction=Direction.UNKNOWN,
            percent_difference=None,
        )

    ttest = pooled_ttest(current.samples, previous.samples)
    if not ttest.significant:
        direction = Direction.NO_CHANGE
    elif current.mean < previous.mean:
        direction = Direction.FASTER
    else:
        direction = Direction.SLOWER

    return ComparisonRecord(
        name=name,
        current=current,
        previous=previous,
        significant=ttest.significant,
        direction=direction,
        percent_difference=percent_difference(current.mean, previous.mean),
        ttest=ttest,
    )


def compare_suites(current: Suite, previous: Suite) -> list[ComparisonRecord]:
    """Compare every benchmark of *current* with its namesake in *previous*.

    Records follow *current*'s registration order. Benchmarks only in
    *previous* are ignored.
    """
    records: list[ComparisonRecord] = []
    for bench in current:
        old = previous.get(bench.name)
        record = compare_results(bench.name, bench.result, old.result if old else None)
        log.debug(
            "%s: %s (t=%s, change=%s)",
            bench.name,
            record.direction.value,
            f"{record.ttest.t_statistic:.3f}" if record.ttest else "n/a",
            f"{record.percent_difference:+.2f}%"
            if record.percent_difference is not None
            else "n/a",
        )
        records.append(record)
    return records


# ---------------------------------------------------------------------------
# Aggregate report
# ---------------------------------------------------------------------------


@dataclass
class ComparisonReport:
    """Aggregate view of a list of comparison records."""

    records: list[ComparisonRecord] = field(default_factory=list)

    def _names(self, direction: Direction) -> list[str]:
        return [r.name for r in self.records if r.direction is direction]

    @property
    def total(self) -> int:
        return len(self.records)

    @property
    def faster(self) -> list[str]:
        return self._names(Direction.FASTER)

    @property
    def slower(self) -> list[str]:
        return self._names(Direction.SLOWER)

    @property
    def unchanged(self) -> list[str]:
        return self._names(Direction.NO_CHANGE)

    @property
    def unknown(self) -> list[str]:
        return self._names(Direction.UNKNOWN)

    @property
    def has_regressions(self) -> bool:
        return bool(self.slower)


def summarize(records: list[ComparisonRecord]) -> ComparisonReport:
    """Wrap *records* in a :class:`ComparisonReport`."""
    return ComparisonReport(records=list(records))
