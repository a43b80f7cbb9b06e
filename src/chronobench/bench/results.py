"""Benchmark result data structures and serialization.

Hierarchy::

    Suite (one benchmarking session, ordered)
      → benchmarks: list[Benchmark]   (registration order, never re-sorted)
        → result: BenchmarkResult
          → samples: tuple[float, ...] (seconds per iteration)
          → mean / variance / stdev   (derived on demand)

File produced::

    <name>.json — {"format_version": 1, "suite": {...}, "benchmarks": [...]}
"""

from __future__ import annotations

import json
import logging
import os
import platform as _platform
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator, Sequence

from chronobench.bench.stats import (
    DescriptiveStats,
    describe,
    mean,
    population_stdev,
    population_variance,
)

log = logging.getLogger("chronobench")

FORMAT_VERSION = 1

DEFAULT_MIN_SAMPLE_DURATION = 0.5
DEFAULT_SAMPLE_COUNT = 50


# ---------------------------------------------------------------------------
# BenchmarkResult
# ---------------------------------------------------------------------------


class BenchmarkResult:
    """An immutable, non-empty population of per-iteration timings.

    Each sample is the mean duration of one invocation within a
    calibrated batch of ``iterations_per_sample`` invocations.
    """

    __slots__ = ("_samples", "_iterations_per_sample")

    def __init__(self, samples: Sequence[float], iterations_per_sample: int = 0) -> None:
        values = tuple(float(s) for s in samples)
        if not values:
            raise ValueError("A benchmark result needs at least one sample.")
        if any(s < 0 for s in values):
            raise ValueError("Samples are durations and cannot be negative.")
        if iterations_per_sample < 0:
            raise ValueError(
                f"iterations_per_sample cannot be negative (got {iterations_per_sample})."
            )
        self._samples = values
        self._iterations_per_sample = iterations_per_sample

    @property
    def samples(self) -> tuple[float, ...]:
        return self._samples

    @property
    def iterations_per_sample(self) -> int:
        """Calibrated invocations per sample; 0 if unknown."""
        return self._iterations_per_sample

    @property
    def count(self) -> int:
        return len(self._samples)

    @property
    def mean(self) -> float:
        return mean(self._samples)

    @property
    def variance(self) -> float:
        """Population variance (divisor N)."""
        return population_variance(self._samples)

    @property
    def stdev(self) -> float:
        return population_stdev(self._samples)

    def describe(self) -> DescriptiveStats:
        return describe(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[float]:
        return iter(self._samples)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BenchmarkResult):
            return NotImplemented
        return (
            self._samples == other._samples
            and self._iterations_per_sample == other._iterations_per_sample
        )

    def __hash__(self) -> int:
        return hash((self._samples, self._iterations_per_sample))

    def __repr__(self) -> str:
        return (
            f"BenchmarkResult(n={self.count}, mean={self.mean!r}, "
            f"iterations_per_sample={self._iterations_per_sample})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize the raw samples; statistics are recomputed on load."""
        return {
            "iterations_per_sample": self._iterations_per_sample,
            "samples": list(self._samples),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BenchmarkResult:
        return cls(
            data["samples"],
            iterations_per_sample=int(data.get("iterations_per_sample", 0)),
        )


# ---------------------------------------------------------------------------
# Benchmark and Suite
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Benchmark:
    """A named benchmark result."""

    name: str
    result: BenchmarkResult

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"name": self.name}
        d.update(self.result.to_dict())
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Benchmark:
        return cls(name=data["name"], result=BenchmarkResult.from_dict(data))


@dataclass
class Suite:
    """An ordered collection of named benchmark results.

    Benchmarks keep their registration order; lookups by name go
    through an index map rather than re-sorting.
    """

    name: str = ""
    min_sample_duration: float = DEFAULT_MIN_SAMPLE_DURATION
    sample_count: int = DEFAULT_SAMPLE_COUNT
    verbose: bool = False
    start_time: str = ""
    end_time: str = ""
    python_version: str = field(default_factory=_platform.python_version)
    platform: str = field(default_factory=_platform.platform)
    _benchmarks: list[Benchmark] = field(default_factory=list, init=False, repr=False)
    _index: dict[str, int] = field(default_factory=dict, init=False, repr=False)

    def add(self, name: str, result: BenchmarkResult) -> Benchmark:
        """Append a result under *name*. Names must be unique."""
        if name in self._index:
            raise ValueError(f"Benchmark '{name}' is already in the suite.")
        bench = Benchmark(name=name, result=result)
        self._index[name] = len(self._benchmarks)
        self._benchmarks.append(bench)
        return bench

    def get(self, name: str) -> Benchmark | None:
        idx = self._index.get(name)
        return None if idx is None else self._benchmarks[idx]

    def run(
        self,
        name: str,
        operation: Callable[[], object],
        **kwargs: Any,
    ) -> BenchmarkResult:
        """Benchmark *operation* and store its result under *name*.

        See :func:`chronobench.bench.runner.run_benchmark` for keyword
        arguments.
        """
        from chronobench.bench.runner import run_benchmark

        return run_benchmark(self, name, operation, **kwargs)

    @property
    def benchmarks(self) -> list[Benchmark]:
        return list(self._benchmarks)

    @property
    def names(self) -> list[str]:
        return [b.name for b in self._benchmarks]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[Benchmark]:
        return iter(list(self._benchmarks))

    def __len__(self) -> int:
        return len(self._benchmarks)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "format_version": FORMAT_VERSION,
            "suite": {
                "name": self.name,
                "min_sample_duration": self.min_sample_duration,
                "sample_count": self.sample_count,
                "verbose": self.verbose,
                "start_time": self.start_time,
                "end_time": self.end_time,
                "python_version": self.python_version,
                "platform": self.platform,
            },
            "benchmarks": [b.to_dict() for b in self._benchmarks],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Suite:
        """Deserialize from a dict produced by :meth:`to_dict`.

        Raises:
            ValueError: If the document is malformed or its format
                version is not supported.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Suite document must be a mapping, got {type(data).__name__}")
        version = data.get("format_version")
        if version != FORMAT_VERSION:
            raise ValueError(f"Unsupported suite format version: {version!r}")

        meta = data.get("suite", {})
        if not isinstance(meta, dict):
            raise ValueError(f"Suite metadata must be a mapping, got {type(meta).__name__}")
        suite = cls(
            name=meta.get("name", ""),
            min_sample_duration=meta.get("min_sample_duration", DEFAULT_MIN_SAMPLE_DURATION),
            sample_count=meta.get("sample_count", DEFAULT_SAMPLE_COUNT),
            verbose=meta.get("verbose", False),
            start_time=meta.get("start_time", ""),
            end_time=meta.get("end_time", ""),
            python_version=meta.get("python_version", ""),
            platform=meta.get("platform", ""),
        )
        try:
            for entry in data.get("benchmarks", []):
                bench = Benchmark.from_dict(entry)
                suite.add(bench.name, bench.result)
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed benchmark entry: {exc}") from exc
        return suite


# ---------------------------------------------------------------------------
# I/O functions
# ---------------------------------------------------------------------------


def save_suite(path: Path, suite: Suite) -> None:
    """Write *suite* to *path* as JSON, atomically."""
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(suite.to_dict(), indent=2) + "\n"
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except OSError:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    log.info("Wrote %d benchmark results to %s", len(suite), path)


def load_suite(path: Path) -> Suite:
    """Load a suite written by :func:`save_suite`.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file is not a valid suite document.
    """
    if not path.exists():
        raise FileNotFoundError(f"No suite file at {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON: {exc}") from exc
    suite = Suite.from_dict(data)
    log.debug("Loaded %d benchmark results from %s", len(suite), path)
    return suite
