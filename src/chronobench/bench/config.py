"""Benchmark configuration and profile loading.

Handles:
- Loading benchmark profiles from YAML files.
- Merging CLI options with profile defaults (CLI wins).
- Validating the final configuration before execution.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from chronobench.bench.results import DEFAULT_MIN_SAMPLE_DURATION, DEFAULT_SAMPLE_COUNT
from chronobench.bench.timing import DEFAULT_MAX_ITERATIONS

log = logging.getLogger("chronobench")

# Below this many samples the t-test has little power; allowed, but warned about.
RECOMMENDED_MIN_SAMPLES = 10


# ---------------------------------------------------------------------------
# BenchConfig
# ---------------------------------------------------------------------------


@dataclass
class BenchConfig:
    """Resolved configuration for a benchmark run."""

    name: str = ""
    min_sample_duration: float = DEFAULT_MIN_SAMPLE_DURATION
    sample_count: int = DEFAULT_SAMPLE_COUNT
    max_calibration_iterations: int = DEFAULT_MAX_ITERATIONS
    verbose: bool = False

    # Benchmark selection; None runs everything the script defines.
    benchmarks_filter: list[str] | None = None

    # Paths
    output: Path | None = None
    compare_to: Path | None = None

    # CLI provenance
    cli_args: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def validate_config(config: BenchConfig) -> list[ValidationError]:
    """Validate a benchmark configuration.

    Returns a list of validation errors. Empty list means valid.
    """
    errors: list[ValidationError] = []

    if config.min_sample_duration <= 0:
        errors.append(
            ValidationError(
                field="min_sample_duration",
                message=(
                    f"Minimum sample duration must be positive "
                    f"(got {config.min_sample_duration})."
                ),
            )
        )

    if config.sample_count < 2:
        errors.append(
            ValidationError(
                field="sample_count",
                message=(
                    f"Need at least 2 samples to compare results "
                    f"(got {config.sample_count})."
                ),
            )
        )
    elif config.sample_count < RECOMMENDED_MIN_SAMPLES:
        errors.append(
            ValidationError(
                field="sample_count",
                message=(
                    f"Only {config.sample_count} samples per benchmark; comparisons "
                    f"will only detect large differences."
                ),
                severity="warning",
            )
        )

    if config.max_calibration_iterations < 1:
        errors.append(
            ValidationError(
                field="max_calibration_iterations",
                message=(
                    f"Calibration iteration cap must be at least 1 "
                    f"(got {config.max_calibration_iterations})."
                ),
            )
        )

    if config.benchmarks_filter is not None:
        for name in config.benchmarks_filter:
            if not name or not name.strip():
                errors.append(
                    ValidationError(
                        field="benchmarks_filter",
                        message="Benchmark names in the filter must be non-empty.",
                    )
                )
                break

    if config.compare_to is not None and not config.compare_to.exists():
        errors.append(
            ValidationError(
                field="compare_to",
                message=f"Previous results file does not exist: {config.compare_to}",
            )
        )

    return errors


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load a benchmark profile from a YAML file.

    Profile format::

        name: "string formatting"
        min_sample_duration: 0.25
        sample_count: 30
        max_calibration_iterations: 1000000
        benchmarks: [fstring, percent]
        output: results/strings.json

    Returns:
        The parsed YAML as a dict.
    """
    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    data = yaml.safe_load(profile_path.read_text())
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Profile must be a YAML mapping, got {type(data).__name__}")
    return data


def config_from_profile(
    profile_data: dict[str, Any],
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> BenchConfig:
    """Build a BenchConfig from a parsed YAML profile.

    CLI overrides take precedence over profile values. An override
    whose value is None is treated as not given.

    Args:
        profile_data: Parsed YAML profile dict.
        cli_overrides: Dict of CLI option values. Keys match
            BenchConfig field names.
    """
    cli = {k: v for k, v in (cli_overrides or {}).items() if v is not None}

    def pick(key: str, default: Any) -> Any:
        if key in cli:
            return cli[key]
        return profile_data.get(key, default)

    benchmarks = cli.get("benchmarks_filter") or profile_data.get("benchmarks")
    if benchmarks is not None:
        if isinstance(benchmarks, str):
            benchmarks = [benchmarks]
        if not isinstance(benchmarks, list):
            raise ValueError("Profile 'benchmarks' must be a list of benchmark names")
        benchmarks = [str(b) for b in benchmarks]

    try:
        config = BenchConfig(
            name=str(pick("name", "")),
            min_sample_duration=float(pick("min_sample_duration", DEFAULT_MIN_SAMPLE_DURATION)),
            sample_count=int(pick("sample_count", DEFAULT_SAMPLE_COUNT)),
            max_calibration_iterations=int(
                pick("max_calibration_iterations", DEFAULT_MAX_ITERATIONS)
            ),
            verbose=bool(pick("verbose", False)),
            benchmarks_filter=benchmarks,
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid profile value: {exc}") from exc

    output = pick("output", None)
    if output:
        config.output = Path(output)
    compare_to = pick("compare_to", None)
    if compare_to:
        config.compare_to = Path(compare_to)

    return config
