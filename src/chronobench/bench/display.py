"""Terminal display formatting for benchmark results.

Durations are shown in engineering notation: the exponent is a
multiple of three and is written as an SI prefix, so ``7.5e-09`` seconds
reads ``  7.500 ns``. Tables keep the suite's registration order.
"""

from __future__ import annotations

import math

from chronobench.bench.compare import ComparisonRecord, ComparisonReport, Direction
from chronobench.bench.results import Suite
from chronobench.formatting import format_pct, format_table

# SI prefixes indexed by power-of-1000 exponent + 8 (yocto .. yotta).
SI_PREFIXES: tuple[str, ...] = (
    "y", "z", "a", "f", "p", "n", "µ", "m",
    "",
    "k", "M", "G", "T", "P", "E", "Z", "Y",
)
_MIN_GROUP = -8
_MAX_GROUP = 8


def format_engineering(
    value: float,
    unit: str = "s",
    *,
    precision: int = 3,
    width: int = 7,
) -> str:
    """Format *value* in engineering notation with an SI prefix.

    The mantissa is right-aligned in *width* characters with
    *precision* digits after the decimal point, followed by a space,
    the prefix and *unit*.

    Raises:
        ValueError: For infinities and magnitudes outside yocto..yotta.
    """
    if math.isnan(value):
        return "N/A"
    if math.isinf(value):
        raise ValueError(f"Cannot format {value} in engineering notation.")

    group = 0 if value == 0 else math.floor(math.log10(abs(value)) / 3)
    mantissa = value / (1000.0**group)
    # Rounding can carry the mantissa into the next group (999.9996 -> 1000.000).
    if round(abs(mantissa), precision) >= 1000:
        group += 1
        mantissa = value / (1000.0**group)
    if not _MIN_GROUP <= group <= _MAX_GROUP:
        raise ValueError(f"{value!r} is outside the SI prefix range (yocto to yotta).")

    prefix = SI_PREFIXES[group - _MIN_GROUP]
    return f"{mantissa:{width}.{precision}f} {prefix}{unit}"


def format_duration(seconds: float) -> str:
    """Engineering notation for a measured duration in a table cell.

    Magnitudes too small for the yocto prefix read as zero.
    """
    try:
        return format_engineering(seconds)
    except ValueError:
        if abs(seconds) < 1.0:
            return format_engineering(0.0)
        raise


def format_ratio(record: ComparisonRecord) -> str:
    """Short verdict for one record: ``'~2.0x faster'``, ``'no change'``..."""
    if record.direction is Direction.UNKNOWN:
        return "no comparison available"
    if record.direction is Direction.NO_CHANGE:
        return "no change"
    ratio = record.ratio
    if ratio is None:
        return record.direction.value
    ratio_text = "∞" if math.isinf(ratio) else f"{ratio:.1f}"
    return f"~{ratio_text}x {record.direction.value}"


# ---------------------------------------------------------------------------
# Suite table
# ---------------------------------------------------------------------------


def format_suite_table(suite: Suite) -> str:
    """Format one row per benchmark: mean, standard deviation and sample shape."""
    if not len(suite):
        return "No benchmarks recorded."

    headers = ["Benchmark", "Mean", "Std. dev.", "Samples", "Iterations"]
    rows: list[list[str]] = []
    for bench in suite:
        r = bench.result
        rows.append(
            [
                bench.name,
                format_duration(r.mean),
                format_duration(r.stdev),
                str(r.count),
                str(r.iterations_per_sample) if r.iterations_per_sample else "?",
            ]
        )
    return format_table(headers, rows, alignments=["l", "r", "r", "r", "r"])


def format_suite_show(suite: Suite) -> str:
    """Header block with run metadata followed by the suite table."""
    lines: list[str] = []
    title = suite.name or "Benchmark suite"
    lines.append(title)
    lines.append("─" * len(title))
    min_duration = format_engineering(suite.min_sample_duration).strip()
    lines.append(f"Samples: {suite.sample_count} x >= {min_duration}")
    if suite.python_version:
        lines.append(f"Python: {suite.python_version} ({suite.platform or 'unknown platform'})")
    if suite.start_time and suite.end_time:
        lines.append(f"Time: {suite.start_time} → {suite.end_time}")
    lines.append("")
    lines.append(format_suite_table(suite))
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Comparison table
# ---------------------------------------------------------------------------


def format_comparison_table(records: list[ComparisonRecord]) -> str:
    """Format one row per comparison record, in record order."""
    if not records:
        return "No benchmarks to compare."

    headers = ["Benchmark", "New mean", "Old mean", "Change", "Verdict"]
    rows: list[list[str]] = []
    for rec in records:
        rows.append(
            [
                rec.name,
                format_duration(rec.current.mean),
                format_duration(rec.previous.mean) if rec.previous else "-",
                format_pct(rec.percent_difference) if rec.percent_difference is not None else "-",
                format_ratio(rec),
            ]
        )
    return format_table(headers, rows, alignments=["l", "r", "r", "r", "l"])


def format_comparison_report(report: ComparisonReport) -> str:
    """Format aggregate counts for a comparison."""
    if report.total == 0:
        return "No benchmarks to compare."

    lines = ["Comparison Summary", "─" * 18]
    lines.append(f"  Benchmarks compared:   {report.total}")
    lines.append(f"  Faster:                {len(report.faster)}")
    lines.append(f"  Slower:                {len(report.slower)}")
    lines.append(f"  No significant change: {len(report.unchanged)}")
    if report.unknown:
        lines.append(f"  No previous result:    {len(report.unknown)}")
    if report.slower:
        lines.append("")
        lines.append("  Regressions:")
        for name in report.slower:
            lines.append(f"    {name}")
    return "\n".join(lines)
