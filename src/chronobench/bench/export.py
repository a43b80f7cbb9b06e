"""Export benchmark results to CSV and Markdown formats.

CSV format: one row per benchmark per sample (long format for
pandas/R). This is the raw data, every single measurement.

Markdown format: a summary table suitable for reports, README files
and pull request descriptions, with an optional comparison section.
"""

from __future__ import annotations

import csv
import io

from chronobench.bench.compare import ComparisonRecord, summarize
from chronobench.bench.display import format_duration, format_engineering, format_ratio
from chronobench.bench.results import Suite
from chronobench.formatting import format_pct


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------


def export_csv(suite: Suite) -> str:
    """Export samples as CSV (long format).

    Columns:
        benchmark, sample, iterations_per_sample, seconds
    """
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["benchmark", "sample", "iterations_per_sample", "seconds"])

    for bench in suite:
        for i, value in enumerate(bench.result.samples, start=1):
            writer.writerow(
                [bench.name, i, bench.result.iterations_per_sample, repr(value)]
            )

    return output.getvalue()


def export_csv_summary(suite: Suite) -> str:
    """Export per-benchmark summary statistics as CSV."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(
        ["benchmark", "n", "mean_s", "median_s", "stdev_s", "min_s", "max_s", "cv"]
    )
    for bench in suite:
        ds = bench.result.describe()
        writer.writerow(
            [
                bench.name,
                ds.n,
                f"{ds.mean:.6e}",
                f"{ds.median:.6e}",
                f"{ds.stdev:.6e}",
                f"{ds.min:.6e}",
                f"{ds.max:.6e}",
                f"{ds.cv:.6f}",
            ]
        )
    return output.getvalue()


# ---------------------------------------------------------------------------
# Markdown export
# ---------------------------------------------------------------------------


def _md_cell(text: str) -> str:
    return text.strip().replace("|", "\\|")


def export_markdown(
    suite: Suite,
    records: list[ComparisonRecord] | None = None,
) -> str:
    """Export a suite, and optionally its comparison, as Markdown."""
    lines: list[str] = []

    title = suite.name or "Benchmark results"
    lines.append(f"# {title}")
    lines.append("")
    if suite.python_version:
        lines.append(f"- **Python:** {suite.python_version}")
    if suite.platform:
        lines.append(f"- **Platform:** {suite.platform}")
    lines.append(
        f"- **Samples:** {suite.sample_count} per benchmark, "
        f"each >= {format_engineering(suite.min_sample_duration).strip()}"
    )
    lines.append("")

    lines.append("## Results")
    lines.append("")
    lines.append("| Benchmark | Mean | Std. dev. | Samples |")
    lines.append("|---|---:|---:|---:|")
    for bench in suite:
        r = bench.result
        lines.append(
            f"| {_md_cell(bench.name)} | {_md_cell(format_duration(r.mean))} | "
            f"{_md_cell(format_duration(r.stdev))} | {r.count} |"
        )

    if records is not None:
        lines.append("")
        _export_markdown_comparison(lines, records)

    lines.append("")
    lines.append(f"*Generated by chronobench on {suite.end_time or 'unknown'}*")
    return "\n".join(lines)


def _export_markdown_comparison(lines: list[str], records: list[ComparisonRecord]) -> None:
    """Append the comparison table and summary to *lines*."""
    lines.append("## Comparison")
    lines.append("")
    lines.append("| Benchmark | New mean | Old mean | Change | Verdict |")
    lines.append("|---|---:|---:|---:|---|")
    for rec in records:
        old = _md_cell(format_duration(rec.previous.mean)) if rec.previous else "-"
        change = (
            format_pct(rec.percent_difference) if rec.percent_difference is not None else "-"
        )
        lines.append(
            f"| {_md_cell(rec.name)} | {_md_cell(format_duration(rec.current.mean))} | "
            f"{old} | {change} | {format_ratio(rec)} |"
        )

    report = summarize(records)
    lines.append("")
    lines.append(f"- Faster: {len(report.faster)}")
    lines.append(f"- Slower: {len(report.slower)}")
    lines.append(f"- No significant change: {len(report.unchanged)}")
    if report.unknown:
        lines.append(f"- No previous result: {len(report.unknown)}")
