"""Command-line interface for chronobench.

Subcommands:
    chronobench run       Run the benchmarks defined in a script
    chronobench show      Display a saved suite
    chronobench compare   Compare a saved suite against an earlier one
    chronobench export    Export a saved suite to CSV or Markdown
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from chronobench import __version__
from chronobench.logging import setup_logging

log = logging.getLogger("chronobench")


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """chronobench — calibrated micro-benchmarks with significance testing."""


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@main.command()
@click.argument("script", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML profile with run settings.",
)
@click.option(
    "--min-sample-duration",
    type=float,
    default=None,
    help="Minimum duration of one sample in seconds (default: 0.5).",
)
@click.option(
    "--samples",
    "sample_count",
    type=int,
    default=None,
    help="Samples per benchmark (default: 50).",
)
@click.option(
    "--max-iterations",
    "max_calibration_iterations",
    type=int,
    default=None,
    help="Calibration iteration cap (default: 10000000).",
)
@click.option(
    "--filter",
    "filters",
    type=str,
    multiple=True,
    help="Only run this benchmark (repeatable).",
)
@click.option("--name", type=str, default=None, help="Human-readable suite name.")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the suite to this JSON file.",
)
@click.option(
    "--compare",
    "compare_to",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Compare against a previously saved suite.",
)
@click.option("-v", "--verbose", is_flag=True, help="Report calibration and sampling progress.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write a DEBUG log to this file.",
)
def run(  # noqa: PLR0913
    script: Path,
    profile_path: Path | None,
    min_sample_duration: float | None,
    sample_count: int | None,
    max_calibration_iterations: int | None,
    filters: tuple[str, ...],
    name: str | None,
    output: Path | None,
    compare_to: Path | None,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Run the benchmarks defined in SCRIPT.

    SCRIPT defines either a BENCHMARKS list of (name, callable) pairs
    or top-level functions named bench_*.

    \b
    Examples:
        chronobench run benches.py --output results/new.json
        chronobench run benches.py --compare results/old.json --samples 30
        chronobench run benches.py --profile quick.yaml --filter parse
    """
    from chronobench.bench.compare import compare_suites, summarize
    from chronobench.bench.config import (
        BenchConfig,
        config_from_profile,
        load_profile,
        validate_config,
    )
    from chronobench.bench.display import (
        format_comparison_report,
        format_comparison_table,
        format_suite_table,
    )
    from chronobench.bench.loader import load_benchmarks
    from chronobench.bench.results import load_suite, save_suite
    from chronobench.bench.runner import new_suite, run_benchmark
    from chronobench.bench.timing import CalibrationFailed

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    cli_overrides: dict[str, object] = {
        "name": name,
        "min_sample_duration": min_sample_duration,
        "sample_count": sample_count,
        "max_calibration_iterations": max_calibration_iterations,
        "benchmarks_filter": list(filters) or None,
        "output": output,
        "compare_to": compare_to,
        "verbose": verbose or None,
    }

    try:
        profile_data = load_profile(profile_path) if profile_path else {}
        config = config_from_profile(profile_data, cli_overrides=cli_overrides)
    except (ValueError, OSError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc
    config.cli_args = sys.argv[1:]

    problems = validate_config(config)
    for problem in problems:
        if problem.severity == "warning":
            log.warning("%s", problem.message)
    errors = [p for p in problems if p.severity == "error"]
    if errors:
        for problem in errors:
            click.echo(f"Error: {problem.message}", err=True)
        raise SystemExit(1)

    try:
        benchmarks = load_benchmarks(script, config.benchmarks_filter)
    except (ValueError, OSError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    previous = None
    if config.compare_to is not None:
        try:
            previous = load_suite(config.compare_to)
        except (ValueError, OSError) as exc:
            click.echo(f"Error: {exc}", err=True)
            raise SystemExit(1) from exc

    suite = new_suite(
        config.min_sample_duration,
        config.sample_count,
        config.verbose,
        name=config.name or script.stem,
    )
    log.info("Running %d benchmark(s) from %s", len(benchmarks), script)

    try:
        for bench_name, operation in benchmarks:
            run_benchmark(
                suite,
                bench_name,
                operation,
                max_iterations=config.max_calibration_iterations,
            )
    except CalibrationFailed as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        click.echo("\nBenchmark interrupted.", err=True)
        raise SystemExit(130)  # noqa: B904

    # Saved before any rendering.
    if config.output is not None:
        save_suite(config.output, suite)

    click.echo(format_suite_table(suite))

    if config.output is not None:
        click.echo(f"\nResults saved to: {config.output}")

    if previous is not None:
        records = compare_suites(suite, previous)
        click.echo()
        click.echo(format_comparison_table(records))
        click.echo()
        click.echo(format_comparison_report(summarize(records)))


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@main.command("show")
@click.argument("result_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def show(result_file: Path) -> None:
    """Display a suite saved with `run --output`."""
    from chronobench.bench.display import format_suite_show
    from chronobench.bench.results import load_suite

    try:
        suite = load_suite(result_file)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc
    click.echo(format_suite_show(suite))


# ---------------------------------------------------------------------------
# compare
# ---------------------------------------------------------------------------


@main.command("compare")
@click.argument("new_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("old_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["table", "markdown"]),
    default="table",
    help="Output format.",
)
@click.option(
    "--fail-on-regression",
    is_flag=True,
    default=False,
    help="Exit with status 2 if any benchmark got significantly slower.",
)
def compare(new_file: Path, old_file: Path, fmt: str, fail_on_regression: bool) -> None:
    """Compare NEW_FILE against OLD_FILE.

    Each benchmark in NEW_FILE is tested against its namesake in
    OLD_FILE with a two-tailed Student's t-test at the 5% level.

    \b
    Examples:
        chronobench compare results/new.json results/old.json
        chronobench compare new.json old.json --format markdown > report.md
    """
    from chronobench.bench.compare import compare_suites, summarize
    from chronobench.bench.display import format_comparison_report, format_comparison_table
    from chronobench.bench.export import export_markdown
    from chronobench.bench.results import load_suite

    try:
        new_suite = load_suite(new_file)
        old_suite = load_suite(old_file)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    records = compare_suites(new_suite, old_suite)
    report = summarize(records)

    if fmt == "markdown":
        click.echo(export_markdown(new_suite, records))
    else:
        click.echo(format_comparison_table(records))
        click.echo()
        click.echo(format_comparison_report(report))

    if fail_on_regression and report.has_regressions:
        raise SystemExit(2)


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------


@main.command("export")
@click.argument("result_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["csv", "csv-summary", "markdown"]),
    default="csv",
    help="Export format.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: stdout).",
)
def export(result_file: Path, fmt: str, output: Path | None) -> None:
    """Export a saved suite to CSV or Markdown.

    \b
    Examples:
        chronobench export results/new.json --format csv > samples.csv
        chronobench export results/new.json --format markdown -o report.md
    """
    from chronobench.bench.export import export_csv, export_csv_summary, export_markdown
    from chronobench.bench.results import load_suite

    try:
        suite = load_suite(result_file)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    if fmt == "csv":
        text = export_csv(suite)
    elif fmt == "csv-summary":
        text = export_csv_summary(suite)
    else:
        text = export_markdown(suite)

    if output:
        output.write_text(text)
        click.echo(f"Exported to {output}")
    else:
        click.echo(text)
