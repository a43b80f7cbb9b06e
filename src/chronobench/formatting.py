"""Shared text formatting helpers for chronobench.

Plain-text tables and small value formatters used by the terminal
display, the Markdown export and the CLI.
"""

from __future__ import annotations

import math


def format_table(
    headers: list[str],
    rows: list[list[str]],
    *,
    alignments: list[str] | None = None,
    max_col_width: dict[int, int] | None = None,
    indent: int = 2,
) -> str:
    """Format a list of rows as an aligned text table.

    Each column is as wide as the longest of its header and cells.
    Rows shorter than the header are padded with empty cells; longer
    rows are cut to the header's column count. Row order is kept as
    given.

    Args:
        headers: Column header strings.
        rows: List of rows, each a list of cell strings.
        alignments: Per-column alignment: ``'l'``, ``'r'``, or ``'c'``.
        max_col_width: Column index to max width mapping. Longer cells
            are truncated with a ``'...'`` suffix.
        indent: Number of leading spaces per line.

    Returns:
        The formatted table as a string.
    """
    if not headers:
        return ""

    ncols = len(headers)
    aligns = list(alignments) if alignments is not None else []
    while len(aligns) < ncols:
        aligns.append("l")

    proc_headers = list(headers)
    proc_rows: list[list[str]] = []
    for row in rows:
        padded = list(row) + [""] * (ncols - len(row))
        proc_rows.append(padded[:ncols])

    for ci, max_w in (max_col_width or {}).items():
        if ci < ncols:
            proc_headers[ci] = truncate(proc_headers[ci], max_w)
            for row in proc_rows:
                row[ci] = truncate(row[ci], max_w)

    widths = column_widths(proc_headers, proc_rows)
    prefix = " " * indent

    def _format_cell(text: str, width: int, align: str) -> str:
        if align == "r":
            return text.rjust(width)
        if align == "c":
            return text.center(width)
        return text.ljust(width)

    lines: list[str] = []
    header_line = "  ".join(
        _format_cell(proc_headers[i], widths[i], aligns[i]) for i in range(ncols)
    )
    lines.append((prefix + header_line).rstrip())

    for row in proc_rows:
        row_line = "  ".join(_format_cell(row[i], widths[i], aligns[i]) for i in range(ncols))
        lines.append((prefix + row_line).rstrip())

    return "\n".join(lines)


def column_widths(headers: list[str], rows: list[list[str]]) -> list[int]:
    """Width of each column: the longest of its header and its cells."""
    widths = [len(h) for h in headers]
    for row in rows:
        for ci, cell in enumerate(row[: len(widths)]):
            widths[ci] = max(widths[ci], len(cell))
    return widths


def format_pct(value: float, precision: int = 1) -> str:
    """Format a percentage with an explicit sign: ``'+12.5%'``."""
    if math.isnan(value):
        return "N/A"
    if math.isinf(value):
        return "+inf%" if value > 0 else "-inf%"
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.{precision}f}%"


def truncate(text: str, max_len: int, suffix: str = "...") -> str:
    """Truncate text to *max_len*, adding *suffix* if truncated."""
    if len(text) <= max_len:
        return text
    if max_len <= len(suffix):
        return suffix[:max_len]
    return text[: max_len - len(suffix)] + suffix
