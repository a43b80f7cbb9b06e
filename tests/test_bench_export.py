"""Tests for chronobench.bench.export — CSV and Markdown export."""

from __future__ import annotations

import csv
import io
import unittest

from bench_test_helpers import constant, make_result, make_suite

from chronobench.bench.compare import compare_suites
from chronobench.bench.export import export_csv, export_csv_summary, export_markdown


class TestExportCsv(unittest.TestCase):
    def test_long_format(self) -> None:
        suite = make_suite({})
        suite.add("b", make_result([0.25, 0.5], iterations_per_sample=4))
        suite.add("a", make_result([1.0], iterations_per_sample=1))
        rows = list(csv.reader(io.StringIO(export_csv(suite))))
        self.assertEqual(rows[0], ["benchmark", "sample", "iterations_per_sample", "seconds"])
        self.assertEqual(
            rows[1:],
            [
                ["b", "1", "4", "0.25"],
                ["b", "2", "4", "0.5"],
                ["a", "1", "1", "1.0"],
            ],
        )

    def test_full_precision(self) -> None:
        value = 1.2345678901234567e-07
        suite = make_suite({"x": [value]})
        rows = list(csv.reader(io.StringIO(export_csv(suite))))
        self.assertEqual(float(rows[1][3]), value)

    def test_empty_suite(self) -> None:
        rows = list(csv.reader(io.StringIO(export_csv(make_suite({})))))
        self.assertEqual(len(rows), 1)


class TestExportCsvSummary(unittest.TestCase):
    def test_summary_rows(self) -> None:
        suite = make_suite({"a": [1.0, 3.0], "b": [2.0, 2.0]})
        rows = list(csv.DictReader(io.StringIO(export_csv_summary(suite))))
        self.assertEqual([r["benchmark"] for r in rows], ["a", "b"])
        self.assertEqual(rows[0]["n"], "2")
        self.assertAlmostEqual(float(rows[0]["mean_s"]), 2.0)
        self.assertAlmostEqual(float(rows[0]["stdev_s"]), 1.0)
        self.assertAlmostEqual(float(rows[1]["cv"]), 0.0)


class TestExportMarkdown(unittest.TestCase):
    def test_results_section(self) -> None:
        suite = make_suite({"fib": [7.5e-9, 7.5e-9]}, name="Numbers")
        md = export_markdown(suite)
        self.assertTrue(md.startswith("# Numbers"))
        self.assertIn("## Results", md)
        self.assertIn("| Benchmark | Mean | Std. dev. | Samples |", md)
        self.assertIn("| fib | 7.500 ns | 0.000 s | 2 |", md)
        self.assertIn("- **Python:** 3.12.0", md)
        self.assertNotIn("## Comparison", md)
        self.assertTrue(md.rstrip().endswith("*Generated by chronobench on 2026-01-01T00:01:00*"))

    def test_sub_yocto_values(self) -> None:
        md = export_markdown(make_suite({"op": [0.0, 2e-25]}))
        self.assertIn("| op | 0.000 s | 0.000 s | 2 |", md)

    def test_pipe_escaped(self) -> None:
        md = export_markdown(make_suite({"a|b": [1.0]}))
        self.assertIn("a\\|b", md)

    def test_comparison_section(self) -> None:
        current = make_suite({"fast": constant(50.0), "new": constant(1.0)})
        previous = make_suite({"fast": constant(100.0)})
        md = export_markdown(current, compare_suites(current, previous))
        self.assertIn("## Comparison", md)
        self.assertIn("~2.0x faster", md)
        self.assertIn("-50.0%", md)
        self.assertIn("- Faster: 1", md)
        self.assertIn("- No previous result: 1", md)


if __name__ == "__main__":
    unittest.main()
