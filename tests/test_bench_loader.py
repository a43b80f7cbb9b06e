"""Tests for chronobench.bench.loader — benchmark discovery in scripts."""

from __future__ import annotations

import sys
import tempfile
import textwrap
import unittest
from pathlib import Path

from chronobench.bench.loader import (
    discover_benchmarks,
    load_benchmarks,
    load_script,
    select_benchmarks,
)


class LoaderTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmpdir = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def write_script(self, source: str, name: str = "benches.py") -> Path:
        path = self.tmpdir / name
        path.write_text(textwrap.dedent(source))
        return path


class TestDiscovery(LoaderTestCase):
    def test_bench_functions_in_definition_order(self) -> None:
        path = self.write_script(
            """
            def bench_zeta():
                pass

            def helper():
                pass

            def bench_alpha():
                pass
            """
        )
        pairs = discover_benchmarks(load_script(path))
        self.assertEqual([name for name, _ in pairs], ["zeta", "alpha"])
        self.assertTrue(all(callable(op) for _, op in pairs))

    def test_imported_functions_ignored(self) -> None:
        self.write_script("def bench_shared():\n    pass\n", name="shared_helpers.py")
        path = self.write_script(
            """
            from shared_helpers import bench_shared

            def bench_local():
                pass
            """
        )
        pairs = discover_benchmarks(load_script(path))
        self.assertEqual([name for name, _ in pairs], ["local"])

    def test_benchmarks_list_takes_precedence(self) -> None:
        path = self.write_script(
            """
            def bench_ignored():
                pass

            BENCHMARKS = [
                ("join", lambda: ",".join("abc")),
                ("sum", lambda: sum(range(10))),
            ]
            """
        )
        pairs = discover_benchmarks(load_script(path))
        self.assertEqual([name for name, _ in pairs], ["join", "sum"])
        self.assertEqual(pairs[1][1](), 45)

    def test_bad_benchmarks_entry(self) -> None:
        path = self.write_script("BENCHMARKS = [('x', 42)]\n")
        with self.assertRaises(ValueError):
            discover_benchmarks(load_script(path))
        path = self.write_script("BENCHMARKS = [42]\n", name="other.py")
        with self.assertRaises(ValueError):
            discover_benchmarks(load_script(path))

    def test_dataclass_with_postponed_annotations(self) -> None:
        path = self.write_script(
            """
            from __future__ import annotations

            from dataclasses import dataclass

            @dataclass
            class Point:
                x: int
                y: int

            def bench_make():
                return Point(1, 2)
            """,
            name="points.py",
        )
        pairs = discover_benchmarks(load_script(path))
        self.assertEqual([name for name, _ in pairs], ["make"])
        self.assertEqual(pairs[0][1]().x, 1)

    def test_failed_load_not_registered(self) -> None:
        path = self.write_script("raise RuntimeError('broken script')\n", name="broken.py")
        with self.assertRaises(RuntimeError):
            load_script(path)
        self.assertNotIn("chronobench_script_broken", sys.modules)

    def test_syntax_error(self) -> None:
        path = self.write_script("def bench_x(:\n")
        with self.assertRaises(ValueError):
            load_script(path)

    def test_missing_script(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_script(self.tmpdir / "missing.py")


class TestSelection(LoaderTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.pairs = [("c", print), ("a", print), ("b", print)]

    def test_no_filter(self) -> None:
        self.assertEqual(select_benchmarks(self.pairs, None), self.pairs)

    def test_filter_keeps_script_order(self) -> None:
        selected = select_benchmarks(self.pairs, ["b", "c"])
        self.assertEqual([name for name, _ in selected], ["c", "b"])

    def test_unknown_name(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            select_benchmarks(self.pairs, ["a", "nope"])
        self.assertIn("nope", str(ctx.exception))

    def test_load_benchmarks_empty_script(self) -> None:
        path = self.write_script("X = 1\n")
        with self.assertRaises(ValueError):
            load_benchmarks(path)

    def test_load_benchmarks_filtered(self) -> None:
        path = self.write_script(
            """
            def bench_one():
                pass

            def bench_two():
                pass
            """
        )
        self.assertEqual([n for n, _ in load_benchmarks(path, ["two"])], ["two"])


if __name__ == "__main__":
    unittest.main()
