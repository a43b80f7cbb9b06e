"""Tests for chronobench.bench.results — data structures and persistence."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from bench_test_helpers import make_result, make_suite

from chronobench.bench.results import (
    FORMAT_VERSION,
    Benchmark,
    BenchmarkResult,
    Suite,
    load_suite,
    save_suite,
)


class TestBenchmarkResult(unittest.TestCase):
    def test_statistics(self) -> None:
        result = make_result([1.0, 3.0], iterations_per_sample=8)
        self.assertEqual(result.count, 2)
        self.assertEqual(len(result), 2)
        self.assertEqual(result.mean, 2.0)
        self.assertEqual(result.variance, 1.0)
        self.assertEqual(result.stdev, 1.0)
        self.assertEqual(result.iterations_per_sample, 8)
        self.assertEqual(list(result), [1.0, 3.0])

    def test_samples_are_copied(self) -> None:
        raw = [1.0, 2.0]
        result = make_result(raw)
        raw.append(100.0)
        self.assertEqual(result.samples, (1.0, 2.0))

    def test_immutable(self) -> None:
        result = make_result([1.0])
        with self.assertRaises(AttributeError):
            result.samples = (2.0,)  # type: ignore[misc]

    def test_empty_rejected(self) -> None:
        with self.assertRaises(ValueError):
            BenchmarkResult([])

    def test_negative_rejected(self) -> None:
        with self.assertRaises(ValueError):
            BenchmarkResult([1.0, -0.5])
        with self.assertRaises(ValueError):
            BenchmarkResult([1.0], iterations_per_sample=-1)

    def test_equality(self) -> None:
        self.assertEqual(make_result([1.0, 2.0], 3), make_result([1.0, 2.0], 3))
        self.assertNotEqual(make_result([1.0, 2.0], 3), make_result([1.0, 2.0], 4))
        self.assertEqual(hash(make_result([1.0], 1)), hash(make_result([1.0], 1)))

    def test_constant_population_has_zero_variance(self) -> None:
        result = make_result([2.329e-8] * 50)
        self.assertEqual(result.mean, 2.329e-8)
        self.assertEqual(result.variance, 0.0)
        self.assertEqual(result.stdev, 0.0)

    def test_dict_round_trip(self) -> None:
        result = make_result([0.001, 0.002, 0.0015], iterations_per_sample=1000)
        self.assertEqual(BenchmarkResult.from_dict(result.to_dict()), result)

    def test_from_dict_missing_iterations(self) -> None:
        result = BenchmarkResult.from_dict({"samples": [1.0]})
        self.assertEqual(result.iterations_per_sample, 0)


class TestSuite(unittest.TestCase):
    def test_order_is_registration_order(self) -> None:
        suite = make_suite({"zeta": [1.0], "alpha": [2.0], "mid": [3.0]})
        self.assertEqual(suite.names, ["zeta", "alpha", "mid"])
        self.assertEqual([b.name for b in suite], ["zeta", "alpha", "mid"])
        self.assertEqual(len(suite), 3)

    def test_lookup(self) -> None:
        suite = make_suite({"a": [1.0], "b": [2.0]})
        bench = suite.get("b")
        self.assertIsInstance(bench, Benchmark)
        self.assertEqual(bench.result.mean, 2.0)
        self.assertIsNone(suite.get("missing"))
        self.assertIn("a", suite)
        self.assertNotIn("c", suite)

    def test_duplicate_name_rejected(self) -> None:
        suite = make_suite({"a": [1.0]})
        with self.assertRaises(ValueError):
            suite.add("a", make_result([2.0]))
        self.assertEqual(suite.get("a").result.mean, 1.0)

    def test_benchmarks_is_a_copy(self) -> None:
        suite = make_suite({"a": [1.0]})
        suite.benchmarks.clear()
        self.assertEqual(len(suite), 1)

    def test_defaults(self) -> None:
        suite = Suite()
        self.assertEqual(suite.min_sample_duration, 0.5)
        self.assertEqual(suite.sample_count, 50)
        self.assertTrue(suite.python_version)

    def test_to_dict_layout(self) -> None:
        suite = make_suite({"a": [1.0, 2.0]})
        d = suite.to_dict()
        self.assertEqual(d["format_version"], FORMAT_VERSION)
        self.assertEqual(d["suite"]["name"], "Test Suite")
        self.assertEqual(
            d["benchmarks"],
            [{"name": "a", "iterations_per_sample": 1, "samples": [1.0, 2.0]}],
        )

    def test_dict_round_trip(self) -> None:
        suite = make_suite({"b": [1.0, 2.0], "a": [3.0, 4.0]})
        loaded = Suite.from_dict(suite.to_dict())
        self.assertEqual(loaded.names, ["b", "a"])
        self.assertEqual(loaded.get("a").result, suite.get("a").result)
        self.assertEqual(loaded.platform, "Linux-test")
        self.assertEqual(loaded.start_time, suite.start_time)

    def test_from_dict_bad_version(self) -> None:
        data = make_suite({"a": [1.0]}).to_dict()
        data["format_version"] = 99
        with self.assertRaises(ValueError):
            Suite.from_dict(data)

    def test_from_dict_malformed(self) -> None:
        with self.assertRaises(ValueError):
            Suite.from_dict({"format_version": FORMAT_VERSION, "suite": []})
        with self.assertRaises(ValueError):
            Suite.from_dict([1, 2, 3])  # type: ignore[arg-type]
        with self.assertRaises(ValueError):
            Suite.from_dict({"format_version": FORMAT_VERSION, "benchmarks": [{"name": "x"}]})
        with self.assertRaises(ValueError):
            Suite.from_dict(
                {
                    "format_version": FORMAT_VERSION,
                    "benchmarks": [{"name": "x", "samples": []}],
                }
            )


class TestSuiteIO(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmpdir = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_save_and_load(self) -> None:
        suite = make_suite({"fib": [0.5, 0.25], "sort": [1.0, 1.5]})
        path = self.tmpdir / "nested" / "run.json"
        save_suite(path, suite)
        self.assertTrue(path.exists())
        loaded = load_suite(path)
        self.assertEqual(loaded.names, ["fib", "sort"])
        self.assertEqual(loaded.get("fib").result.samples, (0.5, 0.25))

    def test_save_leaves_no_temp_files(self) -> None:
        path = self.tmpdir / "run.json"
        save_suite(path, make_suite({"a": [1.0]}))
        self.assertEqual([p.name for p in self.tmpdir.iterdir()], ["run.json"])

    def test_saved_file_is_json(self) -> None:
        path = self.tmpdir / "run.json"
        save_suite(path, make_suite({"a": [1.0]}))
        data = json.loads(path.read_text(encoding="utf-8"))
        self.assertEqual(data["benchmarks"][0]["name"], "a")

    def test_load_missing(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_suite(self.tmpdir / "nope.json")

    def test_load_invalid_json(self) -> None:
        path = self.tmpdir / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(ValueError):
            load_suite(path)

    def test_load_non_mapping_metadata(self) -> None:
        path = self.tmpdir / "meta.json"
        path.write_text(
            json.dumps({"format_version": FORMAT_VERSION, "suite": [], "benchmarks": []}),
            encoding="utf-8",
        )
        with self.assertRaises(ValueError):
            load_suite(path)

    def test_load_wrong_version(self) -> None:
        path = self.tmpdir / "old.json"
        path.write_text(json.dumps({"format_version": 0}), encoding="utf-8")
        with self.assertRaises(ValueError):
            load_suite(path)


if __name__ == "__main__":
    unittest.main()
