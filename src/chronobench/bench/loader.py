"""Discovery of benchmarks in a user script.

A benchmark script declares its operations in one of two ways:

- a ``BENCHMARKS`` sequence of ``(name, callable)`` pairs, or
- top-level functions named ``bench_<name>``, taken in definition order.

Discovery never reorders: the suite reports benchmarks in the order the
script lists them.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Callable

log = logging.getLogger("chronobench")

BENCH_PREFIX = "bench_"

NamedOperation = tuple[str, Callable[[], object]]


def load_script(path: Path) -> ModuleType:
    """Import the Python file at *path* as a fresh module.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file cannot be loaded as a Python module.
    """
    if not path.exists():
        raise FileNotFoundError(f"Benchmark script not found: {path}")

    module_name = f"chronobench_script_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Cannot load {path} as a Python module.")

    module = importlib.util.module_from_spec(spec)
    # Scripts may import siblings next to them.
    script_dir = str(path.resolve().parent)
    added = script_dir not in sys.path
    if added:
        sys.path.insert(0, script_dir)
    # dataclasses and typing resolve the module through sys.modules.
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except SyntaxError as exc:
        sys.modules.pop(module_name, None)
        raise ValueError(f"Syntax error in {path}: {exc}") from exc
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    finally:
        if added:
            sys.path.remove(script_dir)
    log.debug("Loaded benchmark script %s", path)
    return module


def discover_benchmarks(module: ModuleType) -> list[NamedOperation]:
    """Return the ``(name, operation)`` pairs *module* declares."""
    declared = getattr(module, "BENCHMARKS", None)
    if declared is not None:
        pairs: list[NamedOperation] = []
        for entry in declared:
            try:
                name, operation = entry
            except (TypeError, ValueError) as exc:
                raise ValueError(
                    f"BENCHMARKS entries must be (name, callable) pairs, got {entry!r}"
                ) from exc
            if not callable(operation):
                raise ValueError(f"Benchmark '{name}' is not callable.")
            pairs.append((str(name), operation))
        return pairs

    # Module dicts preserve definition order.
    pairs = []
    for attr, value in vars(module).items():
        if not attr.startswith(BENCH_PREFIX) or not inspect.isfunction(value):
            continue
        if value.__module__ != module.__name__:
            continue
        pairs.append((attr[len(BENCH_PREFIX) :], value))
    return pairs


def select_benchmarks(
    benchmarks: list[NamedOperation],
    names: list[str] | None,
) -> list[NamedOperation]:
    """Keep only benchmarks named in *names*, preserving script order.

    Raises:
        ValueError: If a requested name is not defined by the script.
    """
    if not names:
        return list(benchmarks)
    available = {name for name, _ in benchmarks}
    missing = [n for n in names if n not in available]
    if missing:
        raise ValueError(
            f"Unknown benchmark(s): {', '.join(missing)}. "
            f"Available: {', '.join(sorted(available)) or 'none'}"
        )
    wanted = set(names)
    return [(name, op) for name, op in benchmarks if name in wanted]


def load_benchmarks(path: Path, names: list[str] | None = None) -> list[NamedOperation]:
    """Load *path* and return its (optionally filtered) benchmarks."""
    found = discover_benchmarks(load_script(path))
    if not found:
        raise ValueError(
            f"No benchmarks found in {path}. Define BENCHMARKS or functions named bench_*."
        )
    return select_benchmarks(found, names)
