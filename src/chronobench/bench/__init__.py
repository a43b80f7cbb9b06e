"""Benchmarking subsystem for chronobench.

Calibrates and samples zero-argument operations in-process, keeps the
timings in ordered suites, and statistically compares a suite against
an earlier one.
"""
