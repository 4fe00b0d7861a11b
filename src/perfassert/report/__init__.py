"""Benchmark report parsing."""

from perfassert.report.parser import parse

__all__ = ["parse"]
