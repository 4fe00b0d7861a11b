"""Shared pytest fixtures for perfassert tests.

Provides factory fixtures for the domain models, a fake benchmark runner,
and sample runner output in the shape ``go test -bench`` prints.
"""

from __future__ import annotations

from typing import Any

import pytest

from perfassert.domain.models import (
    BenchmarkRecord,
    RunnerOutput,
    Threshold,
    ThresholdConfigs,
)

SAMPLE_OUTPUT = """\
goos: linux
goarch: amd64
pkg: example.com/db
cpu: Intel(R) Core(TM) i7-8550U CPU @ 1.80GHz
BenchmarkInsert-8   	  500000	      2415 ns/op	     312 B/op	       6 allocs/op
BenchmarkQuery-8    	 1000000	      1052.5 ns/op	      64 B/op	       2 allocs/op
BenchmarkParse/size=1KB-8 	  200000	      8123 ns/op	  126.06 MB/s	    1024 B/op	      12 allocs/op
PASS
ok  	example.com/db	4.512s
"""


# ---------------------------------------------------------------------------
# Fake runner
# ---------------------------------------------------------------------------


class FakeRunner:
    """BenchmarkRunner that returns canned output and records its calls."""

    def __init__(self, output: str = SAMPLE_OUTPUT, exit_code: int = 0) -> None:
        self.output = output
        self.exit_code = exit_code
        self.calls: list[tuple[str, list[str]]] = []

    def run(self, pattern: str, flags: list[str]) -> RunnerOutput:
        self.calls.append((pattern, flags))
        return RunnerOutput(
            output=self.output,
            exit_code=self.exit_code,
            passed=self.exit_code == 0,
        )


@pytest.fixture()
def sample_output() -> str:
    return SAMPLE_OUTPUT


@pytest.fixture()
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture()
def make_runner() -> _RunnerFactory:
    """Factory for FakeRunner with custom output or exit code."""

    def _factory(output: str = SAMPLE_OUTPUT, exit_code: int = 0) -> FakeRunner:
        return FakeRunner(output, exit_code)

    return _factory


_RunnerFactory = Any  # callable[..., FakeRunner]


# ---------------------------------------------------------------------------
# Model factories
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_record() -> _RecordFactory:
    """Factory for BenchmarkRecord with sensible defaults."""

    def _factory(
        name: str = "BenchmarkX",
        *,
        cores: int = 8,
        total_ops: int = 1000,
        ns_per_op: float = 120.0,
        bytes_per_op: int = 64,
        allocs_per_op: int = 2,
    ) -> BenchmarkRecord:
        return BenchmarkRecord(
            name=name,
            cores=cores,
            total_ops=total_ops,
            ns_per_op=ns_per_op,
            bytes_per_op=bytes_per_op,
            allocs_per_op=allocs_per_op,
        )

    return _factory


_RecordFactory = Any  # callable[..., BenchmarkRecord]


@pytest.fixture()
def make_configs() -> _ConfigsFactory:
    """Factory for ThresholdConfigs.

    ``thresholds`` values may be Threshold instances or
    ``(ns, bytes, allocs)`` tuples.
    """

    def _factory(
        thresholds: dict[str, Any] | None = None,
        benchmarks: dict[str, str] | None = None,
    ) -> ThresholdConfigs:
        resolved: dict[str, Threshold] = {}
        for group, value in (thresholds or {}).items():
            resolved[group] = value if isinstance(value, Threshold) else Threshold(*value)
        return ThresholdConfigs(thresholds=resolved, benchmarks=dict(benchmarks or {}))

    return _factory


_ConfigsFactory = Any  # callable[..., ThresholdConfigs]
