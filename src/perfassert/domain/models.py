"""Core data types for perfassert.

Records and thresholds are dataclasses with complete type annotations.
This module has ZERO imports from outside the Python standard library.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Metric(Enum):
    """A per-operation cost reported by the benchmark runner."""

    NS_PER_OP = "ns/op"
    BYTES_PER_OP = "B/op"
    ALLOCS_PER_OP = "allocs/op"


# Comparison order used by the assertion engine
METRIC_ORDER: tuple[Metric, ...] = (
    Metric.NS_PER_OP,
    Metric.BYTES_PER_OP,
    Metric.ALLOCS_PER_OP,
)


# ---------------------------------------------------------------------------
# Runner output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RunnerOutput:
    """Combined stdout/stderr of one benchmark-runner invocation."""

    output: str
    exit_code: int
    passed: bool


@dataclass(frozen=True)
class BenchmarkRecord:
    """One parsed result line of a benchmark report."""

    name: str
    cores: int
    total_ops: int
    ns_per_op: float
    bytes_per_op: int = 0
    allocs_per_op: int = 0
    mb_per_sec: float = 0.0

    def value(self, metric: Metric) -> float | int:
        """Return the measured value for *metric*."""
        if metric is Metric.NS_PER_OP:
            return self.ns_per_op
        if metric is Metric.BYTES_PER_OP:
            return self.bytes_per_op
        return self.allocs_per_op


# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Threshold:
    """Budget for one group of benchmarks.

    ``None`` means the metric has no budget and is not checked. Zero is a
    real budget: the metric must measure exactly 0.
    """

    max_ns_per_op: float | None = None
    max_bytes_per_op: int | None = None
    max_allocs_per_op: int | None = None

    def limit(self, metric: Metric) -> float | int | None:
        """Return the budget for *metric*, or None when unbudgeted."""
        if metric is Metric.NS_PER_OP:
            return self.max_ns_per_op
        if metric is Metric.BYTES_PER_OP:
            return self.max_bytes_per_op
        return self.max_allocs_per_op


@dataclass
class ThresholdConfigs:
    """Budgets per group plus the benchmark -> group mapping.

    A benchmark absent from ``benchmarks`` is exempt from assertion.
    """

    thresholds: dict[str, Threshold] = field(default_factory=lambda: dict[str, Threshold]())
    benchmarks: dict[str, str] = field(default_factory=lambda: dict[str, str]())

    def group_for(self, benchmark: str) -> str | None:
        """Return the group *benchmark* is assigned to, if any."""
        return self.benchmarks.get(benchmark) or None

    def threshold_for(self, benchmark: str) -> Threshold | None:
        """Return the threshold of *benchmark*'s group.

        Returns None when the benchmark is unmapped or its group has no
        threshold; ``missing_groups`` tells the two apart.
        """
        group = self.group_for(benchmark)
        if group is None:
            return None
        return self.thresholds.get(group)

    def missing_groups(self) -> dict[str, str]:
        """Return benchmark -> group pairs whose group has no threshold."""
        return {
            name: group
            for name, group in self.benchmarks.items()
            if group and group not in self.thresholds
        }

    def copy(self) -> ThresholdConfigs:
        """Return an independent copy (Threshold values are immutable)."""
        return ThresholdConfigs(
            thresholds=dict(self.thresholds),
            benchmarks=dict(self.benchmarks),
        )


# ---------------------------------------------------------------------------
# Assertion results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Violation:
    """A benchmark metric that exceeded its group's budget."""

    benchmark: str
    group: str
    metric: Metric
    observed: float | int
    threshold: float | int

    def __str__(self) -> str:
        return (
            f"benchmark {self.benchmark} exceeded {self.metric.value} threshold: "
            f"got {self.observed}, wanted <= {self.threshold} (group {self.group!r})"
        )
