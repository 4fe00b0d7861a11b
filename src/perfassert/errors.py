"""Exception types raised by perfassert.

Every error the gate can stop on derives from ``PerfAssertError`` so the
CLI can turn any of them into a non-zero exit with a readable message.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from perfassert.domain.models import BenchmarkRecord, ThresholdConfigs, Violation


class PerfAssertError(Exception):
    """Base class for all gate failures."""


class RunnerError(PerfAssertError):
    """Raised when the benchmark runner cannot be started or exits abnormally."""


class ReportDecodeError(PerfAssertError):
    """Raised when the runner report cannot be scanned at all."""


class ConfigDecodeError(PerfAssertError):
    """Raised when a threshold config file does not have the expected shape."""


class OverrideValidationError(PerfAssertError):
    """Raised when a command-line budget override is negative."""


class ThresholdConfigError(PerfAssertError):
    """Raised when a benchmark is mapped to a group that has no threshold."""


class ThresholdViolationError(PerfAssertError):
    """Raised when one or more benchmarks exceed their budget.

    Carries the violations, the effective configs and the records in report
    order. ``scanned`` is how many leading records were examined before
    assertion stopped; it equals ``len(records)`` unless checking stopped
    early at the first violation.
    """

    def __init__(
        self,
        violations: list[Violation],
        configs: ThresholdConfigs | None = None,
        records: tuple[BenchmarkRecord, ...] = (),
        *,
        scanned: int | None = None,
    ) -> None:
        self.violations = violations
        self.configs = configs
        self.records = records
        self.scanned = len(records) if scanned is None else scanned
        if len(violations) == 1:
            message = str(violations[0])
        else:
            lines = [f"{len(violations)} benchmarks exceeded their thresholds:"]
            lines.extend(f"  - {v}" for v in violations)
            message = "\n".join(lines)
        super().__init__(message)
