"""
perfassert/pipeline.py — The gate run, start to finish.

Stages, in order:
  run benchmarks -> parse report -> load config -> resolve thresholds -> assert

The first error stops the run; nothing is retried or downgraded. The
threshold configs flow through the stages as values: each stage returns
a new ``ThresholdConfigs`` rather than mutating a shared one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from perfassert.config import OUTPUT_TAIL_CHARS
from perfassert.domain.models import BenchmarkRecord, ThresholdConfigs
from perfassert.errors import RunnerError
from perfassert.report.parser import parse
from perfassert.thresholds.assertion import assert_thresholds
from perfassert.thresholds.loader import load_file
from perfassert.thresholds.resolver import resolve

if TYPE_CHECKING:
    from pathlib import Path

    from perfassert.domain.protocols import BenchmarkRunner

logger = logging.getLogger("perfassert")


@dataclass(frozen=True)
class GateOptions:
    """Everything the gate needs from the command line."""

    pattern: str
    benchmem: bool = False
    benchtime: str = ""
    count: int = 0
    config_path: Path | None = None
    max_ns: float | None = None
    max_bytes: int | None = None
    max_allocs: int | None = None
    fail_fast: bool = True


@dataclass(frozen=True)
class GateResult:
    """Outcome of a passing gate run."""

    records: tuple[BenchmarkRecord, ...]
    configs: ThresholdConfigs
    checked: tuple[str, ...] = ()


def bench_flags(options: GateOptions) -> list[str]:
    """Build the runner flags requested by *options*."""
    flags: list[str] = []
    if options.benchmem:
        flags.append("-benchmem")
    if options.benchtime:
        flags.extend(["-benchtime", options.benchtime])
    if options.count > 0:
        flags.extend(["-count", str(options.count)])
    return flags


def run_gate(options: GateOptions, runner: BenchmarkRunner) -> GateResult:
    """Run the benchmarks and assert them against their budgets.

    Args:
        options: Pattern, runner flags, config path and overrides.
        runner: Executes the benchmark harness.

    Returns:
        A GateResult when every checked benchmark is within budget.

    Raises:
        RunnerError: The runner failed or exited non-zero.
        ReportDecodeError: The report could not be scanned.
        ConfigDecodeError: The config file could not be read or decoded.
        OverrideValidationError: A broadcast override was negative.
        ThresholdConfigError: A benchmark maps to an undefined group.
        ThresholdViolationError: A benchmark exceeded its budget; carries
            the effective configs and the records.
    """
    if not options.pattern:
        msg = "a benchmark pattern is required (e.g. '.', 'BenchmarkDBInsert', 'BenchmarkDB*')"
        raise RunnerError(msg)

    # Stage 1: run
    run = runner.run(options.pattern, bench_flags(options))
    logger.info("Benchmark output:\n%s", run.output)
    if not run.passed:
        tail = run.output[-OUTPUT_TAIL_CHARS:].strip()
        msg = f"error running benchmarks: exit status {run.exit_code}"
        if tail:
            msg = f"{msg}\n{tail}"
        raise RunnerError(msg)

    # Stage 2: parse
    records = parse(run.output)
    logger.info("Parsed %d benchmark result(s)", len(records))

    # Stage 3: config
    configs = load_file(options.config_path) if options.config_path else ThresholdConfigs()

    # Stage 4: resolve
    effective = resolve(
        configs,
        records,
        max_ns=options.max_ns,
        max_bytes=options.max_bytes,
        max_allocs=options.max_allocs,
    )

    # Stage 5: assert
    assert_thresholds(effective, records, fail_fast=options.fail_fast)

    checked = tuple(r.name for r in records if effective.group_for(r.name) is not None)
    logger.info("Threshold checks passed for %d benchmark result(s)", len(checked))
    return GateResult(
        records=tuple(records),
        configs=effective,
        checked=checked,
    )
