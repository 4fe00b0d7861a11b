#!/usr/bin/env python3
"""
perfassert CLI -- run Go benchmarks and fail when a budget is exceeded.

Usage:
  perfassert --bench PATTERN [--benchmem] [--benchtime T] [--count N]
             [--config FILE] [--maxns F] [--maxbytes N] [--maxallocs N]
             [--all-violations] [--dir DIR] [--go BIN] [--pkg PKG ...]
             [--plain] [--verbose | --quiet]

Exit status is 0 when every checked benchmark is within budget, 1 on any
gate error, and 2 on usage errors.
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from perfassert.adapters.go_bench import GoBenchRunner
from perfassert.config import DEFAULT_PACKAGES, GO_BINARY, LOG_FORMAT
from perfassert.console import configure, console
from perfassert.errors import PerfAssertError, ThresholdViolationError
from perfassert.pipeline import GateOptions, run_gate

if TYPE_CHECKING:
    from collections.abc import Sequence

    from perfassert.domain.models import BenchmarkRecord, ThresholdConfigs, Violation

logger = logging.getLogger("perfassert")

_PATTERN_HELP = (
    "you must provide a benchmark pattern to --bench "
    "(e.g.: --bench ., --bench BenchmarkDBInsert, --bench 'BenchmarkDB*')"
)

# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _fmt(value: float | int | None) -> str:
    return "-" if value is None else str(value)


def _status(
    record: BenchmarkRecord,
    configs: ThresholdConfigs,
    violations: Sequence[Violation],
    *,
    checked: bool = True,
) -> str:
    if configs.group_for(record.name) is None:
        return "skip"
    if not checked:
        return "not checked"
    for v in violations:
        if v.benchmark == record.name and v.observed == record.value(v.metric):
            return f"FAIL ({v.metric.value})"
    return "ok"


def _mapped(records: Sequence[BenchmarkRecord], configs: ThresholdConfigs | None) -> int:
    if configs is None:
        return 0
    return sum(1 for r in records if configs.group_for(r.name) is not None)


def render_results(
    records: Sequence[BenchmarkRecord],
    configs: ThresholdConfigs,
    violations: Sequence[Violation] = (),
    scanned: int | None = None,
) -> None:
    """Print one row per record plus the effective thresholds.

    Records at or past index *scanned* were not reached by assertion and
    are marked as not checked.
    """
    if scanned is None:
        scanned = len(records)
    if not records:
        console.warning("No benchmark results found in the runner output")
        return

    rows = [
        [
            r.name,
            str(r.cores),
            str(r.total_ops),
            _fmt(r.ns_per_op),
            _fmt(r.bytes_per_op),
            _fmt(r.allocs_per_op),
            configs.group_for(r.name) or "-",
            _status(r, configs, violations, checked=i < scanned),
        ]
        for i, r in enumerate(records)
    ]
    console.table(
        ["Benchmark", "Cores", "Ops", "ns/op", "B/op", "allocs/op", "Group", "Status"],
        rows,
        title="Results",
    )

    if configs.thresholds:
        console.table(
            ["Group", "max ns/op", "max B/op", "max allocs/op"],
            [
                [
                    name,
                    _fmt(t.max_ns_per_op),
                    _fmt(t.max_bytes_per_op),
                    _fmt(t.max_allocs_per_op),
                ]
                for name, t in configs.thresholds.items()
            ],
            title="Thresholds",
        )


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _finite_float(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        msg = f"must be a number, got {raw!r}"
        raise argparse.ArgumentTypeError(msg) from None
    if not math.isfinite(value):
        msg = f"must be a finite number, got {raw!r}"
        raise argparse.ArgumentTypeError(msg)
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="perfassert",
        description="perfassert -- performance-regression gate for Go benchmarks",
    )

    # go benchmark flags
    bench = parser.add_argument_group("benchmark runner")
    bench.add_argument("--bench", default="", help="pattern to pass to 'go test -bench'")
    bench.add_argument(
        "--benchmem", action="store_true", help="enable memory allocation statistics"
    )
    bench.add_argument(
        "--benchtime",
        default="",
        help="run enough iterations of each benchmark to take t (default: 1s)",
    )
    bench.add_argument(
        "--count", type=int, default=0, help="run each benchmark n times (default: 1)"
    )
    bench.add_argument("--dir", type=Path, default=None, help="directory to run go test in")
    bench.add_argument("--go", default=GO_BINARY, help=f"go executable (default: {GO_BINARY})")
    bench.add_argument(
        "--pkg",
        action="append",
        default=None,
        help="package pattern to benchmark; repeatable (default: .)",
    )

    # threshold flags
    limits = parser.add_argument_group("thresholds")
    limits.add_argument("--config", type=Path, default=None, help="path to the config file")
    limits.add_argument("--maxns", type=_finite_float, default=None, help="threshold for ns/op")
    limits.add_argument("--maxbytes", type=int, default=None, help="threshold for B/op")
    limits.add_argument("--maxallocs", type=int, default=None, help="threshold for allocs/op")
    limits.add_argument(
        "--all-violations",
        action="store_true",
        help="report every violating benchmark instead of stopping at the first",
    )

    # output flags
    out = parser.add_argument_group("output")
    out.add_argument("--plain", action="store_true", help="disable colour output")
    verbosity = out.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", action="store_true", help="enable debug logging")
    verbosity.add_argument(
        "--quiet", action="store_true", help="only log warnings and errors"
    )
    return parser


def _options(args: argparse.Namespace) -> GateOptions:
    return GateOptions(
        pattern=args.bench,
        benchmem=args.benchmem,
        benchtime=args.benchtime,
        count=args.count,
        config_path=args.config,
        max_ns=args.maxns,
        max_bytes=args.maxbytes,
        max_allocs=args.maxallocs,
        fail_fast=not args.all_violations,
    )


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.bench:
        parser.error(_PATTERN_HELP)
    if args.count < 0:
        parser.error("--count must not be negative")

    # -- Console configuration ----------------------------------------------
    configure(backend="plain" if args.plain else "auto")

    # -- Logging configuration (stderr) -------------------------------------
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(stream=sys.stderr, format=LOG_FORMAT, level=level)

    runner = GoBenchRunner(
        args.dir,
        go_binary=args.go,
        packages=args.pkg or DEFAULT_PACKAGES,
    )

    console.info("Running benchmarks...")
    try:
        result = run_gate(_options(args), runner)
    except ThresholdViolationError as exc:
        if exc.configs is not None:
            render_results(exc.records, exc.configs, exc.violations, exc.scanned)
        for violation in exc.violations:
            console.error(str(violation))
        console.verdict(
            passed=False,
            checked=_mapped(exc.records[: exc.scanned], exc.configs),
            violations=len(exc.violations),
        )
        sys.exit(1)
    except PerfAssertError as exc:
        logger.debug("Gate aborted", exc_info=True)
        console.error(str(exc))
        sys.exit(1)

    render_results(result.records, result.configs)
    console.success("Threshold checks passed. Exiting perfassert...")
    console.verdict(passed=True, checked=len(result.checked), violations=0)


if __name__ == "__main__":
    main()
