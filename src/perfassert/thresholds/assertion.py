"""Assertion engine -- checks benchmark records against resolved budgets.

Records are checked in report order and metrics in the fixed order
ns/op, B/op, allocs/op. Benchmarks without a group mapping are skipped:
assertion is opt-in per benchmark.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from perfassert.domain.models import METRIC_ORDER, Violation
from perfassert.errors import ThresholdConfigError, ThresholdViolationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from perfassert.domain.models import BenchmarkRecord, ThresholdConfigs

logger = logging.getLogger("perfassert.assertion")

__all__ = ["Violation", "assert_thresholds", "check_record", "find_violations"]


def check_record(record: BenchmarkRecord, group: str, configs: ThresholdConfigs) -> Violation | None:
    """Return the first metric of *record* that exceeds *group*'s budget."""
    threshold = configs.thresholds.get(group)
    if threshold is None:
        msg = f"benchmark {record.name} is assigned to group {group!r}, which has no thresholds"
        raise ThresholdConfigError(msg)

    for metric in METRIC_ORDER:
        limit = threshold.limit(metric)
        if limit is None:
            continue
        observed = record.value(metric)
        if observed > limit:
            return Violation(
                benchmark=record.name,
                group=group,
                metric=metric,
                observed=observed,
                threshold=limit,
            )
    return None


def _scan(
    configs: ThresholdConfigs,
    records: Iterable[BenchmarkRecord],
    *,
    fail_fast: bool,
) -> tuple[list[Violation], int]:
    """Return the violations and how many records were examined."""
    violations: list[Violation] = []
    scanned = 0
    checked = 0
    for record in records:
        scanned += 1
        group = configs.group_for(record.name)
        if group is None:
            logger.debug("Skipping unmapped benchmark %s", record.name)
            continue

        checked += 1
        violation = check_record(record, group, configs)
        if violation is None:
            continue
        logger.info("Violation: %s", violation)
        violations.append(violation)
        if fail_fast:
            break

    logger.debug("Checked %d record(s), %d violation(s)", checked, len(violations))
    return violations, scanned


def find_violations(
    configs: ThresholdConfigs,
    records: Iterable[BenchmarkRecord],
    *,
    fail_fast: bool = True,
) -> list[Violation]:
    """Collect budget violations.

    Args:
        configs: Effective configs from the resolver.
        records: Parsed records, in report order.
        fail_fast: Stop at the first violation. Otherwise report the first
            violating metric of every record.

    Returns:
        Violations in record order; empty when everything passed.

    Raises:
        ThresholdConfigError: If a record's group has no threshold.
    """
    violations, _ = _scan(configs, records, fail_fast=fail_fast)
    return violations


def assert_thresholds(
    configs: ThresholdConfigs,
    records: Iterable[BenchmarkRecord],
    *,
    fail_fast: bool = True,
) -> None:
    """Raise if any checked record exceeds its budget.

    In fail-fast mode the error's ``scanned`` count marks where checking
    stopped; records past it were never compared against a budget.

    Raises:
        ThresholdViolationError: Carrying the violations, the configs and
            the records.
        ThresholdConfigError: If a record's group has no threshold.
    """
    in_order = tuple(records)
    violations, scanned = _scan(configs, in_order, fail_fast=fail_fast)
    if violations:
        raise ThresholdViolationError(violations, configs, in_order, scanned=scanned)
