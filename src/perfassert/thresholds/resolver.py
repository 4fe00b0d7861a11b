"""Threshold resolution -- builds the effective configs used for assertion.

Stages run in a fixed order, each returning a new ``ThresholdConfigs``:

1. default grouping, when the config declares no benchmark mapping;
2. command-line overrides, which always win over the config file;
3. a reference check, so no benchmark points at an undefined group.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import TYPE_CHECKING

from perfassert.config import GLOBAL_GROUP
from perfassert.domain.models import Threshold, ThresholdConfigs
from perfassert.errors import OverrideValidationError, ThresholdConfigError
from perfassert.thresholds.loader import derive_default_grouping

if TYPE_CHECKING:
    from collections.abc import Sequence

    from perfassert.domain.models import BenchmarkRecord

logger = logging.getLogger("perfassert.thresholds")


def has_overrides(
    max_ns: float | None,
    max_bytes: int | None,
    max_allocs: int | None,
) -> bool:
    """Return True if any budget was supplied on the command line."""
    return max_ns is not None or max_bytes is not None or max_allocs is not None


def apply_command_line_overrides(
    configs: ThresholdConfigs,
    max_ns: float | None,
    max_bytes: int | None,
    max_allocs: int | None,
) -> ThresholdConfigs:
    """Merge command-line budgets into *configs*.

    When the config already declares thresholds, each supplied value is
    broadcast into every group, replacing only that field. All values are
    validated before anything is applied. When no thresholds exist, a
    single ``global`` group is created from the values as given.

    Args:
        configs: Configs loaded from file (possibly empty).
        max_ns: ns/op budget, or None when not supplied.
        max_bytes: B/op budget, or None when not supplied.
        max_allocs: allocs/op budget, or None when not supplied.

    Returns:
        A new ``ThresholdConfigs``; *configs* is left unchanged.

    Raises:
        OverrideValidationError: If a supplied value is not finite, or is
            negative and the config declares thresholds to broadcast into.
    """
    overrides = (
        ("maxns", "max_ns_per_op", max_ns),
        ("maxbytes", "max_bytes_per_op", max_bytes),
        ("maxallocs", "max_allocs_per_op", max_allocs),
    )
    for flag, _, value in overrides:
        if value is not None and not math.isfinite(value):
            msg = f"{flag} must be a finite number, got {value}"
            raise OverrideValidationError(msg)

    resolved = configs.copy()

    if not resolved.thresholds:
        # No sign check when synthesizing the global group.
        resolved.thresholds[GLOBAL_GROUP] = Threshold(
            max_ns_per_op=max_ns,
            max_bytes_per_op=max_bytes,
            max_allocs_per_op=max_allocs,
        )
        logger.info("Created %r thresholds from command line", GLOBAL_GROUP)
        return resolved

    changes: dict[str, float | int] = {}
    for flag, field, value in overrides:
        if value is None:
            continue
        if value < 0:
            msg = f"{flag} must be a non-negative number, got {value}"
            raise OverrideValidationError(msg)
        changes[field] = value

    for group, threshold in resolved.thresholds.items():
        resolved.thresholds[group] = dataclasses.replace(threshold, **changes)

    logger.info(
        "Applied command-line overrides %s to %d group(s)",
        changes,
        len(resolved.thresholds),
    )
    return resolved


def check_group_references(configs: ThresholdConfigs) -> None:
    """Ensure every mapped benchmark's group has a threshold.

    Raises:
        ThresholdConfigError: Naming the first benchmark (in mapping order)
            whose group is undefined.
    """
    missing = configs.missing_groups()
    if not missing:
        return

    name, group = next(iter(missing.items()))
    if not configs.thresholds:
        msg = (
            f"no thresholds configured for benchmark {name} (group {group!r}); "
            "pass --config or one of --maxns/--maxbytes/--maxallocs"
        )
    else:
        defined = ", ".join(sorted(configs.thresholds))
        msg = (
            f"benchmark {name} is assigned to group {group!r}, "
            f"which has no thresholds (defined groups: {defined})"
        )
    raise ThresholdConfigError(msg)


def resolve(
    configs: ThresholdConfigs,
    records: Sequence[BenchmarkRecord],
    max_ns: float | None = None,
    max_bytes: int | None = None,
    max_allocs: int | None = None,
) -> ThresholdConfigs:
    """Produce the effective configs for *records*.

    Raises:
        OverrideValidationError: If a broadcast override is negative.
        ThresholdConfigError: If a benchmark maps to an undefined group.
    """
    effective = configs
    if not effective.benchmarks:
        effective = derive_default_grouping(effective, records)

    if has_overrides(max_ns, max_bytes, max_allocs):
        effective = apply_command_line_overrides(effective, max_ns, max_bytes, max_allocs)

    check_group_references(effective)

    checked = sum(1 for r in records if effective.group_for(r.name) is not None)
    if records and not checked:
        logger.warning("No benchmark in the report is mapped to a threshold group")
    return effective
