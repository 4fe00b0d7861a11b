"""Threshold config loading via YAML or JSON.

The config file shape::

    thresholds:
      <group>:
        max_ns_per_op: <float>
        max_bytes_per_op: <int>
        max_allocs_per_op: <int>
    benchmarks:
      <benchmark>: <group>

JSON files use the same field names.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from perfassert.config import CONFIG_FORMATS, GLOBAL_GROUP, JSON_FORMAT, YAML_FORMAT
from perfassert.domain.models import Threshold, ThresholdConfigs
from perfassert.errors import ConfigDecodeError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from perfassert.domain.models import BenchmarkRecord

logger = logging.getLogger("perfassert.thresholds")

# ---------------------------------------------------------------------------
# Shape validation
# ---------------------------------------------------------------------------


def _budget(group: str, key: str, value: Any, *, integral: bool) -> float | int | None:
    """Validate one budget field; None means the metric is unbudgeted."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"thresholds.{group}.{key} must be a number, got {value!r}"
        raise ConfigDecodeError(msg)
    if not math.isfinite(value):
        msg = f"thresholds.{group}.{key} must be a finite number, got {value!r}"
        raise ConfigDecodeError(msg)
    if integral and not isinstance(value, int):
        msg = f"thresholds.{group}.{key} must be an integer, got {value!r}"
        raise ConfigDecodeError(msg)
    if value < 0:
        msg = f"thresholds.{group}.{key} must be a non-negative number, got {value!r}"
        raise ConfigDecodeError(msg)
    return value if integral else float(value)


def _int_budget(group: str, key: str, value: Any) -> int | None:
    budget = _budget(group, key, value, integral=True)
    return None if budget is None else int(budget)


def _threshold_from_dict(group: str, d: Any) -> Threshold:
    if d is None:
        return Threshold()
    if not isinstance(d, dict):
        msg = f"thresholds.{group} must be a mapping, got {type(d).__name__}"
        raise ConfigDecodeError(msg)
    return Threshold(
        max_ns_per_op=_budget(group, "max_ns_per_op", d.get("max_ns_per_op"), integral=False),
        max_bytes_per_op=_int_budget(group, "max_bytes_per_op", d.get("max_bytes_per_op")),
        max_allocs_per_op=_int_budget(group, "max_allocs_per_op", d.get("max_allocs_per_op")),
    )


def _section(d: dict[str, Any], name: str) -> dict[Any, Any]:
    value = d.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"'{name}' must be a mapping, got {type(value).__name__}"
        raise ConfigDecodeError(msg)
    return value


def _configs_from_dict(d: Any) -> ThresholdConfigs:
    if d is None:
        return ThresholdConfigs()
    if not isinstance(d, dict):
        msg = f"config must be a mapping at the top level, got {type(d).__name__}"
        raise ConfigDecodeError(msg)

    configs = ThresholdConfigs()
    for group, raw in _section(d, "thresholds").items():
        if not isinstance(group, str):
            msg = f"threshold group names must be strings, got {group!r}"
            raise ConfigDecodeError(msg)
        configs.thresholds[group] = _threshold_from_dict(group, raw)

    for name, group in _section(d, "benchmarks").items():
        # A null group leaves the benchmark listed but unmapped.
        if group is None:
            group = ""
        if not isinstance(name, str) or not isinstance(group, str):
            msg = f"benchmarks must map names to group names, got {name!r}: {group!r}"
            raise ConfigDecodeError(msg)
        configs.benchmarks[name] = group

    return configs


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_from_bytes(data: bytes, format_hint: str) -> ThresholdConfigs:
    """Decode threshold configs from raw bytes.

    Args:
        data: File contents.
        format_hint: ``"yaml"``/``"yml"`` or ``"json"`` (case-insensitive,
            a leading dot is ignored).

    Returns:
        The decoded configs. An unrecognised *format_hint* yields empty
        configs rather than an error; a warning is logged.

    Raises:
        ConfigDecodeError: If *data* does not fit the config shape.
    """
    hint = format_hint.lower().lstrip(".")
    hint = CONFIG_FORMATS.get(f".{hint}", hint)

    if hint == YAML_FORMAT:
        try:
            raw = yaml.safe_load(data)
        except yaml.YAMLError as exc:
            msg = f"error unmarshalling config file: {exc}"
            raise ConfigDecodeError(msg) from exc
    elif hint == JSON_FORMAT:
        try:
            raw = json.loads(data) if data.strip() else None
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            msg = f"error unmarshalling config file: {exc}"
            raise ConfigDecodeError(msg) from exc
    else:
        logger.warning("Unrecognised config format %r; no thresholds loaded", format_hint)
        return ThresholdConfigs()

    return _configs_from_dict(raw)


def load_file(path: Path | str) -> ThresholdConfigs:
    """Read a config file, choosing the decoder from its extension.

    Raises:
        ConfigDecodeError: If the file cannot be read or decoded.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        msg = f"error reading config file {path}: {exc}"
        raise ConfigDecodeError(msg) from exc

    configs = load_from_bytes(data, path.suffix)
    logger.info(
        "Loaded %d threshold group(s) and %d benchmark mapping(s) from %s",
        len(configs.thresholds),
        len(configs.benchmarks),
        path,
    )
    return configs


def derive_default_grouping(
    configs: ThresholdConfigs,
    records: Iterable[BenchmarkRecord],
) -> ThresholdConfigs:
    """Assign every unmapped benchmark in *records* to the global group.

    Existing assignments are kept. Returns a new ``ThresholdConfigs``;
    *configs* is not modified.
    """
    derived = configs.copy()
    for record in records:
        derived.benchmarks.setdefault(record.name, GLOBAL_GROUP)
    logger.debug("Default grouping covers %d benchmark(s)", len(derived.benchmarks))
    return derived
