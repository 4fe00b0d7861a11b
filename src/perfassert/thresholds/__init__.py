"""Threshold model loading, resolution, and assertion."""

from perfassert.thresholds.assertion import assert_thresholds, find_violations
from perfassert.thresholds.loader import derive_default_grouping, load_file, load_from_bytes
from perfassert.thresholds.resolver import apply_command_line_overrides, has_overrides, resolve

__all__ = [
    "apply_command_line_overrides",
    "assert_thresholds",
    "derive_default_grouping",
    "find_violations",
    "has_overrides",
    "load_file",
    "load_from_bytes",
    "resolve",
]
