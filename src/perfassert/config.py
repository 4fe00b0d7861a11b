"""
perfassert/config.py — Constants shared by the gate pipeline.

Runner defaults, the config file format table, and output settings live
here. Other modules import from this file rather than hard-coding values.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Threshold groups
# ---------------------------------------------------------------------------

# Group assigned to every benchmark when the config declares no mapping
GLOBAL_GROUP = "global"

# ---------------------------------------------------------------------------
# Config file formats
# ---------------------------------------------------------------------------

YAML_FORMAT = "yaml"
JSON_FORMAT = "json"

# File extension -> format hint passed to the loader
CONFIG_FORMATS = {
    ".yaml": YAML_FORMAT,
    ".yml": YAML_FORMAT,
    ".json": JSON_FORMAT,
}

# ---------------------------------------------------------------------------
# Benchmark runner
# ---------------------------------------------------------------------------

GO_BINARY = "go"

# Packages passed to `go test`; "." is the package in the working directory
DEFAULT_PACKAGES = (".",)

# How much of the runner output to keep in a RunnerError message
OUTPUT_TAIL_CHARS = 2000

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
