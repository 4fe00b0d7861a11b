"""Benchmark report parser -- recovers typed records from runner output.

The runner interleaves build and log noise with result lines such as::

    BenchmarkFoo-8    1000000    1052 ns/op    16 B/op    1 allocs/op

A single pass of one compiled pattern over the whole text extracts every
result line in document order. Lines that do not match are ignored.
"""

from __future__ import annotations

import logging
import re

from perfassert.domain.models import BenchmarkRecord
from perfassert.errors import ReportDecodeError

logger = logging.getLogger("perfassert.report")

# ---------------------------------------------------------------------------
# Result-line grammar
# ---------------------------------------------------------------------------

# Fields are separated by spaces/tabs only, so a match never spans lines.
# The name is lazy: the first "-<digits>" followed by whitespace and the
# iteration count ends it, which keeps sub-benchmark names such as
# "BenchmarkParse/size=1-KB-8" intact. MB/s appears when the benchmark calls
# b.SetBytes; B/op and allocs/op only with -benchmem. Custom units from
# b.ReportMetric sit between the two and are skipped.
_RESULT_LINE = re.compile(
    r"(?<!\S)(?P<name>\w\S*?)-(?P<cores>\d+)[ \t]+"
    r"(?P<total_ops>\d+)[ \t]+"
    r"(?P<ns_per_op>\d+(?:\.\d+)?)[ \t]+ns/op"
    r"(?:[ \t]+(?P<mb_per_sec>\d+(?:\.\d+)?)[ \t]+MB/s)?"
    r"(?:[ \t]+-?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?[ \t]+(?!(?:B|allocs)/op(?!\S))\S+/\S+)*"
    r"(?:[ \t]+(?P<bytes_per_op>\d+)[ \t]+B/op"
    r"[ \t]+(?P<allocs_per_op>\d+)[ \t]+allocs/op)?"
)


def _to_int(raw: str | None, field: str) -> int:
    if raw is None:
        return 0
    try:
        return int(raw)
    except ValueError:
        logger.debug("Could not decode %s=%r, using 0", field, raw)
        return 0


def _to_float(raw: str | None, field: str) -> float:
    if raw is None:
        return 0.0
    try:
        return float(raw)
    except ValueError:
        logger.debug("Could not decode %s=%r, using 0.0", field, raw)
        return 0.0


def parse(raw_text: str | bytes) -> list[BenchmarkRecord]:
    """Parse runner output into benchmark records.

    Args:
        raw_text: Combined stdout/stderr of one runner invocation. Bytes
            are decoded as UTF-8 with replacement characters.

    Returns:
        One record per result line, in order of appearance. Empty when no
        line matches; that is not an error.

    Raises:
        ReportDecodeError: If *raw_text* is not text and cannot be scanned.
    """
    if isinstance(raw_text, bytes):
        raw_text = raw_text.decode("utf-8", errors="replace")
    if not isinstance(raw_text, str):
        msg = f"cannot scan benchmark report of type {type(raw_text).__name__}"
        raise ReportDecodeError(msg)

    records: list[BenchmarkRecord] = []
    for match in _RESULT_LINE.finditer(raw_text):
        records.append(
            BenchmarkRecord(
                name=match["name"],
                cores=_to_int(match["cores"], "cores"),
                total_ops=_to_int(match["total_ops"], "total_ops"),
                ns_per_op=_to_float(match["ns_per_op"], "ns_per_op"),
                bytes_per_op=_to_int(match["bytes_per_op"], "bytes_per_op"),
                allocs_per_op=_to_int(match["allocs_per_op"], "allocs_per_op"),
                mb_per_sec=_to_float(match["mb_per_sec"], "mb_per_sec"),
            )
        )

    logger.debug("Parsed %d benchmark records", len(records))
    return records
