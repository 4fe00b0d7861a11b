"""Tests for perfassert/report/parser.py — result-line extraction."""

from __future__ import annotations

import pytest

from perfassert.domain.models import BenchmarkRecord
from perfassert.errors import ReportDecodeError
from perfassert.report.parser import _to_float, _to_int, parse

# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def test_parses_every_result_line_in_order(sample_output: str) -> None:
    records = parse(sample_output)
    assert [r.name for r in records] == [
        "BenchmarkInsert",
        "BenchmarkQuery",
        "BenchmarkParse/size=1KB",
    ]


def test_decodes_all_numeric_fields(sample_output: str) -> None:
    insert, query, _ = parse(sample_output)
    assert insert == BenchmarkRecord(
        name="BenchmarkInsert",
        cores=8,
        total_ops=500000,
        ns_per_op=2415.0,
        bytes_per_op=312,
        allocs_per_op=6,
    )
    assert query.ns_per_op == 1052.5
    assert query.bytes_per_op == 64
    assert query.allocs_per_op == 2


def test_throughput_column_is_captured(sample_output: str) -> None:
    parsed = parse(sample_output)[2]
    assert parsed.mb_per_sec == 126.06
    assert parsed.bytes_per_op == 1024
    assert parsed.allocs_per_op == 12


def test_line_without_benchmem_columns() -> None:
    """Without -benchmem the memory fields are absent and read as zero."""
    (record,) = parse("BenchmarkFoo-4  1000  95.4 ns/op\n")
    assert record.name == "BenchmarkFoo"
    assert record.cores == 4
    assert record.total_ops == 1000
    assert record.ns_per_op == 95.4
    assert record.bytes_per_op == 0
    assert record.allocs_per_op == 0


def test_example_line() -> None:
    (record,) = parse("BenchmarkFoo-4  1000  95.4 ns/op  16 B/op  1 allocs/op\n")
    assert (record.cores, record.total_ops, record.ns_per_op) == (4, 1000, 95.4)
    assert (record.bytes_per_op, record.allocs_per_op) == (16, 1)


def test_custom_metrics_before_benchmem_columns() -> None:
    (record,) = parse("BenchmarkX-8\t100\t5.0 ns/op\t3.00 widgets/op\t4096 B/op\t9 allocs/op\n")
    assert record.ns_per_op == 5.0
    assert (record.bytes_per_op, record.allocs_per_op) == (4096, 9)


def test_throughput_and_several_custom_metrics() -> None:
    line = (
        "BenchmarkDecode-4  50  2100 ns/op  487.62 MB/s  0.5000 hit-ratio/op"
        "  12.00 p99-us/op  512 B/op  3 allocs/op\n"
    )
    (record,) = parse(line)
    assert record.mb_per_sec == 487.62
    assert (record.bytes_per_op, record.allocs_per_op) == (512, 3)


def test_custom_metric_without_benchmem() -> None:
    (record,) = parse("BenchmarkX-8  100  5.0 ns/op  3.00 widgets/op\nPASS\n")
    assert (record.bytes_per_op, record.allocs_per_op) == (0, 0)


def test_sub_benchmark_with_dashes_keeps_full_name() -> None:
    (record,) = parse("BenchmarkSort/n=10-20-16   300   4000 ns/op\n")
    assert record.name == "BenchmarkSort/n=10-20"
    assert record.cores == 16


def test_repeated_benchmark_yields_one_record_per_run() -> None:
    text = "BenchmarkA-2  10  5.0 ns/op\nBenchmarkA-2  10  6.0 ns/op\n"
    records = parse(text)
    assert [r.ns_per_op for r in records] == [5.0, 6.0]


def test_numeric_values_survive_rendering() -> None:
    lines = [
        ("BenchmarkA", 1, 1, 0.25, 0, 0),
        ("BenchmarkB", 16, 123456789, 98765.4321, 4096, 17),
    ]
    text = "\n".join(
        f"{n}-{c}\t{ops}\t{ns} ns/op\t{b} B/op\t{a} allocs/op" for n, c, ops, ns, b, a in lines
    )
    got = [
        (r.name, r.cores, r.total_ops, r.ns_per_op, r.bytes_per_op, r.allocs_per_op)
        for r in parse(text)
    ]
    assert got == lines


# ---------------------------------------------------------------------------
# Noise and empty input
# ---------------------------------------------------------------------------


def test_no_matching_lines_yields_empty_list() -> None:
    assert parse("PASS\nok  \texample.com/db\t0.01s\n") == []


def test_empty_text() -> None:
    assert parse("") == []


def test_noise_is_ignored() -> None:
    text = (
        "# example.com/db\n"
        "./db_test.go:12:2: declared and not used: x\n"
        "--- FAIL: BenchmarkBroken-8\n"
        "BenchmarkGood-8   100   10 ns/op\n"
        "FAIL\n"
    )
    assert [r.name for r in parse(text)] == ["BenchmarkGood"]


def test_match_never_spans_lines() -> None:
    assert parse("BenchmarkSplit-8\n100\n10 ns/op\n") == []


def test_bytes_input_is_decoded() -> None:
    (record,) = parse(b"BenchmarkBytes-2  50  7.5 ns/op\n")
    assert record.name == "BenchmarkBytes"


def test_non_text_input_raises() -> None:
    with pytest.raises(ReportDecodeError):
        parse(42)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Per-field decode fallback
# ---------------------------------------------------------------------------


def test_int_decode_failure_falls_back_to_zero() -> None:
    assert _to_int("not-a-number", "cores") == 0
    assert _to_int(None, "bytes_per_op") == 0
    assert _to_int("12", "cores") == 12


def test_float_decode_failure_falls_back_to_zero() -> None:
    assert _to_float("1.2.3", "ns_per_op") == 0.0
    assert _to_float(None, "mb_per_sec") == 0.0
