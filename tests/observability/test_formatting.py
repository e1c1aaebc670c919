#!filepath: tests/observability/test_formatting.py
import re
import time
from datetime import datetime

import pytest

from scopetimer.config import DurationFormat
from scopetimer.observability.formatting import (
    ELAPSED_BUFFER_SIZE,
    LINE_BUFFER_SIZE,
    bounded,
    clamp_line,
    fmt_auto,
    format_elapsed,
    format_line,
    format_wall_clock,
)

UNIT_RE = re.compile(r"^\d+(\.\d{3})?(s|ms|us|ns)$")


@pytest.mark.parametrize(
    "ns, fmt, expected",
    [
        (2_500_000_000, DurationFormat.SECONDS, "2.500s"),
        (0, DurationFormat.SECONDS, "0.000s"),
        (5_123_456, DurationFormat.MILLIS, "5.123ms"),
        (1_000, DurationFormat.MILLIS, "0.001ms"),
        (1_234, DurationFormat.MICROS, "1.234us"),
        (7, DurationFormat.MICROS, "0.007us"),
        (999, DurationFormat.NANOS, "999ns"),
        (12_345_678_901, DurationFormat.NANOS, "12345678901ns"),
    ],
)
def test_explicit_formats(ns, fmt, expected):
    assert format_elapsed(ns, fmt) == expected


@pytest.mark.parametrize(
    "ns, unit",
    [
        (0, "ns"),
        (999, "ns"),
        (1_000, "us"),
        (999_999, "us"),
        (1_000_000, "ms"),
        (999_999_999, "ms"),
        (1_000_000_000, "s"),
        (3_600_000_000_000, "s"),
    ],
)
def test_auto_unit_boundaries(ns, unit):
    out = fmt_auto(ns)
    m = UNIT_RE.match(out)
    assert m is not None, out
    assert m.group(2) == unit


def test_auto_seconds_branch():
    out = format_elapsed(2_500_000_000, DurationFormat.AUTO)
    assert out == "2.500s"
    assert "ms" not in out and "us" not in out and "ns" not in out


def test_negative_elapsed_clamped_to_zero():
    assert format_elapsed(-5, DurationFormat.NANOS) == "0ns"


def test_process_format_from_config(set_env):
    set_env(SCOPE_TIMER_FORMAT="MILLIS")
    assert format_elapsed(2_000_000_000) == "2000.000ms"


def test_elapsed_is_bounded():
    out = format_elapsed(10**40, DurationFormat.NANOS)
    assert len(out) == ELAPSED_BUFFER_SIZE - 1


def test_bounded():
    assert bounded("abc", 8) == "abc"
    assert bounded("abcdefgh", 8) == "abcdefg"
    assert bounded("abc", 0) == ""


def test_wall_clock_shape():
    now_ns = time.time_ns()
    out = format_wall_clock(now_ns)

    assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3}", out)
    parsed = datetime.strptime(out, "%Y-%m-%d %H:%M:%S.%f")
    assert abs(parsed.timestamp() - now_ns / 1e9) < 1.0


def test_wall_clock_millis_zero_padded():
    base = int(datetime(2025, 8, 13, 11, 57, 21).timestamp()) * 1_000_000_000
    assert format_wall_clock(base + 7_000_000) == "2025-08-13 11:57:21.007"
    assert format_wall_clock(base + 999_999_999) == "2025-08-13 11:57:21.999"


def test_clamp_line_passthrough():
    line = b"[x] short\n"
    assert clamp_line(line) == line


def test_clamp_line_truncates_and_terminates():
    line = b"y" * 2000 + b"\n"
    out = clamp_line(line, 16)
    assert len(out) == 16
    assert out.endswith(b"\n")
    assert out[:15] == b"y" * 15


def test_clamp_line_respects_utf8_boundary():
    line = ("é" * 600 + "\n").encode("utf-8")
    out = clamp_line(line, LINE_BUFFER_SIZE)

    assert len(out) <= LINE_BUFFER_SIZE
    assert out.endswith(b"\n")
    out.decode("utf-8")  # 不应抛异常


def test_format_line_exact_shape():
    line = format_line(
        "label",
        7,
        "mod.func",
        "2025-08-13 11:57:21.832",
        "2025-08-13 11:57:35.885",
        "14.052s",
    )
    assert line == (
        b"[label] TID=007 | mod.func | start=2025-08-13 11:57:21.832 | "
        b"end=2025-08-13 11:57:35.885 | elapsed=14.052s\n"
    )


def test_format_line_wide_thread_number():
    line = format_line("l", 1234, "w", "s", "e", "1ns")
    assert b"TID=1234 |" in line


def test_format_line_truncates_long_label():
    line = format_line("L" * 1000, 1, "where", "s", "e", "1ns")
    assert len(line) == LINE_BUFFER_SIZE
    assert line.endswith(b"\n")
    assert line.startswith(b"[LLLL")
