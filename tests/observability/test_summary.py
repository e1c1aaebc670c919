#!filepath: tests/observability/test_summary.py
import pytest

from scopetimer.observability.formatting import format_line
from scopetimer.observability.summary import (
    SUMMARY_COLUMNS,
    elapsed_to_us,
    format_us,
    parse_line,
    read_records,
    series_by_key,
    strip_timestamps,
    summarize,
    trend,
)
from scopetimer.utils.errors import UserInputError

START = "2025-08-13 11:57:21.832"
END = "2025-08-13 11:57:35.885"


def make_line(label, where, elapsed, tid=1):
    return format_line(label, tid, where, START, END, elapsed).decode("utf-8")


@pytest.mark.parametrize(
    "value, unit, expected",
    [
        (1500, "ns", 1.5),
        (2.0, "us", 2.0),
        (3.5, "ms", 3500.0),
        (1.25, "s", 1_250_000.0),
    ],
)
def test_elapsed_to_us(value, unit, expected):
    assert elapsed_to_us(value, unit) == pytest.approx(expected)


def test_elapsed_to_us_unknown_unit():
    with pytest.raises(ValueError):
        elapsed_to_us(1, "min")


@pytest.mark.parametrize(
    "us, expected",
    [
        (0.5, "500ns"),
        (42, "42us"),
        (1_500, "1.500ms"),
        (2_000_000, "2.000s"),
    ],
)
def test_format_us(us, expected):
    assert format_us(us) == expected


def test_parse_line_roundtrips_emitted_format():
    rec = parse_line(make_line("load", "app.main", "5.123ms", tid=7))

    assert rec is not None
    assert rec.label == "load"
    assert rec.thread_number == 7
    assert rec.where == "app.main"
    assert rec.start == START and rec.end == END
    assert rec.elapsed_text == "5.123ms"
    assert rec.elapsed_us == pytest.approx(5123.0)
    assert rec.key == "[load] app.main"


def test_parse_line_rejects_garbage():
    assert parse_line("not a timer line") is None
    assert parse_line("") is None


def test_strip_timestamps():
    line = make_line("load", "app.main", "1ns", tid=12)
    assert strip_timestamps(line.rstrip("\n")) == "[load] | app.main | elapsed=1ns"


@pytest.mark.parametrize(
    "series, expected",
    [
        ([10, 10, 10], "-"),
        ([100] * 10, "-"),
        ([100] * 9 + [200], "↑"),
        ([200] + [100] * 9, "↓"),
        ([100] * 9 + [103], "-"),  # 变化 < 5us
        ([1_000_000] * 9 + [1_000_010], "-"),  # 变化 < 5%
    ],
)
def test_trend(series, expected):
    assert trend(series) == expected


def test_read_records_missing_file(tmp_path):
    with pytest.raises(UserInputError):
        read_records(tmp_path / "nope.log")


def test_read_records_skips_bad_lines(tmp_path):
    log = tmp_path / "ScopeTimer.log"
    log.write_text(
        make_line("a", "m.f", "1.000ms")
        + "garbage\n"
        + make_line("b", "m.g", "2.000ms"),
        encoding="utf-8",
    )

    records = read_records(log)
    assert [r.label for r in records] == ["a", "b"]


def test_summarize_groups_in_first_seen_order():
    lines = [
        make_line("b", "m.g", "4.000us"),
        make_line("a", "m.f", "1.000ms"),
        make_line("b", "m.g", "2.000us"),
        make_line("a", "m.f", "3.000ms"),
    ]
    records = [parse_line(l) for l in lines]

    df = summarize(records)

    assert list(df.columns) == SUMMARY_COLUMNS
    assert list(df["key"]) == ["[b] m.g", "[a] m.f"]

    b = df.iloc[0]
    assert b["count"] == 2
    assert b["min_us"] == pytest.approx(2.0)
    assert b["avg_us"] == pytest.approx(3.0)
    assert b["max_us"] == pytest.approx(4.0)
    assert b["trend"] == "-"

    a = df.iloc[1]
    assert a["avg_us"] == pytest.approx(2000.0)


def test_summarize_empty():
    df = summarize([])
    assert df.empty
    assert list(df.columns) == SUMMARY_COLUMNS


def test_series_by_key():
    records = [
        parse_line(make_line("a", "m.f", "1.000us")),
        parse_line(make_line("a", "m.f", "2.000us")),
        parse_line(make_line("b", "m.f", "4.000us")),
    ]
    out = series_by_key(records)

    assert out == {"[a] m.f": [1.0, 2.0], "[b] m.f": [4.0]}
