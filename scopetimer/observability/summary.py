#!filepath: scopetimer/observability/summary.py
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from scopetimer.utils.errors import UserInputError
from scopetimer.utils.logger import logs

_TS = r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}(?:\.\d{1,9})?"

LINE_RE = re.compile(
    r"^\[(?P<label>.*)\] TID=(?P<tid>\d+) \| (?P<where>.*) \| "
    rf"start=(?P<start>{_TS}) \| end=(?P<end>{_TS}) \| "
    r"elapsed=(?P<value>\d+(?:\.\d+)?)(?P<unit>ns|us|ms|s)$"
)

_TID_RE = re.compile(r" TID=\d+ \|")
_WALL_RE = re.compile(rf" \| start={_TS} \| end={_TS}")

_US_PER_UNIT = {
    "ns": 0.001,
    "us": 1.0,
    "ms": 1_000.0,
    "s": 1_000_000.0,
}

SUMMARY_COLUMNS = ["key", "count", "min_us", "avg_us", "max_us", "trend"]


@dataclass(frozen=True)
class TimerRecord:
    label: str
    thread_number: int
    where: str
    start: str
    end: str
    elapsed_text: str
    elapsed_us: float

    @property
    def key(self) -> str:
        return f"[{self.label}] {self.where}"


def elapsed_to_us(value: float, unit: str) -> float:
    try:
        return float(value) * _US_PER_UNIT[unit]
    except KeyError:
        raise ValueError(f"unknown elapsed unit: {unit!r}") from None


def format_us(us: float) -> str:
    if us >= 1_000_000:
        return f"{us / 1_000_000:.3f}s"
    if us >= 1_000:
        return f"{us / 1_000:.3f}ms"
    if us >= 1:
        return f"{us:.0f}us"
    return f"{us * 1_000:.0f}ns"


def parse_line(line: str) -> Optional[TimerRecord]:
    m = LINE_RE.match(line.rstrip("\r\n"))
    if m is None:
        return None
    value, unit = m.group("value"), m.group("unit")
    return TimerRecord(
        label=m.group("label"),
        thread_number=int(m.group("tid")),
        where=m.group("where"),
        start=m.group("start"),
        end=m.group("end"),
        elapsed_text=f"{value}{unit}",
        elapsed_us=elapsed_to_us(float(value), unit),
    )


def read_records(path: str | Path) -> List[TimerRecord]:
    p = Path(path)
    if not p.is_file():
        raise UserInputError(f"log file not found: {p}")

    records, skipped = [], 0
    with open(p, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            rec = parse_line(line)
            if rec is None:
                skipped += 1
                continue
            records.append(rec)

    if skipped:
        logs.debug(f"[Summary] {p}: skipped {skipped} unparsable lines")
    return records


def strip_timestamps(line: str) -> str:
    """去掉 TID / start / end，便于跨运行 diff"""
    return _WALL_RE.sub("", _TID_RE.sub("", line))


def trend(series: List[float]) -> str:
    """
    比较前 10% 与后 10%（向上取整）样本均值：
    - n < 5        → "-"
    - 变化 > 5us 且 > 5% → ↑ / ↓
    """
    n = len(series)
    if n < 5:
        return "-"
    seg = max(math.ceil(n / 10), 1)
    first = sum(series[:seg]) / seg
    last = sum(series[-seg:]) / seg
    delta = last - first
    rel = delta / first if first > 0 else 0.0
    if delta > 5 and rel > 0.05:
        return "↑"
    if delta < -5 and -rel > 0.05:
        return "↓"
    return "-"


def to_frame(records: Iterable[TimerRecord]) -> pd.DataFrame:
    rows = [
        dict(
            key=r.key,
            label=r.label,
            where=r.where,
            thread_number=r.thread_number,
            start=r.start,
            end=r.end,
            elapsed_us=r.elapsed_us,
        )
        for r in records
    ]
    return pd.DataFrame(
        rows,
        columns=["key", "label", "where", "thread_number", "start", "end", "elapsed_us"],
    )


def summarize(records: Iterable[TimerRecord]) -> pd.DataFrame:
    """
    按 "[label] where" 分组（保持首次出现顺序）：
        key / count / min_us / avg_us / max_us / trend
    """
    df = to_frame(records)
    if df.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    grouped = df.groupby("key", sort=False)["elapsed_us"]
    out = grouped.agg(count="count", min_us="min", avg_us="mean", max_us="max")
    out["trend"] = grouped.apply(lambda s: trend(s.tolist()))
    return out.reset_index()[SUMMARY_COLUMNS]


def series_by_key(records: Iterable[TimerRecord]) -> dict:
    out: dict = {}
    for r in records:
        out.setdefault(r.key, []).append(r.elapsed_us)
    return out
