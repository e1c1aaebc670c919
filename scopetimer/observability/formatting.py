#!filepath: scopetimer/observability/formatting.py
"""
Timestamp / elapsed-time formatting.

All elapsed formatters are pure functions of an integer nanosecond count.
Every field is bounded: timestamps and elapsed strings fit a 32-slot buffer,
a full log line fits LINE_BUFFER_SIZE bytes including its trailing newline.
"""
from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, Optional

from scopetimer.config import DurationFormat, duration_format

TIMESTAMP_BUFFER_SIZE = 32
ELAPSED_BUFFER_SIZE = 32
LINE_BUFFER_SIZE = 512

NS_PER_US = 1_000
NS_PER_MS = 1_000_000
NS_PER_S = 1_000_000_000

ElapsedFormatter = Callable[[int], str]


def bounded(text: str, size: int) -> str:
    """截断到 size-1 个字符（保留一个终止位，与固定缓冲区一致）"""
    if len(text) < size:
        return text
    return text[: max(size - 1, 0)]


def format_wall_clock(wall_ns: int) -> str:
    """epoch ns → 'YYYY-MM-DD HH:MM:SS.mmm'（本地时间）"""
    sec, rem = divmod(wall_ns, NS_PER_S)
    stamp = datetime.fromtimestamp(sec).strftime("%Y-%m-%d %H:%M:%S")
    return bounded(f"{stamp}.{rem // NS_PER_MS:03d}", TIMESTAMP_BUFFER_SIZE)


# ================================================================
# elapsed formatters
# ================================================================
def fmt_seconds(ns: int) -> str:
    return bounded(f"{ns // NS_PER_S}.{(ns // NS_PER_MS) % 1000:03d}s", ELAPSED_BUFFER_SIZE)


def fmt_millis(ns: int) -> str:
    return bounded(f"{ns // NS_PER_MS}.{(ns // NS_PER_US) % 1000:03d}ms", ELAPSED_BUFFER_SIZE)


def fmt_micros(ns: int) -> str:
    return bounded(f"{ns // NS_PER_US}.{ns % NS_PER_US:03d}us", ELAPSED_BUFFER_SIZE)


def fmt_nanos(ns: int) -> str:
    return bounded(f"{ns}ns", ELAPSED_BUFFER_SIZE)


def fmt_auto(ns: int) -> str:
    if ns >= NS_PER_S:
        return fmt_seconds(ns)
    if ns >= NS_PER_MS:
        return fmt_millis(ns)
    if ns >= NS_PER_US:
        return fmt_micros(ns)
    return fmt_nanos(ns)


FORMATTERS: Dict[DurationFormat, ElapsedFormatter] = {
    DurationFormat.AUTO: fmt_auto,
    DurationFormat.SECONDS: fmt_seconds,
    DurationFormat.MILLIS: fmt_millis,
    DurationFormat.MICROS: fmt_micros,
    DurationFormat.NANOS: fmt_nanos,
}


def elapsed_formatter() -> ElapsedFormatter:
    """进程级 formatter（由缓存的 SCOPE_TIMER_FORMAT 决定）"""
    return FORMATTERS[duration_format()]


def format_elapsed(ns: int, fmt: Optional[DurationFormat] = None) -> str:
    ns = max(int(ns), 0)
    formatter = elapsed_formatter() if fmt is None else FORMATTERS[fmt]
    return formatter(ns)


# ================================================================
# log line
# ================================================================
def clamp_line(data: bytes, size: int = LINE_BUFFER_SIZE) -> bytes:
    """
    把一行限制在 size 字节内：
    - 不超长：原样返回
    - 超长  ：按 UTF-8 边界截断，并保证以 '\\n' 结尾
    """
    if len(data) <= size:
        return data
    if size <= 1:
        return b"\n"[:size]
    head = data[: size - 1].decode("utf-8", errors="ignore").encode("utf-8")
    return head + b"\n"


def format_line(
    label: str,
    thread_number: int,
    where: str,
    start: str,
    end: str,
    elapsed: str,
) -> bytes:
    line = (
        f"[{label}] TID={thread_number:03d} | {where} | "
        f"start={start} | end={end} | elapsed={elapsed}\n"
    )
    return clamp_line(line.encode("utf-8", errors="replace"))
