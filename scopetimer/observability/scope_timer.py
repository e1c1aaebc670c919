#!filepath: scopetimer/observability/scope_timer.py
from __future__ import annotations

import sys
import threading
import time
from enum import Enum
from functools import wraps
from typing import Any, Callable, Optional

from scopetimer.config import flush_interval, is_enabled
from scopetimer.observability.formatting import (
    elapsed_formatter,
    format_line,
    format_wall_clock,
)
from scopetimer.observability.label import Label
from scopetimer.observability.sink import sink_registry
from scopetimer.observability.thread_ids import thread_number


class TimerState(str, Enum):
    ACTIVE = "active"
    FINALIZED = "finalized"
    DISABLED = "disabled"


# ACTIVE -> FINALIZED 的状态切换（多线程同时 close 同一个 timer 时只输出一次）
_FINALIZE_LOCK = threading.Lock()


def caller_where(depth: int = 1) -> str:
    """
    '<module>.<qualname>' of the frame `depth` levels above the caller.
    """
    try:
        frame = sys._getframe(depth + 1)
    except ValueError:
        return "<unknown>"
    code = frame.f_code
    name = getattr(code, "co_qualname", code.co_name)
    return f"{frame.f_globals.get('__name__', '?')}.{name}"


class ScopeTimer:
    """
    Scope 计时器（with 块 / 函数 / 对象生命周期）

    - 构造：开始计时（SCOPE_TIMER 关闭时直接进入 DISABLED，什么都不采集）
    - close() / __exit__：计算耗时，格式化一行，交给 sink（每个实例恰好一次）

    输出：
        [label] TID=001 | module.func | start=... | end=... | elapsed=1.234ms
    """

    def __init__(
        self,
        label: Any = None,
        where: Optional[str] = None,
        *,
        stacklevel: int = 1,
    ):
        if not is_enabled():
            self._state = TimerState.DISABLED
            self.where = ""
            self.label = None
            self.thread_number = 0
            self.elapsed_ns: Optional[int] = None
            return

        self.where = where if where is not None else caller_where(stacklevel)
        self.label = Label.resolve(label)
        self.thread_number = thread_number()
        self.elapsed_ns = None
        self.start_monotonic_ns = time.perf_counter_ns()
        self.start_wall_ns = time.time_ns()
        self._start_formatted = format_wall_clock(self.start_wall_ns)
        self._state = TimerState.ACTIVE

    # ---------------------------------------------------------
    # state
    # ---------------------------------------------------------
    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def disabled(self) -> bool:
        return self._state is TimerState.DISABLED

    # ---------------------------------------------------------
    # finalize
    # ---------------------------------------------------------
    def close(self) -> None:
        with _FINALIZE_LOCK:
            if self._state is not TimerState.ACTIVE:
                return
            self._state = TimerState.FINALIZED

        end_monotonic = time.perf_counter_ns()
        end_wall = time.time_ns()
        self.elapsed_ns = max(end_monotonic - self.start_monotonic_ns, 0)

        # 格式化在锁外完成
        line = format_line(
            self.label.text,
            self.thread_number,
            self.where,
            self._start_formatted,
            format_wall_clock(end_wall),
            elapsed_formatter()(self.elapsed_ns),
        )
        sink_registry().emit(line, flush_interval())

    def __enter__(self) -> "ScopeTimer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ---------------------------------------------------------
    # 不可复制
    # ---------------------------------------------------------
    def __copy__(self):
        raise TypeError(f"{type(self).__name__} is not copyable")

    def __deepcopy__(self, memo):
        raise TypeError(f"{type(self).__name__} is not copyable")

    def __reduce_ex__(self, protocol):
        raise TypeError(f"{type(self).__name__} cannot be pickled")

    def __repr__(self) -> str:
        label = self.label.text if self.label is not None else None
        return f"<{type(self).__name__} label={label!r} where={self.where!r} state={self._state.value}>"


def scope_timer(label: Any = None) -> ScopeTimer:
    """
    用法：
        with scope_timer("load"):
            ...
    """
    return ScopeTimer(label, stacklevel=2)


def timed(label: Any = None) -> Callable:
    """
    装饰器版本：
        @timed
        def work(): ...

        @timed("work:step")
        def work(): ...
    """

    def decorator(func: Callable, label: Any = None) -> Callable:
        where = f"{func.__module__}.{func.__qualname__}"

        @wraps(func)
        def wrapper(*args, **kwargs):
            with ScopeTimer(label, where):
                return func(*args, **kwargs)

        return wrapper

    if callable(label) and not isinstance(label, (str, Label)):
        return decorator(label)

    return lambda func: decorator(func, label)
