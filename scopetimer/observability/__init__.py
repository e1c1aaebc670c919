"""
Scope timing core.

Invariants:
- One finished ACTIVE timer produces exactly one line; DISABLED timers produce nothing.
- Durations come from the monotonic clock; the wall clock is used for display only.
- Lines are written under a single mutex and are never interleaved.
- Nothing in this package raises into a timed scope: bad config degrades to
  defaults, sink failures are swallowed, over-long lines are truncated.
"""
from .label import Label, PLACEHOLDER
from .formatting import clamp_line, format_elapsed, format_wall_clock
from .sink import (
    CallbackLogSink,
    FileLogSink,
    LogSink,
    MemoryLogSink,
    SinkRegistry,
    redirect_sink,
    reset_sink_registry_for_tests,
    set_log_sink,
    sink_registry,
)
from .thread_ids import thread_number, thread_numbers
from .scope_timer import ScopeTimer, TimerState, scope_timer, timed
from .conditional import ConditionalScopeTimer, scope_timer_if

__all__ = [
    "PLACEHOLDER",
    "CallbackLogSink",
    "ConditionalScopeTimer",
    "FileLogSink",
    "Label",
    "LogSink",
    "MemoryLogSink",
    "ScopeTimer",
    "SinkRegistry",
    "TimerState",
    "clamp_line",
    "format_elapsed",
    "format_wall_clock",
    "redirect_sink",
    "reset_sink_registry_for_tests",
    "scope_timer",
    "scope_timer_if",
    "set_log_sink",
    "sink_registry",
    "thread_number",
    "thread_numbers",
    "timed",
]
