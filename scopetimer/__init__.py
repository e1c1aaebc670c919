#!filepath: scopetimer/__init__.py

from loguru import logger

from .config import DurationFormat, ScopeTimerSettings, settings
from .utils.logger import Logging, logs
from .observability import (
    CallbackLogSink,
    ConditionalScopeTimer,
    FileLogSink,
    Label,
    LogSink,
    MemoryLogSink,
    ScopeTimer,
    redirect_sink,
    scope_timer,
    scope_timer_if,
    set_log_sink,
    timed,
)

__version__ = "0.1.0"

# 库默认静音；宿主程序用 logger.enable("scopetimer") 打开诊断
logger.disable("scopetimer")

__all__ = [
    "logs", "Logging",
    "ScopeTimer", "scope_timer", "timed",
    "ConditionalScopeTimer", "scope_timer_if",
    "Label",
    "DurationFormat", "ScopeTimerSettings", "settings",
    "LogSink", "FileLogSink", "MemoryLogSink", "CallbackLogSink",
    "set_log_sink", "redirect_sink",
]
