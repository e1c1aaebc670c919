#!filepath: scopetimer/config/__init__.py

from .settings import DurationFormat, ScopeTimerSettings
from .log_config import LogConfig
from .cache import (
    ConfigCache,
    config_cache,
    duration_format,
    flush_interval,
    is_enabled,
    log_directory,
    reset_config_for_tests,
    reset_log_directory_for_tests,
    settings,
)
from .environment import load_env_file

__all__ = [
    "ConfigCache",
    "DurationFormat",
    "LogConfig",
    "ScopeTimerSettings",
    "config_cache",
    "duration_format",
    "flush_interval",
    "is_enabled",
    "load_env_file",
    "log_directory",
    "reset_config_for_tests",
    "reset_log_directory_for_tests",
    "settings",
]
