#!filepath: scopetimer/config/cache.py
from __future__ import annotations

import os
import threading
from typing import Any, Dict, Mapping, Optional

from scopetimer.config.settings import (
    DurationFormat,
    ENV_KEYS,
    ScopeTimerSettings,
    normalize_dir,
)


class ConfigCache:
    """
    进程级配置缓存：
    - 每个字段首次访问时才读取环境变量
    - 读取后缓存，生产路径不再重新读取
    - reset() 仅供测试使用
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ
        self._values: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def _env(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def get(self, name: str) -> Any:
        try:
            return self._values[name]
        except KeyError:
            pass

        with self._lock:
            if name not in self._values:
                raw = self._env().get(ENV_KEYS[name])
                self._values[name] = ScopeTimerSettings.parse_field(name, raw)
            return self._values[name]

    def is_cached(self, name: str) -> bool:
        return name in self._values

    def snapshot(self) -> ScopeTimerSettings:
        return ScopeTimerSettings.model_construct(
            **{name: self.get(name) for name in ENV_KEYS}
        )

    # ---------------------------------------------------------
    # test hooks
    # ---------------------------------------------------------
    def reset(self) -> None:
        with self._lock:
            self._values.clear()

    def reset_log_directory(self, new_dir: Optional[str] = None) -> None:
        with self._lock:
            if new_dir:
                self._values["log_dir"] = normalize_dir(new_dir)
            else:
                raw = self._env().get(ENV_KEYS["log_dir"])
                self._values["log_dir"] = ScopeTimerSettings.parse_field("log_dir", raw)


_CACHE = ConfigCache()


def config_cache() -> ConfigCache:
    return _CACHE


def is_enabled() -> bool:
    return _CACHE.get("enabled")


def log_directory() -> str:
    return _CACHE.get("log_dir")


def flush_interval() -> int:
    return _CACHE.get("flush_interval")


def duration_format() -> DurationFormat:
    return _CACHE.get("duration_format")


def settings() -> ScopeTimerSettings:
    return _CACHE.snapshot()


def reset_config_for_tests() -> None:
    _CACHE.reset()


def reset_log_directory_for_tests(new_dir: Optional[str] = None) -> None:
    _CACHE.reset_log_directory(new_dir)
