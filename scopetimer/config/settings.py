#!filepath: scopetimer/config/settings.py
from __future__ import annotations

import os
import re
import tempfile
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scopetimer.utils.logger import logs

ENV_ENABLED = "SCOPE_TIMER"
ENV_LOG_DIR = "SCOPE_TIMER_DIR"
ENV_FLUSH_N = "SCOPE_TIMER_FLUSH_N"
ENV_FORMAT = "SCOPE_TIMER_FORMAT"

ENV_KEYS = {
    "enabled": ENV_ENABLED,
    "log_dir": ENV_LOG_DIR,
    "flush_interval": ENV_FLUSH_N,
    "duration_format": ENV_FORMAT,
}

DISABLE_TOKENS = frozenset({"OFF", "FALSE", "NO", "0"})
DEFAULT_FLUSH_INTERVAL = 256
MAX_FLUSH_INTERVAL = 1_000_000

# strtoul 语义：允许前导空白与 '+'，必须完全消费
_UNSIGNED_RE = re.compile(r"\s*\+?[0-9]+")


class DurationFormat(str, Enum):
    AUTO = "AUTO"
    SECONDS = "SECONDS"
    MILLIS = "MILLIS"
    MICROS = "MICROS"
    NANOS = "NANOS"


def default_log_dir() -> str:
    return normalize_dir(tempfile.gettempdir())


def normalize_dir(path: str) -> str:
    """保证目录以且仅以一个分隔符结尾（根目录保持不变）"""
    seps = os.sep + (os.altsep or "")
    stripped = path.rstrip(seps)
    if not stripped:
        return os.sep
    return stripped + os.sep


class ScopeTimerSettings(BaseModel):
    """
    SCOPE_TIMER_* 运行时配置（宽松解析）

    设计铁律：
    1. 任何非法值都静默降级为默认值，绝不抛异常
    2. 计时工具不能让被测程序崩溃
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    log_dir: str = Field(default_factory=default_log_dir)
    flush_interval: int = DEFAULT_FLUSH_INTERVAL
    duration_format: DurationFormat = DurationFormat.AUTO

    @field_validator("enabled", mode="before")
    @classmethod
    def _parse_enabled(cls, v: Any) -> bool:
        if v is None:
            return True
        if isinstance(v, bool):
            return v
        return str(v).upper() not in DISABLE_TOKENS

    @field_validator("log_dir", mode="before")
    @classmethod
    def _parse_log_dir(cls, v: Any) -> str:
        if v is None or str(v) == "":
            return default_log_dir()
        return normalize_dir(str(v))

    @field_validator("flush_interval", mode="before")
    @classmethod
    def _parse_flush_interval(cls, v: Any) -> int:
        if v is None:
            return DEFAULT_FLUSH_INTERVAL
        if isinstance(v, int) and not isinstance(v, bool):
            value = v
        elif isinstance(v, str) and _UNSIGNED_RE.fullmatch(v):
            value = int(v)
        else:
            logs.debug(f"[Config] invalid {ENV_FLUSH_N}={v!r}, fallback {DEFAULT_FLUSH_INTERVAL}")
            return DEFAULT_FLUSH_INTERVAL

        if 0 < value <= MAX_FLUSH_INTERVAL:
            return value
        logs.debug(f"[Config] {ENV_FLUSH_N}={value} out of range, fallback {DEFAULT_FLUSH_INTERVAL}")
        return DEFAULT_FLUSH_INTERVAL

    @field_validator("duration_format", mode="before")
    @classmethod
    def _parse_duration_format(cls, v: Any) -> DurationFormat:
        if isinstance(v, DurationFormat):
            return v
        if not v:
            return DurationFormat.AUTO
        try:
            fmt = DurationFormat(str(v).upper())
        except ValueError:
            logs.debug(f"[Config] invalid {ENV_FORMAT}={v!r}, fallback AUTO")
            return DurationFormat.AUTO
        return fmt

    # ---------------------------------------------------------
    # 构建
    # ---------------------------------------------------------
    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ScopeTimerSettings":
        env = os.environ if environ is None else environ
        return cls(**{name: env.get(key) for name, key in ENV_KEYS.items()})

    @classmethod
    def parse_field(cls, name: str, raw: Optional[str]) -> Any:
        """只解析单个字段（其余字段取默认值）"""
        return getattr(cls(**{name: raw}), name)
