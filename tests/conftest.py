# tests/conftest.py
from __future__ import annotations

import pytest
from loguru import logger

from scopetimer.config import reset_config_for_tests
from scopetimer.config.settings import ENV_KEYS
from scopetimer.observability.sink import (
    MemoryLogSink,
    reset_sink_registry_for_tests,
    set_log_sink,
)


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture(autouse=True)
def isolated_scope_timer(monkeypatch, tmp_path):
    """
    每个测试独立的 SCOPE_TIMER_* 环境：
    - 清空所有相关环境变量
    - 日志目录指向 tmp_path
    - 重置配置缓存与 sink registry
    """
    for key in ENV_KEYS.values():
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("SCOPE_TIMER_DIR", str(tmp_path))

    reset_config_for_tests()
    reset_sink_registry_for_tests()
    yield tmp_path
    reset_sink_registry_for_tests()
    reset_config_for_tests()


@pytest.fixture
def set_env(monkeypatch):
    """设置环境变量并让配置缓存重新读取"""

    def _set(**env: str) -> None:
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        reset_config_for_tests()

    return _set


@pytest.fixture
def memory_sink():
    sink = MemoryLogSink()
    set_log_sink(sink)
    yield sink
    set_log_sink(None)
