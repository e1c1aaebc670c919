#!filepath: tests/base_test/test_config_cache.py
import os

from scopetimer.config import (
    DurationFormat,
    config_cache,
    duration_format,
    flush_interval,
    is_enabled,
    log_directory,
    reset_config_for_tests,
    reset_log_directory_for_tests,
    settings,
)
from scopetimer.config.cache import ConfigCache


def test_fields_are_lazy_and_independent(monkeypatch):
    """只访问过的字段才会被缓存"""
    cache = ConfigCache(environ={"SCOPE_TIMER_FLUSH_N": "9"})

    assert not cache.is_cached("flush_interval")
    assert cache.get("flush_interval") == 9
    assert cache.is_cached("flush_interval")
    assert not cache.is_cached("enabled")


def test_values_read_once_per_process(monkeypatch):
    """首次解析后，修改环境变量不会影响缓存值"""
    monkeypatch.setenv("SCOPE_TIMER_FLUSH_N", "4")
    monkeypatch.setenv("SCOPE_TIMER_FORMAT", "NANOS")
    monkeypatch.setenv("SCOPE_TIMER", "ON")

    assert flush_interval() == 4
    assert duration_format() is DurationFormat.NANOS
    assert is_enabled() is True

    monkeypatch.setenv("SCOPE_TIMER_FLUSH_N", "99")
    monkeypatch.setenv("SCOPE_TIMER_FORMAT", "SECONDS")
    monkeypatch.setenv("SCOPE_TIMER", "OFF")

    assert flush_interval() == 4
    assert duration_format() is DurationFormat.NANOS
    assert is_enabled() is True


def test_reset_forces_recomputation(monkeypatch):
    monkeypatch.setenv("SCOPE_TIMER", "ON")
    assert is_enabled() is True

    monkeypatch.setenv("SCOPE_TIMER", "off")
    reset_config_for_tests()
    assert is_enabled() is False


def test_log_directory_from_env(isolated_scope_timer):
    assert log_directory() == str(isolated_scope_timer) + os.sep


def test_reset_log_directory_override_and_restore(isolated_scope_timer, tmp_path_factory):
    other = tmp_path_factory.mktemp("other")

    reset_log_directory_for_tests(str(other))
    assert log_directory() == str(other) + os.sep

    # 不带参数：重新从环境变量读取
    reset_log_directory_for_tests()
    assert log_directory() == str(isolated_scope_timer) + os.sep


def test_reset_log_directory_keeps_other_fields(monkeypatch, tmp_path):
    monkeypatch.setenv("SCOPE_TIMER_FLUSH_N", "8")
    assert flush_interval() == 8

    monkeypatch.setenv("SCOPE_TIMER_FLUSH_N", "2")
    reset_log_directory_for_tests(str(tmp_path))
    assert flush_interval() == 8


def test_settings_snapshot(set_env, tmp_path):
    set_env(SCOPE_TIMER_FLUSH_N="16", SCOPE_TIMER_FORMAT="micros")

    cfg = settings()
    assert cfg.enabled is True
    assert cfg.flush_interval == 16
    assert cfg.duration_format is DurationFormat.MICROS
    assert cfg.log_dir == str(tmp_path) + os.sep
    assert config_cache().is_cached("log_dir")
