#!filepath: scopetimer/observability/sink.py
from __future__ import annotations

import atexit
import io
import os
import threading
import weakref
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

from scopetimer.config import log_directory
from scopetimer.utils.logger import logs

LOG_FILE_NAME = "ScopeTimer.log"
WRITE_BUFFER_SIZE = 1 << 16

_OPEN_FLAGS = os.O_CREAT | os.O_WRONLY | os.O_APPEND | getattr(os, "O_CLOEXEC", 0)

# 当前持有文件句柄的 FileLogSink（atexit / fork 钩子遍历）
_OPEN_SINKS: "weakref.WeakSet[FileLogSink]" = weakref.WeakSet()


class LogSink(ABC):
    """
    日志输出目标：append bytes + flush。
    调用方（SinkRegistry）负责串行化，实现本身不需要加锁。
    """

    @abstractmethod
    def write(self, data: bytes) -> None:
        ...

    @abstractmethod
    def flush(self) -> None:
        ...

    def close(self) -> None:
        pass


# =============================================================
# 默认实现：文件
# =============================================================
class FileLogSink(LogSink):
    """
    <log_directory()>/ScopeTimer.log

    - 首次 write 时才打开（O_APPEND, 0644, close-on-exec）
    - 打开失败的路径会被记住，同一路径不再重试
    - 打开期间登记在 _OPEN_SINKS：进程退出时 flush + close；fork 前清空缓冲区
    """

    def __init__(self, directory: Callable[[], str] = log_directory):
        self._directory = directory
        self._fh: Optional[io.BufferedWriter] = None
        self._failed_path: Optional[str] = None
        self.open_attempts = 0

    @property
    def path(self) -> str:
        return self._directory() + LOG_FILE_NAME

    @property
    def is_open(self) -> bool:
        return self._fh is not None

    def fileno(self) -> int:
        return self._fh.fileno() if self._fh is not None else -1

    def _ensure_open(self) -> bool:
        if self._fh is not None:
            return True

        path = self.path
        if self._failed_path == path:
            return False

        self.open_attempts += 1
        try:
            fd = os.open(path, _OPEN_FLAGS, 0o644)
        except OSError as e:
            self._failed_path = path
            logs.debug(f"[Sink] cannot open {path}: {e}")
            return False

        os.set_inheritable(fd, False)
        self._fh = io.open(fd, "ab", buffering=WRITE_BUFFER_SIZE)
        self._failed_path = None
        _OPEN_SINKS.add(self)
        logs.debug(f"[Sink] opened {path}")
        return True

    def write(self, data: bytes) -> None:
        if not data:
            return
        if not self._ensure_open():
            return
        try:
            self._fh.write(data)
        except OSError as e:
            logs.debug(f"[Sink] write failed: {e}")

    def flush(self) -> None:
        if self._fh is None:
            return
        try:
            self._fh.flush()
            os.fsync(self._fh.fileno())
        except OSError as e:
            logs.debug(f"[Sink] flush failed: {e}")

    def drain(self) -> None:
        """只把 Python 缓冲区写入内核（不 fsync），fork 前调用"""
        if self._fh is None:
            return
        try:
            self._fh.flush()
        except OSError as e:
            logs.debug(f"[Sink] drain failed: {e}")

    def close(self) -> None:
        fh, self._fh = self._fh, None
        if fh is None:
            return
        _OPEN_SINKS.discard(self)
        try:
            fh.flush()
            os.fsync(fh.fileno())
        except OSError as e:
            logs.debug(f"[Sink] flush on close failed: {e}")
        finally:
            try:
                fh.close()
            except OSError as e:
                logs.debug(f"[Sink] close failed: {e}")


# =============================================================
# 替代实现（测试 / 重定向）
# =============================================================
class MemoryLogSink(LogSink):
    """把日志行收集在内存中"""

    def __init__(self):
        self.chunks: List[bytes] = []
        self.flush_count = 0
        self.closed = False

    def write(self, data: bytes) -> None:
        self.chunks.append(bytes(data))

    def flush(self) -> None:
        self.flush_count += 1

    def close(self) -> None:
        self.closed = True

    @property
    def text(self) -> str:
        return b"".join(self.chunks).decode("utf-8")

    @property
    def lines(self) -> List[str]:
        return self.text.splitlines()


class CallbackLogSink(LogSink):
    """write_fn / flush_fn 函数对；flush_fn 缺省为 no-op"""

    def __init__(
        self,
        write_fn: Callable[[bytes], None],
        flush_fn: Optional[Callable[[], None]] = None,
    ):
        self._write_fn = write_fn
        self._flush_fn = flush_fn

    def write(self, data: bytes) -> None:
        self._write_fn(data)

    def flush(self) -> None:
        if self._flush_fn is not None:
            self._flush_fn()


# =============================================================
# 进程级 registry
# =============================================================
class SinkRegistry:
    """
    进程级共享资源：
    - 当前 sink（默认 FileLogSink，可替换）
    - 行计数器（决定 flush 节奏）
    - 唯一互斥锁：只保护 write + 条件 flush
    """

    def __init__(self, default: Optional[LogSink] = None):
        self._lock = threading.Lock()
        self._default = default if default is not None else FileLogSink()
        self._sink = self._default
        self._line_count = 0

    @property
    def lock(self) -> threading.Lock:
        return self._lock

    @property
    def sink(self) -> LogSink:
        return self._sink

    @property
    def default_sink(self) -> LogSink:
        return self._default

    @property
    def line_count(self) -> int:
        return self._line_count

    def emit(self, line: bytes, flush_every: int) -> None:
        """写一行；计数达到 flush_every 的倍数时 flush。异常不外抛。"""
        with self._lock:
            try:
                if line:
                    self._sink.write(line)
            except Exception as e:
                logs.debug(f"[Sink] {type(self._sink).__name__}.write raised: {e!r}")

            self._line_count += 1
            if self._line_count % flush_every == 0:
                try:
                    self._sink.flush()
                except Exception as e:
                    logs.debug(f"[Sink] {type(self._sink).__name__}.flush raised: {e!r}")

    def set_sink(self, sink: Optional[LogSink] = None) -> None:
        """替换 sink；None 恢复默认文件 sink。默认文件句柄总会被关闭。"""
        with self._lock:
            self._default.close()
            self._sink = sink if sink is not None else self._default
        logs.debug(f"[Sink] active sink -> {type(self._sink).__name__}")

    def close(self) -> None:
        with self._lock:
            self._default.close()


_REGISTRY = SinkRegistry()


def sink_registry() -> SinkRegistry:
    return _REGISTRY


def set_log_sink(sink: Optional[LogSink] = None) -> None:
    _REGISTRY.set_sink(sink)


@contextmanager
def redirect_sink(sink: LogSink) -> Iterator[LogSink]:
    """临时替换 sink，退出时恢复默认"""
    _REGISTRY.set_sink(sink)
    try:
        yield sink
    finally:
        _REGISTRY.set_sink(None)


def reset_sink_registry_for_tests() -> SinkRegistry:
    global _REGISTRY
    _REGISTRY.close()
    _REGISTRY = SinkRegistry()
    return _REGISTRY


# =============================================================
# 进程级钩子：atexit / fork
# =============================================================
def close_open_sinks() -> None:
    """flush + close 所有仍打开的 FileLogSink"""
    for sink in list(_OPEN_SINKS):
        sink.close()


def _before_fork() -> None:
    # 持有写锁并清空缓冲区，子进程继承到的是空缓冲区
    _REGISTRY.lock.acquire()
    for sink in list(_OPEN_SINKS):
        sink.drain()


def _after_fork() -> None:
    _REGISTRY.lock.release()


atexit.register(close_open_sinks)

if hasattr(os, "register_at_fork"):
    os.register_at_fork(
        before=_before_fork,
        after_in_parent=_after_fork,
        after_in_child=_after_fork,
    )
