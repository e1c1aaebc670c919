#!filepath: scopetimer/observability/thread_ids.py
import threading


class ThreadNumberRegistry:
    """
    线程编号：
    - 从 1 开始，每个新线程 +1
    - 首次使用时分配，线程内缓存
    - 进程生命周期内不复用（线程结束也不回收）
    """

    def __init__(self, first: int = 1):
        self._next = first
        self._lock = threading.Lock()
        self._local = threading.local()

    def current(self) -> int:
        number = getattr(self._local, "number", 0)
        if number:
            return number

        with self._lock:
            number = self._next
            self._next += 1
        self._local.number = number
        return number

    def peek_next(self) -> int:
        """下一个将被分配的编号（不消耗）"""
        return self._next


_REGISTRY = ThreadNumberRegistry()


def thread_numbers() -> ThreadNumberRegistry:
    return _REGISTRY


def thread_number() -> int:
    return _REGISTRY.current()
