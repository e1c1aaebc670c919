#!filepath: scopetimer/demo.py
"""
Demo workload: every way of timing a scope, in one run.

    scopetimer demo --iterations 3
    tail /tmp/ScopeTimer.log
"""
from __future__ import annotations

import threading
import time

from scopetimer.observability.conditional import scope_timer_if
from scopetimer.observability.scope_timer import ScopeTimer, scope_timer, timed


def busy_for(us: int) -> None:
    time.sleep(us / 1_000_000)


# 1. 单个函数
def simple_work() -> None:
    with scope_timer("simpleWork"):
        busy_for(2500)


# 2. 嵌套 scope
def nested_scopes() -> None:
    with scope_timer("nestedScopes:outer"):
        busy_for(1000)
        with scope_timer("nestedScopes:inner 1"):
            busy_for(1500)
        with scope_timer("nestedScopes:inner 2"):
            busy_for(2500)
        busy_for(500)


# 3. 同一 scope 内多个 timer
def multiple_timers_same_scope() -> None:
    with scope_timer("multi:first"), scope_timer("multi:second"):
        busy_for(700)


# 4. 条件计时
def conditional_work(enabled: bool) -> None:
    with scope_timer_if(enabled, "conditionalWork"):
        busy_for(1200)


# 5. 循环（每次迭代一行）
def looped_work(iterations: int) -> None:
    with scope_timer("loopedWork:total"):
        for _ in range(iterations):
            with scope_timer("loopedWork:iteration"):
                busy_for(300)


# 6. 多线程
def threaded_work(threads: int) -> None:
    with scope_timer("threadedWork:total"):

        def worker(i: int) -> None:
            with scope_timer("threadedWork:worker"):
                busy_for(500 + i * 200)

        tg = [threading.Thread(target=worker, args=(i,)) for i in range(threads)]
        for t in tg:
            t.start()
        for t in tg:
            t.join()


# 7. 类方法
class Worker:
    def __init__(self):
        with scope_timer("Worker:constructor"):
            busy_for(500)

    def do_task(self, name: str) -> None:
        with scope_timer(name):
            busy_for(1000)

    def do_multiple_tasks(self, count: int, timed_: bool) -> None:
        with scope_timer_if(timed_, "Worker:doMultipleTasks"):
            for _ in range(count):
                self.do_task("Worker:task")

    @timed("Worker:decorated")
    def decorated_task(self) -> None:
        busy_for(400)


# 8. 对象生命周期
class LifetimeTracked:
    """timer 从 __init__ 开始，到 close()（或 with 退出）结束"""

    def __init__(self):
        self._lifetime_timer = ScopeTimer(where="LifetimeTracked")
        busy_for(500)

    def close(self) -> None:
        busy_for(500)
        self._lifetime_timer.close()

    def __enter__(self) -> "LifetimeTracked":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def run_once(threads: int = 3) -> None:
    simple_work()
    nested_scopes()
    multiple_timers_same_scope()
    conditional_work(False)
    conditional_work(True)
    looped_work(5)
    threaded_work(threads)

    w = Worker()
    w.do_task("Worker:singleTask")
    w.do_multiple_tasks(3, True)
    w.do_multiple_tasks(2, False)
    w.decorated_task()

    with LifetimeTracked():
        busy_for(1500)


def run_demo(iterations: int = 1, threads: int = 3) -> None:
    with scope_timer():
        for _ in range(iterations):
            run_once(threads)
