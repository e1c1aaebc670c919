#!filepath: scopetimer/observability/conditional.py
from __future__ import annotations

from typing import Any, Optional

from scopetimer.observability.scope_timer import ScopeTimer, caller_where


class ConditionalScopeTimer:
    """
    条件计时：condition 为 False 时不创建内部 ScopeTimer。

    - label 可以是无参 callable（label 工厂），只有 condition 为 True 才调用
    - condition 为 False：不消耗线程编号、不读栈帧、不输出日志
    - 内部 timer 只能在构造时决定，之后不可替换
    """

    __slots__ = ("_timer",)

    def __init__(
        self,
        condition: Any,
        label: Any = None,
        where: Optional[str] = None,
        *,
        stacklevel: int = 1,
    ):
        timer = None
        if condition:
            if callable(label):
                label = label()
            if where is None:
                where = caller_where(stacklevel)
            timer = ScopeTimer(label, where)
        object.__setattr__(self, "_timer", timer)

    @property
    def timer(self) -> Optional[ScopeTimer]:
        return self._timer

    @property
    def active(self) -> bool:
        return self._timer is not None

    def close(self) -> None:
        if self._timer is not None:
            self._timer.close()

    def __enter__(self) -> "ConditionalScopeTimer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} cannot be reassigned")

    def __copy__(self):
        raise TypeError(f"{type(self).__name__} is not copyable")

    def __deepcopy__(self, memo):
        raise TypeError(f"{type(self).__name__} is not copyable")

    def __reduce_ex__(self, protocol):
        raise TypeError(f"{type(self).__name__} cannot be pickled")


def scope_timer_if(condition: Any, label: Any = None) -> ConditionalScopeTimer:
    """
    用法：
        with scope_timer_if(debug, lambda: f"batch {i}"):
            ...
    """
    return ConditionalScopeTimer(condition, label, stacklevel=2)
