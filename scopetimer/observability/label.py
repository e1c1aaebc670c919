#!filepath: scopetimer/observability/label.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from scopetimer.utils.logger import logs

PLACEHOLDER = "ScopeTimer"


@dataclass(frozen=True)
class Label:
    """
    日志行中的 label，两种所有权：
    - borrowed : 直接引用调用方提供的不可变文本（str / 字面量），不复制
    - owned    : 复制一份（bytes / bytearray / memoryview / 任意对象）

    不变式：text 永远非空；空输入统一解析为 "ScopeTimer"，且不分配存储。
    无法证明来源在 timer 生命周期内不变时，一律走复制路径。
    """

    text: str = PLACEHOLDER
    owned: bool = False

    def __post_init__(self):
        if not self.text:
            object.__setattr__(self, "text", PLACEHOLDER)
            object.__setattr__(self, "owned", False)

    def __str__(self) -> str:
        return self.text

    @property
    def is_placeholder(self) -> bool:
        return self.text == PLACEHOLDER and not self.owned

    # ---------------------------------------------------------
    # constructors
    # ---------------------------------------------------------
    @classmethod
    def literal(cls, text: str) -> "Label":
        return cls.borrow(text)

    @classmethod
    def borrow(cls, view: Optional[str]) -> "Label":
        if not view:
            return _DEFAULT
        return cls(view, owned=False)

    @classmethod
    def own(cls, source: Any) -> "Label":
        if source is None:
            return _DEFAULT
        if isinstance(source, (bytes, bytearray, memoryview)):
            if not len(source):
                return _DEFAULT
            return cls(bytes(source).decode("utf-8", errors="replace"), owned=True)

        if isinstance(source, str):
            text = source
        else:
            try:
                text = str(source)
            except Exception as e:
                logs.debug(f"[Label] str() on {type(source).__name__} raised: {e!r}")
                return _DEFAULT
        if not text:
            return _DEFAULT
        return cls(text, owned=True)

    @classmethod
    def resolve(cls, value: Any = None) -> "Label":
        """
        所有 timer 入口使用的统一转换规则。

        None                          → 占位符
        Label                         → 原样
        str                           → borrowed（不可变，引用即可）
        bytes / bytearray / memoryview→ owned（解码复制）
        其他对象                       → owned（str(value) 复制）
        """
        if value is None:
            return _DEFAULT
        if isinstance(value, Label):
            return value
        if isinstance(value, str):
            return cls.borrow(value)
        return cls.own(value)


_DEFAULT = Label()
