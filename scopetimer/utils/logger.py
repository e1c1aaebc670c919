#!filepath: scopetimer/utils/logger.py
from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, Optional

from loguru import logger

if TYPE_CHECKING:
    from scopetimer.config.log_config import LogConfig

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"


class Logging:
    """
    scopetimer 内部诊断日志（loguru 封装）
    ---------------------------------------
    - 库本身不在 import 时安装任何 sink
    - 诊断默认被 logger.disable("scopetimer") 静音
    - CLI / 宿主程序通过 configure() 打开
    ---------------------------------------
    """

    def __init__(self) -> None:
        self.configured = False

    def configure(self, config: Optional[LogConfig] = None) -> None:
        """
        替换 loguru 全局 sink（只由 CLI 调用）
        """
        if config is None:
            # config 包依赖 logs，延迟导入避免循环
            from scopetimer.config.log_config import LogConfig

            config = LogConfig()

        logger.remove()
        logger.add(sys.stderr, level=config.level, format=LOG_FORMAT)

        if config.dir:
            os.makedirs(config.dir, exist_ok=True)
            logger.add(
                sink=f"{config.dir}/{{time:YYYY-MM-DD}}.log",
                rotation=config.rotation,
                retention=config.retention,
                level=config.level,
                format=LOG_FORMAT,
                enqueue=True,
                backtrace=True,
                diagnose=False,
            )

        logger.enable("scopetimer")
        self.configured = True
        logger.debug(f"[Logging] configured level={config.level} dir={config.dir}")

    # ----------- 日志方法 -----------
    def debug(self, msg: str, *args, **kwargs):
        logger.opt(depth=1).debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        logger.opt(depth=1).info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        logger.opt(depth=1).warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        logger.opt(depth=1).error(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        logger.opt(depth=1, exception=True).error(msg, *args, **kwargs)


logs = Logging()
