# !filepath: scopetimer/config/environment.py

import os
from typing import Optional

from dotenv import load_dotenv

from scopetimer.utils.errors import UserInputError
from scopetimer.utils.logger import logs

DEFAULT_ENV_FILE = ".env"


def load_env_file(env_file: Optional[str] = None) -> bool:
    """
    加载 .env 文件中的 SCOPE_TIMER_* 变量（已存在的环境变量优先）。

    - env_file 未指定：尝试当前目录下的 .env，不存在则跳过
    - env_file 指定但不存在：UserInputError

    必须在第一个 timer 之前调用，配置缓存只读取一次。
    """
    if env_file is None:
        if not os.path.exists(DEFAULT_ENV_FILE):
            return False
        env_file = DEFAULT_ENV_FILE
    elif not os.path.exists(env_file):
        raise UserInputError(f"env file not found: {env_file}")

    logs.debug(f"[ENV] Loading file: {env_file}")
    return load_dotenv(env_file, override=False)
