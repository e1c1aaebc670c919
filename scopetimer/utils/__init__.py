#!filepath: scopetimer/utils/__init__.py

from .errors import ScopeTimerError, UserInputError
from .logger import Logging, logs

__all__ = ["Logging", "logs", "ScopeTimerError", "UserInputError"]
