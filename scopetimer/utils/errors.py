# scopetimer/utils/errors.py
class ScopeTimerError(RuntimeError):
    """
    Base class for errors raised by scopetimer tooling.
    Never raised from inside a timed scope.
    """


class UserInputError(ScopeTimerError):
    """
    Raised for invalid user-provided input (log paths, env files, etc).
    Should NOT print traceback.
    """
