from typing import Any

from .continuation import Continuation
from .protocol import NOOP
from .protocol import Awaiter
from .protocol import Noop


class Emit(Awaiter[None]):
    """Publish an intermediate value and wait to be resumed."""

    def __init__(self, value: Any):
        self.__value = value

    def __repr__(self):
        return f"<{type(self).__name__} {self.__value!r}>"

    def suspend(self, current: Continuation, /) -> Noop:
        current.promise.set_value(self.__value)
        return NOOP


class Repeat(Awaiter[None]):
    """Suspend and hand control straight back to the same body."""

    def suspend(self, current: Continuation, /) -> Continuation:
        return current


def emit(value: Any, /) -> Emit:
    """Yield a value from the running task.

    The task stays suspended until it is resumed again.
    """
    return Emit(value)


def checkpoint() -> Repeat:
    return Repeat()
