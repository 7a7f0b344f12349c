from typing import Any

from .continuation import Continuation
from .protocol import Awaiter
from .protocol import ProtocolError
from .task import Task


class Drain[R](Awaiter[R]):
    """Run another task to completion before continuing, discarding its yields.

    Unlike awaiting the task directly, the awaiting body stays on the native
    stack for as long as the other task runs. This is only suitable for
    shallow, non-recursive calls.
    """

    def __init__(self, task: Task[R]):
        self.__task = task

    def __repr__(self):
        return f"<{type(self).__name__} {self.__task!r}>"

    def ready(self) -> bool:
        return self.__task.done

    def suspend(self, current: Continuation[Any], /) -> Continuation[Any]:
        while not self.__task.done:
            leaf = self.__task.continuation.leaf()
            if leaf.scheduled:
                raise ProtocolError(f"Cannot drain {leaf!r} while it is scheduled")
            leaf.resume()
        return current

    def resume(self) -> R:
        return self.__task.result()


def drain[R](task: Task[R], /) -> Drain[R]:
    return Drain(task)
