from collections.abc import Generator
from typing import Any

from .continuation import Continuation
from .protocol import Awaiter
from .protocol import ProtocolError


class Task[R]:
    """The owner of one continuation.

    Ownership can be moved to another task with ``Task(task.release())``,
    but never shared. Closing the task destroys the continuation, finished
    or not.
    """

    def __init__(self, continuation: Continuation[R], /):
        self.__continuation: Continuation[R] | None = continuation

    def __repr__(self):
        return f"<{type(self).__name__} {self.__continuation!r}>"

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __del__(self):
        self.close()

    def __await__(self) -> Generator[Awaiter[R], Any, R]:
        return (yield TaskAwaiter(self))

    @property
    def continuation(self) -> Continuation[R]:
        if self.__continuation is None:
            raise ProtocolError("The task has released its continuation.")
        return self.__continuation

    @property
    def done(self) -> bool:
        return self.continuation.done

    def resume(self) -> None:
        """Run the task to its next suspension point.

        When the task is waiting on another task, the innermost unfinished
        task in that chain is the one that runs.
        """
        self.continuation.leaf().resume()

    def value(self) -> R | None:
        """Get the latest yielded or returned value.

        ``None`` is returned until the task yields or returns for the first
        time. A failure is raised again on every call.
        """
        return self.continuation.promise.value()

    def result(self) -> R:
        """Get the final value, or raise the failure that ended the task."""
        if not self.done:
            raise ProtocolError(f"{self!r} has not finished.")
        return self.continuation.promise.value()  # type: ignore[return-value]

    def release(self) -> Continuation[R]:
        """Give up ownership of the continuation without destroying it."""
        continuation = self.continuation
        self.__continuation = None
        return continuation

    def close(self) -> None:
        # Guard for __del__ on a partially constructed task.
        continuation = getattr(self, "_Task__continuation", None)
        if continuation is not None:
            self.__continuation = None
            continuation.destroy()


class TaskAwaiter[R](Awaiter[R]):
    """Await another task's completion by handing control straight to it."""

    def __init__(self, task: Task[R]):
        self.__task = task

    def __repr__(self):
        return f"<{type(self).__name__} {self.__task!r}>"

    def ready(self) -> bool:
        return self.__task.done

    def suspend(self, current: Continuation[Any], /) -> Continuation[Any]:
        return current.call(self.__task.continuation)

    def resume(self) -> R:
        return self.__task.result()
