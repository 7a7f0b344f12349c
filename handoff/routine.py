from collections.abc import Callable
from collections.abc import Coroutine
from inspect import iscoroutinefunction
from typing import Any

from .continuation import Continuation
from .task import Task


class Routine[**A, R]:
    def __init__(self, fn: Callable[A, Coroutine[Any, Any, R]], *, name: str):
        if not iscoroutinefunction(fn):
            raise TypeError(f"A routine must be an async function, got {fn!r}")
        self.fn = fn
        self.name = name

    def __repr__(self):
        return f"<{type(self).__name__} {self.name!r}>"

    def __call__(self, *args: A.args, **kwargs: A.kwargs) -> Task[R]:
        """Create a suspended task. The body does not start running."""
        return Task(Continuation(self.fn(*args, **kwargs), name=self.name))
