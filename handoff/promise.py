from __future__ import annotations

from typing import TYPE_CHECKING

from .protocol import NOOP
from .protocol import Noop
from .protocol import ProtocolError
from .result import Err
from .result import Ok
from .result import Result

if TYPE_CHECKING:
    from .continuation import Continuation


class Promise[R]:
    """The mutable state behind one task.

    It holds the latest outcome of the body and the link back to whoever
    is awaiting the task's completion.
    """

    def __init__(self):
        self.__outcome: Result[R, Exception] | None = None
        self.__previous: Continuation | Noop = NOOP
        self.__linked = False

    def __repr__(self):
        return f"<{type(self).__name__} outcome={self.__outcome!r}>"

    @property
    def outcome(self) -> Result[R, Exception] | None:
        return self.__outcome

    @property
    def previous(self) -> Continuation | Noop:
        return self.__previous

    def set_value(self, value: R, /):
        """Record a yielded or returned value."""
        self.__outcome = Ok(value)

    def set_exception(self, exception: Exception, /):
        """Record the failure that ended the body."""
        self.__outcome = Err(exception)

    def value(self) -> R | None:
        """Get the latest value, re-raising a recorded failure every time."""
        if self.__outcome is None:
            return None
        return self.__outcome.unwrap()

    def link(self, previous: Continuation, /):
        """Set the continuation to resume when the task completes.

        A promise is awaited by at most one caller over its lifetime.
        """
        if self.__linked:
            raise ProtocolError(f"{self!r} is already awaited by {self.__previous!r}")
        self.__previous = previous
        self.__linked = True

    def unlink(self) -> Continuation | Noop:
        """Take the link back for the completion hand-off."""
        previous, self.__previous = self.__previous, NOOP
        return previous
