"""The vocabulary spoken at every suspension point.

A task body suspends by awaiting an ``Awaiter``. The awaiter's ``__await__``
yields the awaiter itself to whatever is driving the body, which then asks it
three questions, in order:

1. ``ready()``: can the body continue without suspending?
2. ``suspend(current)``: the body is parked; what should run next?
3. ``resume()``: the body is continuing; what does the await evaluate to?
"""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from collections.abc import Generator
from typing import TYPE_CHECKING
from typing import Any
from typing import Final
from typing import Self

if TYPE_CHECKING:
    from .continuation import Continuation


class ProtocolError(RuntimeError):
    """The task protocol was misused.

    These are programming errors, such as resuming a finished continuation
    or awaiting a task that has given up its continuation. They are never
    captured into a task's result.
    """


class Noop:
    """The continuation that does nothing when resumed.

    Returning it from ``Awaiter.suspend`` stops the driver until something
    outside resumes the parked continuation again.
    """

    resumable: Final = False
    done: Final = False

    def resume(self) -> None:
        pass

    def __repr__(self):
        return "<NOOP>"


NOOP: Final = Noop()


class Awaiter[R](ABC):
    """Base class for everything a task body may await."""

    def ready(self) -> bool:
        """Skip suspending when the result is already available.

        This must never change observable behavior compared to suspending
        and being resumed immediately.
        """
        return False

    @abstractmethod
    def suspend(self, current: Continuation, /) -> Continuation | Noop:
        """Hand off control after ``current`` has parked at this awaiter."""
        raise NotImplementedError("Subclasses must implement this method.")

    def resume(self) -> R:
        """Produce the value of the await expression."""
        return None  # type: ignore[return-value]

    def __await__(self) -> Generator[Self, Any, R]:
        return (yield self)
