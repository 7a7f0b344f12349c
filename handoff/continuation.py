"""Resumable handles to suspended task bodies.

A continuation drives its coroutine as an explicit trampoline. Each step
sends into (or throws into) the coroutine until it yields an awaiter, and the
awaiter's ``suspend`` decides which continuation runs next. Calls into other
tasks and returns from them are both hand-offs of "what runs next" back to
the trampoline, never nested calls, so the native stack stays flat however
deep the chain of awaiting tasks grows.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from collections.abc import Coroutine
from contextvars import ContextVar
from enum import Enum
from functools import partial
from itertools import count
from typing import Any

from .promise import Promise
from .protocol import NOOP
from .protocol import Awaiter
from .protocol import Noop
from .protocol import ProtocolError

log = logging.getLogger(__name__)

_next_id = count(1).__next__

_closing = ContextVar[deque[Coroutine[Any, Any, Any]] | None](
    "Continuation.closing", default=None
)


def _close(coroutine: Coroutine[Any, Any, Any]) -> None:
    """Close a coroutine without nesting the closes it sets off.

    Closing a caller's frame drops the task it was awaiting, and destroying
    that task closes the next frame down. Those closes are queued behind
    this one rather than run inside it.
    """
    if (pending := _closing.get()) is not None:
        pending.append(coroutine)
        return

    pending = deque([coroutine])
    token = _closing.set(pending)
    try:
        while pending:
            pending.popleft().close()
    finally:
        _closing.reset(token)


class State(Enum):
    CREATED = "created"
    SUSPENDED = "suspended"
    RUNNING = "running"
    DONE = "done"
    DESTROYED = "destroyed"


class Final(Awaiter[None]):
    """Hand control back up the call chain once a body has finished."""

    def suspend(self, current: Continuation, /) -> Continuation | Noop:
        previous = current.promise.unlink()
        if previous.resumable:
            log.debug("%r returns to %r", current, previous)
            return previous
        return NOOP


class Continuation[R]:
    def __init__(self, coroutine: Coroutine[Any, Any, R], *, name: str):
        self.id = _next_id()
        self.name = name
        self.promise = Promise[R]()
        self.scheduled = False
        self.__coroutine = coroutine
        self.__state = State.CREATED
        self.__awaiter: Awaiter[Any] | None = None
        self.__callee: Continuation[Any] | None = None

    def __repr__(self):
        return f"<{type(self).__name__} {self.id} {self.name} {self.__state.value}>"

    @property
    def state(self) -> State:
        return self.__state

    @property
    def done(self) -> bool:
        return self.__state is State.DONE

    @property
    def resumable(self) -> bool:
        return self.__state in (State.CREATED, State.SUSPENDED)

    @property
    def awaiting(self) -> Continuation[Any] | None:
        """The unfinished continuation this one is parked on, if any."""
        if self.__callee is not None and not self.__callee.done:
            return self.__callee
        return None

    def leaf(self) -> Continuation[Any]:
        """Follow the forward links to the continuation that runs next."""
        continuation: Continuation[Any] = self
        while (callee := continuation.awaiting) is not None:
            continuation = callee
        return continuation

    def call(self, callee: Continuation[Any], /) -> Continuation[Any]:
        """Link ``callee`` so that its completion resumes this continuation.

        Returns the continuation that should run next to make progress on
        the callee.
        """
        if not callee.resumable:
            raise ProtocolError(f"Cannot await {callee!r}")
        leaf = callee.leaf()
        if self in (callee, leaf) or self.awaiting is not None:
            raise ProtocolError(f"{self!r} cannot await {callee!r}")
        callee.promise.link(self)
        self.__callee = callee
        log.debug("%r calls %r", self, callee)
        return leaf

    def resume(self) -> None:
        """Run until nothing more can run without an outside resume."""
        current: Continuation[Any] | Noop = self
        while not isinstance(current, Noop):
            current = current.__step()

    def destroy(self) -> None:
        """Abandon the body, whether or not it has finished."""
        if self.__state is State.DESTROYED:
            return
        if self.__state is State.RUNNING:
            raise ProtocolError(f"Cannot destroy running {self!r}")
        self.__state = State.DESTROYED
        self.__awaiter = None
        self.__callee = None
        self.promise.unlink()
        _close(self.__coroutine)

    def __check_resumable(self):
        if self.scheduled:
            raise ProtocolError(f"{self!r} is scheduled on a loop")
        if not self.resumable:
            raise ProtocolError(f"Cannot resume {self!r}")
        if self.awaiting is not None:
            raise ProtocolError(f"{self!r} is awaiting {self.awaiting!r}")

    def __step(self) -> Continuation[Any] | Noop:
        """Advance to the next suspension point and return what runs next."""
        self.__check_resumable()
        self.__state = State.RUNNING
        self.__callee = None
        awaiter, self.__awaiter = self.__awaiter, None

        next_step: Callable[[], Any] = partial(self.__coroutine.send, None)
        if awaiter is not None:
            try:
                next_step = partial(self.__coroutine.send, awaiter.resume())
            except Exception as exception:
                next_step = partial(self.__coroutine.throw, exception)

        try:
            awaiter = next_step()
        except StopIteration as stop:
            self.promise.set_value(stop.value)
            return self.__finish()
        except Exception as exception:
            self.promise.set_exception(exception)
            return self.__finish()
        except BaseException:
            self.__state = State.DONE
            raise

        self.__state = State.SUSPENDED
        if not isinstance(awaiter, Awaiter):
            self.destroy()
            raise ProtocolError(f"{self!r} awaited a non-awaiter: {awaiter!r}")

        self.__awaiter = awaiter
        try:
            if awaiter.ready():
                return self
            return awaiter.suspend(self)
        except BaseException:
            # A body parked at a failed await must never continue.
            self.destroy()
            raise

    def __finish(self) -> Continuation[Any] | Noop:
        self.__state = State.DONE
        return Final().suspend(self)
