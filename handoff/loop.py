import heapq
import logging
import time
from collections import deque
from collections.abc import Callable
from contextvars import ContextVar
from dataclasses import dataclass
from itertools import count
from typing import Any

from .bus import Bus
from .continuation import Continuation
from .event import Event
from .protocol import ProtocolError

log = logging.getLogger(__name__)


@dataclass(eq=False, kw_only=True)
class LoopStarted(Event): ...


@dataclass(eq=False, kw_only=True)
class LoopStopped(Event): ...


@dataclass(eq=False, kw_only=True)
class LoopIdled(Event):
    delay: float


@dataclass(eq=False, kw_only=True)
class ContinuationScheduled(Event):
    continuation_id: int
    name: str
    when: float | None


@dataclass(eq=False, kw_only=True)
class ContinuationResumed(Event):
    continuation_id: int
    name: str


class Loop:
    """Run continuations cooperatively on a single thread.

    Ready continuations run in the order they were scheduled. Timed
    continuations become ready once the clock reaches their deadline, and
    the loop idles until then only when nothing else is ready.
    """

    __current = ContextVar["Loop | None"]("Loop.current", default=None)

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        idle: Callable[[float], Any] = time.sleep,
        bus: Bus | None = None,
    ):
        self.__clock = clock
        self.__idle = idle
        self.__bus = bus
        self.__ready = deque[Continuation[Any]]()
        self.__timers: list[tuple[float, int, Continuation[Any]]] = []
        self.__sequence = count().__next__
        self.__running = False

    def __repr__(self):
        return (
            f"<{type(self).__name__} ready={len(self.__ready)} "
            f"timers={len(self.__timers)}>"
        )

    @classmethod
    def current(cls) -> "Loop":
        """Get the loop that is running in this context."""
        loop = cls.__current.get()
        if loop is None:
            raise RuntimeError("No loop is running.")
        return loop

    @property
    def ready(self) -> int:
        return len(self.__ready)

    @property
    def timers(self) -> int:
        return len(self.__timers)

    def time(self) -> float:
        return self.__clock()

    def schedule_now(self, continuation: Continuation[Any], /):
        """Run the continuation once everything already ready has run."""
        self.__claim(continuation, None)
        self.__ready.append(continuation)

    def schedule_at(self, when: float, continuation: Continuation[Any], /):
        """Run the continuation once the loop clock reaches ``when``."""
        self.__claim(continuation, when)
        heapq.heappush(self.__timers, (when, self.__sequence(), continuation))

    def run(self):
        """Run until no continuation is ready or waiting on a timer."""
        if self.__running:
            raise ProtocolError(f"{self!r} is already running")
        self.__running = True
        token = self.__current.set(self)
        self.__publish(LoopStarted())
        try:
            while self.__ready or self.__timers:
                if not self.__ready:
                    when, _, continuation = heapq.heappop(self.__timers)
                    delay = when - self.__clock()
                    if delay > 0:
                        log.debug("Idling %.3fs until %r is due", delay, continuation)
                        self.__publish(LoopIdled(delay=delay))
                        self.__idle(delay)
                    self.__ready.append(continuation)
                    continue

                continuation = self.__ready.popleft()
                continuation.scheduled = False
                self.__publish(
                    ContinuationResumed(
                        continuation_id=continuation.id, name=continuation.name
                    )
                )
                try:
                    continuation.resume()
                except Exception:
                    log.exception("%r escaped the task protocol", continuation)
                    raise
        finally:
            self.__current.reset(token)
            self.__running = False
            self.__publish(LoopStopped())

    def __claim(self, continuation: Continuation[Any], when: float | None):
        if continuation.scheduled:
            raise ProtocolError(f"{continuation!r} is already scheduled")
        if not continuation.resumable or continuation.awaiting is not None:
            raise ProtocolError(f"Cannot schedule {continuation!r}")
        continuation.scheduled = True
        self.__publish(
            ContinuationScheduled(
                continuation_id=continuation.id, name=continuation.name, when=when
            )
        )

    def __publish(self, event: Event):
        if self.__bus:
            self.__bus.publish(event)
