from dataclasses import dataclass
from typing import Any

from .continuation import Continuation
from .loop import Loop
from .protocol import NOOP
from .protocol import Awaiter
from .protocol import Noop


@dataclass(eq=False, kw_only=True)
class Sleep(Awaiter[None]):
    loop: Loop
    when: float

    def suspend(self, current: Continuation[Any], /) -> Noop:
        if self.when <= self.loop.time():
            self.loop.schedule_now(current)
        else:
            self.loop.schedule_at(self.when, current)
        return NOOP


def sleep(delay: float, /) -> Sleep:
    """Suspend the running task for ``delay`` seconds of loop time.

    A delay of zero or less lets every other ready task run first.
    """
    loop = Loop.current()
    return Sleep(loop=loop, when=loop.time() + delay)


def sleep_until(when: float, /) -> Sleep:
    return Sleep(loop=Loop.current(), when=when)
