import pytest

from .awaiter import emit
from .drain import drain
from .loop import Loop
from .protocol import ProtocolError
from .routine import Routine
from .sleep import sleep


async def _counts(n: int):
    for i in range(n):
        await emit(i)
    return n


counts = Routine(_counts, name="drain_test.counts")


def test_drain_discards_yields_and_continues_in_the_same_resume():
    async def body():
        value = await drain(counts(3))
        await emit(value)
        return "done"

    task = Routine(body, name="body")()
    task.resume()
    assert task.value() == 3

    task.resume()
    assert task.result() == "done"


def test_draining_a_finished_task_is_ready():
    inner = counts(0)
    inner.resume()
    assert inner.done

    async def body():
        return await drain(inner)

    task = Routine(body, name="body")()
    task.resume()
    assert task.result() == 0


def test_draining_a_failed_task_raises_at_the_await():
    async def fails():
        await emit("partial")
        raise ValueError("boom")

    async def body():
        with pytest.raises(ValueError, match="boom"):
            await drain(Routine(fails, name="fails")())
        return "handled"

    task = Routine(body, name="body")()
    task.resume()
    assert task.result() == "handled"


def test_draining_a_task_that_waits_on_the_loop_raises():
    async def sleeper():
        await sleep(1)

    async def body():
        await drain(Routine(sleeper, name="sleeper")())

    loop = Loop(idle=lambda delay: None)
    task = Routine(body, name="body")()
    loop.schedule_now(task.continuation)

    with pytest.raises(ProtocolError):
        loop.run()
