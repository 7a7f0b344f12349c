import pytest

from .loop import Loop
from .loop_test import FakeClock
from .routine import Routine
from .sleep import sleep
from .sleep import sleep_until


async def _tick(log: list[tuple[float, str]], name: str, interval: float, ticks: int):
    for _ in range(ticks):
        log.append((Loop.current().time(), name))
        await sleep(interval)
    return name


tick = Routine(_tick, name="sleep_test.tick")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def loop(clock):
    return Loop(clock=clock, idle=clock.idle)


def test_sleeping_tasks_interleave_by_deadline(loop, clock):
    log = []
    fast = tick(log, "fast", 1.0, 3)
    slow = tick(log, "slow", 1.5, 2)
    loop.schedule_now(fast.continuation)
    loop.schedule_now(slow.continuation)

    loop.run()

    assert log == [
        (0.0, "fast"),
        (0.0, "slow"),
        (1.0, "fast"),
        (1.5, "slow"),
        (2.0, "fast"),
    ]
    assert fast.result() == "fast"
    assert slow.result() == "slow"
    assert clock.now == 3.0


def test_sleeping_zero_lets_ready_tasks_run_first(loop, clock):
    log = []
    first = tick(log, "first", 0, 2)
    second = tick(log, "second", 0, 2)
    loop.schedule_now(first.continuation)
    loop.schedule_now(second.continuation)

    loop.run()

    assert [name for _, name in log] == ["first", "second", "first", "second"]
    assert clock.idled == []


def test_sleep_until_an_absolute_time(loop, clock):
    async def body():
        await sleep_until(5.0)
        return Loop.current().time()

    task = Routine(body, name="body")()
    loop.schedule_now(task.continuation)
    loop.run()

    assert task.result() == 5.0
    assert clock.idled == [5.0]


def test_sleeping_outside_a_loop_fails_the_task():
    async def body():
        await sleep(1)

    task = Routine(body, name="body")()
    task.resume()

    with pytest.raises(RuntimeError, match="No loop is running"):
        task.result()
