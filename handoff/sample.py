from .awaiter import emit
from .drain import drain
from .registry import routine
from .sleep import sleep


@routine(name="world")
async def world():
    await emit(1)
    await emit(2)
    return 42


@routine(name="hello")
async def hello():
    # Only world's final value reaches us; its yields are drained away.
    value = await drain(world())
    await emit(value)
    await emit(100)
    return 200


@routine(name="factorial")
async def factorial(n: int):
    if n <= 1:
        return 1
    return n * await factorial(n - 1)


@routine(name="countdown")
async def countdown(n: int):
    """Descend ``n`` tasks deep and count the levels on the way back up."""
    if n <= 0:
        return 0
    return 1 + await countdown(n - 1)


@routine(name="ticker")
async def ticker(name: str, ticks: int, interval: float):
    seen = []
    for tick in range(ticks):
        seen.append(f"{name}{tick}")
        await sleep(interval)
    return seen
