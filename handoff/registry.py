from collections.abc import Callable
from collections.abc import Coroutine
from typing import Any

from .routine import Routine

ROUTINE_REGISTRY: dict[str, Routine] = {}


def routine(*, name: str | None = None):
    """Decorate an async function to make it a routine."""

    def create_routine[**A, R](
        fn: Callable[A, Coroutine[Any, Any, R]],
    ) -> Routine[A, R]:
        routine = Routine(fn, name=name or f"{fn.__module__}.{fn.__qualname__}")
        ROUTINE_REGISTRY.setdefault(routine.name, routine)
        assert ROUTINE_REGISTRY[routine.name].fn is fn, (
            f"Failed to register {routine}"
        )
        return routine

    return create_routine
