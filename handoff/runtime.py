import importlib
import os
import tomllib
from collections.abc import Iterable
from pathlib import Path
from queue import Queue

from .bus import Bus
from .loop import Loop
from .registry import ROUTINE_REGISTRY
from .routine import Routine
from .run import run
from .task import Task


class Runtime:
    """A configured loop and event bus.

    Routine modules listed under ``register`` in the ``[tool.handoff]``
    table of the nearest pyproject.toml are imported on construction. The
    ``HANDOFF_REGISTER`` environment variable, a comma-separated list of
    modules, takes precedence over the file.
    """

    def __init__(self, *, loop: Loop | None = None, bus: Bus | None = None):
        self.__bus = bus if bus is not None else Bus()
        self.__loop = loop or Loop(bus=self.__bus)
        self.__register_routines()

    def __pyproject(self) -> Path | None:
        for path in [cwd := Path.cwd(), *cwd.parents]:
            candidate = path / "pyproject.toml"
            if candidate.is_file():
                return candidate
        return None

    def __config(self) -> dict:
        if pyproject := self.__pyproject():
            with pyproject.open("rb") as f:
                config = tomllib.load(f)
            return config.get("tool", {}).get("handoff", {})
        return {}

    def __register_routines(self):
        """Import the modules that define routines."""
        if register := os.environ.get("HANDOFF_REGISTER"):
            modules = [m.strip() for m in register.split(",") if m.strip()]
        else:
            modules = self.__config().get("register", [])
            if not isinstance(modules, list):
                raise ValueError(
                    f"'register' in [tool.handoff] must be a list, got: {modules!r}"
                )

        for module_name in modules:
            importlib.import_module(module_name)

    @property
    def loop(self) -> Loop:
        return self.__loop

    def run[R](self, task: Task[R], /) -> R:
        return run(task, loop=self.__loop)

    def routine(self, routine_name: str, /) -> Routine:
        return ROUTINE_REGISTRY[routine_name]

    def routines(self) -> list[Routine]:
        """Return all registered routines."""
        return list(ROUTINE_REGISTRY.values())

    def subscribe[T](self, types: Iterable[type[T]]) -> Queue[T]:
        return self.__bus.subscribe(types)

    def unsubscribe(self, queue: Queue):
        return self.__bus.unsubscribe(queue)

    def shutdown(self):
        self.__bus.shutdown()
