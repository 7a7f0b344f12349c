import json
import logging
from queue import ShutDown
from typing import Annotated
from typing import Any

from typer import Argument
from typer import Exit
from typer import Option
from typer import Typer

from .runtime import Runtime

app = Typer()


def parse_argument(value: str) -> Any:
    """Decode an argument as JSON, falling back to the plain string."""
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


@app.command()
def routines():
    """Show all registered routines."""
    runtime = Runtime()
    try:
        routines = runtime.routines()

        if not routines:
            print("No routines registered.")
            return

        name_width = max(len("Name"), max(len(routine.name) for routine in routines))
        function_paths = []
        for routine in routines:
            module = routine.fn.__module__
            qualname = routine.fn.__qualname__
            function_paths.append(f"{module}.{qualname}")
        path_width = max(len("Path"), max(len(path) for path in function_paths))

        print(f"{'Name':<{name_width}} | {'Path':<{path_width}}")
        print(f"{'-' * name_width}-+-{'-' * path_width}")
        for routine, path in zip(routines, function_paths, strict=False):
            print(f"{routine.name:<{name_width}} | {path:<{path_width}}")
    finally:
        runtime.shutdown()


@app.command()
def run(
    name: Annotated[str, Argument(help="Name of a registered routine.")],
    arguments: Annotated[
        list[str] | None,
        Argument(
            help="Arguments for the routine, decoded as JSON where possible. "
            'Examples: 5, \'"text"\', \'[1, 2]\'',
            metavar="[ARGUMENT]...",
        ),
    ] = None,
    events: Annotated[bool, Option(help="Print loop events after the run.")] = False,
    verbose: Annotated[bool, Option(help="Log task transfers.")] = False,
):
    """Run a routine to completion on a fresh loop and print its result."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    runtime = Runtime()
    subscription = runtime.subscribe({object}) if events else None
    try:
        try:
            routine = runtime.routine(name)
        except KeyError:
            print(f"No routine named {name!r} is registered.")
            raise Exit(1) from None

        with routine(*map(parse_argument, arguments or [])) as task:
            try:
                result = runtime.run(task)
            except Exception as exception:
                print(f"{name} failed: {exception!r}")
                raise Exit(1) from None
        print(result)
    finally:
        runtime.shutdown()

    if subscription is not None:
        while True:
            try:
                print(subscription.get_nowait())
            except ShutDown:
                break


if __name__ == "__main__":
    app()
