from .loop import Loop
from .task import Task


def run[R](task: Task[R], /, *, loop: Loop | None = None) -> R:
    """Drive a task to completion and return its result.

    Values the task yields along the way are discarded.
    """
    loop = loop or Loop()
    while not task.done:
        loop.schedule_now(task.continuation.leaf())
        loop.run()
    return task.result()
