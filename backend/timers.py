"""Small helpers for the cancellable asyncio tasks behind auto-play and notification expiry."""

import asyncio
from typing import Awaitable, Callable, Optional


def start_task(factory: Callable[[], Awaitable[None]]) -> Optional[asyncio.Task]:
    """Schedule ``factory()`` on the running loop.

    Returns None when no loop is running; the caller then drives its
    transitions by hand (this is how the state machines are unit tested).
    The coroutine is only created once a loop is known to exist.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return None
    return loop.create_task(factory())


def cancel_task(task: Optional[asyncio.Task]) -> None:
    """Cancel ``task`` unless it is the task currently running."""
    if task is None or task.done():
        return
    try:
        current = asyncio.current_task()
    except RuntimeError:
        current = None
    if task is not current:
        task.cancel()
