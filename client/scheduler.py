"""
Cancellable delayed calls on the running asyncio loop.

Public API:
    LoopScheduler().schedule(fn, delay) → handle with cancel()
"""

import asyncio
from collections.abc import Callable
from typing import Protocol


class Handle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, fn: Callable[[], None], delay: float) -> Handle: ...


class LoopScheduler:
    """Schedules plain callbacks with loop.call_later; the handle is a TimerHandle."""

    def schedule(self, fn: Callable[[], None], delay: float) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay, fn)
