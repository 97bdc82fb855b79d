from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, Protocol, TypeVar

from ..core.exceptions import RemoteTimeoutError

T = TypeVar("T")


class TimerHandle(Protocol):
    def cancel(self) -> None:
        raise NotImplementedError


class Scheduler(Protocol):
    """Source of delayed callbacks for the feedback timers.

    ``asyncio`` event loops satisfy this protocol directly.
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        raise NotImplementedError


class LoopScheduler:
    """Schedules callbacks on an event loop, resolved lazily when not given."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


async def with_timeout(awaitable: Awaitable[T], timeout: Optional[float], *, what: str) -> T:
    """Await a record store call, converting a timeout into RemoteTimeoutError."""

    if timeout is None or timeout <= 0:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError as e:
        raise RemoteTimeoutError(f"{what} timed out after {timeout:g}s") from e
