from __future__ import annotations

import asyncio
import logging
import threading
from typing import Awaitable, Callable, Optional, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")


class LoopRunner:
    """Runs one asyncio event loop in a daemon thread.

    Flask views are synchronous; they hand coroutines to this loop so every
    session's timers and state live on a single thread.
    """

    def __init__(self, *, name: str = "class-attendance-loop"):
        self._name = name
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._ready = threading.Event()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            raise RuntimeError("LoopRunner is not started")
        return self._loop

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "LoopRunner":
        if self.running:
            return self
        self._ready.clear()
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()
        self._ready.wait()
        return self

    def _run(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._ready.set()
        try:
            loop.run_forever()
        finally:
            loop.close()
            log.debug("event loop %s closed", self._name)

    def run(self, coro: Awaitable[T], *, timeout: Optional[float] = None) -> T:
        """Run ``coro`` on the loop thread and block until it finishes."""

        future = asyncio.run_coroutine_threadsafe(coro, self.loop)
        return future.result(timeout)

    def call(self, fn: Callable[..., T], *args, timeout: Optional[float] = None) -> T:
        """Run a plain callable on the loop thread (state is only touched there)."""

        async def _invoke() -> T:
            return fn(*args)

        return self.run(_invoke(), timeout=timeout)

    def stop(self) -> None:
        if not self.running:
            return
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join()
        self._thread = None
        self._loop = None
