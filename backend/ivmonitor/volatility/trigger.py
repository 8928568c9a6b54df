"""Recurring trigger used by the refresh scheduler."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

TickCallback = Callable[[], Awaitable[None] | None]


class Ticker:
    """The single recurring trigger for the process.

    Lifecycle: start(interval) on startup, start() again to reconfigure
    (the previous trigger is cancelled first, so at most one is active),
    stop() on teardown.

    Each tick runs in its own task. Reconfiguring cancels only the sleep
    loop, so a tick already in flight runs to completion; only stop()
    cancels in-flight ticks. A tick slower than the interval overlaps the
    next one instead of delaying it.

    Within a tick, callbacks run one after another in registration order.
    A callback that raises is logged and the remaining callbacks still run.
    """

    def __init__(self, name: str = "iv-refresh") -> None:
        self._name = name
        self._callbacks: list[TickCallback] = []
        self._task: asyncio.Task | None = None
        self._ticks: set[asyncio.Task] = set()
        self._interval: float | None = None

    def on_tick(self, callback: TickCallback) -> Callable[[], None]:
        """Register a tick callback. Returns an unsubscribe function."""
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    @property
    def interval(self) -> float | None:
        """Seconds between ticks, or None when stopped."""
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def pending_ticks(self) -> int:
        """Ticks started but not yet finished."""
        return len(self._ticks)

    async def start(self, interval: float) -> None:
        """(Re)start ticking every `interval` seconds. The first tick is one interval away."""
        await self._cancel_loop()
        self._interval = interval
        self._task = asyncio.create_task(self._run_loop(interval), name=self._name)

    async def stop(self) -> None:
        """Cancel the loop and every in-flight tick."""
        await self._cancel_loop()
        current = asyncio.current_task()
        ticks = [t for t in self._ticks if t is not current and not t.done()]
        for tick in ticks:
            tick.cancel()
        if ticks:
            await asyncio.gather(*ticks, return_exceptions=True)
        self._interval = None

    async def fire(self) -> None:
        """Run every tick callback once."""
        for callback in list(self._callbacks):
            try:
                result = callback()
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Tick callback failed")

    async def _cancel_loop(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        if task is asyncio.current_task():
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    def _spawn_tick(self) -> None:
        tick = asyncio.create_task(self.fire(), name=f"{self._name}-tick")
        self._ticks.add(tick)
        tick.add_done_callback(self._ticks.discard)

    async def _run_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self._spawn_tick()
