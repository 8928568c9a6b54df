"""In-process publish/subscribe bus for update broadcasts."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

DATA_UPDATED = "DATA_UPDATED"

Listener = Callable[[Any], Awaitable[None] | None]


class MessageBus:
    """Topic-based fan-out to any number of listeners.

    Dispatch is sequential on the caller's event loop, in subscription order.
    There is no acknowledgement: a listener that raises is logged and the
    remaining listeners still receive the message.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def subscribe(self, topic: str, callback: Listener) -> Callable[[], None]:
        """Register `callback` for `topic`. Returns an unsubscribe function."""
        self._listeners.setdefault(topic, []).append(callback)

        def unsubscribe() -> None:
            listeners = self._listeners.get(topic, [])
            if callback in listeners:
                listeners.remove(callback)

        return unsubscribe

    def listener_count(self, topic: str) -> int:
        return len(self._listeners.get(topic, []))

    async def publish(self, topic: str, payload: Any) -> int:
        """Deliver `payload` to every listener of `topic`. Returns listeners reached."""
        delivered = 0
        # Copy so listeners may unsubscribe while being dispatched
        for callback in list(self._listeners.get(topic, [])):
            try:
                result = callback(payload)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
            except Exception:
                logger.exception("Listener for %s failed", topic)
        logger.debug("Published %s to %d listener(s)", topic, delivered)
        return delivered
