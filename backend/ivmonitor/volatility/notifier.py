"""Change detection and threshold notifications."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import deque

from .config import NotificationSettings
from .models import Notification, Reading, ReadingChange

logger = logging.getLogger(__name__)


def detect_changes(current: list[Reading], previous: list[Reading]) -> list[ReadingChange]:
    """Pair each current reading with the prior reading for the same symbol.

    Symbols absent from `previous` get previous=None, i.e. a change of
    exactly zero.
    """
    prior = {reading.symbol: reading.implied_volatility for reading in previous}
    return [ReadingChange(reading=r, previous=prior.get(r.symbol)) for r in current]


def build_notification(change: ReadingChange) -> Notification:
    direction = "up" if change.change_percent >= 0 else "down"
    return Notification(
        title=f"{change.symbol} implied volatility {direction} alert",
        message=(
            f"Current implied volatility: {change.reading.implied_volatility:.2f}%\n"
            f"Change: {change.change_percent:.2f}%"
        ),
    )


class NotificationSink(ABC):
    """Displays a notification. Fire-and-forget: no delivery confirmation."""

    @abstractmethod
    def send(self, notification: Notification) -> None: ...


class LoggingNotificationSink(NotificationSink):
    def send(self, notification: Notification) -> None:
        logger.info("NOTIFY %s | %s", notification.title, notification.message.replace("\n", " | "))


class MemoryNotificationSink(NotificationSink):
    """Keeps the most recent notifications in memory."""

    def __init__(self, capacity: int = 50) -> None:
        self._items: deque[Notification] = deque(maxlen=capacity)

    def send(self, notification: Notification) -> None:
        self._items.append(notification)

    def recent(self) -> list[Notification]:
        return list(self._items)

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)


class FanOutNotificationSink(NotificationSink):
    """Delivers each notification to several sinks."""

    def __init__(self, *sinks: NotificationSink) -> None:
        self._sinks = list(sinks)

    def send(self, notification: Notification) -> None:
        for sink in self._sinks:
            sink.send(notification)


class Notifier:
    """Emits one notification per symbol whose change crosses the threshold."""

    def __init__(self, sink: NotificationSink | None = None) -> None:
        self._sink = sink or LoggingNotificationSink()

    def check_and_notify(
        self, changes: list[ReadingChange], settings: NotificationSettings
    ) -> list[Notification]:
        """Send notifications for qualifying changes. Returns what was sent."""
        if not settings.enabled:
            return []

        sent: list[Notification] = []
        for change in changes:
            if change.previous is None:
                continue
            if abs(change.change_percent) < settings.threshold_percent:
                continue
            notification = build_notification(change)
            try:
                self._sink.send(notification)
            except Exception:
                logger.exception("Failed to send notification for %s", change.symbol)
                continue
            logger.info("Notification sent: %s", notification.title)
            sent.append(notification)
        return sent
