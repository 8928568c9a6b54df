"""Data models for implied-volatility readings."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Any


def _now_label() -> str:
    return time.strftime("%H:%M:%S")


@dataclass(frozen=True, slots=True)
class Reading:
    """Immutable implied-volatility reading for one symbol at a point in time."""

    symbol: str
    implied_volatility: float
    price: float | None = None
    update_time: str = field(default_factory=_now_label)
    date: str | None = None  # Data date reported by the upstream series
    is_default: bool = False  # True when the value is a fallback substitute

    def is_valid(self) -> bool:
        """A reading needs a non-empty symbol and a finite numeric volatility."""
        if not isinstance(self.symbol, str) or not self.symbol.strip():
            return False
        iv = self.implied_volatility
        if isinstance(iv, bool) or not isinstance(iv, (int, float)):
            return False
        return math.isfinite(iv)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the storage / broadcast field names."""
        data: dict[str, Any] = {
            "symbol": self.symbol,
            "impliedVolatility": self.implied_volatility,
            "updateTime": self.update_time,
        }
        if self.price is not None:
            data["price"] = self.price
        if self.date is not None:
            data["date"] = self.date
        if self.is_default:
            data["isDefault"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Reading:
        """Inverse of to_dict(). Raises KeyError/TypeError on malformed input."""
        return cls(
            symbol=data["symbol"],
            implied_volatility=data["impliedVolatility"],
            price=data.get("price"),
            update_time=data.get("updateTime", ""),
            date=data.get("date"),
            is_default=bool(data.get("isDefault", False)),
        )


@dataclass(frozen=True, slots=True)
class ReadingChange:
    """A reading paired with the prior cycle's volatility for the same symbol."""

    reading: Reading
    previous: float | None = None  # None when there is no prior data

    @property
    def symbol(self) -> str:
        return self.reading.symbol

    @property
    def change(self) -> float:
        """Absolute volatility change. Zero without prior data."""
        if self.previous is None:
            return 0.0
        return self.reading.implied_volatility - self.previous

    @property
    def change_percent(self) -> float:
        """Percentage change from the prior volatility."""
        if not self.previous:
            return 0.0
        return self.change / self.previous * 100

    @property
    def direction(self) -> str:
        """'up', 'down', or 'flat'."""
        if self.change > 0:
            return "up"
        elif self.change < 0:
            return "down"
        return "flat"

    def to_dict(self) -> dict[str, Any]:
        """Serialize for storage and DATA_UPDATED broadcasts."""
        data = self.reading.to_dict()
        data["change"] = self.change
        data["changePercent"] = self.change_percent
        data["direction"] = self.direction
        return data


@dataclass(frozen=True, slots=True)
class Notification:
    title: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "message": self.message}


def dedupe_by_symbol(readings: list[Reading]) -> list[Reading]:
    """Keep one reading per symbol.

    A later reading for the same symbol replaces the earlier one but keeps
    the position where the symbol first appeared.
    """
    by_symbol: dict[str, Reading] = {}
    for reading in readings:
        by_symbol[reading.symbol] = reading
    return list(by_symbol.values())
