"""User-facing monitor configuration and the partial-update merge."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from ..errors import ConfigError

DEFAULT_SYMBOLS: tuple[str, ...] = ("IF", "IC", "IH")
DEFAULT_REFRESH_INTERVAL = 60  # seconds
DEFAULT_THRESHOLD_PERCENT = 5.0
MIN_REFRESH_INTERVAL = 1


@dataclass(frozen=True, slots=True)
class NotificationSettings:
    enabled: bool = True
    threshold_percent: float = DEFAULT_THRESHOLD_PERCENT

    def to_dict(self) -> dict[str, Any]:
        return {"enabled": self.enabled, "threshold": self.threshold_percent}


@dataclass(frozen=True, slots=True)
class MonitorConfig:
    """Full, validated configuration read by the scheduler each cycle."""

    symbols: tuple[str, ...] = DEFAULT_SYMBOLS
    refresh_interval_seconds: int = DEFAULT_REFRESH_INTERVAL
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    use_real_data: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the stored field names."""
        return {
            "symbols": list(self.symbols),
            "refreshInterval": self.refresh_interval_seconds,
            "notifications": self.notifications.to_dict(),
            "useRealData": self.use_real_data,
        }


DEFAULT_CONFIG = MonitorConfig()

_MISSING = object()


def _pick(data: Mapping[str, Any], *names: str) -> Any:
    for name in names:
        if name in data:
            return data[name]
    return _MISSING


def _normalize_symbols(value: Any) -> tuple[str, ...]:
    if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
        raise ConfigError("symbols must be a list of strings")
    symbols: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ConfigError(f"invalid symbol: {item!r}")
        symbol = item.strip().upper()
        if not symbol:
            continue
        if symbol not in symbols:
            symbols.append(symbol)
    if not symbols:
        raise ConfigError("at least one symbol is required")
    return tuple(symbols)


def _to_number(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number") from None
    if not math.isfinite(number):
        raise ConfigError(f"{name} must be finite")
    return number


def _to_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{name} must be true or false")
    return value


def merge_config(base: MonitorConfig, partial: Mapping[str, Any] | None) -> MonitorConfig:
    """Merge a partial update into `base` and return a new validated config.

    Accepts the stored names (``refreshInterval``, ``useRealData``,
    ``notifications.threshold``) as well as the attribute names. Unknown keys
    are ignored so older or newer stored payloads still load.
    """
    if not partial:
        return base
    if not isinstance(partial, Mapping):
        raise ConfigError("config update must be an object")

    config = base

    symbols = _pick(partial, "symbols")
    if symbols is not _MISSING:
        config = replace(config, symbols=_normalize_symbols(symbols))

    interval = _pick(partial, "refreshInterval", "refresh_interval_seconds")
    if interval is not _MISSING:
        seconds = _to_number(interval, "refreshInterval")
        if seconds < MIN_REFRESH_INTERVAL:
            raise ConfigError(f"refreshInterval must be >= {MIN_REFRESH_INTERVAL}")
        config = replace(config, refresh_interval_seconds=int(seconds))

    use_real = _pick(partial, "useRealData", "use_real_data")
    if use_real is not _MISSING:
        config = replace(config, use_real_data=_to_bool(use_real, "useRealData"))

    notifications = _pick(partial, "notifications")
    if notifications is not _MISSING:
        if not isinstance(notifications, Mapping):
            raise ConfigError("notifications must be an object")
        settings = config.notifications
        enabled = _pick(notifications, "enabled")
        if enabled is not _MISSING:
            settings = replace(settings, enabled=_to_bool(enabled, "notifications.enabled"))
        threshold = _pick(notifications, "threshold", "threshold_percent")
        if threshold is not _MISSING:
            value = _to_number(threshold, "notifications.threshold")
            if value <= 0:
                raise ConfigError("notifications.threshold must be > 0")
            settings = replace(settings, threshold_percent=value)
        config = replace(config, notifications=settings)

    return config
