"""Exception types shared by the monitor and the proxy."""

from __future__ import annotations


class IVMonitorError(Exception):
    """Base class for all ivmonitor errors."""


class NoValidDataError(IVMonitorError):
    """Every reading fetched in a cycle failed validation."""


class UpstreamFetchError(IVMonitorError):
    """A single symbol could not be fetched from the remote source."""

    def __init__(self, symbol: str, reason: str) -> None:
        self.symbol = symbol
        self.reason = reason
        super().__init__(f"{symbol}: {reason}")


class PersistenceError(IVMonitorError):
    """The key-value store could not be read or written."""


class ProxyUpstreamError(IVMonitorError):
    """The proxy's upstream data API failed or returned a non-2xx status."""


class ConfigError(IVMonitorError, ValueError):
    """A configuration update contained an invalid value."""
