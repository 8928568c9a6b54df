"""IV Monitor: implied-volatility refresh/notify service and caching data proxy."""

__version__ = "0.1.0"
