"""Abstract interface for implied-volatility reading sources."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import Reading


class ReadingSource(ABC):
    """Contract for reading providers.

    Unlike a streaming feed, a source is pulled once per refresh cycle: the
    scheduler calls fetch() with the configured symbols and gets back one
    reading per symbol it could produce.

    Lifecycle:
        source = SyntheticReadingSource()
        readings = await source.fetch(["IF", "IC", "IH"])
        # ... next cycle ...
        readings = await source.fetch(["IF", "IC", "IH"])
        # ... shutting down ...
        await source.aclose()
    """

    @abstractmethod
    async def fetch(self, symbols: list[str]) -> list[Reading]:
        """Produce fresh readings for `symbols`.

        Per-symbol failures are handled inside the source; the returned list
        is handed to validation, so it may contain readings that fail it.
        """

    async def aclose(self) -> None:
        """Release any held resources. Safe to call multiple times."""
