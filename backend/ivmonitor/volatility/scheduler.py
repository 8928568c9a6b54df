"""Refresh scheduler: fetch, diff, notify, persist, publish."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..errors import NoValidDataError
from . import store as kv
from .bus import DATA_UPDATED, MessageBus
from .config import DEFAULT_CONFIG, MIN_REFRESH_INTERVAL, MonitorConfig, merge_config
from .interface import ReadingSource
from .models import Reading, ReadingChange, dedupe_by_symbol
from .notifier import Notifier, detect_changes
from .trigger import Ticker

logger = logging.getLogger(__name__)


def validate_readings(readings: list[Reading]) -> list[Reading]:
    """Drop readings without a symbol or with a non-numeric volatility."""
    valid = []
    for reading in readings:
        if reading.is_valid():
            valid.append(reading)
        else:
            logger.warning("Dropping invalid reading: %r", reading)
    return dedupe_by_symbol(valid)


class RefreshScheduler:
    """Owns the recurring trigger and runs refresh cycles.

    One cycle:
        config -> source.fetch(symbols) -> validate -> load prior snapshot
        -> detect changes -> notify -> save snapshot -> publish DATA_UPDATED

    Timed cycles (via the Ticker) and manual ones (refresh()) share
    run_cycle() and are not mutually excluded. The last snapshot write wins.
    """

    def __init__(
        self,
        store: kv.KeyValueStore,
        bus: MessageBus,
        notifier: Notifier,
        synthetic_source: ReadingSource,
        remote_source: ReadingSource | None = None,
        ticker: Ticker | None = None,
    ) -> None:
        self._store = store
        self._bus = bus
        self._notifier = notifier
        self._synthetic = synthetic_source
        self._remote = remote_source
        self._ticker = ticker or Ticker()
        self._ticker.on_tick(self._on_tick)

    @property
    def ticker(self) -> Ticker:
        return self._ticker

    # --- Lifecycle ---

    async def start(self) -> MonitorConfig:
        """Install defaults if needed, schedule the trigger, run one cycle now."""
        if await kv.has_config(self._store):
            config = await kv.load_config(self._store)
        else:
            config = DEFAULT_CONFIG
            logger.info("No stored config, installing defaults")
        # Re-save so stored payloads from older versions gain any new defaults
        await kv.save_config(self._store, config)
        await self.schedule(config.refresh_interval_seconds)
        await self._on_tick()
        return config

    async def stop(self) -> None:
        """Release the trigger and close the sources."""
        await self._ticker.stop()
        for source in (self._synthetic, self._remote):
            if source is not None:
                await source.aclose()
        logger.info("Refresh scheduler stopped")

    async def schedule(self, interval_seconds: float) -> None:
        """(Re)configure the recurring trigger. The interval is clamped to >= 1s."""
        interval = max(MIN_REFRESH_INTERVAL, interval_seconds)
        await self._ticker.start(interval)
        logger.info("Refresh scheduled every %s seconds", interval)

    # --- Cycles ---

    async def run_cycle(self) -> list[ReadingChange]:
        """Execute one refresh cycle and return the readings with their changes.

        Raises NoValidDataError when nothing survives validation (the stored
        snapshot is left untouched) and PersistenceError on store failures.
        """
        config = await kv.load_config(self._store)
        symbols = list(config.symbols)
        source = self._select_source(config)
        logger.debug("Refreshing %s via %s", ", ".join(symbols), type(source).__name__)

        readings = validate_readings(await source.fetch(symbols))
        if not readings:
            raise NoValidDataError(f"no valid readings for {', '.join(symbols)}")

        previous = await kv.load_snapshot(self._store)
        changes = detect_changes(readings, previous)

        if config.notifications.enabled:
            self._notifier.check_and_notify(changes, config.notifications)

        await kv.save_snapshot(self._store, changes)
        await self._bus.publish(DATA_UPDATED, [change.to_dict() for change in changes])
        logger.info("Refresh complete: %d readings", len(changes))
        return changes

    async def refresh(self) -> dict[str, Any]:
        """Manually triggered cycle. Reports the outcome instead of raising."""
        try:
            await self.run_cycle()
        except Exception as e:
            logger.exception("Manual refresh failed")
            return {"success": False, "error": str(e)}
        return {"success": True}

    async def update_config(self, partial: Mapping[str, Any]) -> dict[str, Any]:
        """Merge and persist a config update, reschedule, and refresh immediately."""
        try:
            current = await kv.load_config(self._store)
            config = merge_config(current, partial)
            await kv.save_config(self._store, config)
            await self.schedule(config.refresh_interval_seconds)
            await self.run_cycle()
        except Exception as e:
            logger.exception("Config update failed")
            return {"success": False, "error": str(e)}
        logger.info("Config updated and applied")
        return {"success": True}

    async def reset_config(self) -> dict[str, Any]:
        """Restore the default config."""
        return await self.update_config(DEFAULT_CONFIG.to_dict())

    async def get_config(self) -> MonitorConfig:
        return await kv.load_config(self._store)

    async def get_snapshot(self) -> list[dict[str, Any]]:
        return await kv.load_snapshot_payload(self._store)

    # --- Internal ---

    def _select_source(self, config: MonitorConfig) -> ReadingSource:
        if config.use_real_data:
            if self._remote is not None:
                return self._remote
            logger.warning("Real data requested but no remote source configured, using synthetic")
        return self._synthetic

    async def _on_tick(self) -> None:
        """Trigger entry point. Never raises, so the next tick always fires."""
        try:
            await self.run_cycle()
        except Exception:
            logger.exception("Refresh cycle failed")
