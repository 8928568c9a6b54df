"""Persistent key-value store for the monitor config and last snapshot."""

from __future__ import annotations

import asyncio
import copy
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from ..errors import PersistenceError
from .config import DEFAULT_CONFIG, MonitorConfig, merge_config
from .models import Reading, ReadingChange

logger = logging.getLogger(__name__)

CONFIG_KEY = "config"
SNAPSHOT_KEY = "lastData"


class KeyValueStore(ABC):
    """Contract for JSON-compatible key-value persistence.

    Values are plain JSON types. Implementations may raise any exception on
    I/O failure; the typed helpers below turn those into PersistenceError.
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the stored value for `key`, or None if absent."""

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store `value` under `key`, replacing any previous value."""


class MemoryStore(KeyValueStore):
    """In-process store. Values are deep-copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(key))

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class JsonFileStore(KeyValueStore):
    """Store backed by a single JSON file.

    The whole document is rewritten on every set() via a temp file and
    os.replace, so a crash mid-write never leaves a truncated file. File I/O
    runs in a worker thread to keep the event loop free.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def get(self, key: str) -> Any | None:
        data = await asyncio.to_thread(self._read)
        return data.get(key)

    async def set(self, key: str, value: Any) -> None:
        await asyncio.to_thread(self._write_key, key, value)

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        with self._path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"{self._path} does not contain a JSON object")
        return data

    def _write_key(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=".ivmonitor-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp, self._path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


# --- Typed accessors ---


async def load_config(store: KeyValueStore) -> MonitorConfig:
    """Read the stored config merged over the defaults.

    A stored payload with an invalid field falls back to the defaults for
    the whole config rather than failing the cycle.
    """
    try:
        raw = await store.get(CONFIG_KEY)
    except Exception as e:
        raise PersistenceError(f"failed to read config: {e}") from e
    if not raw:
        return DEFAULT_CONFIG
    try:
        return merge_config(DEFAULT_CONFIG, raw)
    except ValueError as e:
        logger.warning("Stored config is invalid (%s), using defaults", e)
        return DEFAULT_CONFIG


async def save_config(store: KeyValueStore, config: MonitorConfig) -> None:
    try:
        await store.set(CONFIG_KEY, config.to_dict())
    except Exception as e:
        raise PersistenceError(f"failed to write config: {e}") from e


async def has_config(store: KeyValueStore) -> bool:
    try:
        return bool(await store.get(CONFIG_KEY))
    except Exception as e:
        raise PersistenceError(f"failed to read config: {e}") from e


async def load_snapshot(store: KeyValueStore) -> list[Reading]:
    """Read the last persisted snapshot. Malformed entries are skipped."""
    try:
        raw = await store.get(SNAPSHOT_KEY)
    except Exception as e:
        raise PersistenceError(f"failed to read snapshot: {e}") from e
    if not isinstance(raw, list):
        return []

    readings: list[Reading] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        try:
            reading = Reading.from_dict(item)
        except (KeyError, TypeError) as e:
            logger.debug("Skipping malformed snapshot entry %r: %s", item, e)
            continue
        if reading.is_valid():
            readings.append(reading)
    return readings


async def load_snapshot_payload(store: KeyValueStore) -> list[dict[str, Any]]:
    """The snapshot as stored, change fields included."""
    try:
        raw = await store.get(SNAPSHOT_KEY)
    except Exception as e:
        raise PersistenceError(f"failed to read snapshot: {e}") from e
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, dict)]


async def save_snapshot(store: KeyValueStore, changes: list[ReadingChange]) -> None:
    try:
        await store.set(SNAPSHOT_KEY, [change.to_dict() for change in changes])
    except Exception as e:
        raise PersistenceError(f"failed to write snapshot: {e}") from e
