"""Factories that build monitor components from environment variables."""

from __future__ import annotations

import logging
import os

from .bus import MessageBus
from .interface import ReadingSource
from .notifier import Notifier, NotificationSink
from .remote import DEFAULT_PROXY_URL, RemoteReadingSource
from .scheduler import RefreshScheduler
from .store import JsonFileStore, KeyValueStore, MemoryStore
from .synthetic import UNIFORM, SyntheticPolicy, SyntheticReadingSource

logger = logging.getLogger(__name__)


def create_store() -> KeyValueStore:
    """Create the key-value store.

    - IV_STORE_PATH set and non-empty → JsonFileStore at that path
    - Otherwise → MemoryStore (state is lost on restart)
    """
    path = os.environ.get("IV_STORE_PATH", "").strip()
    if path:
        logger.info("Monitor store: JSON file %s", path)
        return JsonFileStore(path)
    logger.info("Monitor store: in-memory")
    return MemoryStore()


def create_reading_sources() -> tuple[ReadingSource, ReadingSource]:
    """Create the (synthetic, remote) reading sources.

    - IV_SYNTHETIC_MODE: "uniform" (default) or "walk"
    - IV_SYNTHETIC_SEED: integer seed for reproducible synthetic values
    - IV_PROXY_URL: base URL of the caching data proxy

    The scheduler picks between them per cycle from the config's
    use_real_data flag.
    """
    mode = os.environ.get("IV_SYNTHETIC_MODE", "").strip().lower() or UNIFORM
    seed_raw = os.environ.get("IV_SYNTHETIC_SEED", "").strip()
    seed = int(seed_raw) if seed_raw else None
    proxy_url = os.environ.get("IV_PROXY_URL", "").strip() or DEFAULT_PROXY_URL

    synthetic = SyntheticReadingSource(policy=SyntheticPolicy(mode=mode), seed=seed)
    remote = RemoteReadingSource(base_url=proxy_url)
    logger.info("Reading sources: synthetic (%s), remote via %s", mode, proxy_url)
    return synthetic, remote


def create_scheduler(
    bus: MessageBus,
    sink: NotificationSink | None = None,
    store: KeyValueStore | None = None,
) -> RefreshScheduler:
    """Build a RefreshScheduler with environment-selected store and sources.

    Returns an unstarted scheduler. Caller must await scheduler.start().
    """
    synthetic, remote = create_reading_sources()
    return RefreshScheduler(
        store=store if store is not None else create_store(),
        bus=bus,
        notifier=Notifier(sink),
        synthetic_source=synthetic,
        remote_source=remote,
    )
