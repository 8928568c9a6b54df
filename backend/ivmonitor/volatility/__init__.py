"""Implied-volatility refresh scheduler and notifier.

Public API:
    Reading                 - Immutable volatility reading dataclass
    ReadingChange           - Reading paired with its prior value
    MonitorConfig           - Validated user configuration
    merge_config            - Partial config update merge
    ReadingSource           - Abstract interface for reading providers
    SyntheticReadingSource  - Random / random-walk readings
    RemoteReadingSource     - Readings from the caching data proxy
    MessageBus              - DATA_UPDATED broadcast bus
    Notifier                - Threshold change notifications
    RefreshScheduler        - Recurring fetch/diff/notify/persist/publish cycle
    create_scheduler        - Factory wiring store and sources from the environment
    create_monitor_router   - FastAPI router for the monitor HTTP surface
    create_stream_router    - FastAPI router factory for the SSE endpoint
"""

from .api import create_monitor_router
from .bus import DATA_UPDATED, MessageBus
from .config import DEFAULT_CONFIG, MonitorConfig, NotificationSettings, merge_config
from .factory import create_scheduler
from .interface import ReadingSource
from .models import Notification, Reading, ReadingChange
from .notifier import Notifier, detect_changes
from .remote import RemoteReadingSource
from .scheduler import RefreshScheduler
from .stream import create_stream_router
from .synthetic import SyntheticPolicy, SyntheticReadingSource

__all__ = [
    "DATA_UPDATED",
    "DEFAULT_CONFIG",
    "MessageBus",
    "MonitorConfig",
    "Notification",
    "NotificationSettings",
    "Notifier",
    "Reading",
    "ReadingChange",
    "ReadingSource",
    "RefreshScheduler",
    "RemoteReadingSource",
    "SyntheticPolicy",
    "SyntheticReadingSource",
    "create_monitor_router",
    "create_scheduler",
    "create_stream_router",
    "detect_changes",
    "merge_config",
]
