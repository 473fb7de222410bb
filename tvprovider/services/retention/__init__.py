"""
Retention services for the TV provider store.

Transient channels and programs live only for the current boot session.
The guard removes them once per boot, however many times the host process
restarts in between.

Services:
- guard: per-process purge decision and execution
- timekeeper: boot time and purge watermark accessors
- watermark: durable last-purge timestamp
- row_store: bulk deletion of transient rows
- clock: wall-clock and since-boot time sources
"""

from tvprovider.services.retention.clock import Clock, MockClock, SystemClock, boot_completed_time_millis
from tvprovider.services.retention.errors import RetentionError, RetentionStorageError
from tvprovider.services.retention.guard import PurgeResult, TransientRetentionGuard, is_purge_owed
from tvprovider.services.retention.row_store import SqlTransientRowStore, TransientRowStore
from tvprovider.services.retention.timekeeper import DefaultTimekeeper, RetentionTimekeeper
from tvprovider.services.retention.watermark import (
    InMemoryWatermarkStore,
    PreferenceWatermarkStore,
    WatermarkStore,
)

__all__ = [
    # Guard
    "TransientRetentionGuard",
    "PurgeResult",
    "is_purge_owed",
    # Timekeeping
    "RetentionTimekeeper",
    "DefaultTimekeeper",
    "Clock",
    "SystemClock",
    "MockClock",
    "boot_completed_time_millis",
    # Storage
    "WatermarkStore",
    "PreferenceWatermarkStore",
    "InMemoryWatermarkStore",
    "TransientRowStore",
    "SqlTransientRowStore",
    # Errors
    "RetentionError",
    "RetentionStorageError",
]
