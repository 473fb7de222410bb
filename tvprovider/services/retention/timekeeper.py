"""
Timekeeping capability injected into the transient retention guard.

Bundles the three accessors the purge decision depends on, so tests can
hand the guard a fake instead of overriding guard internals.
"""

from abc import ABC, abstractmethod

from tvprovider.services.retention.clock import DEFAULT_CLOCK, Clock, boot_completed_time_millis
from tvprovider.services.retention.watermark import WatermarkStore


class RetentionTimekeeper(ABC):
    """Boot-time and purge-watermark accessors."""

    @abstractmethod
    def boot_completed_time_millis(self) -> int:
        """Wall-clock instant (ms) at which the current boot session began."""
        pass

    @abstractmethod
    def last_purge_time_millis(self) -> int:
        """Wall-clock time (ms) of the last completed purge, 0 if never."""
        pass

    @abstractmethod
    def record_purge(self) -> int:
        """Persist the current wall-clock time as the purge watermark and return it."""
        pass


class DefaultTimekeeper(RetentionTimekeeper):
    """Production timekeeper: a clock plus a durable watermark store."""

    def __init__(self, watermark_store: WatermarkStore, clock: Clock = DEFAULT_CLOCK):
        self._watermark_store = watermark_store
        self._clock = clock

    def boot_completed_time_millis(self) -> int:
        return boot_completed_time_millis(self._clock)

    def last_purge_time_millis(self) -> int:
        return self._watermark_store.read()

    def record_purge(self) -> int:
        now = self._clock.current_time_millis()
        self._watermark_store.write(now)
        return now
