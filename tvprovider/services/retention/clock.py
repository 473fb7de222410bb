"""Clock abstraction for boot-session detection.

Two independent clocks are needed to tell "same boot, process restarted"
apart from "new boot":

- wall clock: milliseconds since the Unix epoch, adjustable by the user or
  network time sync
- elapsed realtime: milliseconds since boot, monotonic and counting time
  spent in suspend

Production code uses SystemClock. Tests inject MockClock to control both
clocks and to simulate reboots.
"""

from __future__ import annotations

import time
from typing import Protocol

# CLOCK_BOOTTIME includes suspend; only Linux exposes it
_BOOT_CLOCK_ID = getattr(time, "CLOCK_BOOTTIME", None)


class Clock(Protocol):
    """Source of wall-clock and since-boot time, both in milliseconds."""

    def current_time_millis(self) -> int:
        """Return wall-clock time in milliseconds since the Unix epoch."""
        ...

    def elapsed_since_boot_millis(self) -> int:
        """Return milliseconds elapsed since the current boot session started."""
        ...


class SystemClock:
    """Production clock backed by the operating system."""

    def current_time_millis(self) -> int:
        return time.time_ns() // 1_000_000

    def elapsed_since_boot_millis(self) -> int:
        if _BOOT_CLOCK_ID is not None:
            return time.clock_gettime_ns(_BOOT_CLOCK_ID) // 1_000_000
        return time.monotonic_ns() // 1_000_000


class MockClock:
    """Controllable clock for deterministic testing.

    Example:
        clock = MockClock(wall_millis=1_000_000, uptime_millis=5_000)
        clock.advance(60_000)      # one minute passes in this boot
        clock.reboot()             # new boot session starts now
        clock.set_wall(0)          # user moves the wall clock
    """

    def __init__(self, wall_millis: int = 0, uptime_millis: int = 0) -> None:
        self._wall = wall_millis
        self._uptime = uptime_millis

    def current_time_millis(self) -> int:
        return self._wall

    def elapsed_since_boot_millis(self) -> int:
        return self._uptime

    def advance(self, millis: int) -> None:
        """Advance both clocks by the same amount.

        Raises:
            ValueError: If millis is negative.
        """
        if millis < 0:
            raise ValueError(f"Cannot advance time by negative amount: {millis}")
        self._wall += millis
        self._uptime += millis

    def reboot(self, boot_duration_millis: int = 0) -> None:
        """Start a new boot session at the current wall time.

        Args:
            boot_duration_millis: Time the reboot itself took; added to the
                wall clock and used as the new uptime.
        """
        self._wall += boot_duration_millis
        self._uptime = boot_duration_millis

    def set_wall(self, wall_millis: int) -> None:
        """Set the wall clock without touching uptime, like a manual time change."""
        self._wall = wall_millis


def boot_completed_time_millis(clock: Clock) -> int:
    """Derive the wall-clock instant at which the current boot session started."""
    return clock.current_time_millis() - clock.elapsed_since_boot_millis()


DEFAULT_CLOCK: Clock = SystemClock()
