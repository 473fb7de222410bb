"""Unit tests for clocks and the timekeeper."""

import pytest


class TestSystemClock:
    """Tests for SystemClock."""

    def test_wall_clock_is_epoch_millis(self):
        import time

        from tvprovider.services.retention.clock import SystemClock

        before = int(time.time() * 1000)
        now = SystemClock().current_time_millis()
        after = int(time.time() * 1000)

        assert before - 1 <= now <= after + 1

    def test_elapsed_since_boot_is_monotonic(self):
        from tvprovider.services.retention.clock import SystemClock

        clock = SystemClock()
        first = clock.elapsed_since_boot_millis()
        second = clock.elapsed_since_boot_millis()

        assert first >= 0
        assert second >= first

    def test_boot_time_is_stable_within_a_process(self):
        """Two derivations differ only by invocation timing error."""
        from tvprovider.services.retention.clock import SystemClock, boot_completed_time_millis

        clock = SystemClock()

        assert abs(boot_completed_time_millis(clock) - boot_completed_time_millis(clock)) < 1_000

    def test_boot_time_is_in_the_past(self):
        from tvprovider.services.retention.clock import SystemClock, boot_completed_time_millis

        clock = SystemClock()

        assert boot_completed_time_millis(clock) <= clock.current_time_millis()


class TestMockClock:
    """Tests for MockClock."""

    def test_advance_keeps_boot_time(self):
        from tvprovider.services.retention.clock import MockClock, boot_completed_time_millis

        clock = MockClock(wall_millis=10_000, uptime_millis=4_000)
        clock.advance(2_500)

        assert clock.current_time_millis() == 12_500
        assert clock.elapsed_since_boot_millis() == 6_500
        assert boot_completed_time_millis(clock) == 6_000

    def test_advance_rejects_negative(self):
        from tvprovider.services.retention.clock import MockClock

        with pytest.raises(ValueError, match="negative"):
            MockClock().advance(-1)

    def test_reboot_moves_boot_time_forward(self):
        from tvprovider.services.retention.clock import MockClock, boot_completed_time_millis

        clock = MockClock(wall_millis=10_000, uptime_millis=4_000)
        clock.reboot(boot_duration_millis=1_000)

        assert clock.elapsed_since_boot_millis() == 1_000
        assert boot_completed_time_millis(clock) == 10_000

    def test_set_wall_keeps_uptime(self):
        from tvprovider.services.retention.clock import MockClock

        clock = MockClock(wall_millis=10_000, uptime_millis=4_000)
        clock.set_wall(0)

        assert clock.current_time_millis() == 0
        assert clock.elapsed_since_boot_millis() == 4_000


class TestDefaultTimekeeper:
    """Tests for DefaultTimekeeper."""

    def test_boot_completed_time(self):
        from tvprovider.services.retention.clock import MockClock
        from tvprovider.services.retention.timekeeper import DefaultTimekeeper
        from tvprovider.services.retention.watermark import InMemoryWatermarkStore

        timekeeper = DefaultTimekeeper(InMemoryWatermarkStore(), clock=MockClock(50_000, 20_000))

        assert timekeeper.boot_completed_time_millis() == 30_000

    def test_record_purge_writes_current_wall_time(self):
        from tvprovider.services.retention.clock import MockClock
        from tvprovider.services.retention.timekeeper import DefaultTimekeeper
        from tvprovider.services.retention.watermark import InMemoryWatermarkStore

        store = InMemoryWatermarkStore()
        timekeeper = DefaultTimekeeper(store, clock=MockClock(50_000, 20_000))

        assert timekeeper.last_purge_time_millis() == 0
        assert timekeeper.record_purge() == 50_000
        assert store.read() == 50_000
        assert timekeeper.last_purge_time_millis() == 50_000
