"""
Transient retention guard.

Ensures transient channels and programs, inserted before the current boot,
are deleted exactly once per boot session.

The host process can be killed and restarted many times within one boot
(for example under memory pressure), so "first call in this process" is not
enough on its own. The guard compares the persisted purge watermark against
the derived boot time:

- watermark > boot time: a purge already ran after this boot started, so
  this is a restart within the same boot; nothing to do
- otherwise: the last purge predates this boot; delete transient rows and
  advance the watermark

The comparison is a heuristic. A wall clock moved backwards across a reboot
(before network time sync, say) can produce a spurious skip or an extra
purge; no correction is attempted.
"""

import logging
import threading
from dataclasses import dataclass

from tvprovider.logging_config import log_operation
from tvprovider.services.retention.errors import RetentionError
from tvprovider.services.retention.row_store import TransientRowStore
from tvprovider.services.retention.timekeeper import RetentionTimekeeper

logger = logging.getLogger(__name__)

SKIP_ALREADY_CHECKED = "already_checked"
SKIP_PURGED_THIS_BOOT = "purged_this_boot"


@dataclass
class PurgeResult:
    """Outcome of an ensure_purged() call."""

    performed: bool
    skipped_reason: str | None = None
    programs_deleted: int = 0
    channels_deleted: int = 0
    watermark_ms: int | None = None
    boot_epoch_ms: int | None = None


def is_purge_owed(watermark_ms: int, boot_epoch_ms: int) -> bool:
    """A purge is owed unless the last one happened after the current boot began."""
    return not watermark_ms > boot_epoch_ms


class TransientRetentionGuard:
    """
    Per-process guard around the transient purge.

    Construct one per record store and pass it to every code path that
    touches the store. Call ensure_purged() before any other store access.

    Usage:
        guard = TransientRetentionGuard(SqlTransientRowStore(SessionLocal), timekeeper)
        guard.ensure_purged()
    """

    def __init__(self, row_store: TransientRowStore, timekeeper: RetentionTimekeeper):
        self._row_store = row_store
        self._timekeeper = timekeeper
        self._lock = threading.Lock()
        self._checked = False

    @property
    def checked(self) -> bool:
        """True once the purge decision has been made in this process."""
        return self._checked

    def ensure_purged(self) -> PurgeResult:
        """
        Delete transient rows left over from a previous boot, at most once per process.

        The lock is held for the whole call, so a second caller arriving
        mid-purge waits for the first to finish and then returns without I/O.
        The guard flag is set before anything can fail: a storage error is
        raised to the caller once and the purge is not retried until the
        next process start.

        Raises:
            RetentionStorageError: if the watermark or record store is unavailable
        """
        with self._lock:
            if self._checked:
                return PurgeResult(performed=False, skipped_reason=SKIP_ALREADY_CHECKED)
            self._checked = True

            try:
                watermark = self._timekeeper.last_purge_time_millis()
            except RetentionError as e:
                logger.error(
                    f"Cannot read purge watermark, transient rows kept until next start: {e}",
                    extra={"event": "transient_purge_failed"},
                )
                raise

            boot_epoch = self._timekeeper.boot_completed_time_millis()

            if not is_purge_owed(watermark, boot_epoch):
                logger.info(
                    "Transient rows already purged during this boot, skipping",
                    extra={
                        "event": "transient_purge_skipped",
                        "watermark_ms": watermark,
                        "boot_epoch_ms": boot_epoch,
                    },
                )
                return PurgeResult(
                    performed=False,
                    skipped_reason=SKIP_PURGED_THIS_BOOT,
                    watermark_ms=watermark,
                    boot_epoch_ms=boot_epoch,
                )

            return self._purge(watermark, boot_epoch)

    def reset_for_testing(self) -> None:
        """
        Clear the guard flag, as if the process had restarted.

        Only meaningful in tests, paired with a timekeeper whose boot time moved.
        """
        with self._lock:
            self._checked = False

    def _purge(self, previous_watermark: int, boot_epoch: int) -> PurgeResult:
        logger.info(
            f"Purging transient rows (last purge {previous_watermark} <= boot {boot_epoch})",
            extra={
                "event": "transient_purge_started",
                "watermark_ms": previous_watermark,
                "boot_epoch_ms": boot_epoch,
            },
        )

        with log_operation("transient_purge", logger_name=__name__) as metrics:
            # Two independent predicate deletes, not a cascade
            programs_deleted = self._row_store.delete_transient_programs()
            channels_deleted = self._row_store.delete_transient_channels()
            watermark = self._timekeeper.record_purge()

            metrics["programs_deleted"] = programs_deleted
            metrics["channels_deleted"] = channels_deleted
            metrics["watermark_ms"] = watermark
            metrics["boot_epoch_ms"] = boot_epoch

        return PurgeResult(
            performed=True,
            programs_deleted=programs_deleted,
            channels_deleted=channels_deleted,
            watermark_ms=watermark,
            boot_epoch_ms=boot_epoch,
        )
