"""
Purge watermark storage.

The watermark is the wall-clock time (ms since epoch) of the last completed
transient purge. It is durable across process restarts and scoped to the
installation, not to a boot session.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tvprovider.models import Preference
from tvprovider.services.retention.errors import RetentionStorageError

logger = logging.getLogger(__name__)

DEFAULT_WATERMARK_KEY = "pref_key_last_transient_rows_deleted_time"


class WatermarkStore(ABC):
    """Durable scalar timestamp store."""

    @abstractmethod
    def read(self) -> int:
        """Return the stored watermark, or 0 if it was never written."""
        pass

    @abstractmethod
    def write(self, millis: int) -> None:
        """Persist a new watermark. Last writer wins."""
        pass


class InMemoryWatermarkStore(WatermarkStore):
    """Watermark held in process memory. Lost on restart."""

    def __init__(self, initial: int = 0):
        self._value = initial
        self._lock = threading.Lock()

    def read(self) -> int:
        with self._lock:
            return self._value

    def write(self, millis: int) -> None:
        with self._lock:
            self._value = int(millis)


class PreferenceWatermarkStore(WatermarkStore):
    """
    Watermark kept as a row of the preferences table.

    Every read and write uses a short-lived session from the factory so the
    store can be shared by any thread.
    """

    def __init__(self, session_factory: Callable[[], Session], key: str = DEFAULT_WATERMARK_KEY):
        self._session_factory = session_factory
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def read(self) -> int:
        db = self._session_factory()
        try:
            pref = db.get(Preference, self._key)
        except SQLAlchemyError as e:
            raise RetentionStorageError("watermark", f"read failed: {e}") from e
        finally:
            db.close()

        if pref is None or pref.value is None:
            return 0

        try:
            return int(pref.value)
        except ValueError:
            # Unreadable value counts as never purged, so the next check purges
            logger.warning(
                f"Ignoring malformed watermark '{pref.value}' under {self._key}",
                extra={"event": "watermark_malformed", "key": self._key},
            )
            return 0

    def write(self, millis: int) -> None:
        db = self._session_factory()
        try:
            pref = db.get(Preference, self._key)
            if pref is None:
                pref = Preference(key=self._key)
            pref.value = str(int(millis))
            db.add(pref)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise RetentionStorageError("watermark", f"write failed: {e}") from e
        finally:
            db.close()

        logger.debug(
            f"Watermark {self._key} set to {millis}",
            extra={"event": "watermark_written", "key": self._key, "watermark_ms": millis},
        )
