"""
Transient row deletion against the channel/program store.

Each deletion is a single predicate match (transient = true) committed in its
own transaction. Deleting an already empty match is a no-op, so the deletes
can be repeated safely after a crash or a race between processes.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tvprovider.models import Channel, Program
from tvprovider.services.retention.errors import RetentionStorageError

logger = logging.getLogger(__name__)


class TransientRowStore(ABC):
    """Bulk deletion of transient rows."""

    @abstractmethod
    def delete_transient_programs(self) -> int:
        """Delete every program flagged transient. Returns the number of rows deleted."""
        pass

    @abstractmethod
    def delete_transient_channels(self) -> int:
        """Delete every channel flagged transient. Returns the number of rows deleted."""
        pass


class SqlTransientRowStore(TransientRowStore):
    """SQLAlchemy implementation over the channels and programs tables."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def delete_transient_programs(self) -> int:
        return self._delete_transient(Program)

    def delete_transient_channels(self) -> int:
        # Programs of a deleted channel go with it through the schema's ON DELETE CASCADE
        return self._delete_transient(Channel)

    def count_transient(self) -> dict:
        """Count transient rows per table without changing anything."""
        db = self._session_factory()
        try:
            return {
                "channels": db.query(func.count(Channel.id)).filter(Channel.transient.is_(True)).scalar() or 0,
                "programs": db.query(func.count(Program.id)).filter(Program.transient.is_(True)).scalar() or 0,
            }
        except SQLAlchemyError as e:
            raise RetentionStorageError("record store", f"count failed: {e}") from e
        finally:
            db.close()

    def _delete_transient(self, model) -> int:
        table = model.__tablename__
        db = self._session_factory()
        try:
            deleted = (
                db.query(model)
                .filter(model.transient.is_(True))
                .delete(synchronize_session=False)
            )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise RetentionStorageError("record store", f"delete from {table} failed: {e}") from e
        finally:
            db.close()

        logger.debug(
            f"Deleted {deleted} transient rows from {table}",
            extra={"event": "transient_rows_deleted", "table": table},
        )
        return deleted
