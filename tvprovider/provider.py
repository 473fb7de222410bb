"""
Channel and program access for the TV provider store.

Thin query glue over the channels and programs tables. Every operation runs
the transient retention guard first, so no row left over from a previous
boot is ever read or written.
"""

import logging
from typing import Callable

from sqlalchemy import func
from sqlalchemy.orm import Session

from tvprovider.models import Channel, Program
from tvprovider.services.retention.guard import TransientRetentionGuard

logger = logging.getLogger(__name__)


class TvProvider:
    """Store access guarded by a TransientRetentionGuard."""

    def __init__(self, session_factory: Callable[[], Session], guard: TransientRetentionGuard):
        self._session_factory = session_factory
        self._guard = guard

    @property
    def guard(self) -> TransientRetentionGuard:
        return self._guard

    def insert_channel(
        self,
        input_id: str,
        transient: bool = False,
        display_name: str | None = None,
        display_number: str | None = None,
    ) -> int:
        """Insert a channel and return its id."""
        self._guard.ensure_purged()

        db = self._session_factory()
        try:
            channel = Channel(
                input_id=input_id,
                display_name=display_name,
                display_number=display_number,
                transient=transient,
            )
            db.add(channel)
            db.commit()
            return channel.id
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def insert_program(
        self,
        channel_id: int,
        transient: bool = False,
        title: str | None = None,
        start_time_utc_millis: int | None = None,
        end_time_utc_millis: int | None = None,
    ) -> int:
        """
        Insert a program on a channel and return its id.

        The program's transient flag is independent of its channel's.
        """
        self._guard.ensure_purged()

        db = self._session_factory()
        try:
            program = Program(
                channel_id=channel_id,
                title=title,
                start_time_utc_millis=start_time_utc_millis,
                end_time_utc_millis=end_time_utc_millis,
                transient=transient,
            )
            db.add(program)
            db.commit()
            return program.id
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def query_channels(self, input_id: str | None = None) -> list[Channel]:
        self._guard.ensure_purged()

        db = self._session_factory()
        try:
            query = db.query(Channel)
            if input_id is not None:
                query = query.filter(Channel.input_id == input_id)
            return query.order_by(Channel.id).all()
        finally:
            db.close()

    def query_programs(self, channel_id: int | None = None) -> list[Program]:
        self._guard.ensure_purged()

        db = self._session_factory()
        try:
            query = db.query(Program)
            if channel_id is not None:
                query = query.filter(Program.channel_id == channel_id)
            return query.order_by(Program.id).all()
        finally:
            db.close()

    def count_channels(self) -> int:
        self._guard.ensure_purged()

        db = self._session_factory()
        try:
            return db.query(func.count(Channel.id)).scalar() or 0
        finally:
            db.close()

    def delete_channel(self, channel_id: int) -> bool:
        """
        Delete a channel together with its programs.

        Returns:
            True if deleted, False if not found
        """
        self._guard.ensure_purged()

        db = self._session_factory()
        try:
            deleted = db.query(Channel).filter(Channel.id == channel_id).delete(synchronize_session=False)
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

        if deleted:
            logger.debug(f"Deleted channel {channel_id}")
        return bool(deleted)
