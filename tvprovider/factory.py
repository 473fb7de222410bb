"""
Wiring for the provider and its retention guard.

Builds every collaborator explicitly. The caller owns the returned context
and passes it (or its guard) to whatever needs store access; nothing here
is a module-level singleton.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from tvprovider.config import Settings, get_settings
from tvprovider.database import create_db_engine, create_session_factory, init_db
from tvprovider.provider import TvProvider
from tvprovider.services.retention.clock import DEFAULT_CLOCK, Clock
from tvprovider.services.retention.guard import TransientRetentionGuard
from tvprovider.services.retention.row_store import SqlTransientRowStore
from tvprovider.services.retention.timekeeper import DefaultTimekeeper
from tvprovider.services.retention.watermark import PreferenceWatermarkStore

logger = logging.getLogger(__name__)


@dataclass
class ProviderContext:
    """Everything built for one process lifetime."""

    engine: Engine
    session_factory: sessionmaker
    row_store: SqlTransientRowStore
    watermark_store: PreferenceWatermarkStore
    timekeeper: DefaultTimekeeper
    guard: TransientRetentionGuard
    provider: TvProvider

    def close(self) -> None:
        self.engine.dispose()


def build_provider(
    settings: Settings | None = None,
    clock: Clock = DEFAULT_CLOCK,
    create_tables: bool = True,
) -> ProviderContext:
    """
    Build the store, the retention guard and the provider for this process.

    Args:
        settings: Application settings (default from environment)
        clock: Time source used for boot detection and the watermark
        create_tables: Create missing tables before returning

    Returns:
        ProviderContext holding the wired collaborators
    """
    settings = settings or get_settings()

    engine = create_db_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)
    if create_tables:
        init_db(engine)
    session_factory = create_session_factory(engine)

    row_store = SqlTransientRowStore(session_factory)
    watermark_store = PreferenceWatermarkStore(session_factory, key=settings.WATERMARK_PREF_KEY)
    timekeeper = DefaultTimekeeper(watermark_store, clock=clock)
    guard = TransientRetentionGuard(row_store, timekeeper)
    provider = TvProvider(session_factory, guard)

    logger.info(f"Provider initialized (environment={settings.ENVIRONMENT})")
    return ProviderContext(
        engine=engine,
        session_factory=session_factory,
        row_store=row_store,
        watermark_store=watermark_store,
        timekeeper=timekeeper,
        guard=guard,
        provider=provider,
    )
