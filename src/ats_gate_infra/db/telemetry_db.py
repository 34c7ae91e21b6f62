"""Telemetry database: async engine, sessions and table bootstrap."""

from __future__ import annotations

from pathlib import Path

import structlog
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ats_gate_infra.db.models import Base
from ats_gate_infra.sinks.sqlalchemy_sink import SqlAlchemyEventSink

logger = structlog.get_logger()


def create_telemetry_engine(database_url: str) -> AsyncEngine:
    """Engine for the telemetry tables.

    A SQLite file gets its parent directory created. Server databases get a
    small pre-pinged pool; telemetry writes are short appends.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        return create_async_engine(url, connect_args={"check_same_thread": False})
    return create_async_engine(url, pool_size=5, max_overflow=10, pool_pre_ping=True)


class TelemetryDatabase:
    """Owns the telemetry engine and hands out sinks bound to it."""

    def __init__(self, database_url: str) -> None:
        self.engine = create_telemetry_engine(database_url)
        self.session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def create_tables(self) -> None:
        """Create ats_events, scoring_runs and ai_cost_ledger if missing."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.debug("telemetry_tables_ready", backend=self.engine.url.get_backend_name())

    def sink(self) -> SqlAlchemyEventSink:
        return SqlAlchemyEventSink(self.session_factory)

    async def dispose(self) -> None:
        await self.engine.dispose()
