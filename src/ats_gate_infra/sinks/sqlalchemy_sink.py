"""SQLAlchemy-backed event sink."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ats_gate_infra.db.models import TABLE_MODELS, Base

logger = structlog.get_logger()


def _to_model(model_cls: type[Base], row: dict[str, Any]) -> Base:
    """Build an ORM row, dropping unknown keys and parsing ISO timestamps."""
    columns = set(model_cls.__table__.columns.keys())
    values = {k: v for k, v in row.items() if k in columns}
    created = values.get("created_at")
    if isinstance(created, str):
        values["created_at"] = datetime.fromisoformat(created)
    return model_cls(**values)


class SqlAlchemyEventSink:
    """Writes telemetry rows into the matching ORM table in one transaction."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def insert(self, table: str, rows: list[dict[str, Any]]) -> str | None:
        """Insert rows; return an error message or None."""
        model_cls = TABLE_MODELS.get(table)
        if model_cls is None:
            return f"unknown table: {table}"
        try:
            models = [_to_model(model_cls, row) for row in rows]
        except (TypeError, ValueError) as e:
            return f"invalid row for {table}: {e}"
        try:
            async with self._session_factory() as session, session.begin():
                session.add_all(models)
        except SQLAlchemyError as e:
            logger.debug("sink_insert_failed", table=table, error=str(e))
            return str(e)
        return None
