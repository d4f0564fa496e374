"""
Deletion log repository — append-only rows in toy_deletion_logs.
"""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from toybox._types import ToyId
from toybox.domain import DeletionLogEntry, DeletionStatus
from toybox.store._tables import ToyDeletionLogTable


class DeletionLogRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def record(self, entry: DeletionLogEntry) -> None:
        async with self._session_factory() as session:
            session.add(
                ToyDeletionLogTable(
                    toy_id=entry.toy_id,
                    toy_name=entry.toy_name,
                    admin_id=entry.admin_id,
                    deleted_at=entry.deleted_at,
                    status=entry.status.value,
                    error_message=entry.error_message,
                )
            )
            await session.commit()

    async def entries(self, toy_id: ToyId | None = None) -> Sequence[DeletionLogEntry]:
        stmt = select(ToyDeletionLogTable).order_by(ToyDeletionLogTable.deleted_at.desc())
        if toy_id is not None:
            stmt = stmt.where(ToyDeletionLogTable.toy_id == toy_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [
                DeletionLogEntry(
                    toy_id=row.toy_id,
                    toy_name=row.toy_name,
                    admin_id=row.admin_id,
                    deleted_at=row.deleted_at,
                    status=DeletionStatus(row.status),
                    error_message=row.error_message,
                )
                for row in result.scalars()
            ]


__all__ = ("DeletionLogRepository",)
