"""
Return request repository.

A request flags its order item (order_items.return_requested) in the same
transaction, so an item carries at most one request.
"""

from collections.abc import Sequence
from typing import Any, cast

from sqlalchemy import select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from toybox._types import UserId
from toybox.domain import ReturnRequest, ReturnStatus
from toybox.store._tables import OrderItemTable, ReturnRequestTable


def _to_request(row: ReturnRequestTable) -> ReturnRequest:
    return ReturnRequest(
        id=row.id,
        order_item_id=row.order_item_id,
        user_id=row.user_id,
        reason=row.reason,
        condition=row.condition,
        status=ReturnStatus(row.status),
        created_at=row.created_at,
    )


class ReturnRequestRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(
        self,
        order_item_id: str,
        user_id: UserId,
        reason: str,
        condition: str,
    ) -> ReturnRequest | None:
        """None when the item already has a request."""
        async with self._session_factory() as session:
            flagged = cast(
                CursorResult[Any],
                await session.execute(
                    update(OrderItemTable)
                    .where(
                        OrderItemTable.id == order_item_id,
                        OrderItemTable.return_requested.is_(False),
                    )
                    .values(return_requested=True)
                ),
            )
            if flagged.rowcount == 0:
                await session.rollback()
                return None

            row = ReturnRequestTable(
                order_item_id=order_item_id,
                user_id=user_id,
                reason=reason,
                condition=condition,
                status=ReturnStatus.PENDING.value,
            )
            session.add(row)
            await session.commit()
            return _to_request(row)

    async def for_user(self, user_id: UserId) -> Sequence[ReturnRequest]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ReturnRequestTable)
                .where(ReturnRequestTable.user_id == user_id)
                .order_by(ReturnRequestTable.created_at.desc())
            )
            return [_to_request(row) for row in result.scalars()]

    async def list_all(self, status: ReturnStatus | None = None) -> Sequence[ReturnRequest]:
        stmt = select(ReturnRequestTable).order_by(ReturnRequestTable.created_at.desc())
        if status is not None:
            stmt = stmt.where(ReturnRequestTable.status == status.value)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [_to_request(row) for row in result.scalars()]

    async def set_status(self, request_id: str, status: ReturnStatus) -> ReturnRequest | None:
        """Move a pending request to status; None if it is missing or already decided."""
        async with self._session_factory() as session:
            result = await session.execute(
                update(ReturnRequestTable)
                .where(
                    ReturnRequestTable.id == request_id,
                    ReturnRequestTable.status == ReturnStatus.PENDING.value,
                )
                .values(status=status.value)
                .returning(ReturnRequestTable)
            )
            row = result.scalar_one_or_none()
            await session.commit()
            return _to_request(row) if row is not None else None


__all__ = ("ReturnRequestRepository",)
