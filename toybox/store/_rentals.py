"""
Rental repository.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any, cast

from sqlalchemy import delete, func, select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from toybox._types import RentalId, ToyId, UserId
from toybox.domain import Rental
from toybox.store._tables import RentalTable, ToyTable


@dataclass(frozen=True, slots=True)
class NewRental:
    toy_id: ToyId
    user_id: UserId
    start_date: date
    end_date: date
    quantity: int = 1
    order_item_id: str | None = None


def _to_rental(row: RentalTable, toy_name: str | None = None) -> Rental:
    return Rental(
        id=row.id,
        toy_id=row.toy_id,
        user_id=row.user_id,
        start_date=row.start_date,
        end_date=row.end_date,
        quantity=row.quantity,
        returned=row.returned,
        return_date=row.return_date,
        order_item_id=row.order_item_id,
        created_at=row.created_at,
        toy_name=toy_name,
    )


class RentalRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_many(self, rentals: Sequence[NewRental]) -> Sequence[Rental]:
        async with self._session_factory() as session:
            rows = [
                RentalTable(
                    toy_id=r.toy_id,
                    user_id=r.user_id,
                    start_date=r.start_date,
                    end_date=r.end_date,
                    quantity=r.quantity,
                    order_item_id=r.order_item_id,
                    returned=False,
                )
                for r in rentals
            ]
            session.add_all(rows)
            await session.commit()
            return [_to_rental(row) for row in rows]

    async def delete_many(self, rental_ids: Sequence[RentalId]) -> None:
        if not rental_ids:
            return
        async with self._session_factory() as session:
            await session.execute(delete(RentalTable).where(RentalTable.id.in_(rental_ids)))
            await session.commit()

    async def get(self, rental_id: RentalId) -> Rental | None:
        async with self._session_factory() as session:
            row = await session.get(RentalTable, rental_id)
            return _to_rental(row) if row is not None else None

    async def for_user(self, user_id: UserId, returned: bool) -> Sequence[Rental]:
        """Active rentals soonest-due first; returned ones most recent first."""
        order = RentalTable.end_date.desc() if returned else RentalTable.end_date.asc()
        async with self._session_factory() as session:
            result = await session.execute(
                select(RentalTable, ToyTable.name)
                .outerjoin(ToyTable, RentalTable.toy_id == ToyTable.id)
                .where(RentalTable.user_id == user_id, RentalTable.returned == returned)
                .order_by(order)
            )
            return [_to_rental(row, name) for row, name in result.tuples()]

    async def list_all(self, returned: bool | None = None) -> Sequence[Rental]:
        stmt = (
            select(RentalTable, ToyTable.name)
            .outerjoin(ToyTable, RentalTable.toy_id == ToyTable.id)
            .order_by(RentalTable.created_at.desc())
        )
        if returned is not None:
            stmt = stmt.where(RentalTable.returned == returned)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [_to_rental(row, name) for row, name in result.tuples()]

    async def count_active(self, toy_id: ToyId | None = None) -> int:
        stmt = select(func.count()).select_from(RentalTable).where(RentalTable.returned.is_(False))
        if toy_id is not None:
            stmt = stmt.where(RentalTable.toy_id == toy_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar_one()

    async def mark_returned(self, rental_id: RentalId, on: date) -> bool:
        """
        Flip an active rental to returned.

        Returns False if the rental is missing or already returned, so two
        concurrent returns restore stock only once.
        """
        async with self._session_factory() as session:
            cursor = cast(
                CursorResult[Any],
                await session.execute(
                    update(RentalTable)
                    .where(RentalTable.id == rental_id, RentalTable.returned.is_(False))
                    .values(returned=True, return_date=on)
                ),
            )
            await session.commit()
            return cursor.rowcount > 0


__all__ = ("NewRental", "RentalRepository")
