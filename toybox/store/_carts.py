"""
Cart repository — cart_items rows joined with their toys.

Every query is scoped by user_id; an item id belonging to another user is
treated as missing.
"""

from collections.abc import Sequence
from datetime import date
from typing import Any, cast

from sqlalchemy import ColumnElement, delete, select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from toybox._types import CartItemId, ToyId, UserId
from toybox.domain import CartItem
from toybox.store._tables import CartItemTable, ToyTable
from toybox.store._toys import to_toy


def _to_item(row: CartItemTable, toy: ToyTable) -> CartItem:
    return CartItem(
        id=row.id,
        user_id=row.user_id,
        toy=to_toy(toy),
        quantity=row.quantity,
        is_rental=row.is_rental,
        rental_start_date=row.rental_start_date,
        rental_end_date=row.rental_end_date,
        created_at=row.created_at,
    )


class CartRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def items_for(self, user_id: UserId) -> Sequence[CartItem]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(CartItemTable, ToyTable)
                .join(ToyTable, CartItemTable.toy_id == ToyTable.id)
                .where(CartItemTable.user_id == user_id)
                .order_by(CartItemTable.created_at, CartItemTable.id)
            )
            return [_to_item(item, toy) for item, toy in result.tuples()]

    async def add_line(
        self,
        user_id: UserId,
        toy_id: ToyId,
        quantity: int,
        is_rental: bool,
        start: date | None = None,
        end: date | None = None,
    ) -> CartItemId:
        """
        Insert a line, or merge into the user's (toy_id, is_rental) line.

        A merge adds to the stored quantity in one UPDATE and, for rentals,
        overwrites the dates. Two concurrent adds of the same toy land on one
        line carrying both quantities.
        """
        merged = await self._merge(user_id, toy_id, quantity, is_rental, start, end)
        if merged is not None:
            return merged
        try:
            async with self._session_factory() as session:
                row = CartItemTable(
                    user_id=user_id,
                    toy_id=toy_id,
                    quantity=quantity,
                    is_rental=is_rental,
                    rental_start_date=start,
                    rental_end_date=end,
                )
                session.add(row)
                await session.commit()
                return row.id
        except IntegrityError:
            # Another add inserted the line first
            merged = await self._merge(user_id, toy_id, quantity, is_rental, start, end)
            if merged is None:
                raise
            return merged

    async def _merge(
        self,
        user_id: UserId,
        toy_id: ToyId,
        quantity: int,
        is_rental: bool,
        start: date | None,
        end: date | None,
    ) -> CartItemId | None:
        values: dict[str, Any] = {"quantity": CartItemTable.quantity + quantity}
        if is_rental:
            values.update(rental_start_date=start, rental_end_date=end)
        async with self._session_factory() as session:
            result = await session.execute(
                update(CartItemTable)
                .where(
                    CartItemTable.user_id == user_id,
                    CartItemTable.toy_id == toy_id,
                    CartItemTable.is_rental == is_rental,
                )
                .values(**values)
                .returning(CartItemTable.id)
            )
            item_id = result.scalar_one_or_none()
            await session.commit()
            return item_id

    async def _update(
        self,
        user_id: UserId,
        item_id: CartItemId,
        *criteria: ColumnElement[bool],
        **values: Any,
    ) -> bool:
        async with self._session_factory() as session:
            cursor = cast(
                CursorResult[Any],
                await session.execute(
                    update(CartItemTable)
                    .where(CartItemTable.id == item_id, CartItemTable.user_id == user_id, *criteria)
                    .values(**values)
                ),
            )
            await session.commit()
            return cursor.rowcount > 0

    async def set_quantity(self, user_id: UserId, item_id: CartItemId, quantity: int) -> bool:
        return await self._update(user_id, item_id, quantity=quantity)

    async def set_dates(self, user_id: UserId, item_id: CartItemId, start: date, end: date) -> bool:
        """Only rental lines take dates; a sale line matches no row."""
        return await self._update(
            user_id,
            item_id,
            CartItemTable.is_rental.is_(True),
            rental_start_date=start,
            rental_end_date=end,
        )

    async def remove(self, user_id: UserId, item_id: CartItemId) -> bool:
        async with self._session_factory() as session:
            cursor = cast(
                CursorResult[Any],
                await session.execute(
                    delete(CartItemTable).where(
                        CartItemTable.id == item_id, CartItemTable.user_id == user_id
                    )
                ),
            )
            await session.commit()
            return cursor.rowcount > 0

    async def clear(self, user_id: UserId) -> int:
        async with self._session_factory() as session:
            cursor = cast(
                CursorResult[Any],
                await session.execute(delete(CartItemTable).where(CartItemTable.user_id == user_id)),
            )
            await session.commit()
            return cursor.rowcount


__all__ = ("CartRepository",)
