"""
Toy repository — catalog rows plus the inventory counters.

Stock changes never read-modify-write across sessions: decrements use a
compare-and-swap on the current value, restores use an in-place increment.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal, cast

from sqlalchemy import delete, func, select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from toybox._types import ToyId
from toybox.domain import Toy, ToyDraft, ToyMode
from toybox.store._tables import CartItemTable, ToyTable, WishlistTable

logger = logging.getLogger(__name__)

type StockColumn = Literal["stock", "rental_stock"]


class StockConflict(RuntimeError):
    """Stock kept changing under us for every compare-and-swap attempt."""


@dataclass(frozen=True, slots=True)
class StockAdjustment:
    """
    Record of one inventory decrement, enough to undo it.

    taken can be smaller than the requested quantity when stock ran out.
    """

    toy_id: ToyId
    column: StockColumn
    before: int
    after: int

    @property
    def taken(self) -> int:
        return self.before - self.after


def to_toy(row: ToyTable) -> Toy:
    return Toy(
        id=row.id,
        name=row.name,
        description=row.description,
        price=row.price,
        rental_price=row.rental_price,
        stock=row.stock,
        rental_stock=row.rental_stock,
        rental_only=row.rental_only,
        sale_only=row.sale_only,
        category=row.category,
        age_range=row.age_range,
        image_url=row.image_url,
        created_at=row.created_at,
    )


def _draft_values(draft: ToyDraft) -> dict[str, Any]:
    return {
        "name": draft.name,
        "description": draft.description,
        "price": draft.price,
        "rental_price": draft.rental_price,
        "stock": draft.stock,
        "rental_stock": draft.rental_stock,
        "rental_only": draft.mode is ToyMode.RENTAL_ONLY,
        "sale_only": draft.mode is ToyMode.SALE_ONLY,
        "category": draft.category,
        "age_range": draft.age_range,
        "image_url": draft.image_url,
    }


class ToyRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    # ───────────────────────────────────────────────────────────────────────────
    # Catalog
    # ───────────────────────────────────────────────────────────────────────────

    async def get(self, toy_id: ToyId) -> Toy | None:
        async with self._session_factory() as session:
            row = await session.get(ToyTable, toy_id)
            return to_toy(row) if row is not None else None

    async def list_all(self) -> Sequence[Toy]:
        async with self._session_factory() as session:
            result = await session.execute(select(ToyTable).order_by(ToyTable.name))
            return [to_toy(row) for row in result.scalars()]

    async def count(self) -> int:
        async with self._session_factory() as session:
            result = await session.execute(select(func.count()).select_from(ToyTable))
            return result.scalar_one()

    async def create(self, draft: ToyDraft) -> Toy:
        async with self._session_factory() as session:
            row = ToyTable(**_draft_values(draft))
            session.add(row)
            await session.commit()
            return to_toy(row)

    async def update(self, toy_id: ToyId, draft: ToyDraft) -> Toy | None:
        async with self._session_factory() as session:
            row = await session.get(ToyTable, toy_id)
            if row is None:
                return None
            for key, value in _draft_values(draft).items():
                setattr(row, key, value)
            await session.commit()
            return to_toy(row)

    async def delete(self, toy_id: ToyId) -> bool:
        """
        Delete a toy together with the cart and wishlist rows pointing at it.

        One transaction: either all three go or none do.
        """
        async with self._session_factory() as session:
            await session.execute(delete(CartItemTable).where(CartItemTable.toy_id == toy_id))
            await session.execute(delete(WishlistTable).where(WishlistTable.toy_id == toy_id))
            cursor = cast(
                CursorResult[Any],
                await session.execute(delete(ToyTable).where(ToyTable.id == toy_id)),
            )
            await session.commit()
            return cursor.rowcount > 0

    # ───────────────────────────────────────────────────────────────────────────
    # Inventory
    # ───────────────────────────────────────────────────────────────────────────

    async def take_stock(
        self,
        toy_id: ToyId,
        column: StockColumn,
        quantity: int,
        attempts: int = 5,
    ) -> StockAdjustment | None:
        """
        Decrement a stock counter by quantity, clamped at zero.

        Returns None when the toy no longer exists. Raises StockConflict if
        every compare-and-swap lost to a concurrent writer.

        Example:
            adj = await toys.take_stock(toy_id, "rental_stock", 2)
            # later, to undo:
            await toys.give_back(adj)
        """
        col = getattr(ToyTable, column)

        for attempt in range(1, attempts + 1):
            async with self._session_factory() as session:
                current = (
                    await session.execute(select(col).where(ToyTable.id == toy_id))
                ).scalar_one_or_none()
                if current is None:
                    return None

                target = max(0, current - quantity)
                cursor = cast(
                    CursorResult[Any],
                    await session.execute(
                        update(ToyTable)
                        .where(ToyTable.id == toy_id, col == current)
                        .values({column: target})
                    ),
                )
                await session.commit()

                if cursor.rowcount == 1:
                    if target > current - quantity:
                        logger.warning(
                            "Clamped %s for toy %s: wanted %d, had %d",
                            column, toy_id, quantity, current,
                        )
                    return StockAdjustment(toy_id, column, before=current, after=target)

            logger.debug("Stock CAS lost for toy %s (attempt %d)", toy_id, attempt)

        raise StockConflict(f"{column} for toy {toy_id} changed {attempts} times in a row")

    async def give_back(self, adjustment: StockAdjustment) -> None:
        """Undo a take_stock by adding back what it actually took."""
        await self.add_stock(adjustment.toy_id, adjustment.column, adjustment.taken)

    async def add_stock(self, toy_id: ToyId, column: StockColumn, quantity: int) -> None:
        if quantity <= 0:
            return
        col = getattr(ToyTable, column)
        async with self._session_factory() as session:
            await session.execute(
                update(ToyTable).where(ToyTable.id == toy_id).values({column: col + quantity})
            )
            await session.commit()


__all__ = (
    "StockColumn",
    "StockConflict",
    "StockAdjustment",
    "ToyRepository",
    "to_toy",
)
