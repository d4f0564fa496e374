"""
Wishlist repository.
"""

from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from toybox._types import ToyId, UserId
from toybox.domain import WishlistItem
from toybox.store._tables import ToyTable, WishlistTable
from toybox.store._toys import to_toy


class WishlistRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def items_for(self, user_id: UserId) -> Sequence[WishlistItem]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(WishlistTable, ToyTable)
                .join(ToyTable, WishlistTable.toy_id == ToyTable.id)
                .where(WishlistTable.user_id == user_id)
                .order_by(WishlistTable.created_at.desc())
            )
            return [
                WishlistItem(id=row.id, user_id=row.user_id, toy=to_toy(toy), created_at=row.created_at)
                for row, toy in result.tuples()
            ]

    async def contains(self, user_id: UserId, toy_id: ToyId) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                select(WishlistTable.id).where(
                    WishlistTable.user_id == user_id, WishlistTable.toy_id == toy_id
                )
            )
            return result.scalar_one_or_none() is not None

    async def add(self, user_id: UserId, toy_id: ToyId) -> None:
        async with self._session_factory() as session:
            session.add(WishlistTable(user_id=user_id, toy_id=toy_id))
            await session.commit()

    async def remove(self, user_id: UserId, toy_id: ToyId) -> None:
        async with self._session_factory() as session:
            await session.execute(
                delete(WishlistTable).where(
                    WishlistTable.user_id == user_id, WishlistTable.toy_id == toy_id
                )
            )
            await session.commit()


__all__ = ("WishlistRepository",)
