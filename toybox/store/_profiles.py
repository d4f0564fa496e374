"""
Profile repository — one user_profiles row per user, created on first read.
"""

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from toybox._types import UserId
from toybox.domain import Profile
from toybox.store._tables import ProfileTable


def _to_profile(row: ProfileTable) -> Profile:
    return Profile(
        user_id=row.id,
        email=row.email,
        full_name=row.full_name,
        phone=row.phone,
        address=row.address,
        updated_at=row.updated_at,
    )


class ProfileRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, user_id: UserId) -> Profile | None:
        async with self._session_factory() as session:
            row = await session.get(ProfileTable, user_id)
            return _to_profile(row) if row is not None else None

    async def ensure(self, user_id: UserId, email: str = "") -> Profile:
        """
        The user's profile, inserting an empty one if there is none yet.

        Two first visits racing each other both end up reading the same row.
        """
        existing = await self.get(user_id)
        if existing is not None:
            return existing
        try:
            async with self._session_factory() as session:
                row = ProfileTable(id=user_id, email=email)
                session.add(row)
                await session.commit()
                return _to_profile(row)
        except IntegrityError:
            created = await self.get(user_id)
            if created is None:
                raise
            return created

    async def update(
        self,
        user_id: UserId,
        full_name: str,
        phone: str,
        address: str,
    ) -> Profile | None:
        async with self._session_factory() as session:
            result = await session.execute(
                update(ProfileTable)
                .where(ProfileTable.id == user_id)
                .values(full_name=full_name, phone=phone, address=address)
                .returning(ProfileTable)
            )
            row = result.scalar_one_or_none()
            await session.commit()
            return _to_profile(row) if row is not None else None


__all__ = ("ProfileRepository",)
