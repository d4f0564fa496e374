"""
Blog post repository.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Any, cast

from sqlalchemy import delete, select
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from toybox.domain import BlogDraft, BlogPost
from toybox.store._tables import BlogPostTable


def _to_post(row: BlogPostTable) -> BlogPost:
    return BlogPost(
        id=row.id,
        title=row.title,
        content=row.content,
        published=row.published,
        is_educational=row.is_educational,
        category=row.category,
        published_at=row.published_at,
        created_at=row.created_at,
    )


class BlogRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, post_id: str) -> BlogPost | None:
        async with self._session_factory() as session:
            row = await session.get(BlogPostTable, post_id)
            return _to_post(row) if row is not None else None

    async def list_all(self) -> Sequence[BlogPost]:
        """Drafts included, newest first."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(BlogPostTable).order_by(BlogPostTable.created_at.desc())
            )
            return [_to_post(row) for row in result.scalars()]

    async def published(
        self,
        educational_only: bool = False,
        category: str | None = None,
    ) -> Sequence[BlogPost]:
        """Published posts, most recently published first."""
        stmt = (
            select(BlogPostTable)
            .where(BlogPostTable.published.is_(True))
            .order_by(BlogPostTable.published_at.desc())
        )
        if educational_only:
            stmt = stmt.where(BlogPostTable.is_educational.is_(True))
        if category:
            stmt = stmt.where(BlogPostTable.category == category)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [_to_post(row) for row in result.scalars()]

    async def create(self, draft: BlogDraft, published_at: datetime | None) -> BlogPost:
        async with self._session_factory() as session:
            row = BlogPostTable(
                title=draft.title,
                content=draft.content,
                published=draft.published,
                is_educational=draft.is_educational,
                category=draft.category,
                published_at=published_at,
            )
            session.add(row)
            await session.commit()
            return _to_post(row)

    async def update(
        self,
        post_id: str,
        draft: BlogDraft,
        published_at: datetime | None,
    ) -> BlogPost | None:
        async with self._session_factory() as session:
            row = await session.get(BlogPostTable, post_id)
            if row is None:
                return None
            row.title = draft.title
            row.content = draft.content
            row.published = draft.published
            row.is_educational = draft.is_educational
            row.category = draft.category
            row.published_at = published_at
            await session.commit()
            return _to_post(row)

    async def delete(self, post_id: str) -> bool:
        async with self._session_factory() as session:
            cursor = cast(
                CursorResult[Any],
                await session.execute(delete(BlogPostTable).where(BlogPostTable.id == post_id)),
            )
            await session.commit()
            return cursor.rowcount > 0


__all__ = ("BlogRepository",)
