"""
Blog — articles for parents; admins write them, everyone reads the published ones.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import datetime

from kungfu import Result, Ok, Error

from combinators import lift as L

from toybox._errors import ShopError, ShopErrors
from toybox._types import Lazy
from toybox.catalog import require_admin
from toybox.domain import BlogDraft, BlogPost, Principal
from toybox.lift import fail, from_result, pure, store_call
from toybox.store import BlogRepository

logger = logging.getLogger(__name__)


def validate_post(draft: BlogDraft) -> Result[BlogDraft, ShopError]:
    title, content = draft.title.strip(), draft.content.strip()
    if not title:
        return Error(ShopErrors.validation("Title is required"))
    if not content:
        return Error(ShopErrors.validation("Content is required"))
    return Ok(replace(draft, title=title, content=content, category=draft.category.strip()))


class Blog:
    """
    Published posts are public; drafts exist only for admins.

    published_at is stamped from clock on every save that publishes, and
    cleared when a post goes back to draft.
    """

    def __init__(
        self,
        posts: BlogRepository,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._posts = posts
        self._clock = clock

    def published(
        self,
        educational_only: bool = False,
        category: str | None = None,
    ) -> Lazy[Sequence[BlogPost], ShopError]:
        return store_call(
            lambda: self._posts.published(educational_only, category), "load blog posts"
        )

    def get(self, post_id: str, principal: Principal | None = None) -> Lazy[BlogPost, ShopError]:
        """A draft looks missing to anyone but an admin."""
        show_drafts = principal is not None and principal.is_admin

        def visible(post: BlogPost | None) -> Lazy[BlogPost, ShopError]:
            if post is None or not (post.published or show_drafts):
                return fail(ShopErrors.not_found("Blog post", post_id))
            return pure(post)

        return store_call(lambda: self._posts.get(post_id), "load blog post").then(visible)

    # ═══════════════════════════════════════════════════════════════════════════
    # Admin
    # ═══════════════════════════════════════════════════════════════════════════

    async def list_all(self, principal: Principal | None) -> Result[Sequence[BlogPost], ShopError]:
        return await from_result(require_admin(principal)).then(
            lambda _: store_call(self._posts.list_all, "load blog posts")
        )

    async def create(self, principal: Principal | None, draft: BlogDraft) -> Result[BlogPost, ShopError]:
        result = await (
            from_result(require_admin(principal))
            .then(lambda _: from_result(validate_post(draft)))
            .then(lambda valid: store_call(
                lambda: self._posts.create(valid, self._stamp(valid)), "save blog post"
            ))
        )
        match result:
            case Ok(post):
                logger.info("Blog post %s created (published=%s)", post.id, post.published)
        return result

    async def update(
        self,
        principal: Principal | None,
        post_id: str,
        draft: BlogDraft,
    ) -> Result[BlogPost, ShopError]:
        return await (
            from_result(require_admin(principal))
            .then(lambda _: from_result(validate_post(draft)))
            .then(lambda valid: store_call(
                lambda: self._posts.update(post_id, valid, self._stamp(valid)), "save blog post"
            ))
            .then(lambda post: L.optional(
                post, error=lambda: ShopErrors.not_found("Blog post", post_id)
            ))
        )

    async def delete(self, principal: Principal | None, post_id: str) -> Result[None, ShopError]:
        def gone(deleted: bool) -> Lazy[None, ShopError]:
            if not deleted:
                return fail(ShopErrors.not_found("Blog post", post_id))
            logger.info("Blog post %s deleted", post_id)
            return pure(None)

        return await (
            from_result(require_admin(principal))
            .then(lambda _: store_call(lambda: self._posts.delete(post_id), "delete blog post"))
            .then(gone)
        )

    def _stamp(self, draft: BlogDraft) -> datetime | None:
        return self._clock() if draft.published else None


__all__ = ("Blog", "validate_post")
