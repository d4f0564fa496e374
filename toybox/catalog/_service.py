"""
Catalog service — toy reads for everyone, writes for admins.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from kungfu import Result, Ok, Error

from combinators import lift as L

from toybox._errors import ShopError, ShopErrors
from toybox._types import ToyId
from toybox.catalog._rules import MAX_IMAGE_BYTES, validate_image, validate_toy
from toybox.catalog._search import BrowseMode, ToyFilters, apply_filters
from toybox.domain import ImageUpload, Principal, Toy, ToyDraft
from toybox.lift import from_result, store_call
from toybox.store import ToyRepository

logger = logging.getLogger(__name__)


def require_admin(principal: Principal | None) -> Result[Principal, ShopError]:
    if principal is None:
        return Error(ShopErrors.not_authenticated())
    if not principal.is_admin:
        return Error(ShopErrors.forbidden())
    return Ok(principal)


class Catalog:
    """
    Toy reads for everyone, admin-only writes.

    create and update take the metadata of an image about to be uploaded;
    it is checked against max_image_bytes before anything is saved.
    """

    def __init__(self, toys: ToyRepository, max_image_bytes: int = MAX_IMAGE_BYTES) -> None:
        self._toys = toys
        self._max_image_bytes = max_image_bytes

    def check_image(self, image: ImageUpload | None) -> Result[None, ShopError]:
        if image is None:
            return Ok(None)
        return validate_image(image.size, image.content_type, self._max_image_bytes)

    async def get(self, toy_id: ToyId) -> Result[Toy, ShopError]:
        return await store_call(lambda: self._toys.get(toy_id), "load toy").then(
            lambda toy: L.optional(toy, error=lambda: ShopErrors.not_found("Toy", toy_id))
        )

    async def list_all(self) -> Result[Sequence[Toy], ShopError]:
        """Every toy by name, including ones hidden from the storefront."""
        return await store_call(self._toys.list_all, "load toys")

    async def browse(
        self,
        filters: ToyFilters = ToyFilters(),
        mode: BrowseMode = BrowseMode.RENTAL,
    ) -> Result[list[Toy], ShopError]:
        return await store_call(self._toys.list_all, "load toys").map(
            lambda toys: apply_filters(toys, filters, mode)
        )

    async def create(
        self,
        principal: Principal | None,
        draft: ToyDraft,
        image: ImageUpload | None = None,
    ) -> Result[Toy, ShopError]:
        result = await (
            from_result(require_admin(principal))
            .then(lambda _: from_result(self.check_image(image)))
            .then(lambda _: from_result(validate_toy(draft)))
            .then(lambda clean: store_call(lambda: self._toys.create(clean), "save toy"))
        )
        match result:
            case Ok(toy):
                logger.info("Toy %s (%s) created", toy.id, toy.name)
        return result

    async def update(
        self,
        principal: Principal | None,
        toy_id: ToyId,
        draft: ToyDraft,
        image: ImageUpload | None = None,
    ) -> Result[Toy, ShopError]:
        return await (
            from_result(require_admin(principal))
            .then(lambda _: from_result(self.check_image(image)))
            .then(lambda _: from_result(validate_toy(draft)))
            .then(lambda clean: store_call(lambda: self._toys.update(toy_id, clean), "save toy"))
            .then(lambda toy: L.optional(toy, error=lambda: ShopErrors.not_found("Toy", toy_id)))
        )


__all__ = ("Catalog", "require_admin")
