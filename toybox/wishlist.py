"""
Wishlist — per-user saved toys.

Same contract as the cart: no principal means every call is a no-op.
"""

from __future__ import annotations

import logging

from kungfu import Result, Ok, Error

from toybox._errors import ShopError, ShopErrors
from toybox._types import ToyId
from toybox.domain import Principal, WishlistItem
from toybox.lift import store_call
from toybox.store import ToyRepository, WishlistRepository

logger = logging.getLogger(__name__)


class Wishlist:
    def __init__(
        self,
        principal: Principal | None,
        wishlists: WishlistRepository,
        toys: ToyRepository,
    ) -> None:
        self._principal = principal
        self._wishlists = wishlists
        self._toys = toys
        self._items: tuple[WishlistItem, ...] = ()

    @property
    def items(self) -> tuple[WishlistItem, ...]:
        return self._items

    def contains(self, toy_id: ToyId) -> bool:
        return any(item.toy.id == toy_id for item in self._items)

    async def refresh(self) -> Result[tuple[WishlistItem, ...], ShopError]:
        if self._principal is None:
            self._items = ()
            return Ok(self._items)

        user_id = self._principal.user_id
        match await store_call(lambda: self._wishlists.items_for(user_id), "load your wishlist"):
            case Ok(items):
                self._items = tuple(items)
                return Ok(self._items)
            case Error(e):
                return Error(e)

    async def add(self, toy_id: ToyId) -> Result[None, ShopError]:
        """Save a toy. Saving it twice is fine."""
        if self._principal is None:
            return Ok(None)

        user_id = self._principal.user_id

        async def save(already: bool) -> Result[None, ShopError]:
            if already:
                return Ok(None)
            match await store_call(lambda: self._toys.get(toy_id), "load toy"):
                case Error(e):
                    return Error(e)
                case Ok(None):
                    return Error(ShopErrors.not_found("Toy", toy_id))
            return await store_call(
                lambda: self._wishlists.add(user_id, toy_id), "save to your wishlist"
            )

        result = await store_call(
            lambda: self._wishlists.contains(user_id, toy_id), "load your wishlist"
        ).then(save)
        match result:
            case Error(e):
                return Error(e)
        return (await self.refresh()).map(lambda _: None)

    async def remove(self, toy_id: ToyId) -> Result[None, ShopError]:
        if self._principal is None:
            return Ok(None)

        user_id = self._principal.user_id
        match await store_call(
            lambda: self._wishlists.remove(user_id, toy_id), "update your wishlist"
        ):
            case Error(e):
                return Error(e)
        return (await self.refresh()).map(lambda _: None)


__all__ = ("Wishlist",)
