"""
Cart aggregate — a user's cart kept in sync with its persisted rows.

Every mutation goes to the store first and then re-reads the rows, so
`items` always reflects what a second device would see.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from kungfu import Result, Ok, Error

from toybox._errors import ShopError, ShopErrors
from toybox._types import CartItemId, ToyId
from toybox.domain import CartItem, Principal, Toy
from toybox.lift import store_call
from toybox.pricing import VAT_RATE, CartTotals, totals
from toybox.store import CartRepository, ToyRepository

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Line validation
# ═══════════════════════════════════════════════════════════════════════════════

def check_line(
    quantity: int,
    is_rental: bool,
    start: date | None,
    end: date | None,
) -> Result[None, ShopError]:
    """Rentals need both dates, sales need none, quantity is at least 1."""
    if quantity < 1:
        return Error(ShopErrors.validation("Quantity must be at least 1"))
    if is_rental and (start is None or end is None):
        return Error(ShopErrors.validation("Choose rental start and end dates"))
    if not is_rental and (start is not None or end is not None):
        return Error(ShopErrors.validation("Purchases do not take rental dates"))
    return Ok(None)


def check_mode(toy: Toy, is_rental: bool) -> Result[Toy, ShopError]:
    if is_rental and not toy.for_rent:
        return Error(ShopErrors.validation(f"{toy.name} is for sale only"))
    if not is_rental and not toy.for_sale:
        return Error(ShopErrors.validation(f"{toy.name} is for rent only"))
    return Ok(toy)


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════

class Cart:
    """
    Per-user cart.

    Without a principal every operation is a silent no-op returning Ok(None)
    and the cart stays empty.

    Example:
        cart = Cart(principal, carts, toys)
        await cart.refresh()
        await cart.add(toy_id, 2, is_rental=True, start=d1, end=d2)
        print(cart.totals().total)
    """

    def __init__(
        self,
        principal: Principal | None,
        carts: CartRepository,
        toys: ToyRepository,
        vat_rate: Decimal = VAT_RATE,
    ) -> None:
        self._principal = principal
        self._carts = carts
        self._toys = toys
        self._vat_rate = vat_rate
        self._items: tuple[CartItem, ...] = ()

    @property
    def principal(self) -> Principal | None:
        return self._principal

    @property
    def items(self) -> tuple[CartItem, ...]:
        return self._items

    def snapshot(self) -> tuple[CartItem, ...]:
        """Immutable lines as of the last refresh, for checkout."""
        return self._items

    def totals(self) -> CartTotals:
        return totals(self._items, self._vat_rate)

    # ───────────────────────────────────────────────────────────────────────────
    # Sync
    # ───────────────────────────────────────────────────────────────────────────

    async def refresh(self) -> Result[tuple[CartItem, ...], ShopError]:
        if self._principal is None:
            self._items = ()
            return Ok(self._items)

        user_id = self._principal.user_id
        result = await store_call(lambda: self._carts.items_for(user_id), "load your cart")
        match result:
            case Ok(items):
                self._items = tuple(items)
                return Ok(self._items)
            case Error(e):
                return Error(e)

    async def _then_refresh(self, result: Result[object, ShopError]) -> Result[None, ShopError]:
        match result:
            case Ok(_):
                return (await self.refresh()).map(lambda _: None)
            case Error(e):
                return Error(e)

    # ───────────────────────────────────────────────────────────────────────────
    # Mutations
    # ───────────────────────────────────────────────────────────────────────────

    async def add(
        self,
        toy_id: ToyId,
        quantity: int = 1,
        is_rental: bool = False,
        start: date | None = None,
        end: date | None = None,
    ) -> Result[None, ShopError]:
        """
        Add a line, merging with an existing (toy, is_rental) line.

        A merge increments the quantity; for rentals the new dates replace
        the old ones.
        """
        if self._principal is None:
            return Ok(None)

        match check_line(quantity, is_rental, start, end):
            case Error(e):
                return Error(e)

        match await store_call(lambda: self._toys.get(toy_id), "load toy"):
            case Error(e):
                return Error(e)
            case Ok(None):
                return Error(ShopErrors.not_found("Toy", toy_id))
            case Ok(toy):
                match check_mode(toy, is_rental):
                    case Error(e):
                        return Error(e)

        user_id = self._principal.user_id
        result = await store_call(
            lambda: self._carts.add_line(user_id, toy_id, quantity, is_rental, start, end),
            "add to cart",
        )

        if isinstance(result, Ok):
            logger.debug("Cart %s: added %d x %s (rental=%s)", user_id, quantity, toy_id, is_rental)
        return await self._then_refresh(result)

    async def update_quantity(self, item_id: CartItemId, quantity: int) -> Result[None, ShopError]:
        """Set a line's quantity; values below 1 leave the line as it is."""
        if self._principal is None:
            return Ok(None)
        if quantity < 1:
            return (await self.refresh()).map(lambda _: None)

        user_id = self._principal.user_id
        result = await store_call(
            lambda: self._carts.set_quantity(user_id, item_id, quantity), "update cart"
        )
        return await self._then_refresh(result)

    async def update_rental_dates(
        self,
        item_id: CartItemId,
        start: date,
        end: date,
    ) -> Result[None, ShopError]:
        """Overwrite a rental line's dates as given. Sale lines are left alone."""
        if self._principal is None:
            return Ok(None)

        user_id = self._principal.user_id
        result = await store_call(
            lambda: self._carts.set_dates(user_id, item_id, start, end), "update cart"
        )
        return await self._then_refresh(result)

    async def remove(self, item_id: CartItemId) -> Result[None, ShopError]:
        if self._principal is None:
            return Ok(None)

        user_id = self._principal.user_id
        result = await store_call(lambda: self._carts.remove(user_id, item_id), "remove item")
        return await self._then_refresh(result)

    async def clear(self) -> Result[None, ShopError]:
        if self._principal is None:
            return Ok(None)

        user_id = self._principal.user_id
        result = await store_call(lambda: self._carts.clear(user_id), "clear cart")
        return await self._then_refresh(result)


__all__ = ("Cart", "check_line", "check_mode")
