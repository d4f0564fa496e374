"""
Checkout steps — one saga step per store write, in checkout order.

    create_order → create_order_items → decrement_inventory (per line)
    → create_rentals → clear_cart
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace

from kungfu import Ok, Error, LazyCoroResult, Result

from toybox import saga as S
from toybox._errors import ShopError, ShopErrors
from toybox._types import Money, UserId
from toybox.checkout._types import CheckoutState
from toybox.domain import BillingDetails, CartItem
from toybox.lift import from_result, pure, store_call
from toybox.pricing import unit_price
from toybox.store import (
    CartRepository,
    NewOrderItem,
    NewRental,
    OrderRepository,
    RentalRepository,
    StockAdjustment,
    ToyRepository,
)

logger = logging.getLogger(__name__)

type CheckoutStep = S.SagaStep[CheckoutState, ShopError]


# ═══════════════════════════════════════════════════════════════════════════════
# Order
# ═══════════════════════════════════════════════════════════════════════════════

def create_order(
    orders: OrderRepository,
    user_id: UserId,
    total_amount: Money,
    billing: BillingDetails,
    payment_intent_id: str,
) -> CheckoutStep:
    async def undo(state: CheckoutState) -> None:
        await orders.delete(state.order.id)
        logger.info("Rolled back order %s", state.order.id)

    return S.step(
        action=store_call(
            lambda: orders.create(user_id, total_amount, billing, payment_intent_id),
            "create your order",
        ).map(CheckoutState),
        compensate=undo,
        name="create_order",
    )


def create_order_items(
    orders: OrderRepository,
    lines: Sequence[CartItem],
    state: CheckoutState,
) -> CheckoutStep:
    """Unit prices are snapshotted here; later toy price edits never reach the order."""
    new_items = [
        NewOrderItem(
            toy_id=line.toy_id,
            quantity=line.quantity,
            price=unit_price(line),
            is_rental=line.is_rental,
            rental_start_date=line.rental_start_date,
            rental_end_date=line.rental_end_date,
        )
        for line in lines
    ]

    async def undo(s: CheckoutState) -> None:
        await orders.delete_items(s.order.id)

    return S.step(
        action=store_call(
            lambda: orders.add_items(state.order.id, new_items), "save your order items"
        ).map(lambda items: replace(state, items=tuple(items))),
        compensate=undo,
        name="create_order_items",
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Inventory
# ═══════════════════════════════════════════════════════════════════════════════

def decrement_inventory(
    toys: ToyRepository,
    line: CartItem,
    state: CheckoutState,
    attempts: int,
) -> CheckoutStep:
    """
    Take one line's quantity from the matching stock column.

    Stock is clamped at zero, so a short toy still checks out.
    """
    column = "rental_stock" if line.is_rental else "stock"

    def found(adjustment: StockAdjustment | None) -> Result[CheckoutState, ShopError]:
        if adjustment is None:
            return Error(ShopErrors.not_found("Toy", line.toy_id))
        return Ok(replace(state, adjustments=state.adjustments + (adjustment,)))

    async def undo(s: CheckoutState) -> None:
        await toys.give_back(s.adjustments[-1])

    action: LazyCoroResult[CheckoutState, ShopError] = store_call(
        lambda: toys.take_stock(line.toy_id, column, line.quantity, attempts),
        "update stock",
    ).then(lambda adjustment: from_result(found(adjustment)))

    return S.step(action=action, compensate=undo, name="decrement_inventory")


# ═══════════════════════════════════════════════════════════════════════════════
# Rentals
# ═══════════════════════════════════════════════════════════════════════════════

def create_rentals(
    rentals: RentalRepository,
    user_id: UserId,
    lines: Sequence[CartItem],
    state: CheckoutState,
) -> CheckoutStep:
    """One Rental per rental line, linked to its order item."""
    new_rentals = [
        NewRental(
            toy_id=line.toy_id,
            user_id=user_id,
            start_date=line.rental_start_date,
            end_date=line.rental_end_date,
            quantity=line.quantity,
            order_item_id=item.id,
        )
        for line, item in zip(lines, state.items, strict=True)
        if line.is_rental and line.rental_start_date and line.rental_end_date
    ]

    async def undo(s: CheckoutState) -> None:
        await rentals.delete_many([r.id for r in s.rentals])

    if not new_rentals:
        return S.step(action=pure(state), compensate=None, name="create_rentals")

    return S.step(
        action=store_call(
            lambda: rentals.create_many(new_rentals), "create your rentals"
        ).map(lambda created: replace(state, rentals=tuple(created))),
        compensate=undo,
        name="create_rentals",
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════

def clear_cart(
    carts: CartRepository,
    user_id: UserId,
    state: CheckoutState,
) -> CheckoutStep:
    return S.step(
        action=store_call(lambda: carts.clear(user_id), "empty your cart").map(lambda _: state),
        compensate=None,
        name="clear_cart",
    )


__all__ = (
    "CheckoutStep",
    "create_order",
    "create_order_items",
    "decrement_inventory",
    "create_rentals",
    "clear_cart",
)
