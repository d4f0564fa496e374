"""
Checkout types — state threaded through the saga and the final receipt.
"""

from __future__ import annotations

from dataclasses import dataclass

from toybox.domain import Order, OrderItem, Rental
from toybox.pricing import CartTotals
from toybox.store import StockAdjustment


@dataclass(frozen=True, slots=True)
class CheckoutState:
    """
    Everything created so far.

    Each saga step returns a new state with its own field filled in, and
    its compensator reads that field back to undo exactly what it did.
    """

    order: Order
    items: tuple[OrderItem, ...] = ()
    adjustments: tuple[StockAdjustment, ...] = ()
    rentals: tuple[Rental, ...] = ()


@dataclass(frozen=True, slots=True)
class CheckoutReceipt:
    order: Order  # with items
    rentals: tuple[Rental, ...]
    totals: CartTotals


__all__ = ("CheckoutState", "CheckoutReceipt")
