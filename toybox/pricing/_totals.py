"""
Line, subtotal, VAT and total computation.

All functions are pure: inputs are never mutated and no rounding is
applied, so summing lines in any order gives the same Decimal.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from toybox._types import Money
from toybox.domain import CartItem
from toybox.pricing._days import rental_days

VAT_RATE = Decimal("0.20")


# ═══════════════════════════════════════════════════════════════════════════════
# Per-line
# ═══════════════════════════════════════════════════════════════════════════════


def unit_price(item: CartItem) -> Money:
    """Price snapshotted into the order line: per day for rentals."""
    return item.toy.rental_price if item.is_rental else item.toy.price


def line_total(item: CartItem) -> Money:
    if not item.is_rental:
        return item.toy.price * item.quantity

    period = item.period
    if period is None:
        raise ValueError(f"Rental cart item {item.id} has no rental dates")
    days = rental_days(period.start, period.end)
    return item.toy.rental_price * days * item.quantity


# ═══════════════════════════════════════════════════════════════════════════════
# Aggregates
# ═══════════════════════════════════════════════════════════════════════════════


def subtotal(items: Iterable[CartItem]) -> Money:
    return sum((line_total(i) for i in items), Decimal("0"))


def vat(amount: Money, rate: Decimal = VAT_RATE) -> Money:
    """Flat VAT on the pre-tax subtotal."""
    return amount * rate


def total(items: Iterable[CartItem], rate: Decimal = VAT_RATE) -> Money:
    sub = subtotal(items)
    return sub + vat(sub, rate)


@dataclass(frozen=True, slots=True)
class CartTotals:
    subtotal: Money
    vat: Money
    total: Money


def totals(items: Iterable[CartItem], rate: Decimal = VAT_RATE) -> CartTotals:
    sub = subtotal(items)
    tax = vat(sub, rate)
    return CartTotals(subtotal=sub, vat=tax, total=sub + tax)


CURRENCY_SYMBOLS: dict[str, str] = {"GBP": "£", "EUR": "€", "USD": "$"}


def format_price(amount: Money, currency: str = "GBP") -> str:
    """
    Display string, e.g. £1,234.50.

    Currencies without a known symbol are prefixed with their code:
    format_price(Decimal("5"), "CHF") == "CHF 5.00".
    """
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol is None:
        return f"{currency.upper()} {amount:,.2f}"
    return f"{symbol}{amount:,.2f}"


__all__ = (
    "VAT_RATE",
    "unit_price",
    "line_total",
    "subtotal",
    "vat",
    "total",
    "CartTotals",
    "totals",
    "CURRENCY_SYMBOLS",
    "format_price",
)
