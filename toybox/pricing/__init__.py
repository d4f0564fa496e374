"""
Pricing — pure price math for carts and orders.

    from toybox import pricing as P

    days = P.rental_days(start, end)
    t = P.totals(cart.items)   # subtotal, vat, total
"""

from __future__ import annotations

from toybox.pricing._days import rental_days
from toybox.pricing._totals import (
    VAT_RATE,
    unit_price,
    line_total,
    subtotal,
    vat,
    total,
    CartTotals,
    totals,
    CURRENCY_SYMBOLS,
    format_price,
)

__all__ = (
    "rental_days",
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
