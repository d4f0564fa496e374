"""
Core types for toybox.

Re-exports from kungfu/combinators + storefront type aliases.
"""

from __future__ import annotations

from typing import Never
from decimal import Decimal

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# Re-export from combinators
from combinators import LCR, NoError

# ═══════════════════════════════════════════════════════════════════════════════
# Lazy Computation Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Lazy[T, E] = LazyCoroResult[T, E]
"""Lazy async computation that may fail."""

type Pure[T] = Lazy[T, Never]
"""Lazy computation that cannot fail."""

# ═══════════════════════════════════════════════════════════════════════════════
# Identifiers & Money
# ═══════════════════════════════════════════════════════════════════════════════

type ToyId = str
type UserId = str
type CartItemId = str
type OrderId = str
type RentalId = str

type Money = Decimal
"""Currency amount without minor-unit scaling (e.g. Decimal("12.50"))."""

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Re-exports from combinators
    "LCR",
    "NoError",
    # Type aliases
    "Lazy",
    "Pure",
    # Identity
    "ToyId",
    "UserId",
    "CartItemId",
    "OrderId",
    "RentalId",
    "Money",
)
