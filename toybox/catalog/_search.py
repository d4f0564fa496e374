"""
Catalog search — storefront listing modes and the filter panel.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from toybox.domain import Toy

ALL = "all"


class BrowseMode(Enum):
    RENTAL = "rental"
    SALE = "sale"


@dataclass(frozen=True, slots=True)
class ToyFilters:
    """Filter panel state; the defaults let everything in stock through."""

    query: str = ""
    min_price: Decimal = Decimal("0")
    max_price: Decimal = Decimal("1000")
    category: str = ALL
    age_range: str = ALL
    available_only: bool = True


def listed(toy: Toy, mode: BrowseMode) -> bool:
    """Whether a toy shows up on the rentals or the shop page at all."""
    match mode:
        case BrowseMode.RENTAL:
            return toy.rental_stock != 0 and toy.rental_price != 0
        case BrowseMode.SALE:
            return toy.price != 0 and not toy.rental_only


def _mode_price(toy: Toy, mode: BrowseMode) -> Decimal:
    return toy.rental_price if mode is BrowseMode.RENTAL else toy.price


def _mode_stock(toy: Toy, mode: BrowseMode) -> int:
    return toy.rental_stock if mode is BrowseMode.RENTAL else toy.stock


def matches(toy: Toy, filters: ToyFilters, mode: BrowseMode) -> bool:
    if filters.query:
        q = filters.query.lower()
        if q not in toy.name.lower() and q not in toy.description.lower():
            return False

    if not filters.min_price <= _mode_price(toy, mode) <= filters.max_price:
        return False

    if filters.category != ALL and toy.category.lower() != filters.category.lower():
        return False

    if filters.age_range != ALL and toy.age_range != filters.age_range:
        return False

    return not (filters.available_only and _mode_stock(toy, mode) <= 0)


def apply_filters(
    toys: Iterable[Toy],
    filters: ToyFilters,
    mode: BrowseMode = BrowseMode.RENTAL,
) -> list[Toy]:
    """Listed toys that pass every filter, in input order."""
    return [t for t in toys if listed(t, mode) and matches(t, filters, mode)]


__all__ = (
    "ALL",
    "BrowseMode",
    "ToyFilters",
    "listed",
    "matches",
    "apply_filters",
)
