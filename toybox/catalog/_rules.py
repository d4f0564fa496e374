"""
Catalog rules — admin toy form validation and image upload limits.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

from kungfu import Result, Ok, Error

from toybox._errors import ShopError, ShopErrors
from toybox.domain import ToyDraft, ToyMode

CATEGORIES: tuple[str, ...] = (
    "educational",
    "outdoor",
    "board games",
    "puzzles",
    "building blocks",
    "dolls",
    "vehicles",
    "action figures",
    "arts & crafts",
)

AGE_RANGES: tuple[str, ...] = (
    "0-2 years",
    "3-5 years",
    "6-8 years",
    "9-12 years",
    "13+ years",
)

MAX_IMAGE_BYTES = 5 * 1024 * 1024

_ZERO = Decimal("0")


def mode_from_flags(rental_only: bool, sale_only: bool) -> Result[ToyMode, ShopError]:
    if rental_only and sale_only:
        return Error(ShopErrors.validation("A toy cannot be both rental-only and sale-only"))
    return Ok(ToyMode.from_flags(rental_only, sale_only))


def normalize_mode(draft: ToyDraft) -> ToyDraft:
    """Zero out the price and stock of the mode a toy is not offered in."""
    match draft.mode:
        case ToyMode.RENTAL_ONLY:
            return replace(draft, price=_ZERO, stock=0)
        case ToyMode.SALE_ONLY:
            return replace(draft, rental_price=_ZERO, rental_stock=0)
        case ToyMode.BOTH:
            return draft


def validate_toy(draft: ToyDraft) -> Result[ToyDraft, ShopError]:
    """
    Check a submitted toy and return it normalized for its mode.

    Example:
        match validate_toy(ToyDraft("Kite", "Red kite", Decimal("12"), Decimal("0"),
                                    mode=ToyMode.SALE_ONLY)):
            case Ok(draft):
                ...  # rental_price and rental_stock are now 0
    """
    name = draft.name.strip()
    description = draft.description.strip()

    if not name:
        return Error(ShopErrors.validation("Toy name is required"))
    if not description:
        return Error(ShopErrors.validation("Description is required"))
    if draft.mode is not ToyMode.RENTAL_ONLY and draft.price <= 0:
        return Error(ShopErrors.validation("Price must be greater than 0 for sale items"))
    if draft.mode is not ToyMode.SALE_ONLY and draft.rental_price <= 0:
        return Error(ShopErrors.validation("Rental price must be greater than 0 for rental items"))
    if draft.stock < 0 or draft.rental_stock < 0:
        return Error(ShopErrors.validation("Stock cannot be negative"))
    if draft.category and draft.category not in CATEGORIES:
        return Error(ShopErrors.validation(f"Unknown category: {draft.category}"))
    if draft.age_range and draft.age_range not in AGE_RANGES:
        return Error(ShopErrors.validation(f"Unknown age range: {draft.age_range}"))

    return Ok(normalize_mode(replace(draft, name=name, description=description)))


def validate_image(
    size: int,
    content_type: str,
    max_bytes: int = MAX_IMAGE_BYTES,
) -> Result[None, ShopError]:
    """Upload guard run before bytes go to object storage."""
    if not content_type.startswith("image/"):
        return Error(ShopErrors.validation("Please upload an image file"))
    if size > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        return Error(ShopErrors.validation(f"Image size must be less than {limit_mb:g}MB"))
    return Ok(None)


__all__ = (
    "CATEGORIES",
    "AGE_RANGES",
    "MAX_IMAGE_BYTES",
    "mode_from_flags",
    "normalize_mode",
    "validate_toy",
    "validate_image",
)
