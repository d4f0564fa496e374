"""
Catalog — toys, the admin form rules and storefront search.

    from toybox.catalog import BrowseMode, ToyFilters

    toys = await catalog.browse(ToyFilters(query="lego"), BrowseMode.RENTAL)
"""

from toybox.catalog._rules import (
    CATEGORIES,
    AGE_RANGES,
    MAX_IMAGE_BYTES,
    mode_from_flags,
    normalize_mode,
    validate_toy,
    validate_image,
)
from toybox.catalog._search import (
    ALL,
    BrowseMode,
    ToyFilters,
    listed,
    matches,
    apply_filters,
)
from toybox.catalog._service import Catalog, require_admin

__all__ = (
    # Rules
    "CATEGORIES",
    "AGE_RANGES",
    "MAX_IMAGE_BYTES",
    "mode_from_flags",
    "normalize_mode",
    "validate_toy",
    "validate_image",
    # Search
    "ALL",
    "BrowseMode",
    "ToyFilters",
    "listed",
    "matches",
    "apply_filters",
    # Service
    "Catalog",
    "require_admin",
)
