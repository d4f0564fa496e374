"""
Store — SQLAlchemy persistence for the storefront.

Repositories raise on failure; services lift their calls with
toybox.lift.store_call so callers only ever see Result values.

Example:
    session_factory, engine = await create_database("sqlite+aiosqlite:///shop.db")
    toys = ToyRepository(session_factory)
    toy = await toys.get(toy_id)
"""

from toybox.store._tables import (
    Base,
    ToyTable,
    CartItemTable,
    WishlistTable,
    OrderTable,
    OrderItemTable,
    RentalTable,
    ToyDeletionLogTable,
    ReturnRequestTable,
    ProfileTable,
    BlogPostTable,
)
from toybox.store._db import create_database
from toybox.store._toys import (
    StockColumn,
    StockConflict,
    StockAdjustment,
    ToyRepository,
)
from toybox.store._carts import CartRepository
from toybox.store._wishlists import WishlistRepository
from toybox.store._orders import NewOrderItem, OrderRepository
from toybox.store._rentals import NewRental, RentalRepository
from toybox.store._audit import DeletionLogRepository
from toybox.store._profiles import ProfileRepository
from toybox.store._returns import ReturnRequestRepository
from toybox.store._blog import BlogRepository

__all__ = (
    # Tables
    "Base",
    "ToyTable",
    "CartItemTable",
    "WishlistTable",
    "OrderTable",
    "OrderItemTable",
    "RentalTable",
    "ToyDeletionLogTable",
    "ReturnRequestTable",
    "ProfileTable",
    "BlogPostTable",
    # Setup
    "create_database",
    # Repositories
    "ToyRepository",
    "CartRepository",
    "WishlistRepository",
    "OrderRepository",
    "RentalRepository",
    "DeletionLogRepository",
    "ProfileRepository",
    "ReturnRequestRepository",
    "BlogRepository",
    # Values
    "StockColumn",
    "StockConflict",
    "StockAdjustment",
    "NewOrderItem",
    "NewRental",
)
