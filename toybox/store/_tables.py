"""
Database layer — SQLAlchemy models for the storefront tables.

Table names match the hosted store: toys, cart_items, orders, order_items,
rentals, toy_deletion_logs, wishlists, user_profiles, return_requests,
blog_posts.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def new_id() -> str:
    return str(uuid.uuid4())


# ═══════════════════════════════════════════════════════════════════════════════
# Base
# ═══════════════════════════════════════════════════════════════════════════════

class Base(DeclarativeBase):
    pass


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog
# ═══════════════════════════════════════════════════════════════════════════════

class ToyTable(Base):
    __tablename__ = "toys"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    rental_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rental_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    rental_only: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sale_only: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    category: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    age_range: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    image_url: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)


# ═══════════════════════════════════════════════════════════════════════════════
# Cart & Wishlist
# ═══════════════════════════════════════════════════════════════════════════════

class CartItemTable(Base):
    __tablename__ = "cart_items"
    __table_args__ = (UniqueConstraint("user_id", "toy_id", "is_rental"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    toy_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("toys.id", ondelete="CASCADE"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    is_rental: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rental_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    rental_end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)


class WishlistTable(Base):
    __tablename__ = "wishlists"
    __table_args__ = (UniqueConstraint("user_id", "toy_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    toy_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("toys.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)


# ═══════════════════════════════════════════════════════════════════════════════
# Orders
# ═══════════════════════════════════════════════════════════════════════════════

class OrderTable(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)

    # Billing snapshot
    billing_name: Mapped[str] = mapped_column(String(200), nullable=False)
    billing_email: Mapped[str] = mapped_column(String(200), nullable=False)
    billing_phone: Mapped[str] = mapped_column(String(50), nullable=False)
    billing_address: Mapped[str] = mapped_column(Text, nullable=False)

    payment_intent_id: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)


class OrderItemTable(Base):
    __tablename__ = "order_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    order_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    toy_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("toys.id", ondelete="SET NULL"), nullable=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    # Unit price at purchase time
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    is_rental: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rental_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    rental_end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    return_requested: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class ReturnRequestTable(Base):
    __tablename__ = "return_requests"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    order_item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("order_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    condition: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)


# ═══════════════════════════════════════════════════════════════════════════════
# Rentals
# ═══════════════════════════════════════════════════════════════════════════════

class RentalTable(Base):
    __tablename__ = "rentals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    toy_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("toys.id", ondelete="SET NULL"), nullable=True, index=True
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    order_item_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    returned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    return_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)


# ═══════════════════════════════════════════════════════════════════════════════
# Audit
# ═══════════════════════════════════════════════════════════════════════════════

class ToyDeletionLogTable(Base):
    """No foreign key on toy_id: rows outlive the toy they describe."""

    __tablename__ = "toy_deletion_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    toy_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    toy_name: Mapped[str] = mapped_column(String(200), nullable=False)
    admin_id: Mapped[str] = mapped_column(String(36), nullable=False)
    deleted_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Profiles & Blog
# ═══════════════════════════════════════════════════════════════════════════════

class ProfileTable(Base):
    """Keyed by the identity provider's user id."""

    __tablename__ = "user_profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    full_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.now, onupdate=datetime.now
    )


class BlogPostTable(Base):
    __tablename__ = "blog_posts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_educational: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    published_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)
