"""
Domain — toys, carts, orders, rentals.

Plain frozen values; persistence lives in toybox.store.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from toybox._types import (
    Money,
    ToyId,
    UserId,
    CartItemId,
    OrderId,
    RentalId,
)


# ═══════════════════════════════════════════════════════════════════════════════
# Identity
# ═══════════════════════════════════════════════════════════════════════════════


class Role(Enum):
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


@dataclass(frozen=True, slots=True)
class Principal:
    """
    The signed-in user, as resolved by the identity provider.

    Passed explicitly to every operation; there is no ambient session.
    """

    user_id: UserId
    email: str = ""
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role in (Role.ADMIN, Role.SUPER_ADMIN)


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog
# ═══════════════════════════════════════════════════════════════════════════════


class ToyMode(Enum):
    BOTH = "both"
    RENTAL_ONLY = "rental"
    SALE_ONLY = "sale"

    @classmethod
    def from_flags(cls, rental_only: bool, sale_only: bool) -> "ToyMode":
        if rental_only:
            return cls.RENTAL_ONLY
        if sale_only:
            return cls.SALE_ONLY
        return cls.BOTH


@dataclass(frozen=True, slots=True)
class Toy:
    id: ToyId
    name: str
    description: str
    price: Money  # sale price
    rental_price: Money  # per day
    stock: int
    rental_stock: int
    rental_only: bool = False
    sale_only: bool = False
    category: str = ""
    age_range: str = ""
    image_url: str = ""
    created_at: datetime | None = None

    @property
    def mode(self) -> ToyMode:
        return ToyMode.from_flags(self.rental_only, self.sale_only)

    @property
    def for_rent(self) -> bool:
        return not self.sale_only

    @property
    def for_sale(self) -> bool:
        return not self.rental_only


@dataclass(frozen=True, slots=True)
class ToyDraft:
    """Toy as submitted by the admin form, before validation."""

    name: str
    description: str
    price: Money
    rental_price: Money
    stock: int = 0
    rental_stock: int = 0
    mode: ToyMode = ToyMode.BOTH
    category: str = ""
    age_range: str = ""
    image_url: str = ""


@dataclass(frozen=True, slots=True)
class ImageUpload:
    """Metadata of an image about to go to object storage."""

    size: int
    content_type: str


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class RentalPeriod:
    start: date
    end: date


@dataclass(frozen=True, slots=True)
class CartItem:
    """
    One line in a user's cart.

    rental_start_date / rental_end_date are set iff is_rental.
    """

    id: CartItemId
    user_id: UserId
    toy: Toy
    quantity: int
    is_rental: bool
    rental_start_date: date | None = None
    rental_end_date: date | None = None
    created_at: datetime | None = None

    @property
    def toy_id(self) -> ToyId:
        return self.toy.id

    @property
    def period(self) -> RentalPeriod | None:
        if self.rental_start_date is None or self.rental_end_date is None:
            return None
        return RentalPeriod(self.rental_start_date, self.rental_end_date)


# ═══════════════════════════════════════════════════════════════════════════════
# Orders
# ═══════════════════════════════════════════════════════════════════════════════


class OrderStatus(Enum):
    PAID = "paid"


@dataclass(frozen=True, slots=True)
class BillingDetails:
    name: str
    email: str
    phone: str
    line1: str
    line2: str = ""
    city: str = ""
    postal_code: str = ""
    country: str = "GB"

    @property
    def address(self) -> str:
        return ", ".join([self.line1, self.line2, self.city, self.postal_code])


@dataclass(frozen=True, slots=True)
class OrderItem:
    """
    Order line. price is the unit price at purchase time and is never
    recomputed from the live toy.
    """

    id: str
    order_id: OrderId
    toy_id: ToyId | None
    quantity: int
    price: Money
    is_rental: bool
    rental_start_date: date | None = None
    rental_end_date: date | None = None
    toy_name: str | None = None
    return_requested: bool = False


@dataclass(frozen=True, slots=True)
class Order:
    id: OrderId
    user_id: UserId
    total_amount: Money
    status: OrderStatus
    billing_name: str
    billing_email: str
    billing_phone: str
    billing_address: str
    payment_intent_id: str
    created_at: datetime | None = None
    items: tuple[OrderItem, ...] = ()


# ═══════════════════════════════════════════════════════════════════════════════
# Rentals
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Rental:
    id: RentalId
    toy_id: ToyId | None
    user_id: UserId
    start_date: date
    end_date: date
    quantity: int = 1
    returned: bool = False
    return_date: date | None = None
    order_item_id: str | None = None
    created_at: datetime | None = None
    toy_name: str | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Admin
# ═══════════════════════════════════════════════════════════════════════════════


class DeletionStatus(Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class DeletionLogEntry:
    toy_id: ToyId
    toy_name: str
    admin_id: UserId
    deleted_at: datetime
    status: DeletionStatus
    error_message: str | None = None


@dataclass(frozen=True, slots=True)
class DashboardStats:
    active_rentals: int
    total_toys: int
    customers: int


# ═══════════════════════════════════════════════════════════════════════════════
# Wishlist
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class WishlistItem:
    id: str
    user_id: UserId
    toy: Toy
    created_at: datetime | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Profile & returns
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Profile:
    """
    Contact details a user keeps on file.

    address is a single free-text line; checkout uses it as billing line1
    when the form leaves that blank.
    """

    user_id: UserId
    email: str = ""
    full_name: str = ""
    phone: str = ""
    address: str = ""
    updated_at: datetime | None = None


class ReturnStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True, slots=True)
class ReturnRequest:
    id: str
    order_item_id: str
    user_id: UserId
    reason: str
    condition: str
    status: ReturnStatus = ReturnStatus.PENDING
    created_at: datetime | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Blog
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class BlogDraft:
    title: str
    content: str
    published: bool = False
    is_educational: bool = False
    category: str = ""


@dataclass(frozen=True, slots=True)
class BlogPost:
    id: str
    title: str
    content: str
    published: bool
    is_educational: bool
    category: str = ""
    published_at: datetime | None = None
    created_at: datetime | None = None
