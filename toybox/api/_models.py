"""
HTTP models — pydantic request/response bodies.

Requests convert with to_domain(), responses with from_domain().
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime
from decimal import Decimal

from kungfu import Result
from pydantic import BaseModel, Field

from toybox import pricing as P
from toybox._errors import ShopError
from toybox.cart import Cart
from toybox.catalog import mode_from_flags
from toybox.checkout import CheckoutReceipt
from toybox.domain import (
    BillingDetails,
    BlogDraft,
    BlogPost,
    CartItem,
    DashboardStats,
    ImageUpload,
    Order,
    OrderItem,
    Profile,
    Rental,
    ReturnRequest,
    Toy,
    ToyDraft,
    WishlistItem,
)


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════

class ErrorOut(BaseModel):
    kind: str
    message: str
    step: str | None = None

    @classmethod
    def from_domain(cls, err: ShopError) -> ErrorOut:
        return cls(kind=err.kind.name.lower(), message=err.message, step=err.step)


# ═══════════════════════════════════════════════════════════════════════════════
# Toys
# ═══════════════════════════════════════════════════════════════════════════════

class ImageIn(BaseModel):
    """Metadata of the image the client is about to upload."""

    size: int
    content_type: str


class ToyIn(BaseModel):
    name: str
    description: str
    price: Decimal = Decimal("0")
    rental_price: Decimal = Decimal("0")
    stock: int = 0
    rental_stock: int = 0
    rental_only: bool = False
    sale_only: bool = False
    category: str = ""
    age_range: str = ""
    image_url: str = ""
    image: ImageIn | None = None

    def to_domain(self) -> Result[ToyDraft, ShopError]:
        return mode_from_flags(self.rental_only, self.sale_only).map(
            lambda mode: ToyDraft(
                name=self.name,
                description=self.description,
                price=self.price,
                rental_price=self.rental_price,
                stock=self.stock,
                rental_stock=self.rental_stock,
                mode=mode,
                category=self.category,
                age_range=self.age_range,
                image_url=self.image_url,
            )
        )

    def image_upload(self) -> ImageUpload | None:
        if self.image is None:
            return None
        return ImageUpload(size=self.image.size, content_type=self.image.content_type)


class ToyOut(BaseModel):
    id: str
    name: str
    description: str
    price: Decimal
    rental_price: Decimal
    stock: int
    rental_stock: int
    rental_only: bool
    sale_only: bool
    category: str
    age_range: str
    image_url: str
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, toy: Toy) -> ToyOut:
        return cls(
            id=toy.id,
            name=toy.name,
            description=toy.description,
            price=toy.price,
            rental_price=toy.rental_price,
            stock=toy.stock,
            rental_stock=toy.rental_stock,
            rental_only=toy.rental_only,
            sale_only=toy.sale_only,
            category=toy.category,
            age_range=toy.age_range,
            image_url=toy.image_url,
            created_at=toy.created_at,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════

class CartItemIn(BaseModel):
    toy_id: str
    quantity: int = 1
    is_rental: bool = False
    rental_start_date: date | None = None
    rental_end_date: date | None = None


class QuantityIn(BaseModel):
    quantity: int


class RentalDatesIn(BaseModel):
    rental_start_date: date
    rental_end_date: date


class CartLineOut(BaseModel):
    id: str
    toy: ToyOut
    quantity: int
    is_rental: bool
    rental_start_date: date | None = None
    rental_end_date: date | None = None
    line_total: Decimal

    @classmethod
    def from_domain(cls, item: CartItem) -> CartLineOut:
        return cls(
            id=item.id,
            toy=ToyOut.from_domain(item.toy),
            quantity=item.quantity,
            is_rental=item.is_rental,
            rental_start_date=item.rental_start_date,
            rental_end_date=item.rental_end_date,
            line_total=P.line_total(item),
        )


class CartOut(BaseModel):
    items: list[CartLineOut]
    subtotal: Decimal
    vat: Decimal
    total: Decimal
    total_display: str

    @classmethod
    def from_domain(cls, cart: Cart, currency: str = "GBP") -> CartOut:
        t = cart.totals()
        return cls(
            items=[CartLineOut.from_domain(i) for i in cart.items],
            subtotal=t.subtotal,
            vat=t.vat,
            total=t.total,
            total_display=P.format_price(t.total, currency),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Checkout & orders
# ═══════════════════════════════════════════════════════════════════════════════

class BillingIn(BaseModel):
    """Blank fields are filled from the saved profile at checkout."""

    name: str = ""
    email: str = ""
    phone: str = ""
    line1: str = ""
    line2: str = ""
    city: str = ""
    postal_code: str = ""
    country: str = "GB"

    def to_domain(self) -> BillingDetails:
        return BillingDetails(**self.model_dump())


class OrderItemOut(BaseModel):
    id: str
    toy_id: str | None
    toy_name: str | None = None
    quantity: int
    price: Decimal
    is_rental: bool
    rental_start_date: date | None = None
    rental_end_date: date | None = None
    return_requested: bool = False

    @classmethod
    def from_domain(cls, item: OrderItem) -> OrderItemOut:
        return cls(
            id=item.id,
            toy_id=item.toy_id,
            toy_name=item.toy_name,
            quantity=item.quantity,
            price=item.price,
            is_rental=item.is_rental,
            rental_start_date=item.rental_start_date,
            rental_end_date=item.rental_end_date,
            return_requested=item.return_requested,
        )


class OrderOut(BaseModel):
    id: str
    total_amount: Decimal
    status: str
    billing_name: str
    billing_email: str
    billing_phone: str
    billing_address: str
    payment_intent_id: str
    created_at: datetime | None = None
    items: list[OrderItemOut] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, order: Order) -> OrderOut:
        return cls(
            id=order.id,
            total_amount=order.total_amount,
            status=order.status.value,
            billing_name=order.billing_name,
            billing_email=order.billing_email,
            billing_phone=order.billing_phone,
            billing_address=order.billing_address,
            payment_intent_id=order.payment_intent_id,
            created_at=order.created_at,
            items=[OrderItemOut.from_domain(i) for i in order.items],
        )


class RentalOut(BaseModel):
    id: str
    toy_id: str | None
    toy_name: str | None = None
    user_id: str
    start_date: date
    end_date: date
    quantity: int
    returned: bool
    return_date: date | None = None

    @classmethod
    def from_domain(cls, rental: Rental) -> RentalOut:
        return cls(
            id=rental.id,
            toy_id=rental.toy_id,
            toy_name=rental.toy_name,
            user_id=rental.user_id,
            start_date=rental.start_date,
            end_date=rental.end_date,
            quantity=rental.quantity,
            returned=rental.returned,
            return_date=rental.return_date,
        )

    @classmethod
    def many(cls, rentals: Sequence[Rental]) -> list[RentalOut]:
        return [cls.from_domain(r) for r in rentals]


class ReceiptOut(BaseModel):
    order: OrderOut
    rentals: list[RentalOut]
    subtotal: Decimal
    vat: Decimal
    total: Decimal
    total_display: str

    @classmethod
    def from_domain(cls, receipt: CheckoutReceipt, currency: str = "GBP") -> ReceiptOut:
        return cls(
            order=OrderOut.from_domain(receipt.order),
            rentals=RentalOut.many(receipt.rentals),
            subtotal=receipt.totals.subtotal,
            vat=receipt.totals.vat,
            total=receipt.totals.total,
            total_display=P.format_price(receipt.totals.total, currency),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Profile & returns
# ═══════════════════════════════════════════════════════════════════════════════

class ProfileIn(BaseModel):
    full_name: str = ""
    phone: str = ""
    address: str = ""


class ProfileOut(BaseModel):
    user_id: str
    email: str
    full_name: str
    phone: str
    address: str
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, profile: Profile) -> ProfileOut:
        return cls(
            user_id=profile.user_id,
            email=profile.email,
            full_name=profile.full_name,
            phone=profile.phone,
            address=profile.address,
            updated_at=profile.updated_at,
        )


class ReturnRequestIn(BaseModel):
    order_item_id: str
    reason: str
    condition: str


class ReturnRequestOut(BaseModel):
    id: str
    order_item_id: str
    user_id: str
    reason: str
    condition: str
    status: str
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, request: ReturnRequest) -> ReturnRequestOut:
        return cls(
            id=request.id,
            order_item_id=request.order_item_id,
            user_id=request.user_id,
            reason=request.reason,
            condition=request.condition,
            status=request.status.value,
            created_at=request.created_at,
        )

    @classmethod
    def many(cls, requests: Sequence[ReturnRequest]) -> list[ReturnRequestOut]:
        return [cls.from_domain(r) for r in requests]


# ═══════════════════════════════════════════════════════════════════════════════
# Blog
# ═══════════════════════════════════════════════════════════════════════════════

class BlogPostIn(BaseModel):
    title: str
    content: str
    published: bool = False
    is_educational: bool = False
    category: str = ""

    def to_domain(self) -> BlogDraft:
        return BlogDraft(**self.model_dump())


class BlogPostOut(BaseModel):
    id: str
    title: str
    content: str
    published: bool
    is_educational: bool
    category: str
    published_at: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, post: BlogPost) -> BlogPostOut:
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            published=post.published,
            is_educational=post.is_educational,
            category=post.category,
            published_at=post.published_at,
            created_at=post.created_at,
        )

    @classmethod
    def many(cls, posts: Sequence[BlogPost]) -> list[BlogPostOut]:
        return [cls.from_domain(p) for p in posts]


# ═══════════════════════════════════════════════════════════════════════════════
# Wishlist & admin
# ═══════════════════════════════════════════════════════════════════════════════

class WishlistItemOut(BaseModel):
    id: str
    toy: ToyOut

    @classmethod
    def from_domain(cls, item: WishlistItem) -> WishlistItemOut:
        return cls(id=item.id, toy=ToyOut.from_domain(item.toy))


class StatsOut(BaseModel):
    active_rentals: int
    total_toys: int
    customers: int

    @classmethod
    def from_domain(cls, stats: DashboardStats) -> StatsOut:
        return cls(
            active_rentals=stats.active_rentals,
            total_toys=stats.total_toys,
            customers=stats.customers,
        )


__all__ = (
    "ErrorOut",
    "ImageIn",
    "ToyIn",
    "ToyOut",
    "CartItemIn",
    "QuantityIn",
    "RentalDatesIn",
    "CartLineOut",
    "CartOut",
    "BillingIn",
    "OrderItemOut",
    "OrderOut",
    "RentalOut",
    "ReceiptOut",
    "ProfileIn",
    "ProfileOut",
    "ReturnRequestIn",
    "ReturnRequestOut",
    "BlogPostIn",
    "BlogPostOut",
    "WishlistItemOut",
    "StatsOut",
)
