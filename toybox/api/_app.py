"""
FastAPI application — routes over the shop services.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse

from toybox.api._deps import (
    MaybePrincipal,
    ShopDep,
    ShopFailure,
    SignedIn,
    unwrap,
)
from toybox.api._models import (
    BillingIn,
    BlogPostIn,
    BlogPostOut,
    CartItemIn,
    CartOut,
    ErrorOut,
    OrderOut,
    ProfileIn,
    ProfileOut,
    QuantityIn,
    ReceiptOut,
    RentalDatesIn,
    RentalOut,
    ReturnRequestIn,
    ReturnRequestOut,
    StatsOut,
    ToyIn,
    ToyOut,
    WishlistItemOut,
)
from toybox.catalog import ALL, BrowseMode, ToyFilters
from toybox.config import Settings, configure_logging
from toybox.domain import Principal, ReturnStatus
from toybox.services import Shop

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Toys
# ═══════════════════════════════════════════════════════════════════════════════

toys = APIRouter(prefix="/toys", tags=["toys"])


@toys.get("")
async def browse_toys(
    shop: ShopDep,
    mode: BrowseMode = BrowseMode.RENTAL,
    q: str = "",
    min_price: Decimal = Decimal("0"),
    max_price: Decimal = Decimal("1000"),
    category: str = ALL,
    age_range: str = ALL,
    available: bool = True,
) -> list[ToyOut]:
    filters = ToyFilters(
        query=q,
        min_price=min_price,
        max_price=max_price,
        category=category,
        age_range=age_range,
        available_only=available,
    )
    return [ToyOut.from_domain(t) for t in unwrap(await shop.catalog.browse(filters, mode))]


@toys.get("/{toy_id}")
async def get_toy(shop: ShopDep, toy_id: str) -> ToyOut:
    return ToyOut.from_domain(unwrap(await shop.catalog.get(toy_id)))


@toys.post("", status_code=201)
async def create_toy(shop: ShopDep, principal: MaybePrincipal, body: ToyIn) -> ToyOut:
    draft = unwrap(body.to_domain())
    return ToyOut.from_domain(unwrap(await shop.catalog.create(principal, draft, body.image_upload())))


@toys.put("/{toy_id}")
async def update_toy(shop: ShopDep, principal: MaybePrincipal, toy_id: str, body: ToyIn) -> ToyOut:
    draft = unwrap(body.to_domain())
    return ToyOut.from_domain(
        unwrap(await shop.catalog.update(principal, toy_id, draft, body.image_upload()))
    )


@toys.delete("/{toy_id}", status_code=204)
async def delete_toy(shop: ShopDep, principal: MaybePrincipal, toy_id: str) -> Response:
    unwrap(await shop.deletion.delete(principal, toy_id))
    return Response(status_code=204)


# ═══════════════════════════════════════════════════════════════════════════════
# Cart & checkout
# ═══════════════════════════════════════════════════════════════════════════════

cart = APIRouter(prefix="/cart", tags=["cart"])


async def _cart_view(shop: Shop, principal: Principal) -> CartOut:
    c = shop.cart_for(principal)
    unwrap(await c.refresh())
    return CartOut.from_domain(c, shop.settings.currency)


@cart.get("")
async def get_cart(shop: ShopDep, principal: SignedIn) -> CartOut:
    return await _cart_view(shop, principal)


@cart.post("/items", status_code=201)
async def add_to_cart(shop: ShopDep, principal: SignedIn, body: CartItemIn) -> CartOut:
    c = shop.cart_for(principal)
    unwrap(await c.add(
        body.toy_id,
        body.quantity,
        is_rental=body.is_rental,
        start=body.rental_start_date,
        end=body.rental_end_date,
    ))
    return CartOut.from_domain(c, shop.settings.currency)


@cart.patch("/items/{item_id}/quantity")
async def update_quantity(shop: ShopDep, principal: SignedIn, item_id: str, body: QuantityIn) -> CartOut:
    c = shop.cart_for(principal)
    unwrap(await c.update_quantity(item_id, body.quantity))
    return CartOut.from_domain(c, shop.settings.currency)


@cart.patch("/items/{item_id}/dates")
async def update_dates(shop: ShopDep, principal: SignedIn, item_id: str, body: RentalDatesIn) -> CartOut:
    c = shop.cart_for(principal)
    unwrap(await c.update_rental_dates(item_id, body.rental_start_date, body.rental_end_date))
    return CartOut.from_domain(c, shop.settings.currency)


@cart.delete("/items/{item_id}")
async def remove_from_cart(shop: ShopDep, principal: SignedIn, item_id: str) -> CartOut:
    c = shop.cart_for(principal)
    unwrap(await c.remove(item_id))
    return CartOut.from_domain(c, shop.settings.currency)


@cart.delete("")
async def clear_cart(shop: ShopDep, principal: SignedIn) -> CartOut:
    c = shop.cart_for(principal)
    unwrap(await c.clear())
    return CartOut.from_domain(c, shop.settings.currency)


checkout = APIRouter(tags=["checkout"])


@checkout.post("/checkout", status_code=201)
async def place_order(shop: ShopDep, principal: SignedIn, body: BillingIn) -> ReceiptOut:
    c = shop.cart_for(principal)
    unwrap(await c.refresh())
    receipt = unwrap(await shop.checkout.place(principal, c.snapshot(), body.to_domain()))
    return ReceiptOut.from_domain(receipt, shop.settings.currency)


# ═══════════════════════════════════════════════════════════════════════════════
# Wishlist & account
# ═══════════════════════════════════════════════════════════════════════════════

wishlist = APIRouter(prefix="/wishlist", tags=["wishlist"])


@wishlist.get("")
async def get_wishlist(shop: ShopDep, principal: SignedIn) -> list[WishlistItemOut]:
    w = shop.wishlist_for(principal)
    return [WishlistItemOut.from_domain(i) for i in unwrap(await w.refresh())]


@wishlist.post("/{toy_id}", status_code=201)
async def add_to_wishlist(shop: ShopDep, principal: SignedIn, toy_id: str) -> list[WishlistItemOut]:
    w = shop.wishlist_for(principal)
    unwrap(await w.add(toy_id))
    return [WishlistItemOut.from_domain(i) for i in w.items]


@wishlist.delete("/{toy_id}")
async def remove_from_wishlist(shop: ShopDep, principal: SignedIn, toy_id: str) -> list[WishlistItemOut]:
    w = shop.wishlist_for(principal)
    unwrap(await w.remove(toy_id))
    return [WishlistItemOut.from_domain(i) for i in w.items]


account = APIRouter(prefix="/account", tags=["account"])


@account.get("/orders")
async def order_history(shop: ShopDep, principal: MaybePrincipal) -> list[OrderOut]:
    return [OrderOut.from_domain(o) for o in unwrap(await shop.account.order_history(principal))]


@account.get("/rentals")
async def my_rentals(shop: ShopDep, principal: MaybePrincipal, returned: bool = False) -> list[RentalOut]:
    return RentalOut.many(unwrap(await shop.account.rentals(principal, returned)))


@account.get("/profile")
async def get_profile(shop: ShopDep, principal: MaybePrincipal) -> ProfileOut:
    return ProfileOut.from_domain(unwrap(await shop.account.profile(principal)))


@account.put("/profile")
async def update_profile(shop: ShopDep, principal: MaybePrincipal, body: ProfileIn) -> ProfileOut:
    saved = await shop.account.update_profile(principal, body.full_name, body.phone, body.address)
    return ProfileOut.from_domain(unwrap(saved))


@account.get("/returns")
async def my_returns(shop: ShopDep, principal: MaybePrincipal) -> list[ReturnRequestOut]:
    return ReturnRequestOut.many(unwrap(await shop.returns.for_user(principal)))


@account.post("/returns", status_code=201)
async def request_return(
    shop: ShopDep,
    principal: MaybePrincipal,
    body: ReturnRequestIn,
) -> ReturnRequestOut:
    created = await shop.returns.request(principal, body.order_item_id, body.reason, body.condition)
    return ReturnRequestOut.from_domain(unwrap(created))


# ═══════════════════════════════════════════════════════════════════════════════
# Blog
# ═══════════════════════════════════════════════════════════════════════════════

blog = APIRouter(prefix="/blog", tags=["blog"])


@blog.get("")
async def blog_posts(
    shop: ShopDep,
    educational: bool = False,
    category: str | None = None,
) -> list[BlogPostOut]:
    return BlogPostOut.many(unwrap(await shop.blog.published(educational, category)))


@blog.get("/{post_id}")
async def blog_post(shop: ShopDep, principal: MaybePrincipal, post_id: str) -> BlogPostOut:
    return BlogPostOut.from_domain(unwrap(await shop.blog.get(post_id, principal)))


# ═══════════════════════════════════════════════════════════════════════════════
# Admin
# ═══════════════════════════════════════════════════════════════════════════════

admin = APIRouter(prefix="/admin", tags=["admin"])


@admin.get("/rentals")
async def all_rentals(
    shop: ShopDep,
    principal: MaybePrincipal,
    returned: Annotated[bool | None, Query()] = None,
) -> list[RentalOut]:
    return RentalOut.many(unwrap(await shop.rental_desk.list_rentals(principal, returned)))


@admin.post("/rentals/{rental_id}/return")
async def return_rental(shop: ShopDep, principal: MaybePrincipal, rental_id: str) -> RentalOut:
    return RentalOut.from_domain(unwrap(await shop.rental_desk.mark_returned(principal, rental_id)))


@admin.get("/stats")
async def stats(shop: ShopDep, principal: MaybePrincipal) -> StatsOut:
    return StatsOut.from_domain(unwrap(await shop.dashboard(principal)))


@admin.get("/returns")
async def all_returns(
    shop: ShopDep,
    principal: MaybePrincipal,
    status: Annotated[ReturnStatus | None, Query()] = None,
) -> list[ReturnRequestOut]:
    return ReturnRequestOut.many(unwrap(await shop.returns.list_requests(principal, status)))


@admin.post("/returns/{request_id}/approve")
async def approve_return(shop: ShopDep, principal: MaybePrincipal, request_id: str) -> ReturnRequestOut:
    decided = await shop.returns.decide(principal, request_id, approve=True)
    return ReturnRequestOut.from_domain(unwrap(decided))


@admin.post("/returns/{request_id}/reject")
async def reject_return(shop: ShopDep, principal: MaybePrincipal, request_id: str) -> ReturnRequestOut:
    decided = await shop.returns.decide(principal, request_id, approve=False)
    return ReturnRequestOut.from_domain(unwrap(decided))


@admin.get("/blog")
async def all_blog_posts(shop: ShopDep, principal: MaybePrincipal) -> list[BlogPostOut]:
    return BlogPostOut.many(unwrap(await shop.blog.list_all(principal)))


@admin.post("/blog", status_code=201)
async def create_blog_post(shop: ShopDep, principal: MaybePrincipal, body: BlogPostIn) -> BlogPostOut:
    return BlogPostOut.from_domain(unwrap(await shop.blog.create(principal, body.to_domain())))


@admin.put("/blog/{post_id}")
async def update_blog_post(
    shop: ShopDep,
    principal: MaybePrincipal,
    post_id: str,
    body: BlogPostIn,
) -> BlogPostOut:
    updated = await shop.blog.update(principal, post_id, body.to_domain())
    return BlogPostOut.from_domain(unwrap(updated))


@admin.delete("/blog/{post_id}", status_code=204)
async def delete_blog_post(shop: ShopDep, principal: MaybePrincipal, post_id: str) -> Response:
    unwrap(await shop.blog.delete(principal, post_id))
    return Response(status_code=204)


# ═══════════════════════════════════════════════════════════════════════════════
# Application
# ═══════════════════════════════════════════════════════════════════════════════

async def _on_shop_failure(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, ShopFailure)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorOut.from_domain(exc.error).model_dump(),
    )


def create_app(shop: Shop | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Build the API.

    Pass a ready Shop (tests do); otherwise one is created from settings on
    startup and closed on shutdown.

    Example:
        app = create_app(settings=Settings(database_url="sqlite+aiosqlite:///shop.db"))
        # uvicorn toybox.api:app
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if shop is not None:
            app.state.shop = shop
            yield
            return

        cfg = settings or Settings()
        configure_logging(cfg)
        owned = await Shop.create(cfg)
        app.state.shop = owned
        try:
            yield
        finally:
            await owned.close()

    app = FastAPI(title="toybox", lifespan=lifespan)
    if shop is not None:
        app.state.shop = shop

    app.add_exception_handler(ShopFailure, _on_shop_failure)
    for router in (toys, cart, checkout, wishlist, account, blog, admin):
        app.include_router(router)
    return app


__all__ = ("create_app",)
