"""
Shop — every service wired to one database.

    shop = await Shop.create(Settings())
    cart = shop.cart_for(principal)
    await cart.refresh()
    ...
    await shop.close()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from kungfu import Result
from sqlalchemy.ext.asyncio import AsyncEngine

from toybox._errors import ShopError
from toybox.account import Account
from toybox.admin import RentalDesk, ToyDeletion, dashboard
from toybox.blog import Blog
from toybox.cart import Cart
from toybox.catalog import Catalog
from toybox.checkout import Checkout
from toybox.config import Settings
from toybox.domain import DashboardStats, Principal
from toybox.returns import Returns
from toybox.store import (
    BlogRepository,
    CartRepository,
    DeletionLogRepository,
    OrderRepository,
    ProfileRepository,
    RentalRepository,
    ReturnRequestRepository,
    ToyRepository,
    WishlistRepository,
    create_database,
)
from toybox.wishlist import Wishlist

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Shop:
    settings: Settings
    engine: AsyncEngine

    # Repositories
    toys: ToyRepository
    carts: CartRepository
    orders: OrderRepository
    rentals: RentalRepository
    wishlists: WishlistRepository
    deletion_logs: DeletionLogRepository
    profiles: ProfileRepository
    return_requests: ReturnRequestRepository
    blog_posts: BlogRepository

    # Services
    catalog: Catalog
    checkout: Checkout
    deletion: ToyDeletion
    rental_desk: RentalDesk
    account: Account
    returns: Returns
    blog: Blog

    @classmethod
    async def create(cls, settings: Settings | None = None) -> Shop:
        settings = settings or Settings()
        session_factory, engine = await create_database(settings.database_url)
        logger.info("Connected to %s", engine.url.render_as_string(hide_password=True))

        toys = ToyRepository(session_factory)
        carts = CartRepository(session_factory)
        orders = OrderRepository(session_factory)
        rentals = RentalRepository(session_factory)
        wishlists = WishlistRepository(session_factory)
        deletion_logs = DeletionLogRepository(session_factory)
        profiles = ProfileRepository(session_factory)
        return_requests = ReturnRequestRepository(session_factory)
        blog_posts = BlogRepository(session_factory)

        return cls(
            settings=settings,
            engine=engine,
            toys=toys,
            carts=carts,
            orders=orders,
            rentals=rentals,
            wishlists=wishlists,
            deletion_logs=deletion_logs,
            profiles=profiles,
            return_requests=return_requests,
            blog_posts=blog_posts,
            catalog=Catalog(toys, max_image_bytes=settings.max_image_bytes),
            checkout=Checkout(
                toys,
                carts,
                orders,
                rentals,
                vat_rate=settings.vat_rate,
                stock_cas_attempts=settings.stock_cas_attempts,
                profiles=profiles,
            ),
            deletion=ToyDeletion(toys, rentals, audit=deletion_logs),
            rental_desk=RentalDesk(rentals, toys),
            account=Account(orders, rentals, profiles),
            returns=Returns(orders, return_requests),
            blog=Blog(blog_posts),
        )

    def cart_for(self, principal: Principal | None) -> Cart:
        return Cart(principal, self.carts, self.toys, vat_rate=self.settings.vat_rate)

    def wishlist_for(self, principal: Principal | None) -> Wishlist:
        return Wishlist(principal, self.wishlists, self.toys)

    async def dashboard(self, principal: Principal | None) -> Result[DashboardStats, ShopError]:
        return await dashboard(principal, self.toys, self.rentals, self.orders)

    async def close(self) -> None:
        await self.engine.dispose()


__all__ = ("Shop",)
