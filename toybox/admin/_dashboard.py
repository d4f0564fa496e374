"""
Admin dashboard counters.
"""

from __future__ import annotations

from kungfu import Result

from combinators import parallel

from toybox._errors import ShopError
from toybox.catalog import require_admin
from toybox.domain import DashboardStats, Principal
from toybox.lift import from_result, store_call
from toybox.store import OrderRepository, RentalRepository, ToyRepository


async def dashboard(
    principal: Principal | None,
    toys: ToyRepository,
    rentals: RentalRepository,
    orders: OrderRepository,
) -> Result[DashboardStats, ShopError]:
    """Active rentals, toys and distinct customers, fetched concurrently."""
    counts = parallel(
        store_call(lambda: rentals.count_active(), "count active rentals"),
        store_call(toys.count, "count toys"),
        store_call(orders.customer_count, "count customers"),
    )
    return await (
        from_result(require_admin(principal))
        .then(lambda _: counts)
        .map(lambda c: DashboardStats(active_rentals=c[0], total_toys=c[1], customers=c[2]))
    )


__all__ = ("dashboard",)
