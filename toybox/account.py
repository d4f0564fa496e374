"""
Account — a signed-in user's profile, orders and rentals.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from toybox._errors import ShopError, ShopErrors
from toybox._types import Lazy
from toybox.domain import Order, Principal, Profile, Rental
from toybox.lift import fail, pure, store_call
from toybox.store import OrderRepository, ProfileRepository, RentalRepository

logger = logging.getLogger(__name__)


class Account:
    def __init__(
        self,
        orders: OrderRepository,
        rentals: RentalRepository,
        profiles: ProfileRepository,
    ) -> None:
        self._orders = orders
        self._rentals = rentals
        self._profiles = profiles

    def profile(self, principal: Principal | None) -> Lazy[Profile, ShopError]:
        """The saved profile; an empty one is created on first visit."""
        if principal is None:
            return fail(ShopErrors.not_authenticated())
        return store_call(
            lambda: self._profiles.ensure(principal.user_id, principal.email),
            "load your profile",
        )

    def update_profile(
        self,
        principal: Principal | None,
        full_name: str,
        phone: str,
        address: str,
    ) -> Lazy[Profile, ShopError]:
        if principal is None:
            return fail(ShopErrors.not_authenticated())

        def save(_: Profile) -> Lazy[Profile, ShopError]:
            return store_call(
                lambda: self._profiles.update(
                    principal.user_id, full_name.strip(), phone.strip(), address.strip()
                ),
                "update your profile",
            ).then(lambda saved: _found(saved, principal))

        return self.profile(principal).then(save)

    def order_history(self, principal: Principal | None) -> Lazy[Sequence[Order], ShopError]:
        """Orders newest first, each with its items."""
        if principal is None:
            return fail(ShopErrors.not_authenticated())
        return store_call(lambda: self._orders.history(principal.user_id), "load your orders")

    def rentals(
        self,
        principal: Principal | None,
        returned: bool = False,
    ) -> Lazy[Sequence[Rental], ShopError]:
        """
        Active rentals soonest-due first, or past rentals most recent first.

        Example:
            match await account.rentals(principal):
                case Ok(active):
                    ...
        """
        if principal is None:
            return fail(ShopErrors.not_authenticated())
        return store_call(
            lambda: self._rentals.for_user(principal.user_id, returned), "load your rentals"
        )


def _found(saved: Profile | None, principal: Principal) -> Lazy[Profile, ShopError]:
    if saved is None:
        return fail(ShopErrors.not_found("Profile", principal.user_id))
    logger.info("Profile %s updated", principal.user_id)
    return pure(saved)


__all__ = ("Account",)
