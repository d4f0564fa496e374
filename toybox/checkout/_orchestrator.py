"""
Checkout orchestrator — cart snapshot in, order out.

Steps run strictly one after another. With the default policy a failure
rolls every completed step back; compensate.skip() leaves them in place.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import replace
from decimal import Decimal

from kungfu import Result, Ok, Error

from toybox import saga as S
from toybox._errors import ShopError, ShopErrors
from toybox.cart import check_line
from toybox.checkout import _steps as steps
from toybox.checkout._types import CheckoutReceipt, CheckoutState
from toybox.domain import BillingDetails, CartItem, Principal, Profile
from toybox.lift import store_call
from toybox.pricing import VAT_RATE, totals
from toybox.saga.policy import CompensationPolicy, compensate
from toybox.store import (
    CartRepository,
    OrderRepository,
    ProfileRepository,
    RentalRepository,
    ToyRepository,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Preconditions
# ═══════════════════════════════════════════════════════════════════════════════

_REQUIRED_BILLING = (
    ("name", "Name"),
    ("email", "Email"),
    ("phone", "Phone"),
    ("line1", "Address line 1"),
    ("city", "City"),
    ("postal_code", "Postal code"),
)


def validate_billing(billing: BillingDetails) -> Result[BillingDetails, ShopError]:
    for field, label in _REQUIRED_BILLING:
        if not getattr(billing, field).strip():
            return Error(ShopErrors.validation(f"{label} is required"))
    if "@" not in billing.email:
        return Error(ShopErrors.validation("Enter a valid email address"))
    return Ok(billing)


def prefill_billing(
    billing: BillingDetails,
    profile: Profile | None,
    email: str = "",
) -> BillingDetails:
    """
    Fill blank billing fields from what the user keeps on file.

    Typed values always win. The profile's single address line stands in
    for line1; the signed-in email stands in for email.
    """
    def keep(typed: str, saved: str) -> str:
        return typed if typed.strip() else saved

    if profile is not None:
        billing = replace(
            billing,
            name=keep(billing.name, profile.full_name),
            phone=keep(billing.phone, profile.phone),
            line1=keep(billing.line1, profile.address),
        )
    return replace(billing, email=keep(billing.email, email or (profile.email if profile else "")))


def check_preconditions(
    principal: Principal | None,
    lines: Sequence[CartItem],
    billing: BillingDetails,
) -> Result[Principal, ShopError]:
    if principal is None:
        return Error(ShopErrors.not_authenticated())
    if not lines:
        return Error(ShopErrors.validation("Your cart is empty"))
    for line in lines:
        match check_line(line.quantity, line.is_rental, line.rental_start_date, line.rental_end_date):
            case Error(e):
                return Error(e)
    match validate_billing(billing):
        case Error(e):
            return Error(e)
    return Ok(principal)


def simulated_payment_intent(clock: Callable[[], float] = time.time) -> str:
    """Stand-in for a gateway payment intent id."""
    return f"simulated_{int(clock() * 1000)}"


# ═══════════════════════════════════════════════════════════════════════════════
# Checkout
# ═══════════════════════════════════════════════════════════════════════════════

class Checkout:
    """
    Turns a cart snapshot into an order.

    Example:
        checkout = Checkout(toys, carts, orders, rentals)

        match await checkout.place(principal, cart.snapshot(), billing):
            case Ok(receipt):
                print(receipt.order.id, receipt.totals.total)
            case Error(e):
                print(f"Checkout failed at {e.step}: {e.message}")
    """

    def __init__(
        self,
        toys: ToyRepository,
        carts: CartRepository,
        orders: OrderRepository,
        rentals: RentalRepository,
        vat_rate: Decimal = VAT_RATE,
        stock_cas_attempts: int = 5,
        clock: Callable[[], float] = time.time,
        profiles: ProfileRepository | None = None,
    ) -> None:
        self._toys = toys
        self._carts = carts
        self._orders = orders
        self._rentals = rentals
        self._vat_rate = vat_rate
        self._attempts = stock_cas_attempts
        self._clock = clock
        self._profiles = profiles

    def saga(
        self,
        principal: Principal,
        lines: Sequence[CartItem],
        billing: BillingDetails,
    ) -> S.SagaExpr[CheckoutState, ShopError]:
        """Build the step chain without running it."""
        user_id = principal.user_id
        amount = totals(lines, self._vat_rate).total

        chain = steps.create_order(
            self._orders, user_id, amount, billing, simulated_payment_intent(self._clock)
        ).then(lambda st: steps.create_order_items(self._orders, lines, st))

        for line in lines:
            chain = chain.then(
                lambda st, line=line: steps.decrement_inventory(self._toys, line, st, self._attempts)
            )

        return (
            chain
            .then(lambda st: steps.create_rentals(self._rentals, user_id, lines, st))
            .then(lambda st: steps.clear_cart(self._carts, user_id, st))
        )

    async def place(
        self,
        principal: Principal | None,
        lines: Sequence[CartItem],
        billing: BillingDetails,
        policy: CompensationPolicy = compensate.all_on_failure(),
    ) -> Result[CheckoutReceipt, ShopError]:
        """Blank billing fields are filled from the saved profile first."""
        if principal is not None:
            billing = await self._prefilled(principal, billing)
        match check_preconditions(principal, lines, billing):
            case Error(e):
                return Error(e)
            case Ok(who):
                return await self._run(who, tuple(lines), billing, policy)

    async def _prefilled(self, principal: Principal, billing: BillingDetails) -> BillingDetails:
        if self._profiles is None:
            return prefill_billing(billing, None, principal.email)
        profiles = self._profiles
        match await store_call(lambda: profiles.get(principal.user_id), "load your profile"):
            case Ok(profile):
                return prefill_billing(billing, profile, principal.email)
            case Error(_):
                logger.warning("Checkout for %s continues without profile defaults", principal.user_id)
                return prefill_billing(billing, None, principal.email)

    async def _run(
        self,
        who: Principal,
        lines: tuple[CartItem, ...],
        billing: BillingDetails,
        policy: CompensationPolicy,
    ) -> Result[CheckoutReceipt, ShopError]:
        result = await S.run(self.saga(who, lines, billing), policy=policy)

        match result:
            case Ok(done):
                state = done.value
                logger.info(
                    "Order %s placed by %s: %d lines, %d rentals",
                    state.order.id, who.user_id, len(state.items), len(state.rentals),
                )
                return Ok(CheckoutReceipt(
                    order=replace(state.order, items=state.items),
                    rentals=state.rentals,
                    totals=totals(lines, self._vat_rate),
                ))

            case Error(failure):
                logger.error(
                    "Checkout for %s failed at %s: %s (compensated %d, failed %d)",
                    who.user_id,
                    failure.step_name,
                    failure.error.message,
                    failure.compensators_run,
                    failure.compensators_failed,
                )
                if not failure.rollback_complete:
                    logger.warning("Checkout for %s left partial writes behind", who.user_id)
                return Error(ShopErrors.checkout(failure.step_name, failure.error))


__all__ = (
    "Checkout",
    "check_preconditions",
    "prefill_billing",
    "validate_billing",
    "simulated_payment_intent",
)
