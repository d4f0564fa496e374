"""
Checkout — order placement as a compensated saga.

    from toybox.checkout import Checkout
    from toybox.saga.policy import compensate

    result = await checkout.place(principal, cart.snapshot(), billing)

    # Keep completed steps on failure instead of rolling back
    result = await checkout.place(principal, lines, billing, policy=compensate.skip())
"""

from toybox.checkout._types import CheckoutState, CheckoutReceipt
from toybox.checkout._orchestrator import (
    Checkout,
    check_preconditions,
    prefill_billing,
    validate_billing,
    simulated_payment_intent,
)

__all__ = (
    "CheckoutState",
    "CheckoutReceipt",
    "Checkout",
    "check_preconditions",
    "prefill_billing",
    "validate_billing",
    "simulated_payment_intent",
)
