"""
Lift — Helpers for lifting store calls into LazyCoroResult.

Re-exports from combinators.lift with storefront-specific additions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Awaitable

from kungfu import LazyCoroResult, Result

# Re-export everything from combinators.lift
from combinators.lift import (
    pure,
    fail,
    catching_async,
)

from toybox._errors import ShopError, ShopErrors

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Storefront-specific helpers
# ═══════════════════════════════════════════════════════════════════════════════

def from_result[T, E](result: Result[T, E]) -> LazyCoroResult[T, E]:
    """Lift a Result into LazyCoroResult."""
    async def _run() -> Result[T, E]:
        return result
    return LazyCoroResult(_run)


def store_call[T](
    fn: Callable[[], Awaitable[T]],
    what: str,
) -> LazyCoroResult[T, ShopError]:
    """
    Run a store round trip, turning any exception into an EXTERNAL error.

    The exception is logged with its traceback; the error message stays
    generic so it can be shown to a customer as is.

    Example:
        toy = await store_call(lambda: repo.get(toy_id), "load toy")
    """
    def on_error(exc: Exception) -> ShopError:
        logger.error("Store call failed: %s", what, exc_info=exc)
        return ShopErrors.external(f"Could not {what}. Please try again.")

    return catching_async(fn, on_error=on_error)


__all__ = (
    # From combinators.lift
    "pure",
    "fail",
    "catching_async",
    # Storefront additions
    "from_result",
    "store_call",
)
