"""
Saga step creation.
"""

from __future__ import annotations

from collections.abc import Callable, Awaitable
from kungfu import LazyCoroResult
from combinators import lift as L

from toybox.saga._types import SagaStep, CompensatorWithValue

# ═══════════════════════════════════════════════════════════════════════════════
# step() — Primary Constructor
# ═══════════════════════════════════════════════════════════════════════════════


def step[T, E](
    action: LazyCoroResult[T, E],
    compensate: CompensatorWithValue[T] | None = None,
    name: str = "",
) -> SagaStep[T, E]:
    """
    Create a compensated saga step.

    Args:
        action: The operation to perform (LazyCoroResult)
        compensate: The compensation action if rollback needed
        name: Reported in SagaError.step_name when this step fails

    Returns:
        SagaStep that can be chained with .then()

    Example:
        from toybox import saga as S

        place = S.step(
            action=store_call(lambda: orders.create(...), "create order"),
            compensate=lambda order: orders.delete(order.id),
            name="create_order",
        )

        # Chain steps
        checkout = place.then(lambda order: S.step(
            action=store_call(lambda: orders.add_items(order.id, lines), "save items"),
            compensate=lambda items: orders.delete_items(order.id),
            name="create_order_items",
        ))
    """
    return SagaStep(action=action, compensate=compensate, name=name)


# ═══════════════════════════════════════════════════════════════════════════════
# from_async() — Create step from async callable
# ═══════════════════════════════════════════════════════════════════════════════


def from_async[T, E](
    action: Callable[[], Awaitable[T]],
    on_error: Callable[[Exception], E],
    compensate: CompensatorWithValue[T] | None = None,
    name: str = "",
) -> SagaStep[T, E]:
    """
    Create step from async callable with error handling.

    Example:
        S.from_async(
            lambda: rentals.create_many(lines),
            on_error=lambda e: ShopErrors.external(str(e)),
            compensate=lambda created: rentals.delete_many(created),
            name="create_rentals",
        )
    """
    return SagaStep(
        action=L.catching_async(action, on_error=on_error),
        compensate=compensate,
        name=name,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("step", "from_async")
