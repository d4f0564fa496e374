"""
Returns — customers ask to send an order item back, admins decide.

    returns = Returns(orders, requests)
    await returns.request(principal, item_id, reason="Too small", condition="Unused")
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from kungfu import Result, Ok, Error

from combinators import lift as L

from toybox._errors import ShopError, ShopErrors
from toybox._types import Lazy
from toybox.catalog import require_admin
from toybox.domain import OrderItem, Principal, ReturnRequest, ReturnStatus
from toybox.lift import fail, from_result, pure, store_call
from toybox.store import OrderRepository, ReturnRequestRepository

logger = logging.getLogger(__name__)


def validate_return(reason: str, condition: str) -> Result[tuple[str, str], ShopError]:
    reason, condition = reason.strip(), condition.strip()
    if not reason:
        return Error(ShopErrors.validation("Please give a reason for the return"))
    if not condition:
        return Error(ShopErrors.validation("Please describe the item's condition"))
    return Ok((reason, condition))


def _already_requested() -> ShopError:
    return ShopErrors.business_rule("A return has already been requested for this item")


class Returns:
    def __init__(self, orders: OrderRepository, requests: ReturnRequestRepository) -> None:
        self._orders = orders
        self._requests = requests

    async def request(
        self,
        principal: Principal | None,
        order_item_id: str,
        reason: str,
        condition: str,
    ) -> Result[ReturnRequest, ShopError]:
        """
        File a pending request for one of the user's order items.

        An item from someone else's order is reported as not found. Each
        item takes a single request.
        """
        if principal is None:
            return Error(ShopErrors.not_authenticated())
        user_id = principal.user_id

        def owned(found: tuple[OrderItem, str] | None) -> Lazy[OrderItem, ShopError]:
            if found is None or found[1] != user_id:
                return fail(ShopErrors.not_found("Order item", order_item_id))
            return pure(found[0])

        def create(item: OrderItem, fields: tuple[str, str]) -> Lazy[ReturnRequest, ShopError]:
            if item.return_requested:
                return fail(_already_requested())
            why, state = fields
            return store_call(
                lambda: self._requests.create(item.id, user_id, why, state),
                "submit your return request",
            ).then(lambda created: L.optional(created, error=_already_requested))

        result = await from_result(validate_return(reason, condition)).then(
            lambda fields: store_call(
                lambda: self._orders.item_with_owner(order_item_id), "load order item"
            )
            .then(owned)
            .then(lambda item: create(item, fields))
        )
        match result:
            case Ok(_):
                logger.info("Return requested for item %s by %s", order_item_id, user_id)
            case Error(e):
                logger.warning("Return request for item %s refused: %s", order_item_id, e.message)
        return result

    def for_user(self, principal: Principal | None) -> Lazy[Sequence[ReturnRequest], ShopError]:
        """The user's requests, newest first."""
        if principal is None:
            return fail(ShopErrors.not_authenticated())
        return store_call(lambda: self._requests.for_user(principal.user_id), "load your returns")

    # ───────────────────────────────────────────────────────────────────────────
    # Admin
    # ───────────────────────────────────────────────────────────────────────────

    async def list_requests(
        self,
        principal: Principal | None,
        status: ReturnStatus | None = None,
    ) -> Result[Sequence[ReturnRequest], ShopError]:
        return await from_result(require_admin(principal)).then(
            lambda _: store_call(lambda: self._requests.list_all(status), "load return requests")
        )

    async def decide(
        self,
        principal: Principal | None,
        request_id: str,
        approve: bool,
    ) -> Result[ReturnRequest, ShopError]:
        """Approve or reject a pending request; decided ones stay as they are."""
        status = ReturnStatus.APPROVED if approve else ReturnStatus.REJECTED
        return await (
            from_result(require_admin(principal))
            .then(lambda _: store_call(
                lambda: self._requests.set_status(request_id, status), "update return request"
            ))
            .then(lambda decided: L.optional(
                decided,
                error=lambda: ShopErrors.not_found("Pending return request", request_id),
            ))
        )


__all__ = ("Returns", "validate_return")
