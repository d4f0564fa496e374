"""
Toy deletion — refused while any rental of the toy is still out.

Every attempt leaves one audit row: "success" after the toy is gone,
"failed" with the error message otherwise. Audit writes are best-effort
and never change the outcome returned to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from kungfu import Result, Ok, Error

from combinators import lift as L

from toybox._errors import ErrorKind, ShopError, ShopErrors
from toybox._types import ToyId
from toybox.admin._audit import PLACEHOLDER_ADMIN_ID, UNKNOWN_TOY, AuditTrail
from toybox.catalog import require_admin
from toybox.domain import DeletionLogEntry, DeletionStatus, Principal, Toy
from toybox.lift import from_result, store_call
from toybox.store import RentalRepository, ToyRepository

logger = logging.getLogger(__name__)


def _no_active_rentals(active: int) -> Result[int, ShopError]:
    if active > 0:
        return Error(ShopErrors.business_rule("Cannot delete toy with active rentals"))
    return Ok(active)


class ToyDeletion:
    """
    Example:
        deletion = ToyDeletion(toys, rentals, audit=logs)

        match await deletion.delete(admin, toy_id):
            case Ok(_):
                ...
            case Error(e) if e.kind is ErrorKind.BUSINESS_RULE:
                print(e.message)  # "Cannot delete toy with active rentals"
    """

    def __init__(
        self,
        toys: ToyRepository,
        rentals: RentalRepository,
        audit: AuditTrail,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._toys = toys
        self._rentals = rentals
        self._audit = audit
        self._clock = clock

    async def delete(self, principal: Principal | None, toy_id: ToyId) -> Result[None, ShopError]:
        loaded = await (
            from_result(require_admin(principal))
            .then(lambda _: store_call(lambda: self._toys.get(toy_id), "load toy"))
            .then(lambda toy: L.optional(toy, error=lambda: ShopErrors.not_found("Toy", toy_id)))
        )

        match loaded:
            case Error(e):
                logger.warning("Refused to delete toy %s: %s", toy_id, e.message)
                await self._record(principal, toy_id, UNKNOWN_TOY, DeletionStatus.FAILED, e.message)
                return Error(e)
            case Ok(toy):
                return await self._delete_loaded(principal, toy)

    async def _delete_loaded(self, principal: Principal | None, toy: Toy) -> Result[None, ShopError]:
        def gone(deleted: bool) -> Result[None, ShopError]:
            return Ok(None) if deleted else Error(ShopErrors.not_found("Toy", toy.id))

        result = await (
            store_call(lambda: self._rentals.count_active(toy.id), "check active rentals")
            .then(lambda active: from_result(_no_active_rentals(active)))
            .then(lambda _: store_call(lambda: self._toys.delete(toy.id), "delete toy"))
            .then(lambda deleted: from_result(gone(deleted)))
        )

        match result:
            case Ok(_):
                logger.info("Toy %s (%s) deleted", toy.id, toy.name)
                await self._record(principal, toy.id, toy.name, DeletionStatus.SUCCESS)
                return Ok(None)
            case Error(e):
                if e.kind is ErrorKind.BUSINESS_RULE:
                    logger.warning("Refused to delete toy %s: %s", toy.id, e.message)
                await self._record(principal, toy.id, toy.name, DeletionStatus.FAILED, e.message)
                return Error(e)

    async def _record(
        self,
        principal: Principal | None,
        toy_id: ToyId,
        toy_name: str,
        status: DeletionStatus,
        error_message: str | None = None,
    ) -> None:
        entry = DeletionLogEntry(
            toy_id=toy_id,
            toy_name=toy_name or UNKNOWN_TOY,
            admin_id=principal.user_id if principal is not None else PLACEHOLDER_ADMIN_ID,
            deleted_at=self._clock(),
            status=status,
            error_message=error_message,
        )
        try:
            await self._audit.record(entry)
        except Exception:
            logger.exception("Could not write deletion log for toy %s", toy_id)


__all__ = ("ToyDeletion",)
