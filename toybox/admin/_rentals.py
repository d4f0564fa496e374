"""
Rental desk — the admin side of rentals.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import date

from kungfu import Result, Ok, Error

from combinators import lift as L

from toybox._errors import ShopError, ShopErrors
from toybox._types import RentalId
from toybox.catalog import require_admin
from toybox.domain import Principal, Rental
from toybox.lift import from_result, store_call
from toybox.store import RentalRepository, ToyRepository

logger = logging.getLogger(__name__)


class RentalDesk:
    def __init__(
        self,
        rentals: RentalRepository,
        toys: ToyRepository,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._rentals = rentals
        self._toys = toys
        self._clock = clock

    async def list_rentals(
        self,
        principal: Principal | None,
        returned: bool | None = None,
    ) -> Result[Sequence[Rental], ShopError]:
        """All rentals newest first, optionally only active or only returned."""
        return await from_result(require_admin(principal)).then(
            lambda _: store_call(lambda: self._rentals.list_all(returned), "load rentals")
        )

    async def mark_returned(
        self,
        principal: Principal | None,
        rental_id: RentalId,
    ) -> Result[Rental, ShopError]:
        """
        Close a rental and put its units back into rental stock.
        """
        loaded = await (
            from_result(require_admin(principal))
            .then(lambda _: store_call(lambda: self._rentals.get(rental_id), "load rental"))
            .then(lambda r: L.optional(r, error=lambda: ShopErrors.not_found("Rental", rental_id)))
        )
        match loaded:
            case Error(e):
                return Error(e)
            case Ok(rental) if rental.returned:
                return Error(ShopErrors.business_rule("Rental has already been returned"))
            case Ok(rental):
                return await self._close(rental)

    async def _close(self, rental: Rental) -> Result[Rental, ShopError]:
        today = self._clock()

        match await store_call(lambda: self._rentals.mark_returned(rental.id, today), "update rental"):
            case Error(e):
                return Error(e)
            case Ok(False):
                # Someone else returned it between our read and write
                return Error(ShopErrors.business_rule("Rental has already been returned"))

        if rental.toy_id is not None:
            toy_id = rental.toy_id
            match await store_call(
                lambda: self._toys.add_stock(toy_id, "rental_stock", rental.quantity),
                "restore rental stock",
            ):
                case Error(e):
                    return Error(e)

        logger.info("Rental %s returned (%d unit(s) back in stock)", rental.id, rental.quantity)
        return Ok(replace(rental, returned=True, return_date=today))


__all__ = ("RentalDesk",)
