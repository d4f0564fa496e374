"""
Order repository — orders and their line items.
"""

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from toybox._types import Money, OrderId, ToyId, UserId
from toybox.domain import BillingDetails, Order, OrderItem, OrderStatus
from toybox.store._tables import OrderItemTable, OrderTable, ToyTable


@dataclass(frozen=True, slots=True)
class NewOrderItem:
    toy_id: ToyId
    quantity: int
    price: Money
    is_rental: bool
    rental_start_date: date | None = None
    rental_end_date: date | None = None


def _to_order(row: OrderTable, items: Sequence[OrderItem] = ()) -> Order:
    return Order(
        id=row.id,
        user_id=row.user_id,
        total_amount=row.total_amount,
        status=OrderStatus(row.status),
        billing_name=row.billing_name,
        billing_email=row.billing_email,
        billing_phone=row.billing_phone,
        billing_address=row.billing_address,
        payment_intent_id=row.payment_intent_id,
        created_at=row.created_at,
        items=tuple(items),
    )


def _to_item(row: OrderItemTable, toy_name: str | None = None) -> OrderItem:
    return OrderItem(
        id=row.id,
        order_id=row.order_id,
        toy_id=row.toy_id,
        quantity=row.quantity,
        price=row.price,
        is_rental=row.is_rental,
        rental_start_date=row.rental_start_date,
        rental_end_date=row.rental_end_date,
        toy_name=toy_name,
        return_requested=row.return_requested,
    )


class OrderRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(
        self,
        user_id: UserId,
        total_amount: Money,
        billing: BillingDetails,
        payment_intent_id: str,
        status: OrderStatus = OrderStatus.PAID,
    ) -> Order:
        async with self._session_factory() as session:
            row = OrderTable(
                user_id=user_id,
                total_amount=total_amount,
                status=status.value,
                billing_name=billing.name,
                billing_email=billing.email,
                billing_phone=billing.phone,
                billing_address=billing.address,
                payment_intent_id=payment_intent_id,
            )
            session.add(row)
            await session.commit()
            return _to_order(row)

    async def add_items(self, order_id: OrderId, lines: Sequence[NewOrderItem]) -> Sequence[OrderItem]:
        """Insert all lines in one transaction."""
        async with self._session_factory() as session:
            rows = [
                OrderItemTable(
                    order_id=order_id,
                    toy_id=line.toy_id,
                    quantity=line.quantity,
                    price=line.price,
                    is_rental=line.is_rental,
                    rental_start_date=line.rental_start_date,
                    rental_end_date=line.rental_end_date,
                )
                for line in lines
            ]
            session.add_all(rows)
            await session.commit()
            return [_to_item(row) for row in rows]

    async def delete_items(self, order_id: OrderId) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(OrderItemTable).where(OrderItemTable.order_id == order_id))
            await session.commit()

    async def delete(self, order_id: OrderId) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(OrderItemTable).where(OrderItemTable.order_id == order_id))
            await session.execute(delete(OrderTable).where(OrderTable.id == order_id))
            await session.commit()

    async def get(self, order_id: OrderId) -> Order | None:
        async with self._session_factory() as session:
            row = await session.get(OrderTable, order_id)
            if row is None:
                return None
            items = await self._items(session, [order_id])
            return _to_order(row, items[order_id])

    async def history(self, user_id: UserId) -> Sequence[Order]:
        """A user's orders, newest first, each with its items."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(OrderTable)
                .where(OrderTable.user_id == user_id)
                .order_by(OrderTable.created_at.desc())
            )
            rows = list(result.scalars())
            items = await self._items(session, [row.id for row in rows])
            return [_to_order(row, items[row.id]) for row in rows]

    async def item_with_owner(self, item_id: str) -> tuple[OrderItem, UserId] | None:
        """An order item and the user who placed its order."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(OrderItemTable, OrderTable.user_id, ToyTable.name)
                .join(OrderTable, OrderItemTable.order_id == OrderTable.id)
                .outerjoin(ToyTable, OrderItemTable.toy_id == ToyTable.id)
                .where(OrderItemTable.id == item_id)
            )
            found = result.tuples().first()
            if found is None:
                return None
            row, owner, toy_name = found
            return _to_item(row, toy_name), owner

    async def customer_count(self) -> int:
        async with self._session_factory() as session:
            result = await session.execute(select(func.count(func.distinct(OrderTable.user_id))))
            return result.scalar_one()

    async def _items(
        self,
        session: AsyncSession,
        order_ids: Sequence[OrderId],
    ) -> defaultdict[OrderId, list[OrderItem]]:
        grouped: defaultdict[OrderId, list[OrderItem]] = defaultdict(list)
        if not order_ids:
            return grouped
        result = await session.execute(
            select(OrderItemTable, ToyTable.name)
            .outerjoin(ToyTable, OrderItemTable.toy_id == ToyTable.id)
            .where(OrderItemTable.order_id.in_(order_ids))
            .order_by(OrderItemTable.id)
        )
        for row, toy_name in result.tuples():
            grouped[row.order_id].append(_to_item(row, toy_name))
        return grouped


__all__ = ("NewOrderItem", "OrderRepository")
