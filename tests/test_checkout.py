"""
Checkout — the happy path, preconditions, and what a failed step leaves behind.
"""

import asyncio
from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest
from kungfu import Ok, Error

from toybox._errors import ErrorKind
from toybox.checkout import Checkout, prefill_billing, simulated_payment_intent
from toybox.domain import BillingDetails, Profile, Toy, ToyDraft
from toybox.saga.policy import compensate


@pytest.fixture
async def filled_cart(shop, customer, make_toy, three_days):
    """Two trains to buy at 10.00 and one bike to rent at 5.00/day for three days."""
    train = await make_toy("Wooden Train", price="10.00", stock=5)
    bike = await make_toy("Balance Bike", rental_price="5.00", rental_stock=3)
    cart = shop.cart_for(customer)
    await cart.add(train.id, 2)
    await cart.add(bike.id, 1, is_rental=True, start=three_days[0], end=three_days[1])
    return cart, train, bike


async def boom(*_args: object, **_kwargs: object) -> None:
    raise ConnectionError("store went away")


# ═══════════════════════════════════════════════════════════════════════════════
# Happy path
# ═══════════════════════════════════════════════════════════════════════════════

async def test_checkout_places_order(shop, customer, billing, filled_cart, three_days) -> None:
    cart, train, bike = filled_cart

    result = await shop.checkout.place(customer, cart.snapshot(), billing)

    receipt = result.unwrap()
    assert receipt.totals.subtotal == Decimal("35")
    assert receipt.totals.vat == Decimal("7")
    assert receipt.totals.total == Decimal("42")

    order = receipt.order
    assert order.total_amount == Decimal("42")
    assert order.status.value == "paid"
    assert order.payment_intent_id.startswith("simulated_")
    assert order.billing_address == "1 Toy Street, , Leeds, LS1 1AA"

    prices = {item.toy_id: item.price for item in order.items}
    assert prices == {train.id: Decimal("10.00"), bike.id: Decimal("5.00")}

    [rental] = receipt.rentals
    assert rental.toy_id == bike.id
    assert rental.returned is False
    assert (rental.start_date, rental.end_date) == three_days


async def test_checkout_updates_store(shop, customer, billing, filled_cart) -> None:
    cart, train, bike = filled_cart

    await shop.checkout.place(customer, cart.snapshot(), billing)

    assert (await shop.toys.get(train.id)).stock == 3
    assert (await shop.toys.get(bike.id)).rental_stock == 2

    await cart.refresh()
    assert cart.items == ()

    [active] = await shop.rentals.for_user(customer.user_id, returned=False)
    assert active.toy_id == bike.id
    assert active.quantity == 1


async def test_order_keeps_price_paid(shop, customer, billing, filled_cart) -> None:
    cart, train, _ = filled_cart
    await shop.checkout.place(customer, cart.snapshot(), billing)

    await shop.toys.update(train.id, replace_price(await shop.toys.get(train.id), "99.00"))

    [order] = await shop.orders.history(customer.user_id)
    train_line = next(i for i in order.items if i.toy_id == train.id)
    assert train_line.price == Decimal("10.00")
    assert train_line.toy_name == "Wooden Train"


def replace_price(toy: Toy, price: str) -> ToyDraft:
    return ToyDraft(
        name=toy.name,
        description=toy.description,
        price=Decimal(price),
        rental_price=toy.rental_price,
        stock=toy.stock,
        rental_stock=toy.rental_stock,
    )


async def test_stock_is_clamped_at_zero(shop, customer, billing, make_toy) -> None:
    toy = await make_toy("Last Puzzle", stock=1)
    cart = shop.cart_for(customer)
    await cart.add(toy.id, 3)

    result = await shop.checkout.place(customer, cart.snapshot(), billing)

    assert isinstance(result, Ok)
    assert (await shop.toys.get(toy.id)).stock == 0


async def test_payment_intent_uses_epoch_millis(shop, customer, billing, filled_cart) -> None:
    cart, _, _ = filled_cart
    checkout = Checkout(
        shop.toys, shop.carts, shop.orders, shop.rentals, clock=lambda: 1_700_000_000.123
    )

    receipt = (await checkout.place(customer, cart.snapshot(), billing)).unwrap()

    assert receipt.order.payment_intent_id == "simulated_1700000000123"
    assert simulated_payment_intent(lambda: 1.5) == "simulated_1500"


# ═══════════════════════════════════════════════════════════════════════════════
# Preconditions
# ═══════════════════════════════════════════════════════════════════════════════

async def test_requires_principal(shop, billing, filled_cart) -> None:
    cart, _, _ = filled_cart

    result = await shop.checkout.place(None, cart.snapshot(), billing)

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.NOT_AUTHENTICATED


async def test_requires_items(shop, customer, billing) -> None:
    result = await shop.checkout.place(customer, (), billing)

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.VALIDATION
    assert await shop.orders.history(customer.user_id) == []


@pytest.mark.parametrize("field", ["name", "email", "phone", "line1", "city", "postal_code"])
async def test_requires_billing_fields(shop, customer, billing, filled_cart, field) -> None:
    cart, _, _ = filled_cart
    no_email = replace(customer, email="")

    result = await shop.checkout.place(no_email, cart.snapshot(), replace(billing, **{field: " "}))

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.VALIDATION


# ═══════════════════════════════════════════════════════════════════════════════
# Failed steps
# ═══════════════════════════════════════════════════════════════════════════════

async def test_failed_items_roll_back_order(shop, customer, billing, filled_cart, monkeypatch) -> None:
    cart, train, _ = filled_cart
    monkeypatch.setattr(shop.orders, "add_items", boom)

    result = await shop.checkout.place(customer, cart.snapshot(), billing)

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.CHECKOUT
    assert result.error.step == "create_order_items"
    assert await shop.orders.history(customer.user_id) == []
    assert (await shop.toys.get(train.id)).stock == 5
    await cart.refresh()
    assert len(cart.items) == 2


async def test_skip_policy_leaves_orphan_order(shop, customer, billing, filled_cart, monkeypatch) -> None:
    cart, _, _ = filled_cart
    monkeypatch.setattr(shop.orders, "add_items", boom)

    result = await shop.checkout.place(
        customer, cart.snapshot(), billing, policy=compensate.skip()
    )

    assert isinstance(result, Error)
    [orphan] = await shop.orders.history(customer.user_id)
    assert orphan.items == ()


async def test_failed_rentals_restore_stock(shop, customer, billing, filled_cart, monkeypatch) -> None:
    cart, train, bike = filled_cart
    monkeypatch.setattr(shop.rentals, "create_many", boom)

    result = await shop.checkout.place(customer, cart.snapshot(), billing)

    assert isinstance(result, Error)
    assert result.error.step == "create_rentals"
    assert (await shop.toys.get(train.id)).stock == 5
    assert (await shop.toys.get(bike.id)).rental_stock == 3
    assert await shop.orders.history(customer.user_id) == []


async def test_skip_policy_keeps_stock_taken(shop, customer, billing, filled_cart, monkeypatch) -> None:
    cart, train, bike = filled_cart
    monkeypatch.setattr(shop.rentals, "create_many", boom)

    await shop.checkout.place(customer, cart.snapshot(), billing, policy=compensate.skip())

    assert (await shop.toys.get(train.id)).stock == 3
    assert (await shop.toys.get(bike.id)).rental_stock == 2
    assert await shop.rentals.for_user(customer.user_id, returned=False) == []


async def test_failed_cart_clear_undoes_everything(shop, customer, billing, filled_cart, monkeypatch) -> None:
    cart, _, bike = filled_cart
    monkeypatch.setattr(shop.carts, "clear", boom)

    result = await shop.checkout.place(customer, cart.snapshot(), billing)

    assert isinstance(result, Error)
    assert result.error.step == "clear_cart"
    assert await shop.rentals.for_user(customer.user_id, returned=False) == []
    assert (await shop.toys.get(bike.id)).rental_stock == 3
    await cart.refresh()
    assert len(cart.items) == 2


async def test_toy_deleted_mid_checkout(shop, customer, billing, filled_cart) -> None:
    cart, train, _ = filled_cart
    snapshot = cart.snapshot()
    await shop.toys.delete(train.id)

    result = await shop.checkout.place(customer, snapshot, billing)

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.CHECKOUT


# ═══════════════════════════════════════════════════════════════════════════════
# Inventory
# ═══════════════════════════════════════════════════════════════════════════════

async def test_concurrent_takes_never_lose_updates(shop, make_toy) -> None:
    toy = await make_toy(stock=4)

    adjustments = await asyncio.gather(
        *(shop.toys.take_stock(toy.id, "stock", 1, attempts=10) for _ in range(4))
    )

    assert sum(a.taken for a in adjustments) == 4
    assert (await shop.toys.get(toy.id)).stock == 0


async def test_give_back_restores_only_what_was_taken(shop, make_toy) -> None:
    toy = await make_toy(stock=1)

    adjustment = await shop.toys.take_stock(toy.id, "stock", 3)
    assert adjustment is not None
    assert adjustment.taken == 1
    assert (await shop.toys.get(toy.id)).stock == 0

    await shop.toys.give_back(adjustment)
    assert (await shop.toys.get(toy.id)).stock == 1


async def test_take_stock_of_missing_toy(shop) -> None:
    assert await shop.toys.take_stock("gone", "stock", 1) is None


# ═══════════════════════════════════════════════════════════════════════════════
# Account views
# ═══════════════════════════════════════════════════════════════════════════════

async def test_account_lists_orders_and_rentals(shop, customer, billing, make_toy) -> None:
    bike = await make_toy("Balance Bike", rental_stock=5)
    cart = shop.cart_for(customer)

    await cart.add(bike.id, 1, is_rental=True, start=date(2024, 6, 1), end=date(2024, 6, 20))
    await shop.checkout.place(customer, cart.snapshot(), billing)
    await cart.refresh()
    await cart.add(bike.id, 1, is_rental=True, start=date(2024, 6, 1), end=date(2024, 6, 5))
    await shop.checkout.place(customer, cart.snapshot(), billing)

    orders = (await shop.account.order_history(customer)).unwrap()
    assert len(orders) == 2
    assert all(len(o.items) == 1 for o in orders)

    active = (await shop.account.rentals(customer)).unwrap()
    assert [r.end_date for r in active] == [date(2024, 6, 5), date(2024, 6, 20)]
    assert all(r.toy_name == "Balance Bike" for r in active)


async def test_account_requires_principal(shop) -> None:
    result = await shop.account.order_history(None)

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.NOT_AUTHENTICATED


# ═══════════════════════════════════════════════════════════════════════════════
# Saved profile
# ═══════════════════════════════════════════════════════════════════════════════

async def test_blank_billing_falls_back_to_profile(shop, customer, filled_cart) -> None:
    cart, _, _ = filled_cart
    await shop.account.update_profile(customer, "Ada Parent", "07700 900123", "1 Toy Street")
    form = BillingDetails(name="", email="", phone="", line1="", city="Leeds", postal_code="LS1 1AA")

    result = await shop.checkout.place(customer, cart.snapshot(), form)

    order = result.unwrap().order
    assert order.billing_name == "Ada Parent"
    assert order.billing_email == "kid@example.com"
    assert order.billing_phone == "07700 900123"
    assert order.billing_address.startswith("1 Toy Street")


async def test_typed_billing_wins_over_profile(shop, customer, billing, filled_cart) -> None:
    cart, _, _ = filled_cart
    await shop.account.update_profile(customer, "Someone Else", "01130 000000", "9 Other Road")

    order = (await shop.checkout.place(customer, cart.snapshot(), billing)).unwrap().order

    assert order.billing_name == "Ada Parent"
    assert order.billing_email == "ada@example.com"
    assert order.billing_phone == "07700 900123"


async def test_incomplete_profile_still_fails_validation(shop, customer, filled_cart) -> None:
    cart, _, _ = filled_cart
    await shop.account.update_profile(customer, "Ada Parent", "", "1 Toy Street")
    form = BillingDetails(name="", email="", phone="", line1="", city="Leeds", postal_code="LS1 1AA")

    result = await shop.checkout.place(customer, cart.snapshot(), form)

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.VALIDATION


def test_prefill_billing_keeps_typed_values() -> None:
    profile = Profile(user_id="user-1", email="saved@example.com", full_name="Saved", phone="1", address="A")
    typed = BillingDetails(name="Typed", email="", phone=" ", line1="", city="Leeds", postal_code="LS1")

    filled = prefill_billing(typed, profile)

    assert filled.name == "Typed"
    assert filled.email == "saved@example.com"
    assert filled.phone == "1"
    assert filled.line1 == "A"
    assert prefill_billing(typed, None) == typed


async def test_sale_line_dates_are_ignored_and_checkout_succeeds(shop, customer, billing, make_toy) -> None:
    train = await make_toy("Wooden Train", price="10.00", stock=5)
    cart = shop.cart_for(customer)
    await cart.add(train.id, 1)

    await cart.update_rental_dates(cart.items[0].id, date(2024, 6, 1), date(2024, 6, 4))

    assert cart.items[0].rental_start_date is None
    assert isinstance(await shop.checkout.place(customer, cart.snapshot(), billing), Ok)
