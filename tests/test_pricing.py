from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from hypothesis import given, strategies as st

from toybox import pricing as P
from toybox.domain import CartItem, Toy


def toy(price: str = "10.00", rental_price: str = "5.00") -> Toy:
    return Toy(
        id="toy-1",
        name="Kite",
        description="Red kite",
        price=Decimal(price),
        rental_price=Decimal(rental_price),
        stock=10,
        rental_stock=10,
    )


def sale(qty: int, price: str = "10.00") -> CartItem:
    return CartItem(id="i-sale", user_id="u", toy=toy(price=price), quantity=qty, is_rental=False)


def rental(qty: int, start: date, end: date, rental_price: str = "5.00") -> CartItem:
    return CartItem(
        id="i-rent",
        user_id="u",
        toy=toy(rental_price=rental_price),
        quantity=qty,
        is_rental=True,
        rental_start_date=start,
        rental_end_date=end,
    )


dates = st.dates(min_value=date(2000, 1, 1), max_value=date(2100, 1, 1))
money = st.decimals(min_value=0, max_value=1000, places=2, allow_nan=False, allow_infinity=False)


@st.composite
def cart_items(draw: st.DrawFn) -> CartItem:
    qty = draw(st.integers(min_value=1, max_value=20))
    price = str(draw(money))
    if draw(st.booleans()):
        return rental(qty, draw(dates), draw(dates), rental_price=price)
    return sale(qty, price=price)


# ═══════════════════════════════════════════════════════════════════════════════
# Rental days
# ═══════════════════════════════════════════════════════════════════════════════

@given(dates)
def test_same_day_bills_one_day(d: date) -> None:
    assert P.rental_days(d, d) == 1


@given(dates, dates)
def test_rental_days_symmetric(a: date, b: date) -> None:
    assert P.rental_days(a, b) == P.rental_days(b, a)


@given(dates, dates)
def test_rental_days_at_least_one(a: date, b: date) -> None:
    assert P.rental_days(a, b) >= 1


def test_rental_days_counts_span() -> None:
    assert P.rental_days(date(2024, 6, 1), date(2024, 6, 4)) == 3


def test_partial_day_rounds_up() -> None:
    start = datetime(2024, 6, 1, 10, 0)
    assert P.rental_days(start, start + timedelta(days=1, hours=1)) == 2


# ═══════════════════════════════════════════════════════════════════════════════
# Totals
# ═══════════════════════════════════════════════════════════════════════════════

def test_mixed_cart_example() -> None:
    items = [sale(2), rental(1, date(2024, 6, 1), date(2024, 6, 4))]

    t = P.totals(items)

    assert t.subtotal == Decimal("35.00")
    assert t.vat == Decimal("7.00")
    assert t.total == Decimal("42.00")


@given(st.lists(cart_items(), max_size=8))
def test_vat_is_exactly_a_fifth_of_subtotal(items: list[CartItem]) -> None:
    sub = P.subtotal(items)
    assert P.vat(sub) == sub * Decimal("0.20")
    assert P.total(items) == sub + sub * Decimal("0.20")


@given(st.lists(cart_items(), max_size=8))
def test_subtotal_ignores_line_order(items: list[CartItem]) -> None:
    assert P.subtotal(items) == P.subtotal(list(reversed(items)))


def test_empty_cart_totals_zero() -> None:
    assert P.totals([]) == P.CartTotals(Decimal("0"), Decimal("0"), Decimal("0"))


def test_rental_line_needs_dates() -> None:
    undated = CartItem(id="x", user_id="u", toy=toy(), quantity=1, is_rental=True)
    with pytest.raises(ValueError):
        P.line_total(undated)


def test_unit_price_follows_mode() -> None:
    assert P.unit_price(sale(1)) == Decimal("10.00")
    assert P.unit_price(rental(1, date(2024, 1, 1), date(2024, 1, 9))) == Decimal("5.00")


def test_format_price() -> None:
    assert P.format_price(Decimal("1234.5")) == "£1,234.50"


@pytest.mark.parametrize(
    ("currency", "shown"),
    [("GBP", "£12.00"), ("eur", "€12.00"), ("USD", "$12.00"), ("CHF", "CHF 12.00")],
)
def test_format_price_uses_currency(currency: str, shown: str) -> None:
    assert P.format_price(Decimal("12"), currency) == shown
