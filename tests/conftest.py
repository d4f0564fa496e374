"""
Shared fixtures — a fresh file-backed SQLite shop per test.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from toybox.config import Settings
from toybox.domain import BillingDetails, Principal, Role, Toy, ToyDraft, ToyMode
from toybox.services import Shop

type MakeToy = Callable[..., Awaitable[Toy]]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'shop.db'}")


@pytest.fixture
async def shop(settings: Settings) -> AsyncIterator[Shop]:
    s = await Shop.create(settings)
    yield s
    await s.close()


@pytest.fixture
def customer() -> Principal:
    return Principal(user_id="user-1", email="kid@example.com")


@pytest.fixture
def other_customer() -> Principal:
    return Principal(user_id="user-2", email="sibling@example.com")


@pytest.fixture
def admin() -> Principal:
    return Principal(user_id="admin-1", email="staff@example.com", role=Role.ADMIN)


@pytest.fixture
def billing() -> BillingDetails:
    return BillingDetails(
        name="Ada Parent",
        email="ada@example.com",
        phone="07700 900123",
        line1="1 Toy Street",
        city="Leeds",
        postal_code="LS1 1AA",
    )


@pytest.fixture
def make_toy(shop: Shop) -> MakeToy:
    """Insert a toy straight into the store, skipping form validation."""

    async def make(
        name: str = "Wooden Train",
        price: str = "10.00",
        rental_price: str = "5.00",
        stock: int = 5,
        rental_stock: int = 3,
        mode: ToyMode = ToyMode.BOTH,
        **extra: object,
    ) -> Toy:
        return await shop.toys.create(ToyDraft(
            name=name,
            description=extra.pop("description", f"A lovely {name.lower()}"),  # type: ignore[arg-type]
            price=Decimal(price),
            rental_price=Decimal(rental_price),
            stock=stock,
            rental_stock=rental_stock,
            mode=mode,
            **extra,  # type: ignore[arg-type]
        ))

    return make


@pytest.fixture
def three_days() -> tuple[date, date]:
    return date(2024, 6, 1), date(2024, 6, 4)
