"""
Profiles and return requests.
"""

import asyncio

import pytest
from kungfu import Ok, Error

from toybox._errors import ErrorKind
from toybox.domain import ReturnStatus


@pytest.fixture
async def bought_item(shop, customer, billing, make_toy):
    """The single order item of a paid order for one train."""
    train = await make_toy("Wooden Train", price="10.00", stock=5)
    cart = shop.cart_for(customer)
    await cart.add(train.id, 1)
    receipt = (await shop.checkout.place(customer, cart.snapshot(), billing)).unwrap()
    [item] = receipt.order.items
    return item


# ═══════════════════════════════════════════════════════════════════════════════
# Profile
# ═══════════════════════════════════════════════════════════════════════════════

async def test_first_visit_creates_empty_profile(shop, customer) -> None:
    profile = (await shop.account.profile(customer)).unwrap()

    assert profile.user_id == "user-1"
    assert profile.email == "kid@example.com"
    assert profile.full_name == ""
    assert (await shop.account.profile(customer)).unwrap().user_id == "user-1"


async def test_update_profile_trims_fields(shop, customer) -> None:
    result = await shop.account.update_profile(customer, " Ada Parent ", "07700 900123", " 1 Toy Street ")
    saved = result.unwrap()

    assert saved.full_name == "Ada Parent"
    assert saved.address == "1 Toy Street"
    assert (await shop.account.profile(customer)).unwrap().phone == "07700 900123"


async def test_concurrent_first_visits_share_a_profile(shop, customer) -> None:
    results = await asyncio.gather(*(shop.account.profile(customer) for _ in range(3)))

    assert all(isinstance(r, Ok) for r in results)
    assert {r.unwrap().user_id for r in results} == {"user-1"}


async def test_profile_requires_principal(shop) -> None:
    result = await shop.account.update_profile(None, "Ada", "1", "A")

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.NOT_AUTHENTICATED


# ═══════════════════════════════════════════════════════════════════════════════
# Return requests
# ═══════════════════════════════════════════════════════════════════════════════

async def test_request_return_for_own_item(shop, customer, bought_item) -> None:
    created = (await shop.returns.request(customer, bought_item.id, " Too small ", "Unused")).unwrap()

    assert created.status is ReturnStatus.PENDING
    assert created.reason == "Too small"
    assert [r.id for r in (await shop.returns.for_user(customer)).unwrap()] == [created.id]

    [order] = (await shop.account.order_history(customer)).unwrap()
    assert order.items[0].return_requested


async def test_second_request_for_item_conflicts(shop, customer, bought_item) -> None:
    await shop.returns.request(customer, bought_item.id, "Too small", "Unused")

    result = await shop.returns.request(customer, bought_item.id, "Changed my mind", "Unused")

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.BUSINESS_RULE
    assert len((await shop.returns.for_user(customer)).unwrap()) == 1


async def test_concurrent_requests_create_one(shop, customer, bought_item) -> None:
    results = await asyncio.gather(
        *(shop.returns.request(customer, bought_item.id, "Too small", "Unused") for _ in range(3))
    )

    assert sum(isinstance(r, Ok) for r in results) == 1
    assert len((await shop.returns.for_user(customer)).unwrap()) == 1


async def test_other_users_item_looks_missing(shop, other_customer, bought_item) -> None:
    result = await shop.returns.request(other_customer, bought_item.id, "Too small", "Unused")

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.NOT_FOUND


@pytest.mark.parametrize(("reason", "condition"), [(" ", "Unused"), ("Too small", "")])
async def test_request_needs_reason_and_condition(shop, customer, bought_item, reason, condition) -> None:
    result = await shop.returns.request(customer, bought_item.id, reason, condition)

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.VALIDATION


async def test_request_requires_principal(shop, bought_item) -> None:
    result = await shop.returns.request(None, bought_item.id, "Too small", "Unused")

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.NOT_AUTHENTICATED


async def test_admin_reviews_requests(shop, customer, admin, bought_item) -> None:
    created = (await shop.returns.request(customer, bought_item.id, "Too small", "Unused")).unwrap()

    pending = (await shop.returns.list_requests(admin, ReturnStatus.PENDING)).unwrap()
    assert [r.id for r in pending] == [created.id]

    approved = (await shop.returns.decide(admin, created.id, approve=True)).unwrap()
    assert approved.status is ReturnStatus.APPROVED
    assert (await shop.returns.list_requests(admin, ReturnStatus.PENDING)).unwrap() == []

    # Decided requests stay decided
    again = await shop.returns.decide(admin, created.id, approve=False)
    assert isinstance(again, Error)
    assert again.error.kind is ErrorKind.NOT_FOUND


async def test_customers_cannot_review(shop, customer, bought_item) -> None:
    created = (await shop.returns.request(customer, bought_item.id, "Too small", "Unused")).unwrap()

    listed = await shop.returns.list_requests(customer)
    decided = await shop.returns.decide(customer, created.id, approve=True)

    assert isinstance(listed, Error) and listed.error.kind is ErrorKind.FORBIDDEN
    assert isinstance(decided, Error) and decided.error.kind is ErrorKind.FORBIDDEN
