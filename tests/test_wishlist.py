from kungfu import Ok, Error

from toybox._errors import ErrorKind


async def test_add_is_idempotent(shop, customer, make_toy) -> None:
    toy = await make_toy()
    wishlist = shop.wishlist_for(customer)

    assert await wishlist.add(toy.id) == Ok(None)
    assert await wishlist.add(toy.id) == Ok(None)

    assert len(wishlist.items) == 1
    assert wishlist.contains(toy.id)


async def test_remove(shop, customer, make_toy) -> None:
    toy = await make_toy()
    wishlist = shop.wishlist_for(customer)
    await wishlist.add(toy.id)

    await wishlist.remove(toy.id)

    assert wishlist.items == ()
    assert not wishlist.contains(toy.id)


async def test_wishlists_are_per_user(shop, customer, other_customer, make_toy) -> None:
    toy = await make_toy()
    await shop.wishlist_for(customer).add(toy.id)

    theirs = shop.wishlist_for(other_customer)
    await theirs.refresh()

    assert theirs.items == ()


async def test_without_principal_is_a_no_op(shop, make_toy) -> None:
    toy = await make_toy()
    wishlist = shop.wishlist_for(None)

    assert await wishlist.add(toy.id) == Ok(None)
    assert wishlist.items == ()


async def test_unknown_toy(shop, customer) -> None:
    result = await shop.wishlist_for(customer).add("missing")

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.NOT_FOUND
