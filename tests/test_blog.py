"""
Blog — admin-written posts, public once published.
"""

from datetime import datetime

import pytest
from kungfu import Ok, Error

from toybox._errors import ErrorKind
from toybox.blog import Blog, validate_post
from toybox.domain import BlogDraft

NOON = datetime(2024, 6, 1, 12, 0)


@pytest.fixture
def blog(shop) -> Blog:
    return Blog(shop.blog_posts, clock=lambda: NOON)


def post(**overrides: object) -> BlogDraft:
    fields: dict[str, object] = {
        "title": "Why wooden toys last",
        "content": "Hardwood survives toddlers.",
        "published": True,
    }
    fields.update(overrides)
    return BlogDraft(**fields)  # type: ignore[arg-type]


def test_validate_post_trims() -> None:
    match validate_post(post(title="  Rainy day games  ", category=" play ")):
        case Ok(clean):
            assert clean.title == "Rainy day games"
            assert clean.category == "play"
        case Error(e):
            pytest.fail(e.message)


@pytest.mark.parametrize("field", ["title", "content"])
def test_validate_post_requires_text(field) -> None:
    result = validate_post(post(**{field: "   "}))

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.VALIDATION


async def test_publishing_stamps_time(blog, admin) -> None:
    live = (await blog.create(admin, post())).unwrap()
    draft = (await blog.create(admin, post(title="Coming soon", published=False))).unwrap()

    assert live.published_at == NOON
    assert draft.published_at is None


async def test_only_published_posts_are_listed(blog, admin) -> None:
    await blog.create(admin, post(title="Live"))
    await blog.create(admin, post(title="Draft", published=False))

    assert [p.title for p in (await blog.published()).unwrap()] == ["Live"]
    assert len((await blog.list_all(admin)).unwrap()) == 2


async def test_educational_and_category_filters(blog, admin) -> None:
    await blog.create(admin, post(title="Counting games", is_educational=True, category="learning"))
    await blog.create(admin, post(title="Toy care", category="care"))

    assert [p.title for p in (await blog.published(educational_only=True)).unwrap()] == ["Counting games"]
    assert [p.title for p in (await blog.published(category="care")).unwrap()] == ["Toy care"]


async def test_drafts_are_hidden_from_customers(blog, admin, customer) -> None:
    draft = (await blog.create(admin, post(published=False))).unwrap()

    hidden = await blog.get(draft.id, customer)

    assert isinstance(hidden, Error)
    assert hidden.error.kind is ErrorKind.NOT_FOUND
    assert (await blog.get(draft.id, admin)).unwrap().id == draft.id


async def test_update_and_unpublish(blog, admin) -> None:
    created = (await blog.create(admin, post())).unwrap()

    updated = (await blog.update(admin, created.id, post(title="Renamed", published=False))).unwrap()

    assert updated.title == "Renamed"
    assert updated.published_at is None
    assert (await blog.published()).unwrap() == []


async def test_delete_post(blog, admin) -> None:
    created = (await blog.create(admin, post())).unwrap()

    assert await blog.delete(admin, created.id) == Ok(None)
    missing = await blog.delete(admin, created.id)
    assert isinstance(missing, Error)
    assert missing.error.kind is ErrorKind.NOT_FOUND


async def test_customers_cannot_write(blog, customer, admin) -> None:
    created = (await blog.create(admin, post())).unwrap()

    for result in (
        await blog.create(customer, post()),
        await blog.update(customer, created.id, post()),
        await blog.delete(customer, created.id),
        await blog.list_all(customer),
    ):
        assert isinstance(result, Error)
        assert result.error.kind is ErrorKind.FORBIDDEN
