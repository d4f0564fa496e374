from decimal import Decimal

import pytest
from kungfu import Ok, Error

from toybox._errors import ErrorKind
from toybox.catalog import (
    BrowseMode,
    ToyFilters,
    apply_filters,
    mode_from_flags,
    validate_image,
    validate_toy,
)
from toybox.domain import ImageUpload, Toy, ToyDraft, ToyMode
from toybox.services import Shop


def draft(**overrides: object) -> ToyDraft:
    fields: dict[str, object] = {
        "name": "Stacking Rings",
        "description": "Five bright rings",
        "price": Decimal("12.00"),
        "rental_price": Decimal("2.00"),
        "stock": 4,
        "rental_stock": 2,
        "category": "educational",
        "age_range": "0-2 years",
    }
    fields.update(overrides)
    return ToyDraft(**fields)  # type: ignore[arg-type]


def toy(name: str, **overrides: object) -> Toy:
    fields: dict[str, object] = {
        "id": name.lower(),
        "name": name,
        "description": f"{name} for little hands",
        "price": Decimal("10"),
        "rental_price": Decimal("3"),
        "stock": 2,
        "rental_stock": 2,
    }
    fields.update(overrides)
    return Toy(**fields)  # type: ignore[arg-type]


# ═══════════════════════════════════════════════════════════════════════════════
# Form rules
# ═══════════════════════════════════════════════════════════════════════════════

def test_valid_draft_passes_trimmed() -> None:
    result = validate_toy(draft(name="  Stacking Rings "))

    assert isinstance(result, Ok)
    assert result.value.name == "Stacking Rings"


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"name": " "}, "Toy name is required"),
        ({"description": ""}, "Description is required"),
        ({"price": Decimal("0")}, "Price must be greater than 0 for sale items"),
        ({"rental_price": Decimal("-1")}, "Rental price must be greater than 0 for rental items"),
        ({"category": "weapons"}, "Unknown category: weapons"),
        ({"age_range": "adults"}, "Unknown age range: adults"),
        ({"stock": -1}, "Stock cannot be negative"),
    ],
)
def test_invalid_drafts(overrides: dict[str, object], message: str) -> None:
    result = validate_toy(draft(**overrides))

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.VALIDATION
    assert result.error.message == message


def test_rental_only_zeroes_sale_side() -> None:
    clean = validate_toy(draft(mode=ToyMode.RENTAL_ONLY, price=Decimal("0"))).unwrap()

    assert clean.price == 0
    assert clean.stock == 0
    assert clean.rental_price == Decimal("2.00")


def test_sale_only_zeroes_rental_side() -> None:
    clean = validate_toy(draft(mode=ToyMode.SALE_ONLY, rental_price=Decimal("0"))).unwrap()

    assert clean.rental_price == 0
    assert clean.rental_stock == 0
    assert clean.price == Decimal("12.00")


def test_blank_category_is_allowed() -> None:
    assert isinstance(validate_toy(draft(category="", age_range="")), Ok)


def test_rental_only_and_sale_only_together_rejected() -> None:
    result = mode_from_flags(rental_only=True, sale_only=True)

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.VALIDATION
    assert mode_from_flags(False, False) == Ok(ToyMode.BOTH)


def test_image_limits() -> None:
    assert validate_image(1024, "image/png") == Ok(None)
    assert isinstance(validate_image(1024, "application/pdf"), Error)
    assert isinstance(validate_image(5 * 1024 * 1024 + 1, "image/jpeg"), Error)
    assert validate_image(5 * 1024 * 1024, "image/jpeg") == Ok(None)


# ═══════════════════════════════════════════════════════════════════════════════
# Search
# ═══════════════════════════════════════════════════════════════════════════════

def test_rental_listing_hides_unrentable_toys() -> None:
    toys = [
        toy("Kite"),
        toy("Drum", rental_stock=0),
        toy("Piano", rental_price=Decimal("0")),
    ]

    listed = apply_filters(toys, ToyFilters(available_only=False), BrowseMode.RENTAL)

    assert [t.name for t in listed] == ["Kite"]


def test_sale_listing_hides_rental_only_toys() -> None:
    toys = [toy("Kite"), toy("Castle", rental_only=True), toy("Free Sticker", price=Decimal("0"))]

    listed = apply_filters(toys, ToyFilters(), BrowseMode.SALE)

    assert [t.name for t in listed] == ["Kite"]


def test_query_matches_name_or_description_case_insensitively() -> None:
    toys = [toy("Kite"), toy("Yo-yo", description="Classic WOODEN toy")]

    assert [t.name for t in apply_filters(toys, ToyFilters(query="kItE"))] == ["Kite"]
    assert [t.name for t in apply_filters(toys, ToyFilters(query="wooden"))] == ["Yo-yo"]


def test_price_range_uses_mode_price() -> None:
    toys = [toy("Cheap", rental_price=Decimal("1")), toy("Dear", rental_price=Decimal("50"))]
    filters = ToyFilters(min_price=Decimal("5"), max_price=Decimal("100"))

    assert [t.name for t in apply_filters(toys, filters, BrowseMode.RENTAL)] == ["Dear"]


def test_category_and_age_filters() -> None:
    toys = [
        toy("Puzzle", category="Puzzles", age_range="6-8 years"),
        toy("Doll", category="dolls", age_range="3-5 years"),
    ]

    by_category = apply_filters(toys, ToyFilters(category="puzzles"))
    by_age = apply_filters(toys, ToyFilters(age_range="3-5 years"))

    assert [t.name for t in by_category] == ["Puzzle"]
    assert [t.name for t in by_age] == ["Doll"]
    assert len(apply_filters(toys, ToyFilters(category="all", age_range="all"))) == 2


def test_availability_filter() -> None:
    toys = [toy("In", stock=1), toy("Out", stock=0)]

    assert [t.name for t in apply_filters(toys, ToyFilters(), BrowseMode.SALE)] == ["In"]
    assert len(apply_filters(toys, ToyFilters(available_only=False), BrowseMode.SALE)) == 2


# ═══════════════════════════════════════════════════════════════════════════════
# Service
# ═══════════════════════════════════════════════════════════════════════════════

async def test_admin_creates_and_updates_toy(shop, admin) -> None:
    created = (await shop.catalog.create(admin, draft(mode=ToyMode.SALE_ONLY))).unwrap()

    assert created.sale_only
    assert created.rental_price == 0

    updated = (await shop.catalog.update(admin, created.id, draft(name="Rings XL"))).unwrap()
    assert updated.name == "Rings XL"
    assert not updated.sale_only
    assert (await shop.catalog.get(created.id)).unwrap().name == "Rings XL"


async def test_customers_cannot_edit_catalog(shop, customer) -> None:
    result = await shop.catalog.create(customer, draft())

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.FORBIDDEN
    assert (await shop.catalog.list_all()).unwrap() == []


async def test_update_missing_toy(shop, admin) -> None:
    result = await shop.catalog.update(admin, "missing", draft())

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.NOT_FOUND


async def test_browse_reads_store(shop, make_toy) -> None:
    await make_toy("Kite", rental_stock=2)
    await make_toy("Drum", rental_stock=0)

    toys = (await shop.catalog.browse(ToyFilters(), BrowseMode.RENTAL)).unwrap()

    assert [t.name for t in toys] == ["Kite"]


async def test_image_over_configured_limit_is_refused(settings, admin) -> None:
    small = await Shop.create(settings.model_copy(update={"max_image_bytes": 1024}))
    try:
        too_big = await small.catalog.create(admin, draft(), ImageUpload(size=2048, content_type="image/png"))
        fits = await small.catalog.create(admin, draft(), ImageUpload(size=512, content_type="image/png"))
    finally:
        await small.close()

    assert isinstance(too_big, Error)
    assert too_big.error.kind is ErrorKind.VALIDATION
    assert isinstance(fits, Ok)


async def test_update_checks_image_type(shop, admin) -> None:
    created = (await shop.catalog.create(admin, draft())).unwrap()

    result = await shop.catalog.update(
        admin, created.id, draft(name="Rings XL"), ImageUpload(size=10, content_type="application/pdf")
    )

    assert isinstance(result, Error)
    assert result.error.message == "Please upload an image file"
    assert (await shop.catalog.get(created.id)).unwrap().name == "Stacking Rings"
