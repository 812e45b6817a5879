import pytest

from src.app.core.errors import NotFoundError, ValidationError
from src.app.features.products import service
from src.app.features.products.models import Product, Review
from src.app.features.products.schemas import ProductUpdate


def make_product(**overrides) -> Product:
    fields = {
        "user_id": "admin-1",
        "name": "Widget",
        "image": "/images/widget.jpg",
        "brand": "Acme",
        "category": "tools",
        "description": "A widget",
        "price": 10.0,
        "count_in_stock": 3,
    }
    fields.update(overrides)
    return Product(**fields)


async def add_products(db, products):
    db.add_all(products)
    await db.commit()
    return products


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 1), ("", 1), ("abc", 1), ("0", 1), ("-3", 1), ("2", 2), (" 4 ", 4), (5, 5)],
)
def test_parse_page_number(raw, expected):
    assert service.parse_page_number(raw) == expected


@pytest.mark.asyncio
async def test_category_second_page_holds_the_thirteenth_product(db):
    await add_products(
        db, [make_product(id=f"shoe{i:02d}", category="shoes") for i in range(13)]
    )
    await add_products(db, [make_product(id="hat01", category="hats")])

    result = await service.list_products_by_category(db, "shoes", 2)

    assert len(result.products) == 1
    assert result.products[0].id == "shoe12"
    assert result.page == 2
    assert result.pages == 2
    assert result.count == 13


@pytest.mark.asyncio
async def test_category_listing_requires_category(db):
    with pytest.raises(ValidationError) as exc:
        await service.list_products_by_category(db, "", 1)
    assert exc.value.message == "Category is required"


@pytest.mark.asyncio
async def test_category_match_is_exact(db):
    await add_products(
        db,
        [
            make_product(id="p1", category="shoes"),
            make_product(id="p2", category=" shoes"),
            make_product(id="p3", category="Shoes"),
        ],
    )

    padded = await service.list_products_by_category(db, " shoes", 1)
    assert [p.id for p in padded.products] == ["p2"]

    exact = await service.list_products_by_category(db, "shoes", 1)
    assert [p.id for p in exact.products] == ["p1"]

    blank = await service.list_products_by_category(db, "  ", 1)
    assert (blank.products, blank.pages) == ([], 0)


@pytest.mark.asyncio
async def test_list_products_keyword_is_case_insensitive_substring(db):
    await add_products(
        db,
        [
            make_product(id="p1", name="Running Shoe", category="shoes"),
            make_product(id="p2", name="Shoehorn", category="tools"),
            make_product(id="p3", name="Hat", category="shoes"),
        ],
    )

    result = await service.list_products(db, keyword="SHOE")
    assert [p.id for p in result.products] == ["p1", "p2"]

    both = await service.list_products(db, keyword="shoe", category="shoes")
    assert [p.id for p in both.products] == ["p1"]
    assert both.count == 1


@pytest.mark.asyncio
async def test_keyword_wildcards_are_literal(db):
    await add_products(
        db,
        [
            make_product(id="p1", name="100% Cotton Tee"),
            make_product(id="p2", name="Cotton Tee"),
        ],
    )
    result = await service.list_products(db, keyword="100%")
    assert [p.id for p in result.products] == ["p1"]


@pytest.mark.asyncio
async def test_pages_is_ceiling_of_count_over_page_size(db):
    await add_products(db, [make_product(id=f"p{i:02d}") for i in range(25)])

    first = await service.list_products(db, page=1)
    assert len(first.products) == 12
    assert first.pages == 3
    assert first.count == 25

    last = await service.list_products(db, page=3)
    assert len(last.products) == 1


@pytest.mark.asyncio
async def test_out_of_range_page_is_empty_but_keeps_totals(db):
    await add_products(db, [make_product(id=f"p{i:02d}") for i in range(5)])

    result = await service.list_products(db, page=9)

    assert result.products == []
    assert result.page == 9
    assert result.pages == 1
    assert result.count == 5


@pytest.mark.asyncio
async def test_empty_catalog_has_zero_pages(db):
    result = await service.list_products(db, keyword="nothing")
    assert result.products == []
    assert result.pages == 0


@pytest.mark.asyncio
async def test_get_product_missing_raises_not_found(db):
    with pytest.raises(NotFoundError) as exc:
        await service.get_product(db, "missing-id")
    assert exc.value.message == "Product not found"


@pytest.mark.asyncio
async def test_get_product_includes_reviews(db):
    product = make_product(id="p1", rating=4.0, num_reviews=1)
    product.reviews.append(Review(user_id="u1", name="Ann", rating=4, comment="ok"))
    await add_products(db, [product])

    out = await service.get_product(db, "p1")

    assert out.num_reviews == 1
    assert out.reviews[0].user == "u1"
    assert out.reviews[0].name == "Ann"


@pytest.mark.asyncio
async def test_top_products_orders_by_rating_then_id(db):
    await add_products(
        db,
        [
            make_product(id="d", rating=3.0),
            make_product(id="c", rating=5.0),
            make_product(id="b", rating=4.5),
            make_product(id="a", rating=4.5),
            make_product(id="e", rating=1.0),
        ],
    )

    top = await service.get_top_products(db)

    assert [p.id for p in top] == ["c", "a", "b"]


@pytest.mark.asyncio
async def test_create_product_uses_placeholders_and_owner(db):
    created = await service.create_product(db, "admin-7")

    assert created.id
    assert created.user == "admin-7"
    assert created.name == "Sample name"
    assert created.price == 0
    assert created.image == "/images/sample.jpg"
    assert created.brand == "Sample brand"
    assert created.category == "Sample category"
    assert created.description == "Sample description"
    assert created.count_in_stock == 0
    assert created.num_reviews == 0
    assert created.rating == 0
    assert created.reviews == []

    fetched = await service.get_product(db, created.id)
    assert fetched.id == created.id


@pytest.mark.asyncio
async def test_update_ignores_falsy_fields(db):
    await add_products(db, [make_product(id="p1", name="Old", price=10.0, count_in_stock=3)])

    updated = await service.update_product(
        db, "p1", ProductUpdate(name="", price=0, count_in_stock=0, brand="NewBrand")
    )

    assert updated.name == "Old"
    assert updated.price == 10.0
    assert updated.count_in_stock == 3
    assert updated.brand == "NewBrand"


@pytest.mark.asyncio
async def test_update_overwrites_truthy_fields(db):
    await add_products(db, [make_product(id="p1")])

    updated = await service.update_product(
        db,
        "p1",
        ProductUpdate(
            name="New",
            price=12.5,
            description="Better",
            image="/images/new.jpg",
            category="gadgets",
            count_in_stock=8,
        ),
    )

    assert updated.name == "New"
    assert updated.price == 12.5
    assert updated.description == "Better"
    assert updated.image == "/images/new.jpg"
    assert updated.category == "gadgets"
    assert updated.count_in_stock == 8


@pytest.mark.asyncio
async def test_update_missing_product_raises_not_found(db):
    with pytest.raises(NotFoundError):
        await service.update_product(db, "nope", ProductUpdate(name="x"))


@pytest.mark.asyncio
async def test_delete_removes_product_and_reviews(db):
    from sqlalchemy import func, select

    product = make_product(id="p1")
    product.reviews.append(Review(user_id="u1", name="Ann", rating=5, comment=""))
    await add_products(db, [product])

    result = await service.delete_product(db, "p1")

    assert result.message == "Product removed"
    with pytest.raises(NotFoundError):
        await service.get_product(db, "p1")
    remaining = (await db.execute(select(func.count(Review.id)))).scalar_one()
    assert remaining == 0


@pytest.mark.asyncio
async def test_delete_missing_product_raises_not_found(db):
    with pytest.raises(NotFoundError):
        await service.delete_product(db, "nope")
