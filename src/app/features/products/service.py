from __future__ import annotations

import logging
import math
from typing import List, Optional, Union

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.errors import NotFoundError, ValidationError
from src.settings import settings
from .models import Product
from .schemas import MessageOut, ProductOut, ProductPage, ProductUpdate, ReviewOut

logger = logging.getLogger(__name__)

PRODUCT_NOT_FOUND = "Product not found"

# Placeholder values for products created from the admin screen
SAMPLE_PRODUCT = {
    "name": "Sample name",
    "price": 0,
    "image": "/images/sample.jpg",
    "brand": "Sample brand",
    "category": "Sample category",
    "count_in_stock": 0,
    "num_reviews": 0,
    "rating": 0,
    "description": "Sample description",
}

_UPDATABLE_FIELDS = (
    "name",
    "price",
    "description",
    "image",
    "brand",
    "category",
    "count_in_stock",
)


def parse_page_number(raw: Union[str, int, None]) -> int:
    """Return a 1-indexed page number; anything absent, non-numeric or < 1 is page 1."""
    if raw is None:
        return 1
    try:
        page = int(str(raw).strip())
    except ValueError:
        return 1
    return page if page >= 1 else 1


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _product_to_out(product: Product) -> ProductOut:
    return ProductOut(
        id=product.id,
        user=product.user_id,
        name=product.name,
        image=product.image,
        brand=product.brand,
        category=product.category,
        description=product.description,
        price=product.price,
        count_in_stock=product.count_in_stock,
        rating=product.rating,
        num_reviews=product.num_reviews,
        reviews=[
            ReviewOut(
                id=r.id,
                user=r.user_id,
                name=r.name,
                rating=r.rating,
                comment=r.comment,
                created_at=r.created_at,
            )
            for r in product.reviews
        ],
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


async def _find_product(db: AsyncSession, product_id: str) -> Product:
    query = (
        select(Product)
        .where(Product.id == product_id)
        .execution_options(populate_existing=True)
    )
    product = (await db.execute(query)).scalar_one_or_none()
    if product is None:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return product


async def _paginate(db: AsyncSession, conditions: list, page: int) -> ProductPage:
    page_size = settings.PAGE_SIZE

    count_query = select(func.count(Product.id)).where(*conditions)
    count = int((await db.execute(count_query)).scalar_one())

    query = (
        select(Product)
        .where(*conditions)
        .order_by(Product.id.asc())
        .offset(page_size * (page - 1))
        .limit(page_size)
    )
    products = (await db.execute(query)).scalars().all()
    return ProductPage(
        products=[_product_to_out(p) for p in products],
        page=page,
        pages=math.ceil(count / page_size),
        count=count,
    )


async def list_products(
    db: AsyncSession,
    *,
    keyword: Optional[str] = None,
    category: Optional[str] = None,
    page: int = 1,
) -> ProductPage:
    """Page through products whose name contains ``keyword`` (any case) and whose
    category equals ``category``. Both filters are optional and combine with AND.

    A page past the end is not an error: it comes back empty with the real
    ``count`` and ``pages``.
    """
    conditions = []
    if keyword:
        conditions.append(
            Product.name.ilike(f"%{_escape_like(keyword)}%", escape="\\")
        )
    if category:
        conditions.append(Product.category == category)
    return await _paginate(db, conditions, page)


async def list_products_by_category(
    db: AsyncSession, category: Optional[str], page: int = 1
) -> ProductPage:
    if not category:
        raise ValidationError("Category is required")
    return await _paginate(db, [Product.category == category], page)


async def get_product(db: AsyncSession, product_id: str) -> ProductOut:
    return _product_to_out(await _find_product(db, product_id))


async def get_top_products(db: AsyncSession) -> List[ProductOut]:
    # Equal ratings fall back to id order so results are reproducible
    query = (
        select(Product)
        .order_by(Product.rating.desc(), Product.id.asc())
        .limit(settings.TOP_PRODUCTS_LIMIT)
    )
    products = (await db.execute(query)).scalars().all()
    return [_product_to_out(p) for p in products]


async def create_product(db: AsyncSession, owner_id: str) -> ProductOut:
    product = Product(user_id=owner_id, **SAMPLE_PRODUCT)
    db.add(product)
    await db.commit()
    logger.info("Created product %s for user %s", product.id, owner_id)
    return _product_to_out(await _find_product(db, product.id))


async def update_product(
    db: AsyncSession, product_id: str, data: ProductUpdate
) -> ProductOut:
    product = await _find_product(db, product_id)

    changed = []
    for field in _UPDATABLE_FIELDS:
        value = getattr(data, field)
        # Falsy values ("" and 0 included) never overwrite the stored value
        if value:
            setattr(product, field, value)
            changed.append(field)

    if changed:
        await db.commit()
        logger.info("Updated product %s fields=%s", product_id, ",".join(changed))
        product = await _find_product(db, product_id)
    return _product_to_out(product)


async def delete_product(db: AsyncSession, product_id: str) -> MessageOut:
    product = await _find_product(db, product_id)
    await db.delete(product)
    await db.commit()
    logger.info("Deleted product %s", product_id)
    return MessageOut(message="Product removed")
