from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from src.app.core.errors import ConflictError, NotFoundError
from src.app.features.products.models import Product, Review
from src.app.features.products.schemas import MessageOut
from src.app.features.products.service import PRODUCT_NOT_FOUND

logger = logging.getLogger(__name__)

ALREADY_REVIEWED = "Product already reviewed"


def recompute_rating(product: Product) -> None:
    """Refresh the denormalized ``num_reviews`` and ``rating`` from ``reviews``."""
    product.num_reviews = len(product.reviews)
    if product.num_reviews:
        product.rating = (
            sum(review.rating for review in product.reviews) / product.num_reviews
        )
    else:
        product.rating = 0


async def _lock_product(db: AsyncSession, product_id: str) -> Product:
    # FOR UPDATE serializes reviewers of the same product on engines that support it;
    # the mapper's version counter catches the rest at commit time.
    query = (
        select(Product)
        .where(Product.id == product_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    product = (await db.execute(query)).scalar_one_or_none()
    if product is None:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return product


async def create_product_review(
    db: AsyncSession,
    product_id: str,
    *,
    author_id: str,
    author_name: str,
    rating,
    comment: str = "",
) -> MessageOut:
    product = await _lock_product(db, product_id)

    author_id = str(author_id)
    if any(review.user_id == author_id for review in product.reviews):
        await db.rollback()
        logger.warning("User %s already reviewed product %s", author_id, product_id)
        raise ConflictError(ALREADY_REVIEWED)

    product.reviews.append(
        Review(
            user_id=author_id,
            name=author_name,
            rating=int(rating),
            comment=comment or "",
        )
    )
    recompute_rating(product)

    try:
        await db.commit()
    except IntegrityError:
        # Lost a race against another review by the same author
        await db.rollback()
        logger.warning("Duplicate review by %s on %s rejected by the database", author_id, product_id)
        raise ConflictError(ALREADY_REVIEWED)
    except StaleDataError:
        await db.rollback()
        logger.warning("Concurrent update on product %s, review not saved", product_id)
        raise ConflictError("Product was updated concurrently, please retry")

    logger.info(
        "Review added to %s: num_reviews=%d rating=%s",
        product_id,
        product.num_reviews,
        product.rating,
    )
    return MessageOut(message="Review added")
