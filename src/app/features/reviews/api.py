from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.auth import CurrentUser, get_current_user
from src.app.features.products.schemas import MessageOut
from src.db.session import get_db_session
from .schemas import ReviewCreate
from .service import create_product_review as svc_create_product_review

router = APIRouter()


@router.post(
    "/products/{product_id}/reviews",
    response_model=MessageOut,
    status_code=status.HTTP_201_CREATED,
    summary="Review a product (one review per user)",
    tags=["reviews"],
)
async def create_product_review(
    product_id: str = Path(..., description="Product id"),
    payload: ReviewCreate = ...,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return await svc_create_product_review(
        db,
        product_id,
        author_id=user.id,
        author_name=user.name,
        rating=payload.rating,
        comment=payload.comment,
    )
