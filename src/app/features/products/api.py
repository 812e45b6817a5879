from fastapi import APIRouter, Depends, Query, Path, status
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.auth import CurrentUser, require_admin
from src.app.core.errors import ValidationError
from src.db.session import get_db_session
from .schemas import ProductOut, ProductPage, ProductUpdate, MessageOut
from .service import (
    parse_page_number,
    list_products as svc_list_products,
    list_products_by_category as svc_list_products_by_category,
    get_product as svc_get_product,
    get_top_products as svc_get_top_products,
    create_product as svc_create_product,
    update_product as svc_update_product,
    delete_product as svc_delete_product,
)

router = APIRouter()

_PAGE_FIELDS = {"products", "page", "pages"}


@router.get(
    "/products",
    response_model=ProductPage,
    response_model_include=_PAGE_FIELDS,
    summary="List products",
    tags=["products"],
)
async def get_products(
    keyword: Optional[str] = Query(
        None, description="Case-insensitive name contains search"
    ),
    category: Optional[str] = Query(None, description="Filter by exact category"),
    page_number: Optional[str] = Query(
        None, alias="pageNumber", description="1-indexed page, defaults to 1"
    ),
    db: AsyncSession = Depends(get_db_session),
):
    return await svc_list_products(
        db,
        keyword=keyword,
        category=category,
        page=parse_page_number(page_number),
    )


@router.get(
    "/products/top",
    response_model=List[ProductOut],
    summary="Top rated products",
    tags=["products"],
)
async def get_top_products(db: AsyncSession = Depends(get_db_session)):
    return await svc_get_top_products(db)


@router.get(
    "/products/category/{category}",
    response_model=ProductPage,
    response_model_include=_PAGE_FIELDS,
    summary="List products in a category",
    tags=["products"],
)
async def get_products_by_category(
    category: str = Path(..., description="Exact category name"),
    page_number: Optional[str] = Query(None, alias="pageNumber"),
    db: AsyncSession = Depends(get_db_session),
):
    return await svc_list_products_by_category(
        db, category, parse_page_number(page_number)
    )


# Without these a missing category would be looked up as product id "category"
@router.get("/products/category", include_in_schema=False)
@router.get("/products/category/", include_in_schema=False)
async def get_products_without_category():
    raise ValidationError("Category is required")


@router.get(
    "/products/{product_id}",
    response_model=ProductOut,
    summary="Get a product by id",
    tags=["products"],
)
async def get_product(
    product_id: str = Path(..., description="Product id"),
    db: AsyncSession = Depends(get_db_session),
):
    return await svc_get_product(db, product_id)


@router.post(
    "/products",
    response_model=ProductOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a placeholder product",
    tags=["products"],
)
async def create_product(
    user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
):
    return await svc_create_product(db, user.id)


@router.put(
    "/products/{product_id}",
    response_model=ProductOut,
    summary="Update a product (falsy fields are ignored)",
    tags=["products"],
)
async def update_product(
    product_id: str = Path(..., description="Product id"),
    payload: ProductUpdate = ...,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
):
    return await svc_update_product(db, product_id, payload)


@router.delete(
    "/products/{product_id}",
    response_model=MessageOut,
    summary="Delete a product",
    tags=["products"],
)
async def delete_product(
    product_id: str = Path(..., description="Product id"),
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
):
    return await svc_delete_product(db, product_id)
