from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime


class CamelModel(BaseModel):
    """Accepts and emits the camelCase field names used by the web client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReviewOut(CamelModel):
    id: int = Field(..., description="Review identifier")
    user: str = Field(..., description="Author user id")
    name: str = Field(..., description="Author display name at the time of review")
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")


class ProductOut(CamelModel):
    id: str = Field(..., description="Database identifier")
    user: str = Field(..., description="Id of the admin who created the product")
    name: str
    image: str
    brand: str
    category: str
    description: str
    price: float = Field(..., ge=0, description="Unit price in the store currency")
    count_in_stock: int = 0
    rating: float = Field(0, description="Mean of review ratings, 0 without reviews")
    num_reviews: int = 0
    reviews: List[ReviewOut] = Field(default_factory=list)
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    updated_at: Optional[datetime] = Field(
        None, description="Last update timestamp (UTC) if updated"
    )


class ProductUpdate(CamelModel):
    """Payload to update a product.

    Fields that are missing or falsy ("" or 0) keep their current value, so this
    payload cannot clear a field or set a number to zero.
    """

    name: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    image: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    count_in_stock: Optional[int] = Field(None, ge=0)


class ProductPage(CamelModel):
    products: List[ProductOut]
    page: int = Field(..., ge=1, description="Requested page (1-indexed)")
    pages: int = Field(..., ge=0, description="Total pages for the filter")
    count: int = Field(0, ge=0, description="Total products matching the filter")


class MessageOut(BaseModel):
    message: str
