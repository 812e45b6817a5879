from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    """Payload to review a product. ``rating`` accepts numeric strings ("4")."""

    rating: int = Field(..., ge=1, le=5, description="Star rating from 1 to 5")
    comment: str = Field("", description="Free-form review text")
