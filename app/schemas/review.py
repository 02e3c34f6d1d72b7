from pydantic import BaseModel, Field, model_validator
from typing import Optional
from app.models.review import ReviewStatus


class ReviewCreate(BaseModel):
    property_id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    rating: int = Field(..., ge=1, le=5)
    review_text: Optional[str] = None
    text: Optional[str] = None
    property_type: Optional[str] = Field(None, max_length=100)

    @model_validator(mode="after")
    def require_text(self):
        # Older clients post the body as "text"
        body = (self.review_text or self.text or "").strip()
        if not body:
            raise ValueError("review_text is required")
        self.review_text = body
        return self


class ReviewStatusUpdate(BaseModel):
    status: ReviewStatus


class ReviewStats(BaseModel):
    success: bool = True
    totalReviews: int = 0
    averageRating: float = 0
    fiveStarReviews: int = 0
    fourStarReviews: int = 0
    threeStarReviews: int = 0
    twoStarReviews: int = 0
    oneStarReviews: int = 0
