from pydantic import BaseModel, Field
from typing import Optional


class InquiryCreate(BaseModel):
    property_id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    message: Optional[str] = None
    inquiry_type: str = Field(default="general", max_length=50)
