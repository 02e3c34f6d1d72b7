from pydantic import BaseModel, ConfigDict
from typing import Optional


class InquiryEmailBase(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    def missing_contact_fields(self) -> list[str]:
        return [
            name
            for name in ("firstName", "lastName", "email", "phone")
            if not (getattr(self, name) or "").strip()
        ]


class SellInquiry(InquiryEmailBase):
    preferredContact: Optional[str] = None
    description: Optional[str] = None


class BuyInquiry(InquiryEmailBase):
    budget: Optional[str] = None
    timeline: Optional[str] = None
    preferredAreas: Optional[str] = None
    firstTimeBuyer: bool = False
    additionalInfo: Optional[str] = None
