# Import all models so they're registered with Base.metadata
from app.models.user import User
from app.models.property import Property
from app.models.property_photo import PropertyPhoto
from app.models.property_details import PropertyFeature, PropertyAmenity
from app.models.review import Review
from app.models.inquiry import ContactInquiry

__all__ = [
    "User",
    "Property",
    "PropertyPhoto",
    "PropertyFeature",
    "PropertyAmenity",
    "Review",
    "ContactInquiry",
]
