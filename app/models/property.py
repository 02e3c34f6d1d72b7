from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Float,
    Date,
    DateTime,
    ForeignKey,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
import enum


class ListingType(str, enum.Enum):
    RENT = "rent"
    SELL = "sell"
    BUY = "buy"


class PropertyStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Property(Base):
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)

    # Location
    address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(50), nullable=True)
    zip_code = Column(String(20), nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # Classification
    property_type = Column(String(100), nullable=False)
    # Stored as plain text; membership in ListingType is enforced by the normalizer
    listing_type = Column(String(20), nullable=False, index=True)
    status = Column(String(50), default=PropertyStatus.ACTIVE.value, index=True)

    # Property Details
    bedrooms = Column(Integer, nullable=False)
    bathrooms = Column(Float, nullable=False)
    square_feet = Column(Integer, nullable=False)
    year_built = Column(Integer, nullable=True)
    lot_size = Column(Float, nullable=True)
    price = Column(Float, nullable=False)
    available_date = Column(Date, nullable=True)

    # Agent/Owner
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    agent_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    owner_name = Column(String(255), nullable=True)
    owner_email = Column(String(255), nullable=True, index=True)
    owner_phone = Column(String(50), nullable=True)
    owner_preferred_contact = Column(String(20), nullable=True)

    # Metadata
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships (read side only; child rows are written and deleted explicitly)
    owner = relationship("User", foreign_keys=[owner_id], viewonly=True)
    agent = relationship("User", foreign_keys=[agent_id], viewonly=True)
    photos = relationship(
        "PropertyPhoto", order_by="PropertyPhoto.display_order", viewonly=True
    )
    features = relationship(
        "PropertyFeature", order_by="PropertyFeature.id", viewonly=True
    )
    amenities = relationship(
        "PropertyAmenity", order_by="PropertyAmenity.id", viewonly=True
    )