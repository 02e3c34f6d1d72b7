from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from app.database import Base


class PropertyPhoto(Base):
    __tablename__ = "property_photos"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    photo_url = Column(Text, nullable=False)  # http(s) URL or base64 data string
    photo_name = Column(String(255), nullable=True)
    photo_size = Column(Integer, default=0)
    is_primary = Column(Boolean, default=False)
    display_order = Column(Integer, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
