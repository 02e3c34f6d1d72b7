from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from app.utils.normalizers import is_absent, to_number


class PropertyFilters(BaseModel):
    property_type: Optional[str] = None
    status: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_bedrooms: Optional[int] = None
    min_bathrooms: Optional[float] = None
    city: Optional[str] = None

    @classmethod
    def from_query(
        cls,
        type: Optional[str] = None,
        status: Optional[str] = None,
        minPrice: Optional[str] = None,
        maxPrice: Optional[str] = None,
        bedrooms: Optional[str] = None,
        bathrooms: Optional[str] = None,
        city: Optional[str] = None,
    ) -> "PropertyFilters":
        """Build filters from raw query strings; unparseable numbers are dropped."""
        min_bedrooms = to_number(bedrooms)
        return cls(
            property_type=None if is_absent(type) else type.strip(),
            status=None if is_absent(status) else status.strip(),
            min_price=to_number(minPrice),
            max_price=to_number(maxPrice),
            min_bedrooms=int(min_bedrooms) if min_bedrooms is not None else None,
            min_bathrooms=to_number(bathrooms),
            city=None if is_absent(city) else city.strip(),
        )


class ListingsResponse(BaseModel):
    success: bool = True
    listings: List[Dict[str, Any]] = []
    total: int = 0
    message: Optional[str] = None
    error: Optional[str] = None
