"""Flatten ORM rows into the listing shape the frontend reads.

The portal and the public pages read both the raw snake_case columns and their
camelCase aliases, so both are emitted.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import inspect as sa_inspect

from app.models.property import Property
from app.models.property_photo import PropertyPhoto
from app.models.review import Review


def row_to_dict(row) -> Dict[str, Any]:
    """Column values of any mapped row."""
    return {attr.key: getattr(row, attr.key) for attr in sa_inspect(row).mapper.column_attrs}


def photo_to_dict(photo: PropertyPhoto) -> Dict[str, Any]:
    return {
        "id": photo.id,
        "name": photo.photo_name or "",
        "url": photo.photo_url or "",
        "size": photo.photo_size or 0,
        "isPrimary": bool(photo.is_primary),
        "displayOrder": photo.display_order,
    }


def review_to_dict(review: Review) -> Dict[str, Any]:
    data = row_to_dict(review)
    data["text"] = review.review_text or ""
    data["createdAt"] = review.created_at
    return data


def _coordinates(prop: Property) -> Optional[Dict[str, float]]:
    if prop.latitude is None or prop.longitude is None:
        return None
    return {"lat": float(prop.latitude), "lng": float(prop.longitude)}


def property_to_listing(prop: Property, reviews: Optional[List[Review]] = None) -> Dict[str, Any]:
    data = row_to_dict(prop)

    owner = prop.owner
    agent = prop.agent
    owner_name = prop.owner_name or (owner.full_name if owner else "")

    data.update(
        {
            "zipCode": prop.zip_code or "",
            "propertyType": prop.property_type or "",
            "squareFeet": prop.square_feet or 0,
            "yearBuilt": prop.year_built,
            "lotSize": prop.lot_size or 0,
            "listingType": prop.listing_type or "rent",
            "availableDate": prop.available_date,
            "submittedAt": prop.created_at,
            "createdAt": prop.created_at,
            "updatedAt": prop.updated_at,
            "coordinates": _coordinates(prop),
            "photos": [photo_to_dict(photo) for photo in prop.photos],
            "features": [f.feature_name for f in prop.features if f.feature_name],
            "amenities": [a.amenity_name for a in prop.amenities if a.amenity_name],
            "ownerName": owner_name or "",
            "ownerEmail": prop.owner_email or (owner.email if owner else "") or "",
            "ownerPhone": prop.owner_phone or (owner.phone if owner else "") or "",
            "ownerPreferredContact": prop.owner_preferred_contact or "email",
            "agentName": agent.full_name if agent else "",
            "agentEmail": agent.email if agent else "",
            "agentPhone": (agent.phone or "") if agent else "",
        }
    )
    if reviews is not None:
        data["reviews"] = [review_to_dict(review) for review in reviews]
    return data
