from sqlalchemy import select, delete, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from typing import Any, Dict, List
from datetime import datetime, timezone
from app.exceptions import FieldValidationError, NotFoundError
from app.models.inquiry import ContactInquiry
from app.models.property import Property
from app.models.property_details import PropertyAmenity, PropertyFeature
from app.models.property_photo import PropertyPhoto
from app.models.review import Review
from app.models.user import User
from app.schemas.inquiry import InquiryCreate
from app.schemas.property import PropertyFilters
from app.utils.listing_mapper import property_to_listing, row_to_dict
from app.utils.normalizers import (
    has_any,
    is_absent,
    normalize_names,
    normalize_photos,
    normalize_property_payload,
    pick,
)
from app.utils.store_errors import to_store_error
import logging

logger = logging.getLogger(__name__)

FEATURE_KEYS = ("features",)
AMENITY_KEYS = ("amenities",)
PHOTO_KEYS = ("photos",)


def _listing_query():
    return select(Property).options(
        selectinload(Property.photos),
        selectinload(Property.features),
        selectinload(Property.amenities),
        selectinload(Property.owner),
        selectinload(Property.agent),
    )


class PropertyService:
    # ---------- reads ----------

    def list_properties(self, db: Session, filters: PropertyFilters) -> List[Dict[str, Any]]:
        query = _listing_query()

        if filters.property_type:
            query = query.where(Property.property_type == filters.property_type)
        if filters.status:
            query = query.where(Property.status == filters.status)
        if filters.min_price is not None:
            query = query.where(Property.price >= filters.min_price)
        if filters.max_price is not None:
            query = query.where(Property.price <= filters.max_price)
        if filters.min_bedrooms is not None:
            query = query.where(Property.bedrooms >= filters.min_bedrooms)
        if filters.min_bathrooms is not None:
            query = query.where(Property.bathrooms >= filters.min_bathrooms)
        if filters.city:
            query = query.where(Property.city.ilike(f"%{filters.city}%"))

        query = query.order_by(Property.created_at.desc(), Property.id.desc())
        properties = db.execute(query).scalars().all()
        logger.info(f"Fetched {len(properties)} properties")
        return [property_to_listing(prop) for prop in properties]

    def get_property(self, db: Session, property_id: int) -> Dict[str, Any]:
        prop = db.execute(
            _listing_query().where(Property.id == property_id)
        ).scalar_one_or_none()
        if not prop:
            raise NotFoundError("Property not found")
        return property_to_listing(prop, reviews=self._reviews_for(db, property_id))

    def get_properties_by_owner(self, db: Session, owner_email: str) -> List[Dict[str, Any]]:
        if is_absent(owner_email):
            raise FieldValidationError("ownerEmail query parameter is required")
        owner_email = owner_email.strip()

        owner_ids = select(User.id).where(User.email == owner_email)
        query = (
            _listing_query()
            .where(
                or_(
                    Property.owner_id.in_(owner_ids),
                    Property.owner_email == owner_email,
                )
            )
            .order_by(Property.created_at.desc(), Property.id.desc())
        )
        properties = db.execute(query).scalars().all()
        return [property_to_listing(prop) for prop in properties]

    def get_property_reviews(self, db: Session, property_id: int) -> List[Dict[str, Any]]:
        return [row_to_dict(review) for review in self._reviews_for(db, property_id)]

    def _reviews_for(self, db: Session, property_id: int) -> List[Review]:
        return list(
            db.execute(
                select(Review)
                .where(Review.property_id == property_id)
                .order_by(Review.created_at.desc(), Review.id.desc())
            ).scalars()
        )

    # ---------- writes ----------

    def create_property(self, db: Session, body: Dict[str, Any]) -> Dict[str, Any]:
        values = normalize_property_payload(body)
        features = normalize_names(pick(body, *FEATURE_KEYS), "feature")
        amenities = normalize_names(pick(body, *AMENITY_KEYS), "amenity")
        photos = normalize_photos(pick(body, *PHOTO_KEYS))

        try:
            new_property = Property(**values)
            db.add(new_property)
            db.flush()
            self._insert_children(db, new_property.id, features, amenities, photos)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(f"Failed to create property: {exc}")
            raise to_store_error(exc, "Failed to create property") from exc

        logger.info(
            f"Created property {new_property.id} with {len(photos)} photos, "
            f"{len(features)} features, {len(amenities)} amenities"
        )
        return self.get_property(db, new_property.id)

    def update_property(
        self, db: Session, property_id: int, body: Dict[str, Any]
    ) -> Dict[str, Any]:
        values = normalize_property_payload(body, partial=True)

        # Only collections whose key was sent are replaced
        features = amenities = photos = None
        if has_any(body, FEATURE_KEYS):
            features = normalize_names(pick(body, *FEATURE_KEYS), "feature")
        if has_any(body, AMENITY_KEYS):
            amenities = normalize_names(pick(body, *AMENITY_KEYS), "amenity")
        if has_any(body, PHOTO_KEYS):
            photos = normalize_photos(pick(body, *PHOTO_KEYS))
        if not values and features is None and amenities is None and photos is None:
            raise FieldValidationError("No fields to update")

        try:
            prop = db.get(Property, property_id)
            if not prop:
                db.rollback()
                raise NotFoundError("Property not found")

            for key, value in values.items():
                setattr(prop, key, value)
            prop.updated_at = datetime.now(timezone.utc)

            if features is not None:
                db.execute(delete(PropertyFeature).where(PropertyFeature.property_id == property_id))
            if amenities is not None:
                db.execute(delete(PropertyAmenity).where(PropertyAmenity.property_id == property_id))
            if photos is not None:
                db.execute(delete(PropertyPhoto).where(PropertyPhoto.property_id == property_id))
            self._insert_children(db, property_id, features or [], amenities or [], photos or [])

            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(f"Failed to update property {property_id}: {exc}")
            raise to_store_error(exc, "Failed to update property") from exc

        logger.info(f"Updated property {property_id}: {sorted(values)}")
        return self.get_property(db, property_id)

    def delete_property(self, db: Session, property_id: int) -> None:
        try:
            prop = db.get(Property, property_id)
            if not prop:
                db.rollback()
                raise NotFoundError("Property not found")

            for model in (
                PropertyFeature,
                PropertyAmenity,
                PropertyPhoto,
                ContactInquiry,
                Review,
            ):
                db.execute(delete(model).where(model.property_id == property_id))
            db.delete(prop)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(f"Failed to delete property {property_id}: {exc}")
            raise to_store_error(exc, "Failed to delete property") from exc

        logger.info(f"Deleted property {property_id} and its related rows")

    def create_inquiry(self, db: Session, inquiry: InquiryCreate) -> Dict[str, Any]:
        try:
            row = ContactInquiry(**inquiry.model_dump())
            db.add(row)
            db.commit()
            db.refresh(row)
        except SQLAlchemyError as exc:
            db.rollback()
            raise to_store_error(exc, "Failed to create inquiry") from exc

        logger.info(f"Contact inquiry {row.id} created ({row.inquiry_type})")
        return row_to_dict(row)

    def _insert_children(
        self,
        db: Session,
        property_id: int,
        features: List[str],
        amenities: List[str],
        photos: List[Dict[str, Any]],
    ) -> None:
        for name in features:
            db.add(PropertyFeature(property_id=property_id, feature_name=name))
        for name in amenities:
            db.add(PropertyAmenity(property_id=property_id, amenity_name=name))
        for index, photo in enumerate(photos):
            db.add(
                PropertyPhoto(
                    property_id=property_id,
                    display_order=index + 1,
                    is_primary=index == 0,
                    **photo,
                )
            )
        db.flush()
