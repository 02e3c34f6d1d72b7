from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional
from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.config import settings
from app.exceptions import NotFoundError
from app.models.review import Review, ReviewStatus
from app.schemas.review import ReviewCreate
from app.utils.listing_mapper import review_to_dict
from app.utils.store_errors import to_store_error
import logging

logger = logging.getLogger(__name__)

STAR_KEYS = {
    5: "fiveStarReviews",
    4: "fourStarReviews",
    3: "threeStarReviews",
    2: "twoStarReviews",
    1: "oneStarReviews",
}


def round_rating(value: Optional[float]) -> float:
    """Half-up rounding to the nearest tenth (4.25 -> 4.3, 4.4 -> 4.4)."""
    if value is None:
        return 0
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def empty_stats() -> Dict[str, Any]:
    stats: Dict[str, Any] = {"totalReviews": 0, "averageRating": 0}
    stats.update({key: 0 for key in STAR_KEYS.values()})
    return stats


def calculate_stats(ratings: Iterable[Any]) -> Dict[str, Any]:
    """Statistics from an already fetched list of ratings or review dicts."""
    values = []
    for item in ratings:
        rating = item.get("rating") if isinstance(item, dict) else item
        if rating is not None:
            values.append(int(rating))

    stats = empty_stats()
    if not values:
        return stats
    stats["totalReviews"] = len(values)
    stats["averageRating"] = round_rating(sum(values) / len(values))
    for star, key in STAR_KEYS.items():
        stats[key] = sum(1 for value in values if value == star)
    return stats


class ReviewService:

    def __init__(self, db: Session):
        self.db = db

    def list_reviews(self, status: Optional[str] = ReviewStatus.APPROVED.value) -> List[Dict[str, Any]]:
        query = self.db.query(Review)
        if status:
            query = query.filter(Review.status == status)
        reviews = query.order_by(Review.created_at.desc(), Review.id.desc()).all()
        return [review_to_dict(review) for review in reviews]

    def create_review(self, review_data: ReviewCreate) -> Dict[str, Any]:
        review = Review(
            property_id=review_data.property_id,
            name=review_data.name.strip(),
            email=review_data.email,
            location=review_data.location,
            rating=review_data.rating,
            review_text=review_data.review_text,
            property_type=review_data.property_type,
            status=settings.REVIEW_DEFAULT_STATUS,
        )
        try:
            self.db.add(review)
            self.db.commit()
            self.db.refresh(review)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise to_store_error(exc, "Failed to create review") from exc

        logger.info(f"Review {review.id} created with rating {review.rating}")
        return review_to_dict(review)

    def update_review_status(self, review_id: int, status: ReviewStatus) -> Dict[str, Any]:
        review = self.db.query(Review).filter(Review.id == review_id).first()
        if not review:
            raise NotFoundError("Review not found")

        review.status = status.value
        try:
            self.db.commit()
            self.db.refresh(review)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise to_store_error(exc, "Failed to update review status") from exc

        logger.info(f"Review {review_id} status set to {status.value}")
        return review_to_dict(review)

    def delete_review(self, review_id: int) -> None:
        review = self.db.query(Review).filter(Review.id == review_id).first()
        if not review:
            raise NotFoundError("Review not found")

        try:
            self.db.delete(review)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise to_store_error(exc, "Failed to delete review") from exc
        logger.info(f"Review {review_id} deleted")

    def get_stats(self, status: Optional[str] = ReviewStatus.APPROVED.value) -> Dict[str, Any]:
        """Statistics computed by the database in one aggregate query."""
        columns = [
            func.count(Review.id).label("totalReviews"),
            func.avg(Review.rating).label("averageRating"),
        ]
        for star, key in STAR_KEYS.items():
            columns.append(func.sum(case((Review.rating == star, 1), else_=0)).label(key))

        query = self.db.query(*columns)
        if status:
            query = query.filter(Review.status == status)
        row = query.one()._asdict()

        stats = empty_stats()
        stats["totalReviews"] = int(row["totalReviews"] or 0)
        stats["averageRating"] = round_rating(row["averageRating"])
        for key in STAR_KEYS.values():
            stats[key] = int(row[key] or 0)
        return stats
