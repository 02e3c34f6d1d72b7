from typing import Optional
from fastapi import APIRouter, Path, Query, Request
from starlette import status
from app.dependencies import review_service_dependency
from app.limits import limiter, REVIEW_SUBMIT_LIMIT
from app.schemas.review import ReviewCreate, ReviewStats, ReviewStatusUpdate

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@router.get("", status_code=status.HTTP_200_OK)
def get_reviews(
    service: review_service_dependency,
    review_status: Optional[str] = Query("approved", alias="status"),
):
    # ?status=all lists every review regardless of moderation state
    reviews = service.list_reviews(None if review_status == "all" else review_status)
    return {"success": True, "reviews": reviews, "total": len(reviews)}


@router.get("/stats", status_code=status.HTTP_200_OK, response_model=ReviewStats)
def get_review_stats(service: review_service_dependency):
    return {"success": True, **service.get_stats()}


@router.post("", status_code=status.HTTP_201_CREATED)
@limiter.limit(REVIEW_SUBMIT_LIMIT)
def create_review(
    request: Request,
    service: review_service_dependency,
    review: ReviewCreate,
):
    return {
        "success": True,
        "message": "Review submitted successfully",
        "data": service.create_review(review),
    }


@router.put("/{review_id}/status", status_code=status.HTTP_200_OK)
def update_review_status(
    service: review_service_dependency,
    update: ReviewStatusUpdate,
    review_id: int = Path(gt=0),
):
    return {
        "success": True,
        "message": "Review status updated successfully",
        "data": service.update_review_status(review_id, update.status),
    }


@router.delete("/{review_id}", status_code=status.HTTP_200_OK)
def delete_review(service: review_service_dependency, review_id: int = Path(gt=0)):
    service.delete_review(review_id)
    return {"success": True, "message": "Review deleted successfully"}
