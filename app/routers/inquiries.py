from fastapi import APIRouter
from starlette import status
from app.dependencies import db_dependency, property_service_dependency
from app.schemas.inquiry import InquiryCreate

router = APIRouter(prefix="/api/inquiries", tags=["inquiries"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_inquiry(
    db: db_dependency,
    service: property_service_dependency,
    inquiry: InquiryCreate,
):
    return {
        "success": True,
        "message": "Inquiry submitted successfully",
        "data": service.create_inquiry(db, inquiry),
    }
