from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from app.database import SessionLocal
from app.services.email_service import EmailService
from app.services.property_service import PropertyService
from app.services.review_service import ReviewService


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


db_dependency = Annotated[Session, Depends(get_db)]


def get_property_service() -> PropertyService:
    return PropertyService()


def get_review_service(db: db_dependency) -> ReviewService:
    return ReviewService(db)


def get_email_service() -> EmailService:
    return EmailService()


property_service_dependency = Annotated[PropertyService, Depends(get_property_service)]
review_service_dependency = Annotated[ReviewService, Depends(get_review_service)]
email_service_dependency = Annotated[EmailService, Depends(get_email_service)]
