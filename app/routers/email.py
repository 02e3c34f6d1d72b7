from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Request
from starlette import status
from app.dependencies import email_service_dependency
from app.limits import limiter, INQUIRY_EMAIL_LIMIT

router = APIRouter(prefix="/api/email", tags=["email"])


def _sent(message_id: str) -> dict:
    return {"success": True, "message": "Email sent successfully", "messageId": message_id}


@router.post("/sell-inquiry", status_code=status.HTTP_200_OK)
@limiter.limit(INQUIRY_EMAIL_LIMIT)
async def send_sell_inquiry(
    request: Request,
    service: email_service_dependency,
    body: Optional[Dict[str, Any]] = Body(None),
):
    return _sent(await service.send_sell_inquiry(body))


@router.post("/buy-inquiry", status_code=status.HTTP_200_OK)
@limiter.limit(INQUIRY_EMAIL_LIMIT)
async def send_buy_inquiry(
    request: Request,
    service: email_service_dependency,
    body: Optional[Dict[str, Any]] = Body(None),
):
    return _sent(await service.send_buy_inquiry(body))
