from typing import Any, Dict, Optional
from pydantic import ValidationError
from app.config import settings
from app.exceptions import EmailDeliveryError, FieldValidationError
from app.schemas.email import BuyInquiry, SellInquiry
from app.utils.email_templates import (
    buy_inquiry_subject,
    render_buy_inquiry,
    render_sell_inquiry,
    sell_inquiry_subject,
    single_line,
)
from app.utils.email_utils import build_message, get_transport
import logging

logger = logging.getLogger(__name__)

SELL_HINT = (
    "Request body is empty. Please send JSON data with firstName, lastName, email, "
    "phone, preferredContact, and description fields."
)
SELL_EXAMPLE = (
    '{"firstName":"John","lastName":"Doe","email":"john@example.com",'
    '"phone":"123-456-7890","preferredContact":"email","description":"Test"}'
)
BUY_HINT = (
    "Request body is empty. Please send JSON data with firstName, lastName, email, "
    "phone, budget, timeline, preferredAreas, firstTimeBuyer, and additionalInfo fields."
)
BUY_EXAMPLE = (
    '{"firstName":"John","lastName":"Doe","email":"john@example.com",'
    '"phone":"123-456-7890","budget":"300k-500k","timeline":"1-3-months"}'
)


class EmptyBodyError(FieldValidationError):
    def __init__(self, message: str, hint: str):
        super().__init__(message)
        self.hint = hint

    def to_content(self) -> dict:
        content = super().to_content()
        content["hint"] = f"Example: {self.hint}"
        return content


class EmailService:
    def __init__(self, transport=None):
        self.transport = transport or get_transport()

    async def send_sell_inquiry(self, body: Optional[Dict[str, Any]]) -> str:
        if not body:
            raise EmptyBodyError(SELL_HINT, SELL_EXAMPLE)
        form = self._parse(SellInquiry, body)
        self._require_contact(form)

        html, text = render_sell_inquiry(form)
        return await self._deliver(sell_inquiry_subject(form), html, text, form.email, "sell")

    async def send_buy_inquiry(self, body: Optional[Dict[str, Any]]) -> str:
        if not body:
            raise EmptyBodyError(BUY_HINT, BUY_EXAMPLE)
        form = self._parse(BuyInquiry, body)
        self._require_contact(form)

        html, text = render_buy_inquiry(form)
        return await self._deliver(buy_inquiry_subject(form), html, text, form.email, "buy")

    def _parse(self, schema, body: Dict[str, Any]):
        try:
            return schema.model_validate(body)
        except ValidationError as exc:
            raise FieldValidationError("Invalid inquiry form", str(exc)) from exc

    def _require_contact(self, form) -> None:
        missing = form.missing_contact_fields()
        if missing:
            raise FieldValidationError(
                "Missing required fields: firstName, lastName, email, phone",
                f"Missing: {', '.join(missing)}",
            )

    async def _deliver(self, subject: str, html: str, text: str, reply_to: str, kind: str) -> str:
        try:
            message = build_message(
                settings.INQUIRY_RECIPIENT,
                single_line(subject),
                html,
                text,
                reply_to=single_line(reply_to),
            )
            message_id = await self.transport.deliver(message)
        except Exception as exc:
            logger.error(f"Error sending {kind} inquiry email: {exc}")
            raise EmailDeliveryError("Failed to send email", str(exc)) from exc

        logger.info(f"{kind.capitalize()} inquiry email sent: {message_id}")
        return message_id
