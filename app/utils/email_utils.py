from email.message import EmailMessage
from email.utils import make_msgid
from typing import List, Optional
from aiosmtplib import send
from app.config import settings
import logging

logger = logging.getLogger(__name__)


def build_message(
    to_email: str,
    subject: str,
    html: str,
    text: str,
    reply_to: Optional[str] = None,
) -> EmailMessage:
    message = EmailMessage()
    message["From"] = settings.SMTP_USER or settings.EMAIL_FROM
    message["To"] = to_email
    message["Subject"] = subject
    if reply_to:
        message["Reply-To"] = reply_to
    message["Message-ID"] = make_msgid(domain="pittmetrorealty.com")
    message.set_content(text)
    message.add_alternative(html, subtype="html")
    return message


class SMTPTransport:
    def __init__(
        self,
        hostname: str,
        port: int,
        username: str,
        password: str,
    ):
        self.hostname = hostname
        self.port = port
        self.username = username
        self.password = password

    async def deliver(self, message: EmailMessage) -> str:
        await send(
            message,
            hostname=self.hostname,
            port=self.port,
            username=self.username,
            password=self.password,
            start_tls=self.port != 465,
            use_tls=self.port == 465,
        )
        return message["Message-ID"]


class NullTransport:
    """Keeps messages in memory instead of delivering them."""

    def __init__(self):
        self.outbox: List[EmailMessage] = []

    async def deliver(self, message: EmailMessage) -> str:
        logger.warning(
            f"SMTP is not configured; email '{message['Subject']}' to {message['To']} was not delivered"
        )
        self.outbox.append(message)
        return message["Message-ID"]


def get_transport():
    if settings.smtp_configured:
        return SMTPTransport(
            settings.SMTP_HOST,
            settings.SMTP_PORT,
            settings.SMTP_USER,
            settings.SMTP_PASS,
        )
    return NullTransport()
