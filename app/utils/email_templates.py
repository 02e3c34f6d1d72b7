"""HTML and plain-text bodies for the website inquiry emails.

Every value that came from the visitor goes through ``_esc`` before it is
placed in markup.
"""

from datetime import datetime, timezone
from html import escape
from typing import List, Optional, Tuple
from app.config import settings
from app.schemas.email import BuyInquiry, SellInquiry

PREFERRED_CONTACT_LABELS = {
    "email": "Email",
    "phone": "Phone Call",
    "text": "Text Message",
}

BUDGET_LABELS = {
    "under-300k": "Under $300K",
    "300k-500k": "$300K - $500K",
    "500k-750k": "$500K - $750K",
    "750k-1m": "$750K - $1M",
    "1m-1.5m": "$1M - $1.5M",
    "over-1.5m": "Over $1.5M",
}

TIMELINE_LABELS = {
    "immediately": "Immediately",
    "1-3-months": "1-3 months",
    "3-6-months": "3-6 months",
    "6-12-months": "6-12 months",
    "over-1-year": "Over 1 year",
}

_STYLE = """
        body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; margin: 0; padding: 0; }
        .container { max-width: 600px; margin: 0 auto; padding: 0; }
        .header { background: linear-gradient(135deg, #2563eb 0%, #1e40af 100%); color: white; padding: 25px 20px; border-radius: 8px 8px 0 0; }
        .header h1 { margin: 0; font-size: 24px; }
        .header p { margin: 5px 0 0 0; opacity: 0.9; font-size: 14px; }
        .content { background: #f9fafb; padding: 30px; border: 1px solid #e5e7eb; }
        .section { margin-bottom: 25px; }
        .section-title { font-size: 18px; font-weight: bold; color: #2563eb; margin-bottom: 15px; border-bottom: 2px solid #2563eb; padding-bottom: 5px; }
        .field { margin-bottom: 12px; }
        .field-label { font-weight: bold; color: #1f2937; margin-bottom: 5px; font-size: 14px; }
        .field-value { color: #4b5563; padding: 10px; background: white; border-left: 3px solid #2563eb; padding-left: 15px; border-radius: 4px; font-size: 14px; }
        .footer { background: #f3f4f6; padding: 20px; text-align: center; font-size: 12px; color: #6b7280; border-radius: 0 0 8px 8px; border-top: 1px solid #e5e7eb; }
"""

# (label, value, multiline)
Field = Tuple[str, str, bool]
Section = Tuple[str, List[Field]]


def format_submitted_at(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    hour = now.strftime("%I").lstrip("0") or "12"
    return f"{now.strftime('%B')} {now.day}, {now.year} at {hour}:{now.strftime('%M %p %Z')}"


def _esc(value: Optional[str]) -> str:
    return escape(value or "", quote=True)


def _esc_multiline(value: str) -> str:
    return _esc(value).replace("\r\n", "\n").replace("\n", "<br>")


def _or(value: Optional[str], fallback: str) -> str:
    value = (value or "").strip()
    return value or fallback


def single_line(value: Optional[str]) -> str:
    """Collapse line breaks and runs of whitespace so the value is safe in a header."""
    return " ".join((value or "").split())


def full_name(form) -> str:
    return single_line(f"{form.firstName or ''} {form.lastName or ''}")


def _render_html(title: str, subtitle: str, sections: List[Section], closing: str) -> str:
    blocks = []
    for section_title, fields in sections:
        rows = []
        for label, value, multiline in fields:
            if multiline:
                rows.append(
                    f'<div class="field"><div class="field-label">{_esc(label)}:</div>'
                    f'<div class="field-value" style="white-space: pre-wrap;">'
                    f"{_esc_multiline(value)}</div></div>"
                )
            else:
                rows.append(
                    f'<div class="field"><div class="field-label">{_esc(label)}:</div>'
                    f'<div class="field-value">{_esc(value)}</div></div>'
                )
        blocks.append(
            f'<div class="section"><div class="section-title">{_esc(section_title)}</div>'
            + "".join(rows)
            + "</div>"
        )

    brand = _esc(settings.BRAND_NAME)
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <style>{_STYLE}    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>{_esc(title)}</h1>
            <p>{brand} - {_esc(subtitle)}</p>
        </div>
        <div class="content">
            {"".join(blocks)}
        </div>
        <div class="footer">
            <p><strong>This email was automatically generated from the {brand} website.</strong></p>
            <p>{_esc(closing)}</p>
        </div>
    </div>
</body>
</html>
"""


def _render_text(title: str, subtitle: str, sections: List[Section], closing: str) -> str:
    rule = "=" * 43
    lines = [rule, title.upper(), f"{settings.BRAND_NAME} - {subtitle}", rule, ""]
    for section_title, fields in sections:
        heading = section_title.upper()
        lines += [heading, "-" * len(heading)]
        for label, value, multiline in fields:
            if multiline:
                lines += [f"{label}:", value]
            else:
                lines.append(f"{label}: {value}")
        lines.append("")
    lines += [
        rule,
        f"This email was automatically generated from the {settings.BRAND_NAME} website.",
        closing,
        rule,
    ]
    return "\n".join(lines) + "\n"


def _contact_fields(form) -> List[Field]:
    return [
        ("Full Name", full_name(form), False),
        ("Email Address", _or(form.email, "Not provided"), False),
        ("Phone Number", _or(form.phone, "Not provided"), False),
    ]


def _submission_section(source: str, submitted_at: str) -> Section:
    return (
        "Submission Information",
        [
            ("Submission Date & Time", submitted_at, False),
            ("Source", source, False),
        ],
    )


def sell_inquiry_subject(form: SellInquiry) -> str:
    return f"New Property Sale Inquiry - {full_name(form)}"


def buy_inquiry_subject(form: BuyInquiry) -> str:
    return f"New Property Purchase Inquiry - {full_name(form)}"


def render_sell_inquiry(form: SellInquiry, submitted_at: Optional[str] = None) -> Tuple[str, str]:
    """Returns ``(html, text)`` for a seller's listing request."""
    submitted_at = submitted_at or format_submitted_at()
    contact = PREFERRED_CONTACT_LABELS.get(
        form.preferredContact or "", _or(form.preferredContact, "Not specified")
    )
    sections: List[Section] = [
        ("Personal Information", _contact_fields(form) + [("Preferred Contact Method", contact, False)]),
        (
            "Property Details & Requirements",
            [("Description", _or(form.description, "No description provided"), True)],
        ),
        _submission_section("Sell Page - Property Listing Form", submitted_at),
    ]
    title = "New Property Sale Inquiry"
    subtitle = "Property Listing Request"
    closing = "Please respond to the customer at their preferred contact method listed above."
    return (
        _render_html(title, subtitle, sections, closing),
        _render_text(title, subtitle, sections, closing),
    )


def render_buy_inquiry(form: BuyInquiry, submitted_at: Optional[str] = None) -> Tuple[str, str]:
    """Returns ``(html, text)`` for a buyer's information request."""
    submitted_at = submitted_at or format_submitted_at()
    budget = BUDGET_LABELS.get(form.budget or "", _or(form.budget, "Not specified"))
    timeline = TIMELINE_LABELS.get(form.timeline or "", _or(form.timeline, "Not specified"))
    sections: List[Section] = [
        ("Personal Information", _contact_fields(form)),
        (
            "Property Preferences",
            [
                ("Budget Range", budget, False),
                ("Timeline", timeline, False),
                ("Preferred Areas", _or(form.preferredAreas, "Not specified"), False),
                ("First-Time Home Buyer", "Yes" if form.firstTimeBuyer else "No", False),
            ],
        ),
        (
            "Additional Information",
            [
                (
                    "Additional Requirements",
                    _or(form.additionalInfo, "No additional information provided"),
                    True,
                )
            ],
        ),
        _submission_section("Buy Page - Property Purchase Form", submitted_at),
    ]
    title = "New Property Purchase Inquiry"
    subtitle = "Buyer Information Request"
    closing = "Please contact the customer to discuss their property purchase needs."
    return (
        _render_html(title, subtitle, sections, closing),
        _render_text(title, subtitle, sections, closing),
    )
