"""Request body normalization for property writes.

The frontend has sent the same logical field under both camelCase and
snake_case names over time, and serializes missing values as ``null``,
``""`` or the strings ``"null"``/``"undefined"``. Everything here turns such a
body into column values for ``Property`` or raises ``FieldValidationError``
naming the field and the raw values received.
"""

import json
import logging
import math
from datetime import date, datetime
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple

from app.config import settings
from app.exceptions import FieldValidationError
from app.models.property import ListingType

logger = logging.getLogger(__name__)

ABSENT_STRINGS = ("", "null", "undefined")
LISTING_TYPES = tuple(t.value for t in ListingType)
MAX_CHILD_NAME_LENGTH = 255
# INTEGER columns are 32-bit signed on PostgreSQL
MAX_INTEGER = 2**31 - 1

_MISSING = object()


class FieldSpec(NamedTuple):
    column: str
    keys: Tuple[str, ...]
    label: str
    max_length: Optional[int] = None


ZIP_CODE = FieldSpec("zip_code", ("zipCode", "zip_code"), "ZIP code", 20)
PROPERTY_TYPE = FieldSpec(
    "property_type", ("propertyType", "property_type"), "Property type", 100
)
LISTING_TYPE = FieldSpec("listing_type", ("listingType", "listing_type"), "Listing type")
SQUARE_FEET = FieldSpec("square_feet", ("squareFeet", "square_feet"), "Square feet")
BEDROOMS = FieldSpec("bedrooms", ("bedrooms",), "Bedrooms")
BATHROOMS = FieldSpec("bathrooms", ("bathrooms",), "Bathrooms")
PRICE = FieldSpec("price", ("price",), "Price")

TITLE = FieldSpec("title", ("title",), "Title", 255)
DESCRIPTION = FieldSpec("description", ("description",), "Description")
ADDRESS = FieldSpec("address", ("address",), "Address", 255)
CITY = FieldSpec("city", ("city",), "City name", 100)
STATE = FieldSpec("state", ("state",), "State name", 50)

STATUS = FieldSpec("status", ("status",), "Status", 50)
OWNER_NAME = FieldSpec("owner_name", ("ownerName", "owner_name"), "Owner name", 255)
OWNER_EMAIL = FieldSpec("owner_email", ("ownerEmail", "owner_email"), "Owner email", 255)
OWNER_PHONE = FieldSpec("owner_phone", ("ownerPhone", "owner_phone"), "Owner phone", 50)
OWNER_PREFERRED_CONTACT = FieldSpec(
    "owner_preferred_contact",
    ("ownerPreferredContact", "owner_preferred_contact"),
    "Preferred contact method",
    20,
)
YEAR_BUILT = FieldSpec("year_built", ("yearBuilt", "year_built"), "Year built")
LOT_SIZE = FieldSpec("lot_size", ("lotSize", "lot_size"), "Lot size")
AVAILABLE_DATE = FieldSpec(
    "available_date", ("availableDate", "available_date"), "Available date"
)
OWNER_ID = FieldSpec("owner_id", ("owner_id", "ownerId"), "Owner id")
AGENT_ID = FieldSpec("agent_id", ("agent_id", "agentId"), "Agent id")

LATITUDE_KEYS = ("latitude", "lat")
LONGITUDE_KEYS = ("longitude", "lng", "lon")

REQUIRED_TEXT_FIELDS = (TITLE, DESCRIPTION, ADDRESS, CITY, STATE)
OPTIONAL_TEXT_FIELDS = (
    STATUS,
    OWNER_NAME,
    OWNER_EMAIL,
    OWNER_PHONE,
    OWNER_PREFERRED_CONTACT,
)


# ---------- primitives ----------


def is_absent(value: Any) -> bool:
    if value is None or value is _MISSING:
        return True
    if isinstance(value, str) and value.strip() in ABSENT_STRINGS:
        return True
    return False


def pick(body: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the value of the first key holding a non-absent value."""
    for key in keys:
        value = body.get(key, _MISSING)
        if not is_absent(value):
            return value
    return default


def has_any(body: Dict[str, Any], keys: Sequence[str]) -> bool:
    return any(key in body for key in keys)


def _json_type(value: Any) -> str:
    if value is _MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def _json_repr(value: Any) -> str:
    if value is _MISSING:
        return "undefined"
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)


def describe_received(body: Dict[str, Any], keys: Sequence[str]) -> str:
    """``zipCode: null (type: null), zip_code: undefined (type: undefined)``"""
    parts = []
    for key in keys:
        value = body.get(key, _MISSING)
        parts.append(f"{key}: {_json_repr(value)} (type: {_json_type(value)})")
    return ", ".join(parts)


def to_number(value: Any) -> Optional[float]:
    """Parse a JSON number or numeric string; ``None`` for anything else."""
    if is_absent(value) or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _check_length(spec: FieldSpec, value: str) -> str:
    if spec.max_length is not None and len(value) > spec.max_length:
        raise FieldValidationError(
            f"{spec.label} is too long. Maximum length is {spec.max_length} characters.",
            f"{spec.label} length: {len(value)} characters (max: {spec.max_length})",
        )
    return value


# ---------- field families ----------


def require_text(body: Dict[str, Any], spec: FieldSpec) -> str:
    value = pick(body, *spec.keys)
    text = "" if value is None else str(value).strip()
    if is_absent(text):
        logger.warning(
            f"{spec.label} validation failed: {describe_received(body, spec.keys)}"
        )
        raise FieldValidationError(
            f"{spec.label} is required and cannot be empty",
            f"{spec.label} validation failed. Received {describe_received(body, spec.keys)}",
        )
    return _check_length(spec, text)


def require_present_text(body: Dict[str, Any], spec: FieldSpec) -> str:
    """Title/address style fields: required, with the legacy missing-field wording."""
    value = pick(body, *spec.keys)
    text = "" if value is None else str(value).strip()
    if is_absent(text):
        raise FieldValidationError(
            "Missing required fields: title, description, address, city, state, "
            "and zipCode are required",
            f"Missing required field: {spec.column}",
        )
    return _check_length(spec, text)


def optional_text(body: Dict[str, Any], spec: FieldSpec) -> Optional[str]:
    value = pick(body, *spec.keys)
    if value is None:
        return None
    return _check_length(spec, str(value).strip())


def require_listing_type(body: Dict[str, Any]) -> str:
    value = pick(body, *LISTING_TYPE.keys)
    listing_type = "" if value is None else str(value).strip().lower()
    if listing_type not in LISTING_TYPES:
        allowed = ", ".join(LISTING_TYPES)
        raise FieldValidationError(
            f"Listing type is required and must be one of: {allowed}",
            f"Listing type validation failed. Received "
            f"{describe_received(body, LISTING_TYPE.keys)}. Valid values: {allowed}",
        )
    return listing_type


def _check_integer_range(body: Dict[str, Any], spec: FieldSpec, number: float) -> None:
    if number > MAX_INTEGER:
        raise FieldValidationError(
            f"{spec.label} is too large. Maximum value is {MAX_INTEGER}",
            f"{spec.label} validation failed. Received {describe_received(body, spec.keys)}",
        )


def require_positive_number(
    body: Dict[str, Any], spec: FieldSpec, integer: bool = False
):
    number = to_number(pick(body, *spec.keys))
    if number is None or number <= 0:
        raise FieldValidationError(
            f"{spec.label} is required and must be greater than 0",
            f"{spec.label} validation failed. Received {describe_received(body, spec.keys)}",
        )
    if integer and not number.is_integer():
        raise FieldValidationError(
            f"{spec.label} must be a whole number greater than 0",
            f"{spec.label} validation failed. Received {describe_received(body, spec.keys)}",
        )
    if integer:
        _check_integer_range(body, spec, number)
    return int(number) if integer else number


def optional_number(
    body: Dict[str, Any], spec: FieldSpec, integer: bool = False
):
    value = pick(body, *spec.keys)
    if value is None:
        return None
    number = to_number(value)
    if number is None or number < 0 or (integer and not number.is_integer()):
        raise FieldValidationError(
            f"{spec.label} must be a valid non-negative number",
            f"{spec.label} validation failed. Received {describe_received(body, spec.keys)}",
        )
    if integer:
        _check_integer_range(body, spec, number)
    return int(number) if integer else number


def optional_id(body: Dict[str, Any], spec: FieldSpec) -> Optional[int]:
    value = pick(body, *spec.keys)
    if value is None:
        return None
    number = to_number(value)
    if number is None or number <= 0 or not number.is_integer():
        raise FieldValidationError(
            f"{spec.label} must be a positive integer",
            f"{spec.label} validation failed. Received {describe_received(body, spec.keys)}",
        )
    _check_integer_range(body, spec, number)
    return int(number)


def optional_date(body: Dict[str, Any], spec: FieldSpec) -> Optional[date]:
    value = pick(body, *spec.keys)
    if value is None:
        return None
    try:
        # Accept both "2025-06-01" and full ISO timestamps from date pickers
        return datetime.fromisoformat(str(value).strip().replace("Z", "+00:00")).date()
    except ValueError:
        try:
            return date.fromisoformat(str(value).strip()[:10])
        except ValueError:
            raise FieldValidationError(
                f"{spec.label} must be a valid date (YYYY-MM-DD)",
                f"{spec.label} validation failed. Received {describe_received(body, spec.keys)}",
            )


def normalize_coordinates(
    body: Dict[str, Any],
) -> Optional[Tuple[Optional[float], Optional[float]]]:
    """Return ``(lat, lng)`` to store, ``(None, None)`` to store nothing.

    ``None`` means neither coordinate was supplied at all.
    """
    raw_lat = pick(body, *LATITUDE_KEYS)
    raw_lng = pick(body, *LONGITUDE_KEYS)
    if raw_lat is None and raw_lng is None:
        return None
    if raw_lat is None or raw_lng is None:
        logger.warning(
            f"Only one coordinate provided (lat: {raw_lat}, lng: {raw_lng}). "
            "Both are required; coordinates not stored."
        )
        return (None, None)

    lat, lng = to_number(raw_lat), to_number(raw_lng)
    if lat is None or lng is None or not -90 <= lat <= 90 or not -180 <= lng <= 180:
        logger.warning(f"Invalid coordinates provided: {raw_lat}, {raw_lng}")
        return (None, None)
    return (lat, lng)


def normalize_names(value: Any, label: str) -> List[str]:
    """Feature/amenity names: a list (or single string) of non-blank names."""
    if is_absent(value):
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise FieldValidationError(
            f"{label.capitalize()}s must be a list of names",
            f"Received {label}s: {_json_repr(value)} (type: {_json_type(value)})",
        )
    names = []
    for item in value:
        if is_absent(item):
            continue
        name = str(item).strip()
        if len(name) > MAX_CHILD_NAME_LENGTH:
            raise FieldValidationError(
                f"{label.capitalize()} name is too long. Maximum length is "
                f"{MAX_CHILD_NAME_LENGTH} characters.",
                f"{label.capitalize()} {name[:40]!r}... length: {len(name)} characters",
            )
        names.append(name)
    return names


def normalize_photos(value: Any) -> List[Dict[str, Any]]:
    """Photos in submission order, with URL-less entries dropped.

    Each photo's encoded URL is checked against ``MAX_PHOTO_BYTES``.
    """
    if is_absent(value):
        return []
    if not isinstance(value, (list, tuple)):
        raise FieldValidationError(
            "Photos must be a list",
            f"Received photos of type {_json_type(value)}",
        )

    max_size = settings.MAX_PHOTO_BYTES
    max_mb = max_size / (1024 * 1024)
    photos = []
    for position, item in enumerate(value, start=1):
        if isinstance(item, str):
            item = {"url": item}
        if not isinstance(item, dict):
            logger.warning(f"Skipping photo {position} - unsupported entry")
            continue
        url = pick(item, "url", "photo_url")
        if url is None:
            logger.warning(f"Skipping photo {position} - no URL provided")
            continue
        url = str(url)
        name = str(pick(item, "name", "photo_name", default=f"photo_{position}.jpg"))
        if len(url) > max_size:
            size_mb = f"{len(url) / (1024 * 1024):.2f}"
            raise FieldValidationError(
                f"Photo {position} ({name}) is too large ({size_mb}MB). Maximum size "
                f"is {max_mb:g}MB. Please compress or resize the image.",
                f"Photo {position} base64 size: {len(url)} characters (max: {max_size}). "
                "Please use smaller images.",
            )
        size = to_number(pick(item, "size", "photo_size"))
        photos.append(
            {
                "photo_url": url,
                "photo_name": name[:255],
                "photo_size": int(size) if size is not None else 0,
            }
        )
    return photos


# ---------- whole payloads ----------


def normalize_property_payload(
    body: Dict[str, Any], partial: bool = False
) -> Dict[str, Any]:
    """Column values for a ``Property`` row.

    With ``partial=False`` every required field is enforced and defaults are
    filled in. With ``partial=True`` only keys present in ``body`` are
    normalized (with the same rules) and everything else is omitted.
    """
    if not isinstance(body, dict):
        raise FieldValidationError(
            "Request body must be a JSON object",
            f"Received body of type {_json_type(body)}",
        )

    def wanted(spec: FieldSpec) -> bool:
        return not partial or has_any(body, spec.keys)

    values: Dict[str, Any] = {}

    if wanted(ZIP_CODE):
        values["zip_code"] = require_text(body, ZIP_CODE)
    for spec in REQUIRED_TEXT_FIELDS:
        if wanted(spec):
            values[spec.column] = require_present_text(body, spec)
    if wanted(PROPERTY_TYPE):
        values["property_type"] = require_text(body, PROPERTY_TYPE)
    if wanted(SQUARE_FEET):
        values["square_feet"] = require_positive_number(body, SQUARE_FEET, integer=True)
    if wanted(LISTING_TYPE):
        values["listing_type"] = require_listing_type(body)
    if wanted(BEDROOMS):
        values["bedrooms"] = require_positive_number(body, BEDROOMS, integer=True)
    if wanted(BATHROOMS):
        values["bathrooms"] = require_positive_number(body, BATHROOMS)
    if wanted(PRICE):
        values["price"] = require_positive_number(body, PRICE)

    for spec in OPTIONAL_TEXT_FIELDS:
        if wanted(spec):
            values[spec.column] = optional_text(body, spec)
    if wanted(YEAR_BUILT):
        values["year_built"] = optional_number(body, YEAR_BUILT, integer=True)
    if wanted(LOT_SIZE):
        values["lot_size"] = optional_number(body, LOT_SIZE)
    if wanted(AVAILABLE_DATE):
        values["available_date"] = optional_date(body, AVAILABLE_DATE)
    if wanted(OWNER_ID):
        values["owner_id"] = optional_id(body, OWNER_ID)
    if wanted(AGENT_ID):
        values["agent_id"] = optional_id(body, AGENT_ID)

    if not partial and not values.get("status"):
        values["status"] = "active"
    if partial and "status" in values and values["status"] is None:
        del values["status"]

    coordinates = normalize_coordinates(body)
    if coordinates is not None:
        if coordinates != (None, None) or not partial:
            values["latitude"], values["longitude"] = coordinates
    elif not partial:
        values["latitude"], values["longitude"] = None, None

    return values
