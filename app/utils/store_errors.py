"""Classification of database failures.

Everything that inspects driver error text lives here so the rest of the code
only deals with a ``StoreErrorKind``.
"""

import enum
from typing import Optional

from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)

from app.exceptions import StoreError


class StoreErrorKind(str, enum.Enum):
    CONSTRAINT_VIOLATION = "constraint_violation"
    NOT_NULL_VIOLATION = "not_null_violation"
    DUPLICATE_KEY = "duplicate_key"
    FOREIGN_KEY_VIOLATION = "foreign_key_violation"
    VALUE_TOO_LONG = "value_too_long"
    CONNECTION_FAILURE = "connection_failure"
    OTHER = "other"


# PostgreSQL SQLSTATE codes
_SQLSTATE_KINDS = {
    "23502": StoreErrorKind.NOT_NULL_VIOLATION,
    "23503": StoreErrorKind.FOREIGN_KEY_VIOLATION,
    "23505": StoreErrorKind.DUPLICATE_KEY,
    "23514": StoreErrorKind.CONSTRAINT_VIOLATION,
    "22001": StoreErrorKind.VALUE_TOO_LONG,
}
_SQLSTATE_CLASS_KINDS = {
    "08": StoreErrorKind.CONNECTION_FAILURE,
    "23": StoreErrorKind.CONSTRAINT_VIOLATION,
    "57": StoreErrorKind.CONNECTION_FAILURE,
}

# Fallback text markers (SQLite and drivers without SQLSTATE)
_MESSAGE_KINDS = (
    ("not null constraint", StoreErrorKind.NOT_NULL_VIOLATION),
    ("null value in column", StoreErrorKind.NOT_NULL_VIOLATION),
    ("unique constraint", StoreErrorKind.DUPLICATE_KEY),
    ("duplicate key", StoreErrorKind.DUPLICATE_KEY),
    ("foreign key", StoreErrorKind.FOREIGN_KEY_VIOLATION),
    ("value too long", StoreErrorKind.VALUE_TOO_LONG),
    ("check constraint", StoreErrorKind.CONSTRAINT_VIOLATION),
    ("could not connect", StoreErrorKind.CONNECTION_FAILURE),
    ("connection refused", StoreErrorKind.CONNECTION_FAILURE),
    ("timeout", StoreErrorKind.CONNECTION_FAILURE),
)


def _sqlstate(exc: BaseException) -> Optional[str]:
    orig = getattr(exc, "orig", None)
    for attr in ("pgcode", "sqlstate"):
        code = getattr(orig, attr, None)
        if code:
            return str(code)
    return None


def store_diagnostic(exc: BaseException) -> str:
    """The driver's own message, without SQLAlchemy's statement/params suffix."""
    orig = getattr(exc, "orig", None)
    if orig is not None:
        return str(orig).strip()
    return str(exc).strip()


def classify_store_error(exc: BaseException) -> StoreErrorKind:
    code = _sqlstate(exc)
    if code:
        if code in _SQLSTATE_KINDS:
            return _SQLSTATE_KINDS[code]
        if code[:2] in _SQLSTATE_CLASS_KINDS:
            return _SQLSTATE_CLASS_KINDS[code[:2]]

    text = store_diagnostic(exc).lower()
    for marker, kind in _MESSAGE_KINDS:
        if marker in text:
            return kind

    if isinstance(exc, IntegrityError):
        return StoreErrorKind.CONSTRAINT_VIOLATION
    if isinstance(exc, (OperationalError, PoolTimeoutError)):
        return StoreErrorKind.CONNECTION_FAILURE
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return StoreErrorKind.CONNECTION_FAILURE
    return StoreErrorKind.OTHER


def to_store_error(exc: SQLAlchemyError, message: str) -> StoreError:
    """Wrap a failed statement, keeping the driver diagnostic for the caller."""
    kind = classify_store_error(exc)
    diagnostic = store_diagnostic(exc)
    if kind is StoreErrorKind.VALUE_TOO_LONG and "character varying(500)" in diagnostic:
        # photo_url predates the TEXT column; the startup migrator fixes it
        return StoreError(
            "Database migration required",
            "The photo_url column needs to be migrated from VARCHAR(500) to TEXT. "
            "Run `alembic upgrade head` or restart the server to let the "
            "startup migration widen it.",
            kind=kind.value,
        )
    return StoreError(message, diagnostic, kind=kind.value)
