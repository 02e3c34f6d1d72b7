"""Application exceptions.

Services raise these; the handlers registered in ``app.main`` turn them into
the ``{success, message, error}`` response envelope. Nothing below the router
layer writes HTTP responses.
"""

from typing import Optional

from starlette import status


class AppException(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable summary shown to the user.
        status_code: HTTP status code to return.
        error: Detailed diagnostic (raw values received, store message).
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        error: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.message = message
        self.error = error
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_content(self) -> dict:
        content = {"success": False, "message": self.message}
        if self.error:
            content["error"] = self.error
        return content


class FieldValidationError(AppException):
    """A request field is missing, malformed or out of bounds."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AppException):
    status_code = status.HTTP_404_NOT_FOUND


class StoreError(AppException):
    """A database statement failed; ``error`` carries the driver message verbatim."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, error: Optional[str] = None, kind: str = "other"):
        super().__init__(message, error)
        self.kind = kind


class DatabaseUnavailableError(AppException):
    """No connection could be acquired within the configured attempts."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class EmailDeliveryError(AppException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
