"""
HTTP-facing errors.

Routes translate domain and application errors into ApiError; a single
exception handler in src.main renders them as localized JSON bodies.
"""

import time

from src.infrastructure.i18n.catalog import MessageCatalog
from src.presentation.schemas import ErrorResponse, ValidationErrorResponse


class ApiError(Exception):
    """
    An error response waiting to be rendered.

    Attributes:
        status_code: HTTP status code
        message_key: Message id of the top-level message
        validation_errors: Field -> message id, only for validation failures
    """

    def __init__(
        self,
        status_code: int,
        message_key: str,
        validation_errors: dict[str, str] | None = None,
    ):
        self.status_code = status_code
        self.message_key = message_key
        self.validation_errors = validation_errors
        super().__init__(message_key)


def now_millis() -> int:
    """Milliseconds since epoch."""
    return int(time.time() * 1000)


def build_error_body(
    path: str,
    message_key: str,
    catalog: MessageCatalog,
    locale: str,
    validation_errors: dict[str, str] | None = None,
) -> dict:
    """
    Build the JSON body of an error response.

    Args:
        path: Request path
        message_key: Message id of the top-level message
        catalog: Message catalog
        locale: Response locale
        validation_errors: Field -> message id, adds "validationErrors" when given

    Returns:
        {path, timestamp, message} plus validationErrors for validation failures
    """
    message = catalog.translate(message_key, locale)

    if validation_errors is None:
        return ErrorResponse(path=path, timestamp=now_millis(), message=message).model_dump()

    return ValidationErrorResponse(
        path=path,
        timestamp=now_millis(),
        message=message,
        validation_errors=catalog.translate_all(validation_errors, locale),
    ).model_dump(by_alias=True)
