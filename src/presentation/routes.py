"""
FastAPI routes for user registration and activation.

Each route is thin: it handles HTTP concerns, delegates to a use case, and
maps failures to an ApiError carrying the status code and message id.
"""

import json
import logging
from datetime import UTC, datetime
from typing import Annotated, Any

from config.settings import settings
from fastapi import APIRouter, Depends, Request, status

from src.application.activate_user import ActivateUserUseCase
from src.application.email_service import EmailDeliveryError
from src.application.register_user import RegisterUserUseCase
from src.domain.exceptions import (
    InvalidActivationTokenError,
    UserAlreadyExistsError,
    UserValidationError,
)
from src.infrastructure.i18n.catalog import MessageCatalog
from src.presentation.dependencies import (
    get_activate_user_use_case,
    get_database_connection,
    get_locale,
    get_message_catalog,
    get_register_user_use_case,
    get_user_validator,
)
from src.presentation.errors import ApiError
from src.presentation.schemas import (
    CreateUserRequest,
    ErrorResponse,
    HealthCheckResponse,
    MessageResponse,
    ValidationErrorResponse,
)
from src.presentation.validation import UserValidator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/1.0", tags=["users"])


async def read_json_body(request: Request) -> Any:
    """Decode the request body, treating a missing or malformed body as empty."""
    body = await request.body()
    if not body:
        return {}
    try:
        return json.loads(body)
    except (ValueError, UnicodeDecodeError):
        logger.info("Ignoring malformed JSON body")
        return {}


@router.post(
    "/users",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "User created, activation email sent"},
        400: {"model": ValidationErrorResponse, "description": "Validation failure"},
        502: {"model": ErrorResponse, "description": "Activation email could not be sent"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Register a new user",
    description="""
    Register a new user with username, email and password.

    An activation token is emailed to the given address. The account stays
    inactive until the token is submitted to /users/token/{token}.

    Business Rules:
    - Username: 4 to 32 characters
    - Email must be valid and not registered yet
    - Password: at least 6 characters, with a lowercase letter, an uppercase letter and a digit
    - Any "inactive" field in the body is ignored
    - If the email cannot be sent, the user is not kept
    """,
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": CreateUserRequest.model_json_schema()}},
            "required": True,
        }
    },
)
async def create_user(
    http_request: Request,
    validator: Annotated[UserValidator, Depends(get_user_validator)],
    use_case: Annotated[RegisterUserUseCase, Depends(get_register_user_use_case)],
    catalog: Annotated[MessageCatalog, Depends(get_message_catalog)],
    locale: Annotated[str, Depends(get_locale)],
) -> MessageResponse:
    """Register a new user."""
    payload = await read_json_body(http_request)

    try:
        request = await validator.validate(payload)

        await use_case.execute(
            username=request.username,
            email=request.email,
            password=request.password,
        )

    except UserValidationError as e:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST, "validation_failure", validation_errors=e.errors
        ) from e

    except UserAlreadyExistsError as e:
        logger.warning(f"Registration failed: {e!s}")
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "validation_failure",
            validation_errors={"email": "email_inuse"},
        ) from e

    except EmailDeliveryError as e:
        logger.warning(f"Registration failed: {e!s}")
        raise ApiError(status.HTTP_502_BAD_GATEWAY, "email_failure") from e

    except Exception as e:
        logger.error(f"Unexpected error during registration: {e}", exc_info=True)
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error") from e

    return MessageResponse(message=catalog.translate("user_create_success", locale))


@router.post(
    "/users/token/{token}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Account activated"},
        400: {"model": ErrorResponse, "description": "Account already active or token invalid"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Activate user account",
    description="""
    Activate a user account with the token received by email.

    The same error is returned for an unknown token and for a token that
    has already been used.
    """,
)
async def activate_user(
    token: str,
    use_case: Annotated[ActivateUserUseCase, Depends(get_activate_user_use_case)],
    catalog: Annotated[MessageCatalog, Depends(get_message_catalog)],
    locale: Annotated[str, Depends(get_locale)],
) -> MessageResponse:
    """Activate a user account."""
    try:
        await use_case.execute(token)

    except InvalidActivationTokenError as e:
        logger.warning("Activation failed: unknown or consumed token")
        raise ApiError(status.HTTP_400_BAD_REQUEST, "account_activation_failure") from e

    except Exception as e:
        logger.error(f"Unexpected error during activation: {e}", exc_info=True)
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error") from e

    return MessageResponse(message=catalog.translate("account_activation_success", locale))


@router.post(
    "/users/token",
    status_code=status.HTTP_400_BAD_REQUEST,
    responses={400: {"model": ErrorResponse, "description": "Token missing"}},
    summary="Activate without a token",
    include_in_schema=False,
)
async def activate_user_without_token() -> None:
    """Reject activation requests that carry no token."""
    raise ApiError(status.HTTP_400_BAD_REQUEST, "account_activation_failure")


@router.get(
    "/health",
    response_model=HealthCheckResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Check if the service is running and its database pool is open",
    tags=["health"],
)
async def health_check() -> HealthCheckResponse:
    """Health check endpoint."""
    db_ready = get_database_connection().is_connected

    return HealthCheckResponse(
        status="healthy" if db_ready else "degraded",
        service=settings.app_name,
        version=settings.app_version,
        timestamp=datetime.now(UTC),
    )
