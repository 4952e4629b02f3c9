"""
API request/response schemas (DTOs).

These Pydantic models define the API contract for requests and responses.

The signup request carries the field rules. Every rule failure is raised as a
PydanticCustomError whose type is the message id of that rule, so the
validation layer can hand the ids straight to the message catalog.
"""

import re
from datetime import datetime
from typing import Any

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

USERNAME_MIN_LENGTH = 4
USERNAME_MAX_LENGTH = 32
PASSWORD_MIN_LENGTH = 6
# A password needs one of each; only ASCII letters and digits count
PASSWORD_RULES = (re.compile(r"[a-z]"), re.compile(r"[A-Z]"), re.compile(r"[0-9]"))

# Message id used when a field holds something other than a string
FORMAT_ERRORS = {
    "username": "username_size",
    "email": "email_invalid",
    "password": "password_pattern",
}


def _rule_error(key: str) -> PydanticCustomError:
    return PydanticCustomError(key, key)


class CreateUserRequest(BaseModel):
    """
    Request schema for user registration.

    Unknown fields are dropped, so a client-sent "inactive" flag never
    reaches the domain.
    """

    model_config = ConfigDict(extra="ignore")

    username: str = Field(
        default=None,
        validate_default=True,
        description="Display name, 4 to 32 characters",
        examples=["user1"],
    )
    email: str = Field(
        default=None,
        validate_default=True,
        description="User's email address, must not be registered yet",
        examples=["user1@example.com"],
    )
    password: str = Field(
        default=None,
        validate_default=True,
        description="At least 6 characters with a lowercase letter, an uppercase letter and a digit",
        examples=["Pass1234"],
    )

    @field_validator("username", "email", "password", mode="before")
    @classmethod
    def check_present(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            raise _rule_error(f"{info.field_name}_null")
        if not isinstance(value, str):
            raise _rule_error(FORMAT_ERRORS[info.field_name])
        return value

    @field_validator("username")
    @classmethod
    def check_username_size(cls, value: str) -> str:
        if not USERNAME_MIN_LENGTH <= len(value) <= USERNAME_MAX_LENGTH:
            raise _rule_error("username_size")
        return value

    @field_validator("email")
    @classmethod
    def check_email_syntax(cls, value: str) -> str:
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError as e:
            raise _rule_error("email_invalid") from e
        return value

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, value: str) -> str:
        if len(value) < PASSWORD_MIN_LENGTH:
            raise _rule_error("password_size")
        if not all(rule.search(value) for rule in PASSWORD_RULES):
            raise _rule_error("password_pattern")
        return value


class MessageResponse(BaseModel):
    """Success response carrying a localized message."""

    message: str = Field(..., description="Localized success message", examples=["User created"])


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    path: str = Field(..., description="Request path", examples=["/api/1.0/users"])
    timestamp: int = Field(..., description="Milliseconds since epoch at response time")
    message: str = Field(..., description="Localized error message")


class ValidationErrorResponse(ErrorResponse):
    """Error response for rejected signup payloads."""

    validation_errors: dict[str, str] = Field(
        ...,
        serialization_alias="validationErrors",
        description="Localized message per failing field, in field order",
        examples=[{"username": "Username cannot be null"}],
    )


class HealthCheckResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(..., description="Service status", examples=["healthy"])
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    timestamp: datetime = Field(..., description="Current server time")
