"""
Signup payload validation.

Runs every field rule, collects one message id per failing field and reports
them together in field order (username, email, password). The "email in use"
rule needs a store lookup, so it runs after the schema rules and only for an
email that passed them.
"""

import logging
from typing import Any

from pydantic import ValidationError

from src.application.register_user import RegisterUserUseCase
from src.domain.exceptions import UserValidationError
from src.presentation.schemas import FORMAT_ERRORS, CreateUserRequest

logger = logging.getLogger(__name__)

FIELD_ORDER = ("username", "email", "password")


class UserValidator:
    """Validates signup payloads before anything is persisted."""

    def __init__(self, use_case: RegisterUserUseCase):
        """
        Args:
            use_case: Registration use case, used for the duplicate email lookup
        """
        self.use_case = use_case

    async def validate(self, payload: Any) -> CreateUserRequest:
        """
        Validate a raw signup payload.

        Args:
            payload: Decoded JSON body; anything but an object counts as empty

        Returns:
            The parsed request

        Raises:
            UserValidationError: With field -> message id for every failing field
        """
        if not isinstance(payload, dict):
            payload = {}

        try:
            request = CreateUserRequest.model_validate(payload)
        except ValidationError as e:
            errors = self._collect(e)
            await self._check_email_in_use(payload.get("email"), errors)
            raise self._rejected(errors) from e

        errors = {}
        await self._check_email_in_use(request.email, errors)
        if errors:
            raise self._rejected(errors)

        return request

    async def _check_email_in_use(self, email: Any, errors: dict[str, str]) -> None:
        """Add "email_inuse" when the email passed its own rules but is taken."""
        if "email" in errors:
            return
        if await self.use_case.find_by_email(email) is not None:
            errors["email"] = "email_inuse"

    @staticmethod
    def _rejected(errors: dict[str, str]) -> UserValidationError:
        ordered = {field: errors[field] for field in FIELD_ORDER if field in errors}
        logger.info(f"Signup rejected: {ordered}")
        return UserValidationError(ordered)

    @staticmethod
    def _collect(error: ValidationError) -> dict[str, str]:
        """Keep the first message id reported for each field."""
        errors: dict[str, str] = {}
        for item in error.errors():
            field = str(item["loc"][0]) if item["loc"] else ""
            if field not in FORMAT_ERRORS:
                continue
            key = item["type"]
            if not key.startswith(f"{field}_"):
                key = FORMAT_ERRORS[field]
            errors.setdefault(field, key)
        return errors
