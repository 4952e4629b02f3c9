"""
Domain-specific exceptions.

These exceptions represent business rule violations and domain errors.
They are independent of infrastructure concerns.
"""


class DomainError(Exception):
    """Base exception for all domain errors."""

    pass


class UserAlreadyExistsError(DomainError):
    """Raised when attempting to create a user with an email that already exists."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"User with email '{email}' already exists")


class UserValidationError(DomainError):
    """
    Raised when a signup payload breaks one or more field rules.

    Attributes:
        errors: Ordered mapping of field name to message key
            (e.g. {"username": "username_null", "email": "email_inuse"})
    """

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__(f"Validation failed for fields: {', '.join(errors)}")


class InvalidActivationTokenError(DomainError):
    """
    Raised when an activation token does not match any pending user.

    The same error covers unknown tokens and tokens that were already consumed,
    so callers cannot tell which tokens were ever valid.
    """

    def __init__(self) -> None:
        super().__init__("Account is either already active or the token is invalid")
