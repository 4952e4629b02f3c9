"""
ActivationToken value object.

Represents the single-use token mailed to a new user to prove control of
their email address.
"""

import re
import secrets


class ActivationToken:
    """
    Value object representing an activation token.

    A token is 16 random bytes, hex-encoded and cut down to 16 characters.
    It carries no expiry: it lives until the account is activated.
    """

    TOKEN_LENGTH = 16
    TOKEN_REGEX = re.compile(r"^[0-9a-f]{16}$")

    def __init__(self, value: str):
        """
        Initialize an ActivationToken.

        Args:
            value: The hex-encoded token string

        Raises:
            ValueError: If the token format is invalid
        """
        if not self.is_well_formed(value):
            raise ValueError(f"Activation token must be {self.TOKEN_LENGTH} hex characters")

        self._value = value

    @classmethod
    def is_well_formed(cls, value: str) -> bool:
        """
        Check the format of a token string.

        Args:
            value: The candidate token

        Returns:
            True if the value is 16 lowercase hex characters, False otherwise
        """
        return isinstance(value, str) and bool(cls.TOKEN_REGEX.match(value))

    @classmethod
    def generate(cls) -> "ActivationToken":
        """
        Generate a new random activation token.

        Returns:
            A new ActivationToken backed by the secrets module
        """
        return cls(secrets.token_hex(cls.TOKEN_LENGTH)[: cls.TOKEN_LENGTH])

    @property
    def value(self) -> str:
        """Get the token string."""
        return self._value

    def __str__(self) -> str:
        return self._value

    def __eq__(self, other: object) -> bool:
        """Value objects are equal if their values are equal."""
        if not isinstance(other, ActivationToken):
            return False
        return secrets.compare_digest(self._value, other._value)

    def __hash__(self) -> int:
        return hash(self._value)
