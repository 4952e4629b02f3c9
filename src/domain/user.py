"""
User entity.

Represents the User aggregate root in our domain model.
Contains business logic for user registration and activation.
"""

import uuid
from datetime import UTC, datetime

import bcrypt

from src.domain.activation_token import ActivationToken
from src.domain.exceptions import InvalidActivationTokenError

# Password hashing configuration
# Cost factor 10 (2^10 iterations)
BCRYPT_ROUNDS = 10

# bcrypt only reads this many bytes of a password; newer releases refuse longer input
BCRYPT_MAX_PASSWORD_BYTES = 72


def hashable_password(password: str) -> bytes:
    """
    Encode a password for bcrypt.

    Passwords longer than 72 UTF-8 bytes are cut to their first 72 bytes, which
    is what bcrypt has always hashed. A multibyte character split at the cut
    stays split; the bytes only ever feed the hash.
    """
    return password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


class User:
    """
    User aggregate root.

    A user is either pending (inactive with a token) or active (no token).
    Those two states are the only ones this entity can reach.

    Attributes:
        id: Unique identifier for the user
        username: Display name (not unique)
        email: User's email address (unique)
        password_hash: bcrypt hash of the password
        inactive: True until the activation token has been consumed
        activation_token: Pending token (None once activated)
        created_at: When the user was created
    """

    def __init__(
        self,
        id: uuid.UUID,
        username: str,
        email: str,
        password_hash: str,
        inactive: bool = True,
        activation_token: str | None = None,
        created_at: datetime | None = None,
    ):
        """
        Initialize a User entity.

        Note: This constructor is primarily for reconstructing entities from persistence.
        Use the 'create' class method for creating new users.
        """
        self.id = id
        self.username = username
        self.email = email
        self.password_hash = password_hash
        self.inactive = inactive
        self.activation_token = activation_token
        self.created_at = created_at or datetime.now(UTC)

    @classmethod
    def create(
        cls,
        username: str,
        email: str,
        password: str,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
        activation_token: str | None = None,
    ) -> "User":
        """
        Create a new pending user.

        Field rules (lengths, formats, uniqueness) are checked before this is
        called; this factory only enforces the lifecycle invariants.

        Args:
            username: Display name
            email: User's email address
            password: Plain text password (will be hashed)
            bcrypt_rounds: bcrypt cost factor
            activation_token: Token to assign, a fresh one is generated if None

        Returns:
            A new inactive User holding the activation token
        """
        password_hash = bcrypt.hashpw(
            hashable_password(password), bcrypt.gensalt(rounds=bcrypt_rounds)
        ).decode("utf-8")

        # Always inactive on creation, whatever the client sent
        return cls(
            id=uuid.uuid4(),
            username=username,
            email=email,
            password_hash=password_hash,
            inactive=True,
            activation_token=activation_token or ActivationToken.generate().value,
            created_at=datetime.now(UTC),
        )

    @property
    def is_pending(self) -> bool:
        """Whether the user still waits for activation."""
        return self.inactive and self.activation_token is not None

    def activate(self) -> None:
        """
        Activate the account and consume its token.

        Raises:
            InvalidActivationTokenError: If the user has no pending token
        """
        if not self.is_pending:
            raise InvalidActivationTokenError()

        self.inactive = False
        self.activation_token = None

    def __eq__(self, other: object) -> bool:
        """Entities are equal if they have the same identity."""
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
