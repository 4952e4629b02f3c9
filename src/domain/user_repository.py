"""
User repository interface (Port).

This interface defines the contract for user persistence.
The domain defines the interface, and the infrastructure layer
provides the implementation.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from src.domain.user import User


class UserRepository(ABC):
    """
    Abstract repository interface for User persistence.

    This is a "port" in Hexagonal Architecture terminology.
    The infrastructure layer will provide the concrete "adapter" implementation.
    """

    @abstractmethod
    async def save(self, user: User) -> None:
        """
        Persist a user entity.

        This method handles both creation and updates.

        Args:
            user: The user entity to persist

        Raises:
            UserAlreadyExistsError: If another user already owns the email
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> User | None:
        """
        Find a user by their email address.

        Args:
            email: The email to search for

        Returns:
            The User entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_activation_token(self, token: str) -> User | None:
        """
        Find the pending user holding an activation token.

        Args:
            token: The activation token

        Returns:
            The User entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def delete(self, user_id: UUID) -> None:
        """
        Remove a user.

        Only used to undo a registration whose activation email failed.

        Args:
            user_id: The user's UUID
        """
        pass
