"""
Activate User use case.

Handles account activation with the token received by email.
"""

import logging

from src.domain.activation_token import ActivationToken
from src.domain.exceptions import InvalidActivationTokenError
from src.domain.user import User
from src.domain.user_repository import UserRepository

logger = logging.getLogger(__name__)


class ActivateUserUseCase:
    """
    Use case for activating a user account.

    This use case handles the activation flow:
    1. Look up the pending user holding the token
    2. Mark user as active and consume the token
    3. Persist changes

    Unknown tokens and already consumed tokens end the same way, with
    InvalidActivationTokenError.
    """

    def __init__(self, user_repository: UserRepository):
        """
        Initialize the use case.

        Args:
            user_repository: Repository for user persistence
        """
        self.user_repository = user_repository

    async def execute(self, token: str) -> User:
        """
        Execute the user activation use case.

        Args:
            token: The activation token received by email

        Returns:
            The activated User entity

        Raises:
            InvalidActivationTokenError: If no pending user holds this token
        """
        if not ActivationToken.is_well_formed(token):
            raise InvalidActivationTokenError()

        user = await self.user_repository.find_by_activation_token(token)
        if user is None:
            raise InvalidActivationTokenError()

        user.activate()

        await self.user_repository.save(user)
        logger.info(f"Activated user {user.id}")

        return user
