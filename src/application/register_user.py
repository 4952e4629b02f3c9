"""
Register User use case.

Orchestrates the user registration process including:
1. Creating a new pending user
2. Persisting to the database
3. Sending the activation token via email

If the email cannot be sent, the persisted user is removed again so the
store never keeps an account whose activation mail never went out.
"""

import logging

from src.application.email_service import EmailDeliveryError, EmailService
from src.domain.activation_token import ActivationToken
from src.domain.user import BCRYPT_ROUNDS, User
from src.domain.user_repository import UserRepository

logger = logging.getLogger(__name__)


class RegisterUserUseCase:
    """
    Use case for registering a new user.

    This class encapsulates the business logic for user registration,
    coordinating between the domain layer and infrastructure services.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        email_service: EmailService,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
    ):
        """
        Initialize the use case.

        Args:
            user_repository: Repository for user persistence
            email_service: Outbound mail adapter
            bcrypt_rounds: bcrypt cost factor for password hashing
        """
        self.user_repository = user_repository
        self.email_service = email_service
        self.bcrypt_rounds = bcrypt_rounds

    async def execute(self, username: str, email: str, password: str) -> User:
        """
        Execute the user registration use case.

        Process:
        1. Create new user entity (hashes password, generates token, inactive)
        2. Save user to database
        3. Send activation email
        4. On email failure, delete the saved user and re-raise the email error

        Args:
            username: Display name (already validated)
            email: User's email address (already validated)
            password: User's password (plain text, already validated)

        Returns:
            The created User entity

        Raises:
            UserAlreadyExistsError: If the email was taken concurrently
            EmailDeliveryError: If the activation email could not be sent
        """
        token = ActivationToken.generate().value
        user = User.create(
            username=username,
            email=email,
            password=password,
            bcrypt_rounds=self.bcrypt_rounds,
            activation_token=token,
        )

        await self.user_repository.save(user)
        logger.info(f"Created pending user {user.id}")

        try:
            await self.email_service.send_activation_token(user.email, token)
        except EmailDeliveryError:
            logger.warning(f"Activation email failed, rolling back user {user.id}")
            await self._rollback(user)
            raise

        return user

    async def _rollback(self, user: User) -> None:
        """
        Delete a user whose activation email failed.

        A failing delete is logged and left for the caller's email error to
        report, so the client still learns that the email was not sent.
        """
        try:
            await self.user_repository.delete(user.id)
        except Exception as e:
            logger.error(f"Rollback of user {user.id} failed, row kept: {e}", exc_info=True)

    async def find_by_email(self, email: str) -> User | None:
        """
        Look up a user by email.

        Used by request validation to report duplicate emails before
        anything is persisted.

        Args:
            email: Email to search for

        Returns:
            The User entity if found, None otherwise
        """
        return await self.user_repository.find_by_email(email)
