"""
PostgreSQL implementation of UserRepository.

This is the concrete adapter for user persistence using raw SQL with asyncpg.
"""

import logging
from uuid import UUID

import asyncpg

from src.domain.exceptions import UserAlreadyExistsError
from src.domain.user import User
from src.domain.user_repository import UserRepository
from src.infrastructure.database.connection import DatabaseConnection

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, username, email, password_hash, inactive, activation_token, created_at"


class PostgresUserRepository(UserRepository):
    """
    PostgreSQL implementation of the UserRepository interface.

    This adapter translates between our domain model (User entity) and
    the database representation. Email uniqueness is left to the UNIQUE
    constraint on the users table, which serializes concurrent signups.
    """

    def __init__(self, db_connection: DatabaseConnection):
        """
        Initialize the repository.

        Args:
            db_connection: Database connection manager
        """
        self.db = db_connection

    async def save(self, user: User) -> None:
        """
        Save or update a user.

        Uses INSERT ... ON CONFLICT (id) to handle both creation and updates.

        Args:
            user: User entity to persist

        Raises:
            UserAlreadyExistsError: If a different user already owns the email
        """
        query = f"""
        INSERT INTO users ({USER_COLUMNS})
        VALUES ($1, $2, $3, $4, $5, $6, $7)
        ON CONFLICT (id) DO UPDATE SET
            username = EXCLUDED.username,
            email = EXCLUDED.email,
            password_hash = EXCLUDED.password_hash,
            inactive = EXCLUDED.inactive,
            activation_token = EXCLUDED.activation_token
        """

        try:
            await self.db.execute(
                query,
                user.id,
                user.username,
                user.email,
                user.password_hash,
                user.inactive,
                user.activation_token,
                user.created_at,
            )
            logger.debug(f"Saved user: {user.id}")
        except asyncpg.exceptions.UniqueViolationError as e:
            logger.warning(f"Email already registered: {user.email}")
            raise UserAlreadyExistsError(user.email) from e
        except Exception as e:
            logger.error(f"Failed to save user {user.id}: {e}")
            raise

    async def find_by_email(self, email: str) -> User | None:
        """
        Find a user by email.

        Args:
            email: Email to search for

        Returns:
            User entity if found, None otherwise
        """
        query = f"SELECT {USER_COLUMNS} FROM users WHERE email = $1"

        try:
            result = await self.db.execute(query, email, fetchone=True)
            if not result:
                return None

            assert isinstance(result, dict)
            return self._map_to_entity(result)
        except Exception as e:
            logger.error(f"Failed to find user by email {email}: {e}")
            raise

    async def find_by_activation_token(self, token: str) -> User | None:
        """
        Find the pending user holding a token.

        Args:
            token: Activation token

        Returns:
            User entity if found, None otherwise
        """
        query = f"SELECT {USER_COLUMNS} FROM users WHERE activation_token = $1"

        try:
            result = await self.db.execute(query, token, fetchone=True)
            if not result:
                return None

            assert isinstance(result, dict)
            return self._map_to_entity(result)
        except Exception as e:
            logger.error(f"Failed to find user by activation token: {e}")
            raise

    async def delete(self, user_id: UUID) -> None:
        """
        Delete a user by ID.

        Args:
            user_id: User's UUID
        """
        try:
            await self.db.execute("DELETE FROM users WHERE id = $1", user_id)
            logger.debug(f"Deleted user: {user_id}")
        except Exception as e:
            logger.error(f"Failed to delete user {user_id}: {e}")
            raise

    def _map_to_entity(self, row: dict) -> User:
        """
        Map a database row to a User entity.

        Args:
            row: Database row as dict (from asyncpg Record converted to dict)

        Returns:
            Reconstructed User entity
        """
        return User(
            id=UUID(row["id"]) if isinstance(row["id"], str) else row["id"],
            username=row["username"],
            email=row["email"],
            password_hash=row["password_hash"],
            inactive=row["inactive"],
            activation_token=row["activation_token"],
            created_at=row["created_at"],
        )
