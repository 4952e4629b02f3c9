"""
Database connection management.

Handles PostgreSQL connection pooling and lifecycle using asyncpg.
Queries are raw SQL with PostgreSQL's native $1, $2 placeholders.
"""

import logging
from typing import Any

import asyncpg

logger = logging.getLogger(__name__)


USERS_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id UUID PRIMARY KEY,
    username VARCHAR(32) NOT NULL,
    email VARCHAR(255) UNIQUE NOT NULL,
    password_hash VARCHAR(255) NOT NULL,
    inactive BOOLEAN NOT NULL DEFAULT TRUE,
    activation_token VARCHAR(16),
    created_at TIMESTAMPTZ NOT NULL,
    CONSTRAINT users_token_matches_state CHECK (inactive = (activation_token IS NOT NULL))
);

CREATE INDEX IF NOT EXISTS idx_users_activation_token ON users(activation_token);
"""


class DatabaseConnection:
    """
    Manages PostgreSQL database connections using an asyncpg connection pool.

    One instance is shared by the whole application; it is opened in the
    FastAPI lifespan and closed on shutdown.
    """

    def __init__(
        self,
        host: str,
        port: int,
        database: str,
        user: str,
        password: str,
        min_connections: int = 1,
        max_connections: int = 10,
    ):
        """
        Initialize database connection parameters.

        Args:
            host: Database host
            port: Database port
            database: Database name
            user: Database user
            password: Database password
            min_connections: Minimum connections in pool
            max_connections: Maximum connections in pool
        """
        self.connection_params = {
            "host": host,
            "port": port,
            "database": database,
            "user": user,
            "password": password,
        }
        self.min_connections = min_connections
        self.max_connections = max_connections
        self._pool: asyncpg.Pool | None = None

    @property
    def is_connected(self) -> bool:
        """Whether the pool has been created."""
        return self._pool is not None

    async def connect(self) -> None:
        """
        Initialize the connection pool.

        Should be called on application startup.
        """
        try:
            self._pool = await asyncpg.create_pool(
                **self.connection_params,
                min_size=self.min_connections,
                max_size=self.max_connections,
                command_timeout=60,
            )
            logger.info(
                f"asyncpg connection pool initialized "
                f"(min={self.min_connections}, max={self.max_connections})"
            )
        except Exception as e:
            logger.error(f"Failed to initialize database connection pool: {e}")
            raise

    async def disconnect(self) -> None:
        """
        Close all connections in the pool.

        Should be called on application shutdown.
        """
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("Database connection pool closed")

    async def execute(
        self,
        query: str,
        *args: Any,
        fetch: bool = False,
        fetchone: bool = False,
    ) -> list | dict | None:
        """
        Execute a SQL query.

        Args:
            query: SQL query to execute (use $1, $2, $3 for parameters)
            *args: Query parameters (passed positionally)
            fetch: Whether to fetch all results
            fetchone: Whether to fetch single result

        Returns:
            Query results if fetch=True/fetchone=True, None otherwise

        Example:
            user = await db.execute(
                "SELECT * FROM users WHERE activation_token = $1",
                token,
                fetchone=True
            )
        """
        if not self._pool:
            raise RuntimeError("Connection pool not initialized. Call connect() first.")

        async with self._pool.acquire() as conn:
            try:
                if fetchone:
                    row = await conn.fetchrow(query, *args)
                    return dict(row) if row else None
                elif fetch:
                    rows = await conn.fetch(query, *args)
                    return [dict(row) for row in rows]
                else:
                    await conn.execute(query, *args)
                    return None
            except asyncpg.exceptions.UniqueViolationError:
                # Expected on concurrent signups, the repository translates it
                raise
            except Exception as e:
                logger.error(f"Database query failed: {e}\nQuery: {query}")
                raise

    async def init_schema(self) -> None:
        """
        Initialize database schema.

        Creates the users table if it doesn't exist.
        Should be called on application startup.
        """
        try:
            await self.execute(USERS_SCHEMA)
            logger.info("Database schema initialized")
        except asyncpg.exceptions.UniqueViolationError as e:
            # Another worker created the table at the same time
            logger.warning(f"Schema already exists (concurrent worker): {e}")
        except Exception as e:
            logger.error(f"Failed to initialize database schema: {e}")
            raise
