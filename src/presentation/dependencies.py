"""
FastAPI dependency injection.

This module wires together our layers (domain, application, infrastructure).
Tests swap any of these out with app.dependency_overrides.
"""

import logging
from functools import lru_cache
from typing import Annotated

from config.settings import settings
from fastapi import Depends, Request

from src.application.activate_user import ActivateUserUseCase
from src.application.email_service import EmailService
from src.application.register_user import RegisterUserUseCase
from src.domain.user_repository import UserRepository
from src.infrastructure.database.connection import DatabaseConnection
from src.infrastructure.database.postgres_user_repository import PostgresUserRepository
from src.infrastructure.email.smtp_email_service import SmtpEmailService
from src.infrastructure.i18n.catalog import MessageCatalog
from src.presentation.validation import UserValidator

logger = logging.getLogger(__name__)


@lru_cache
def get_database_connection() -> DatabaseConnection:
    """
    Get database connection instance (singleton).

    A single connection pool is shared across the application.

    Returns:
        DatabaseConnection instance
    """
    logger.info(f"Creating database connection to host: {settings.database_host}")
    return DatabaseConnection(
        host=settings.database_host,
        port=settings.database_port,
        database=settings.database_name,
        user=settings.database_user,
        password=settings.database_password,
        min_connections=settings.database_min_connections,
        max_connections=settings.database_max_connections,
    )


@lru_cache
def get_message_catalog() -> MessageCatalog:
    """Get the message catalog (loaded once)."""
    return MessageCatalog.load(
        locales=settings.supported_locales,
        default_locale=settings.default_locale,
    )


@lru_cache
def get_email_service() -> EmailService:
    """
    Get the SMTP email service (singleton).

    Returns:
        SmtpEmailService configured from settings
    """
    return SmtpEmailService(
        smtp_host=settings.smtp_host,
        smtp_port=settings.smtp_port,
        smtp_username=settings.smtp_username,
        smtp_password=settings.smtp_password,
        from_email=settings.smtp_from_email,
        use_tls=settings.smtp_use_tls,
        timeout=settings.smtp_timeout_seconds,
        activation_url=settings.activation_url,
    )


def get_user_repository(
    db: Annotated[DatabaseConnection, Depends(get_database_connection)],
) -> UserRepository:
    """
    Get user repository instance.

    Args:
        db: Database connection (injected)

    Returns:
        PostgresUserRepository instance
    """
    return PostgresUserRepository(db)


def get_register_user_use_case(
    repository: Annotated[UserRepository, Depends(get_user_repository)],
    email_service: Annotated[EmailService, Depends(get_email_service)],
) -> RegisterUserUseCase:
    """
    Get RegisterUser use case with dependencies injected.

    Args:
        repository: User repository (injected)
        email_service: Outbound mail adapter (injected)

    Returns:
        RegisterUserUseCase instance
    """
    return RegisterUserUseCase(repository, email_service, bcrypt_rounds=settings.bcrypt_rounds)


def get_activate_user_use_case(
    repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> ActivateUserUseCase:
    """
    Get ActivateUser use case with dependencies injected.

    Args:
        repository: User repository (injected)

    Returns:
        ActivateUserUseCase instance
    """
    return ActivateUserUseCase(repository)


def get_user_validator(
    use_case: Annotated[RegisterUserUseCase, Depends(get_register_user_use_case)],
) -> UserValidator:
    """Get the signup validator, sharing the request's registration use case."""
    return UserValidator(use_case)


def get_locale(
    request: Request,
    catalog: Annotated[MessageCatalog, Depends(get_message_catalog)],
) -> str:
    """Resolve the response locale from the Accept-Language header."""
    return catalog.resolve_locale(request.headers.get("Accept-Language"))
