"""
Application configuration settings.

Centralized configuration using Pydantic Settings for type safety and validation.
Every value can be overridden with an environment variable of the same name
(case-insensitive) or through a local .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "user-signup-api"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = False

    # Database
    database_host: str = "localhost"
    database_port: int = 5432
    database_name: str = "user_signup"
    database_user: str = "postgres"
    database_password: str = "postgres"
    database_min_connections: int = 1
    database_max_connections: int = 10

    # Security
    # bcrypt cost factor (2^10 iterations)
    bcrypt_rounds: int = 10

    # Email Service (SMTP)
    smtp_host: str = "mailhog"
    smtp_port: int = 1025
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_from_email: str = "My App <info@my-app.com>"
    smtp_use_tls: bool = False
    smtp_timeout_seconds: float = 10.0
    activation_url: str = "http://localhost:8080/#/login"

    # Localization
    default_locale: str = "en"
    supported_locales: list[str] = ["en", "ru"]

    # Feature Flags
    enable_request_logging: bool = True


# Global settings instance
settings = Settings()
