"""
Pytest configuration and shared fixtures.

This file provides common configuration for all tests.
"""

import os

# Set test environment variables
# Use .setdefault() to respect values already set by docker-compose or other sources
os.environ.setdefault("DATABASE_HOST", "localhost")
os.environ.setdefault("DATABASE_PORT", "5432")
os.environ.setdefault("DATABASE_NAME", "test_user_signup")
os.environ.setdefault("DATABASE_USER", "postgres")
os.environ.setdefault("DATABASE_PASSWORD", "postgres")
os.environ.setdefault("SMTP_HOST", "localhost")
os.environ.setdefault("SMTP_PORT", "1025")
os.environ.setdefault("LOG_LEVEL", "ERROR")

# Keep test output quiet by default
os.environ.setdefault("ENABLE_REQUEST_LOGGING", "false")
