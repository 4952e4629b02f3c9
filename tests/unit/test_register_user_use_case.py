"""
Unit tests for RegisterUser use case.

Tests the orchestration logic for user registration.
Uses mocks for dependencies to isolate the use case.
"""

import logging
from unittest.mock import AsyncMock

import bcrypt
import pytest

from src.application.email_service import EmailDeliveryError
from src.application.register_user import RegisterUserUseCase
from src.domain.exceptions import UserAlreadyExistsError


class TestRegisterUserUseCase:
    """Test RegisterUser use case."""

    @pytest.fixture
    def mock_repository(self) -> AsyncMock:
        """Create a mock user repository."""
        repository = AsyncMock()
        repository.save = AsyncMock()
        repository.delete = AsyncMock()
        repository.find_by_email = AsyncMock(return_value=None)
        return repository

    @pytest.fixture
    def mock_email_service(self) -> AsyncMock:
        """Create a mock email service."""
        email_service = AsyncMock()
        email_service.send_activation_token = AsyncMock()
        return email_service

    @pytest.fixture
    def use_case(
        self, mock_repository: AsyncMock, mock_email_service: AsyncMock
    ) -> RegisterUserUseCase:
        """Create a RegisterUserUseCase with mocked dependencies."""
        return RegisterUserUseCase(mock_repository, mock_email_service)

    async def test_register_user_success(
        self,
        use_case: RegisterUserUseCase,
        mock_repository: AsyncMock,
        mock_email_service: AsyncMock,
    ) -> None:
        """Test successful user registration."""
        user = await use_case.execute("user1", "user1@example.com", "Pass1234")

        assert user.username == "user1"
        assert user.email == "user1@example.com"
        assert user.inactive is True
        assert user.activation_token
        assert bcrypt.checkpw(b"Pass1234", user.password_hash.encode("utf-8"))

        mock_repository.save.assert_called_once_with(user)
        mock_email_service.send_activation_token.assert_called_once_with(
            "user1@example.com", user.activation_token
        )
        mock_repository.delete.assert_not_called()

    async def test_user_is_saved_before_email_is_sent(
        self,
        use_case: RegisterUserUseCase,
        mock_repository: AsyncMock,
        mock_email_service: AsyncMock,
    ) -> None:
        """Test the persist-then-send order."""
        calls = []
        mock_repository.save.side_effect = lambda user: calls.append("save")
        mock_email_service.send_activation_token.side_effect = lambda email, token: calls.append(
            "send"
        )

        await use_case.execute("user1", "user1@example.com", "Pass1234")

        assert calls == ["save", "send"]

    async def test_email_failure_rolls_back_user(
        self,
        use_case: RegisterUserUseCase,
        mock_repository: AsyncMock,
        mock_email_service: AsyncMock,
    ) -> None:
        """Test that the saved user is deleted when the email cannot be sent."""
        mock_email_service.send_activation_token.side_effect = EmailDeliveryError(
            "user1@example.com", "Connection refused"
        )

        with pytest.raises(EmailDeliveryError):
            await use_case.execute("user1", "user1@example.com", "Pass1234")

        saved_user = mock_repository.save.call_args.args[0]
        mock_repository.delete.assert_called_once_with(saved_user.id)

    async def test_failed_rollback_still_reports_email_failure(
        self,
        use_case: RegisterUserUseCase,
        mock_repository: AsyncMock,
        mock_email_service: AsyncMock,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test that a delete error during rollback does not hide the email error."""
        mock_email_service.send_activation_token.side_effect = EmailDeliveryError(
            "user1@example.com", "Connection refused"
        )
        mock_repository.delete.side_effect = RuntimeError("connection reset")

        with caplog.at_level(logging.ERROR, logger="src.application.register_user"):
            with pytest.raises(EmailDeliveryError):
                await use_case.execute("user1", "user1@example.com", "Pass1234")

        mock_repository.delete.assert_called_once()
        assert "Rollback of user" in caplog.text

    async def test_email_is_sent_with_stored_token(
        self,
        use_case: RegisterUserUseCase,
        mock_repository: AsyncMock,
        mock_email_service: AsyncMock,
    ) -> None:
        await use_case.execute("user1", "user1@example.com", "Pass1234")

        saved_user = mock_repository.save.call_args.args[0]
        sent_token = mock_email_service.send_activation_token.call_args.args[1]
        assert sent_token == saved_user.activation_token

    async def test_duplicate_email_on_save_sends_no_email(
        self,
        use_case: RegisterUserUseCase,
        mock_repository: AsyncMock,
        mock_email_service: AsyncMock,
    ) -> None:
        """Test that a unique violation stops the flow before the email."""
        mock_repository.save.side_effect = UserAlreadyExistsError("user1@example.com")

        with pytest.raises(UserAlreadyExistsError):
            await use_case.execute("user1", "user1@example.com", "Pass1234")

        mock_email_service.send_activation_token.assert_not_called()
        mock_repository.delete.assert_not_called()

    async def test_uses_configured_bcrypt_rounds(
        self, mock_repository: AsyncMock, mock_email_service: AsyncMock
    ) -> None:
        """Test that the cost factor is passed to hashing."""
        use_case = RegisterUserUseCase(mock_repository, mock_email_service, bcrypt_rounds=4)

        user = await use_case.execute("user1", "user1@example.com", "Pass1234")

        assert user.password_hash.startswith("$2b$04$")

    async def test_find_by_email_delegates_to_repository(
        self, use_case: RegisterUserUseCase, mock_repository: AsyncMock
    ) -> None:
        """Test the lookup used by validation."""
        result = await use_case.find_by_email("user1@example.com")

        assert result is None
        mock_repository.find_by_email.assert_called_once_with("user1@example.com")
