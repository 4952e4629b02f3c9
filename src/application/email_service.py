"""
Email service interface (Port).

Defines the contract for sending emails.
The infrastructure layer will provide the adapter implementation.
"""

from abc import ABC, abstractmethod


class EmailDeliveryError(Exception):
    """Raised when the outbound mail transport rejects or fails to send a message."""

    def __init__(self, email: str, reason: str):
        self.email = email
        self.reason = reason
        super().__init__(f"Failed to send activation email to '{email}': {reason}")


class EmailService(ABC):
    """
    Abstract interface for email sending.

    This is a "port" in Hexagonal Architecture.
    The infrastructure layer provides the concrete adapter.

    Sending is synchronous from the caller's point of view: the registration
    flow needs to know whether the message went out before it answers.
    """

    @abstractmethod
    async def send_activation_token(self, email: str, token: str) -> None:
        """
        Send an activation token to a user's email.

        A single attempt is made; there is no retry.

        Args:
            email: Recipient's email address
            token: The activation token to send

        Raises:
            EmailDeliveryError: If sending fails
        """
        pass
