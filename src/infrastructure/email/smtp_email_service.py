"""
SMTP Email Service implementation.

Sends activation emails via SMTP with aiosmtplib. For local development we
use Mailhog (SMTP testing server with web UI on port 8025).
"""

import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path

import aiosmtplib
from jinja2 import Environment, FileSystemLoader

from src.application.email_service import EmailDeliveryError, EmailService

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"


class SmtpEmailService(EmailService):
    """
    Email service that sends emails via SMTP.

    Each call opens its own connection and makes exactly one delivery
    attempt. Any transport failure is reported as EmailDeliveryError.
    """

    SUBJECT = "Account Activation"

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int,
        smtp_username: str | None = None,
        smtp_password: str | None = None,
        from_email: str = "My App <info@my-app.com>",
        use_tls: bool = False,
        timeout: float = 10.0,
        activation_url: str = "http://localhost:8080/#/login",
    ):
        """
        Initialize the SMTP email service.

        Args:
            smtp_host: SMTP server hostname
            smtp_port: SMTP server port
            smtp_username: SMTP authentication username (optional for Mailhog)
            smtp_password: SMTP authentication password (optional for Mailhog)
            from_email: Sender email address
            use_tls: Connect with implicit TLS
            timeout: Connection and command timeout in seconds
            activation_url: Front end page the email links to, the token is
                appended as a query parameter
        """
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username
        self.smtp_password = smtp_password
        self.from_email = from_email
        self.use_tls = use_tls
        self.timeout = timeout
        self.activation_url = activation_url

        self.jinja_env = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            autoescape=True,
        )

        logger.info(
            f"SMTP Email Service initialized: {smtp_host}:{smtp_port} "
            f"(auth: {'yes' if smtp_username else 'no'})"
        )

    def build_message(self, email: str, token: str) -> MIMEMultipart:
        """
        Build the activation email.

        Args:
            email: Recipient email
            token: Activation token

        Returns:
            A multipart message with plain text and HTML alternatives
        """
        message = MIMEMultipart("alternative")
        message["Subject"] = self.SUBJECT
        message["From"] = self.from_email
        message["To"] = email

        context = {"token": token, "activation_url": self.activation_url}

        text_content = self.jinja_env.get_template("activation_token.txt").render(context)
        html_content = self.jinja_env.get_template("activation_token.html").render(context)

        # Plain text first, clients pick the last alternative they support
        message.attach(MIMEText(text_content, "plain", _charset="utf-8"))
        message.attach(MIMEText(html_content, "html", _charset="utf-8"))

        return message

    async def send_activation_token(self, email: str, token: str) -> None:
        """
        Send the activation token to the user's email via SMTP.

        Args:
            email: Recipient email
            token: Activation token

        Raises:
            EmailDeliveryError: If the SMTP server cannot be reached or rejects the message
        """
        message = self.build_message(email, token)

        try:
            logger.info(f"Sending activation email to {email} via SMTP")

            async with aiosmtplib.SMTP(
                hostname=self.smtp_host,
                port=self.smtp_port,
                use_tls=self.use_tls,
                timeout=self.timeout,
            ) as smtp:
                if self.smtp_username and self.smtp_password:
                    await smtp.login(self.smtp_username, self.smtp_password)

                await smtp.send_message(message)

            logger.info(f"Activation email sent to {email}")

        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {email}: {e}")
            raise EmailDeliveryError(email, str(e)) from e
