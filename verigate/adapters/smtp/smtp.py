"""
SMTP email sender adapter - Implements EmailSender protocol.

Delivers the verification link over SMTP with a bounded socket timeout.
Any transport error is raised as DeliveryFailed; the registration flow
decides to absorb it.
"""

import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from verigate.domain.exceptions import DeliveryFailed

logger = logging.getLogger(__name__)

SUBJECT = "Verify Your Email Address"


def build_verification_message(sender: str, email: str, name: str, link: str) -> EmailMessage:
    message = EmailMessage()
    message["Subject"] = SUBJECT
    message["From"] = sender
    message["To"] = email
    message.set_content(
        f"Hi {name},\n\n"
        "Thank you for registering! To activate your account, verify your "
        "email address by opening the link below:\n\n"
        f"{link}\n\n"
        "If you didn't create an account, you can ignore this email.\n"
    )
    return message


class SmtpEmailSender:
    """
    Implements EmailSender protocol via smtplib.

    Uses structural subtyping - no explicit inheritance from Protocol.
    A new connection is opened per message; no state is shared across requests.
    """

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout

    def send_verification_email(self, email: str, name: str, link: str) -> None:
        """
        Send the verification message.

        Raises:
            DeliveryFailed: On connection, authentication or send errors
        """
        message = build_verification_message(self._sender, email, name, link)
        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as client:
                if self._use_tls:
                    client.starttls()
                if self._username:
                    client.login(self._username, self._password or "")
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryFailed(f"Failed to send verification email to {email}") from e

        logger.info("Verification email sent to %s", email)
