"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from typing import Optional, Protocol

from .models import UserAccount


class UserRepository(Protocol):
    """Port interface for account persistence."""

    def find_by_email(self, email: str) -> Optional[UserAccount]:
        """Return the account holding a normalized email, if any."""
        ...

    def find_by_id(self, user_id: str) -> Optional[UserAccount]:
        """Return the account with this id. Malformed ids return None."""
        ...

    def find_by_verification_code(self, code: str) -> Optional[UserAccount]:
        """
        Return the account a verification code was issued to.

        Matches the live code of an unverified account, or the consumed
        code of an account it already verified. An empty code never matches.
        """
        ...

    def upsert_unverified(
        self, name: str, email: str, password_hash: str, code: str
    ) -> UserAccount:
        """
        Atomically create or overwrite an unverified account.

        An existing unverified row for the email is overwritten in place
        (name, password hash, code). A verified row is never touched.

        Args:
            name: Display name
            email: Normalized email address
            password_hash: bcrypt hashed password
            code: Freshly issued 64-character verification code

        Returns:
            The stored account

        Raises:
            DuplicateEmail: If a verified account holds the email
        """
        ...

    def mark_verified(self, user_id: str, code: str) -> Optional[UserAccount]:
        """
        Transition an unverified account to verified and consume its code.

        Conditional on the account still being unverified and on ``code`` still
        being its live code, so concurrent verifications perform the transition
        exactly once and a code replaced by a repeat registration never verifies.

        Returns:
            The updated account, or None if no unverified account was updated
        """
        ...

    def delete(self, user_id: str) -> bool:
        """Remove an account. Returns True if a row was deleted."""
        ...


class EmailSender(Protocol):
    """Port interface for verification message delivery."""

    def send_verification_email(self, email: str, name: str, link: str) -> None:
        """
        Deliver a verification message containing the verification link.

        Args:
            email: Recipient email address
            name: Recipient display name
            link: Verification URL embedding the code

        Raises:
            DeliveryFailed: If the transport rejects or times out
        """
        ...


class TokenCodec(Protocol):
    """Port interface for signing and verifying bearer tokens."""

    def encode(self, subject: str) -> str:
        """Mint a signed token asserting ``sub=subject`` with iat/exp claims."""
        ...

    def decode(self, token: str) -> dict:
        """
        Verify signature and expiry and return the claims.

        Raises:
            InvalidToken: If the token is malformed, tampered, or expired
        """
        ...
