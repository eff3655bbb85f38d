"""
Registration domain service - account creation and email verification.

Registration Flow
=================

1. Normalize the email and look it up
2. Verified account holds the email -> ACCOUNT_EXISTS (no mutation)
3. Upsert an unverified account with a new hash and a fresh code
4. Dispatch the verification link (best effort, failures are logged only)
5. Return the public projection, never the hash or the code

Verify Flow
===========

Format checks (empty, wrong length) run before any store lookup. A code
that matches no account is NOT_FOUND. Otherwise the account's
VerificationState decides: UNVERIFIED transitions once to VERIFIED,
VERIFIED is an idempotent self-loop that writes nothing.

Unexpected failures (store down, hashing error) are logged with their
traceback and returned as INTERNAL with a generic message.
"""

import logging
from dataclasses import dataclass, field

from .exceptions import DuplicateEmail
from .models import (
    PublicUser,
    RegistrationReceipt,
    UserAccount,
    VerificationOutcome,
    VerificationState,
)
from .passwords import PasswordHasher
from .ports import EmailSender, UserRepository
from .result import Err, ErrorKind, Ok, Result
from .verification import VerificationCodeIssuer

logger = logging.getLogger(__name__)

REGISTERED_MESSAGE = "Registration successful! Please check your email to verify your account."
VERIFIED_MESSAGE = "Email verified successfully! You can now log in."
ALREADY_VERIFIED_MESSAGE = "Email already verified. You can now log in."


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


@dataclass
class RegistrationService:
    """
    Domain service for user registration and email verification.

    Orchestrates lookup, password hashing, code issuance, upsert
    persistence and verification email dispatch.
    """

    repository: UserRepository
    email_sender: EmailSender
    hasher: PasswordHasher
    frontend_url: str
    codes: VerificationCodeIssuer = field(default_factory=VerificationCodeIssuer)

    def register(self, name: str, email: str, password: str) -> Result[RegistrationReceipt]:
        """
        Register a user, or refresh a pending unverified registration.

        The password length bounds are a precondition enforced by the caller.

        Args:
            name: Display name
            email: User's email address (will be normalized)
            password: User's plaintext password (will be hashed)

        Returns:
            Ok(RegistrationReceipt) or Err(ACCOUNT_EXISTS | INTERNAL)
        """
        normalized_email = normalize_email(email)
        try:
            existing = self.repository.find_by_email(normalized_email)
            if existing is not None and existing.verified:
                return Err(ErrorKind.ACCOUNT_EXISTS, "User already exists")

            password_hash = self.hasher.hash(password)
            code = self.codes.issue()
            try:
                account = self.repository.upsert_unverified(
                    name, normalized_email, password_hash, code
                )
            except DuplicateEmail:
                # Lost a race against a concurrent verification
                return Err(ErrorKind.ACCOUNT_EXISTS, "User already exists")

            self._notify(account)
        except Exception:
            logger.exception("Error during user registration for %s", normalized_email)
            return Err(
                ErrorKind.INTERNAL,
                "An error occurred during registration. Please try again later.",
            )

        return Ok(RegistrationReceipt(user=PublicUser.from_account(account), message=REGISTERED_MESSAGE))

    def verify_email(self, code: str) -> Result[VerificationOutcome]:
        """
        Consume a verification code.

        Args:
            code: 64-character verification code from the emailed link

        Returns:
            Ok(VerificationOutcome) or Err(INVALID_REQUEST | NOT_FOUND | INTERNAL)
        """
        format_error = self.codes.check_format(code)
        if format_error is not None:
            return format_error

        try:
            account = self.repository.find_by_verification_code(code)
            if account is None:
                return Err(
                    ErrorKind.NOT_FOUND,
                    "Invalid or expired verification code. "
                    "Please request a new verification email.",
                )

            _, changed = VerificationState.of(account).transition()
            if not changed:
                return Ok(self._outcome(account, already_verified=True))

            updated = self.repository.mark_verified(account.id, code)
            if updated is None:
                # Either a concurrent request consumed this code first, or a
                # repeat registration replaced it after the lookup
                current = self.repository.find_by_id(account.id)
                if current is None or not current.verified or current.consumed_code != code:
                    return Err(
                        ErrorKind.NOT_FOUND,
                        "Invalid or expired verification code. "
                        "Please request a new verification email.",
                    )
                return Ok(self._outcome(current, already_verified=True))
        except Exception:
            logger.exception("Error during email verification")
            return Err(
                ErrorKind.INTERNAL,
                "An error occurred during email verification. Please try again later.",
            )

        logger.info("Account %s verified", updated.id)
        return Ok(self._outcome(updated, already_verified=False))

    def _notify(self, account: UserAccount) -> None:
        """Send the verification link. Delivery failure never fails registration."""
        link = self.codes.build_link(self.frontend_url, account.verification_code)
        try:
            self.email_sender.send_verification_email(account.email, account.name, link)
        except Exception:
            logger.warning(
                "Failed to send verification email to %s", account.email, exc_info=True
            )

    def _outcome(self, account: UserAccount, already_verified: bool) -> VerificationOutcome:
        return VerificationOutcome(
            user=PublicUser.from_account(account),
            message=ALREADY_VERIFIED_MESSAGE if already_verified else VERIFIED_MESSAGE,
            already_verified=already_verified,
        )
