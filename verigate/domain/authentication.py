"""
Authentication domain service - credential validation and session tokens.

Sessions are stateless signed tokens. Resolution re-reads the account on
every request, so deleting an account revokes all of its outstanding
tokens without a blacklist.
"""

import logging
from dataclasses import dataclass

from .exceptions import InvalidToken
from .models import Identity, LoginResult
from .passwords import PasswordHasher
from .ports import TokenCodec, UserRepository
from .registration import normalize_email
from .result import Err, ErrorKind, Ok, Result

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
EMAIL_NOT_VERIFIED = (
    "Email not verified. Please check your email and verify your account before logging in."
)


@dataclass
class AuthenticationService:
    """Credential validator, token issuer and session resolver."""

    repository: UserRepository
    hasher: PasswordHasher
    tokens: TokenCodec

    def validate_credentials(self, email: str, password: str) -> Result[Identity]:
        """
        Authenticate an email/password pair.

        Unknown email and wrong password produce the same error so the
        response does not reveal whether an account exists.
        """
        try:
            account = self.repository.find_by_email(normalize_email(email))
        except Exception:
            logger.exception("Error looking up account during login")
            return Err(ErrorKind.INTERNAL, "An error occurred during login. Please try again later.")

        if account is None:
            self.hasher.verify_dummy(password)
            return Err(ErrorKind.UNAUTHORIZED, INVALID_CREDENTIALS)

        if not account.verified:
            return Err(ErrorKind.UNAUTHORIZED, EMAIL_NOT_VERIFIED)

        if not self.hasher.verify(password, account.password_hash):
            return Err(ErrorKind.UNAUTHORIZED, INVALID_CREDENTIALS)

        return Ok(Identity.from_account(account))

    def issue_token(self, identity: Identity) -> str:
        """Mint a signed, time-bound bearer token for the identity."""
        token = self.tokens.encode(identity.id)
        logger.info("Issued session token for account %s", identity.id)
        return token

    def login(self, email: str, password: str) -> Result[LoginResult]:
        """Validate credentials and, on success, mint a session token."""
        result = self.validate_credentials(email, password)
        if isinstance(result, Err):
            return result
        identity = result.value
        return Ok(LoginResult(identity=identity, access_token=self.issue_token(identity)))

    def resolve_session(self, token: str) -> Result[Identity]:
        """
        Recover the identity a bearer token asserts, against live account state.

        Returns:
            Ok(Identity) or Err(UNAUTHORIZED | INTERNAL)
        """
        try:
            claims = self.tokens.decode(token)
        except InvalidToken:
            return Err(ErrorKind.UNAUTHORIZED, "Invalid or expired token")

        subject = claims.get("sub")
        if not subject or not isinstance(subject, str):
            return Err(ErrorKind.UNAUTHORIZED, "Invalid token payload")

        try:
            account = self.repository.find_by_id(subject)
        except Exception:
            logger.exception("Error resolving session for account %s", subject)
            return Err(ErrorKind.INTERNAL, "An error occurred. Please try again later.")

        if account is None:
            return Err(ErrorKind.UNAUTHORIZED, "Invalid token - user not found")

        return Ok(Identity.from_account(account))
