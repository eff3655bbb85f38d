"""
Domain models - Account record and the projections returned by flows.

Verification State Machine
==========================

States:
- UNVERIFIED: account holds a live verification code
- VERIFIED: code consumed, login allowed

Transitions:
    UNVERIFIED -> VERIFIED   (matching code presented, one time only)
    VERIFIED   -> VERIFIED   (no-op self-loop, stale code re-presented)

No transition returns an account to UNVERIFIED.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Account role. Stored for future authorization, unused by the core."""

    USER = "user"
    ADMIN = "admin"


class AuthType(str, Enum):
    """How the account authenticates. Only email/password is supported."""

    EMAIL = "email"


@dataclass(frozen=True)
class UserAccount:
    """Persisted account record as returned by the repository."""

    id: str
    name: str
    email: str
    password_hash: str
    verified: bool = False
    verification_code: str = ""
    consumed_code: str = ""
    role: Role = Role.USER
    auth_type: AuthType = AuthType.EMAIL
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class VerificationState(str, Enum):
    """Verification lifecycle of a single account."""

    UNVERIFIED = "unverified"
    VERIFIED = "verified"

    @classmethod
    def of(cls, account: UserAccount) -> "VerificationState":
        return cls.VERIFIED if account.verified else cls.UNVERIFIED

    def transition(self) -> tuple["VerificationState", bool]:
        """
        Apply a verification to this state.

        Returns:
            Tuple of (next_state, changed). ``changed`` is False for the
            VERIFIED self-loop, meaning nothing must be written.
        """
        if self is VerificationState.UNVERIFIED:
            return VerificationState.VERIFIED, True
        return VerificationState.VERIFIED, False


@dataclass(frozen=True)
class Identity:
    """Minimal identity handed to the token issuer and protected handlers."""

    id: str
    name: str
    email: str

    @classmethod
    def from_account(cls, account: UserAccount) -> "Identity":
        return cls(id=account.id, name=account.name, email=account.email)


@dataclass(frozen=True)
class PublicUser:
    """Public projection of an account. Never carries the hash or the code."""

    id: str
    name: str
    email: str
    verified: bool

    @classmethod
    def from_account(cls, account: UserAccount) -> "PublicUser":
        return cls(
            id=account.id,
            name=account.name,
            email=account.email,
            verified=account.verified,
        )


@dataclass(frozen=True)
class RegistrationReceipt:
    user: PublicUser
    message: str


@dataclass(frozen=True)
class VerificationOutcome:
    user: PublicUser
    message: str
    already_verified: bool


@dataclass(frozen=True)
class LoginResult:
    identity: Identity
    access_token: str
