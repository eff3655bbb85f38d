"""
Domain layer - Pure business logic with zero framework imports.

This package contains the authentication core: the account verification
state machine, credential validation and session token flows. It defines
its own port interfaces for infrastructure abstraction, ensuring true
hexagonal architecture decoupling.
"""

from .authentication import AuthenticationService
from .exceptions import DeliveryFailed, DuplicateEmail, InvalidToken, VerigateError
from .models import Identity, PublicUser, Role, UserAccount, VerificationState
from .passwords import PasswordHasher
from .ports import EmailSender, TokenCodec, UserRepository
from .registration import RegistrationService
from .result import Err, ErrorKind, Ok, Result
from .verification import CODE_LENGTH, VerificationCodeIssuer

__all__ = [
    "CODE_LENGTH",
    "AuthenticationService",
    "DeliveryFailed",
    "DuplicateEmail",
    "EmailSender",
    "Err",
    "ErrorKind",
    "Identity",
    "InvalidToken",
    "Ok",
    "PasswordHasher",
    "PublicUser",
    "RegistrationService",
    "Result",
    "Role",
    "TokenCodec",
    "UserAccount",
    "UserRepository",
    "VerificationCodeIssuer",
    "VerificationState",
    "VerigateError",
]
