"""
Tagged result type for domain flows.

Every service operation returns either ``Ok(value)`` or ``Err(kind, message)``.
Domain failures are values, not exceptions, so callers branch on them
explicitly.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Error taxonomy shared by every flow."""

    ACCOUNT_EXISTS = "account_exists"
    INVALID_REQUEST = "invalid_request"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    INTERNAL = "internal"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T


@dataclass(frozen=True)
class Err:
    """Failed outcome with a kind and a client-safe message."""

    kind: ErrorKind
    message: str


Result = Union[Ok[T], Err]
