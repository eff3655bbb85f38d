"""
Domain exceptions - Error types raised by infrastructure ports.

Business rule violations are returned as ``Err`` results (see result.py).
These exceptions are the narrow contract adapters use to report
conditions the domain has to translate.
"""


class VerigateError(Exception):
    """Base class for errors raised through domain ports."""

    pass


class DuplicateEmail(VerigateError):
    """Email is already held by a verified account (uniqueness constraint)."""

    pass


class InvalidToken(VerigateError):
    """Bearer token has a bad signature, is malformed, or has expired."""

    pass


class DeliveryFailed(VerigateError):
    """Outbound verification message could not be delivered."""

    pass
