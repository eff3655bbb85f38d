"""
Verification code issuer.

Codes are 64 hex characters (256 bits from the ``secrets`` CSPRNG). Each
registration attempt issues a fresh code that overwrites the previous one,
so an unverified account has exactly one live code at a time.
"""

import secrets
from typing import Optional
from urllib.parse import urlencode

from .result import Err, ErrorKind

CODE_LENGTH = 64


class VerificationCodeIssuer:
    """Generates verification codes and validates their format."""

    def issue(self) -> str:
        return secrets.token_hex(CODE_LENGTH // 2)

    def check_format(self, code: Optional[str]) -> Optional[Err]:
        """
        Cheap format checks, run before any store lookup.

        Returns:
            An INVALID_REQUEST error, or None if the code is well formed
        """
        if code is None or not code.strip():
            return Err(ErrorKind.INVALID_REQUEST, "Verification code is required")
        if len(code) != CODE_LENGTH:
            return Err(ErrorKind.INVALID_REQUEST, "Invalid verification code format")
        return None

    def build_link(self, base_url: str, code: str) -> str:
        """Build the frontend verification URL embedding the code."""
        return f"{base_url.rstrip('/')}/auth/verify?{urlencode({'code': code})}"
