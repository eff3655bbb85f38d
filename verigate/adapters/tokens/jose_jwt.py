"""
JWT token codec adapter - Implements TokenCodec protocol.

Signs ``{sub, iat, exp}`` with a symmetric secret using python-jose.
Nothing is stored server-side: validity is the signature plus the exp claim.
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from verigate.domain.exceptions import InvalidToken


class JoseTokenCodec:
    """
    Implements TokenCodec protocol via python-jose.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expires_seconds: int = 3600) -> None:
        if not secret:
            raise ValueError("JWT signing secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._expires = timedelta(seconds=expires_seconds)

    def encode(self, subject: str) -> str:
        """
        Create a signed access token.

        Args:
            subject: Account id to assert in the ``sub`` claim

        Returns:
            str: Encoded JWT token
        """
        now = datetime.now(timezone.utc)
        payload = {
            "sub": subject,
            "iat": now,
            "exp": now + self._expires,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> dict:
        """
        Decode and verify a JWT token.

        Raises:
            InvalidToken: If token is invalid or expired
        """
        try:
            return jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as exc:
            raise InvalidToken(str(exc)) from exc
