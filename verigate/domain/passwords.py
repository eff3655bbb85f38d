"""
Password hashing - one-way bcrypt transform with constant-time comparison.
"""

from dataclasses import dataclass, field

import bcrypt

# bcrypt only looks at the first 72 bytes of input
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


@dataclass(frozen=True)
class PasswordHasher:
    """
    bcrypt password hasher.

    ``verify_dummy`` runs a full bcrypt comparison against a throwaway hash
    so that a lookup miss costs the same as a password mismatch.
    """

    cost: int = 10
    _dummy_hash: bytes = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.cost < 10:
            raise ValueError("bcrypt cost factor must be at least 10")
        dummy = bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(self.cost))
        object.__setattr__(self, "_dummy_hash", dummy)

    def hash(self, password: str) -> str:
        """Hash a plaintext password. The result never equals the input."""
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self.cost)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time check of a plaintext password against a stored hash."""
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode())
        except ValueError:
            # Stored value is not a bcrypt hash
            return False

    def verify_dummy(self, password: str) -> None:
        bcrypt.checkpw(_encode(password), self._dummy_hash)
