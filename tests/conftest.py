"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory repository and domain services
- Token codec bound to a test secret
- Helpers to seed accounts in a given verification state
"""

import os

# Settings require a signing secret; tests never read one from the real environment
os.environ.setdefault("JWT_SECRET", "test-signing-secret-do-not-use-in-production")

from unittest.mock import Mock  # noqa: E402

import pytest  # noqa: E402

from verigate.adapters.repository.memory import InMemoryUserRepository  # noqa: E402
from verigate.adapters.tokens.jose_jwt import JoseTokenCodec  # noqa: E402
from verigate.domain.authentication import AuthenticationService  # noqa: E402
from verigate.domain.models import UserAccount  # noqa: E402
from verigate.domain.passwords import PasswordHasher  # noqa: E402
from verigate.domain.registration import RegistrationService  # noqa: E402

TEST_SECRET = "unit-test-secret"
FRONTEND_URL = "http://frontend.test"


@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    """bcrypt hasher at the minimum allowed cost."""
    return PasswordHasher(cost=10)


@pytest.fixture
def repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def email_sender() -> Mock:
    return Mock()


@pytest.fixture
def codec() -> JoseTokenCodec:
    return JoseTokenCodec(secret=TEST_SECRET, expires_seconds=3600)


@pytest.fixture
def registration_service(
    repository: InMemoryUserRepository, email_sender: Mock, hasher: PasswordHasher
) -> RegistrationService:
    return RegistrationService(
        repository=repository,
        email_sender=email_sender,
        hasher=hasher,
        frontend_url=FRONTEND_URL,
    )


@pytest.fixture
def auth_service(
    repository: InMemoryUserRepository, hasher: PasswordHasher, codec: JoseTokenCodec
) -> AuthenticationService:
    return AuthenticationService(repository=repository, hasher=hasher, tokens=codec)


@pytest.fixture
def make_account(repository: InMemoryUserRepository, hasher: PasswordHasher):
    """Factory seeding an account, optionally already verified."""

    def create(
        email: str = "user@example.com",
        password: str = "secret123",
        name: str = "Ada",
        verified: bool = False,
        code: str = "a" * 64,
    ) -> UserAccount:
        account = repository.upsert_unverified(name, email, hasher.hash(password), code)
        if verified:
            account = repository.mark_verified(account.id, code)
        return account

    return create
