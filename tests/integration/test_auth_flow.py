"""
Integration tests for the full authentication flow.

Tests register -> verify -> login -> protected through the API with a real
database. Requires PostgreSQL to be running (DATABASE_URL).
"""

import logging
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from psycopg_pool import ConnectionPool

from verigate.adapters.repository.postgres import PostgresUserRepository
from verigate.api.dependencies import get_password_hasher
from verigate.api.main import app
from verigate.domain.passwords import PasswordHasher

pytestmark = pytest.mark.integration


@pytest.fixture
def client(pool: ConnectionPool, hasher: PasswordHasher) -> Generator[TestClient, None, None]:
    """Create test client with real database connection and the console sender."""
    app.state.pool = pool
    app.state.repository = PostgresUserRepository(pool)
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client: TestClient, email: str = "flow@example.com", password: str = "secret1"):
    return client.post(
        "/v1/auth/register", json={"name": "Flo", "email": email, "password": password}
    )


def code_from_logs(caplog: pytest.LogCaptureFixture) -> str:
    lines = [r.message for r in caplog.records if "[VERIFICATION]" in r.message]
    return lines[-1].rsplit("code=", 1)[1]


class TestAuthFlow:
    def test_full_flow(self, client: TestClient, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO):
            response = register(client)

        assert response.status_code == 201
        body = response.json()
        assert body["verified"] is False
        assert "password" not in body and "verificationCode" not in body

        code = code_from_logs(caplog)
        assert len(code) == 64

        verified = client.post("/v1/auth/verify", json={"code": code})
        assert verified.status_code == 200
        assert verified.json()["user"]["verified"] is True

        repeat = client.post("/v1/auth/verify", json={"code": code})
        assert repeat.status_code == 200
        assert repeat.json()["message"] == "Email already verified. You can now log in."

        login = client.post(
            "/v1/auth/login", json={"email": "flow@example.com", "password": "secret1"}
        )
        assert login.status_code == 200
        token = login.json()["accessToken"]

        protected = client.get(
            "/v1/auth/protected", headers={"Authorization": f"Bearer {token}"}
        )
        assert protected.status_code == 200

    def test_repeat_registration_replaces_code(
        self, client: TestClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO):
            first = register(client)
            first_code = code_from_logs(caplog)
            second = register(client, password="secret2")
            second_code = code_from_logs(caplog)

        assert first.json()["id"] == second.json()["id"]
        assert client.post("/v1/auth/verify", json={"code": first_code}).status_code == 404
        assert client.post("/v1/auth/verify", json={"code": second_code}).status_code == 200

    def test_verified_email_cannot_register_again(
        self, client: TestClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO):
            register(client)
        client.post("/v1/auth/verify", json={"code": code_from_logs(caplog)})

        assert register(client, password="takeover1").status_code == 409

    def test_deleted_account_token_revoked(
        self, client: TestClient, pool: ConnectionPool, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO):
            register(client)
        client.post("/v1/auth/verify", json={"code": code_from_logs(caplog)})
        login = client.post(
            "/v1/auth/login", json={"email": "flow@example.com", "password": "secret1"}
        )
        token = login.json()["accessToken"]

        with pool.connection() as conn:
            conn.execute("DELETE FROM users WHERE email = %s", ("flow@example.com",))
            conn.commit()

        response = client.get("/v1/auth/protected", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json() == {"detail": "Invalid token - user not found"}

    def test_health(self, client: TestClient) -> None:
        assert client.get("/health").json() == {"status": "healthy"}
