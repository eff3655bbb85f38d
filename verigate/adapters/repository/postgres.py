"""
PostgreSQL repository adapter - Implements UserRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Concurrency Design:
-------------------
1. **Upsert**: ``INSERT ... ON CONFLICT (email) DO UPDATE ... WHERE verified = FALSE``
   runs as a single statement. The UNIQUE constraint on email guarantees two
   concurrent registrations can never produce two rows; a conflict with a
   verified row updates nothing and is reported as DuplicateEmail.

2. **Verification**: ``UPDATE ... WHERE verified = FALSE`` makes the
   UNVERIFIED -> VERIFIED transition happen exactly once even when the same
   link is clicked twice at the same time.

No account state is cached; every call reads the committed row.
"""

import logging
import uuid
from pathlib import Path
from typing import Any, Optional

from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from verigate.domain.exceptions import DuplicateEmail
from verigate.domain.models import AuthType, Role, UserAccount

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, name, email, password_hash, verified, verification_code,
    consumed_code, role, auth_type, created_at, updated_at
"""


def _to_account(row: dict[str, Any]) -> UserAccount:
    return UserAccount(
        id=str(row["id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        verified=row["verified"],
        verification_code=row["verification_code"],
        consumed_code=row["consumed_code"],
        role=Role(row["role"]),
        auth_type=AuthType(row["auth_type"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _parse_id(user_id: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(user_id)
    except (TypeError, ValueError):
        return None


class PostgresUserRepository:
    """
    Implements UserRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def _fetch_one(self, sql: str, params: tuple) -> Optional[UserAccount]:
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(sql, params)
            row = cursor.fetchone()
            conn.commit()
        return _to_account(row) if row is not None else None

    def find_by_email(self, email: str) -> Optional[UserAccount]:
        sql = f"SELECT {_COLUMNS} FROM users WHERE email = %s"
        return self._fetch_one(sql, (email,))

    def find_by_id(self, user_id: str) -> Optional[UserAccount]:
        parsed = _parse_id(user_id)
        if parsed is None:
            return None
        sql = f"SELECT {_COLUMNS} FROM users WHERE id = %s"
        return self._fetch_one(sql, (parsed,))

    def find_by_verification_code(self, code: str) -> Optional[UserAccount]:
        """
        Look up an account by its live or consumed verification code.

        The partial indexes exclude empty codes, and an empty code is
        rejected here so it can never match a consumed account.
        """
        if not code:
            return None
        sql = f"""
            SELECT {_COLUMNS} FROM users
            WHERE verification_code = %s OR consumed_code = %s
            ORDER BY verified ASC
            LIMIT 1
        """
        return self._fetch_one(sql, (code, code))

    def upsert_unverified(
        self, name: str, email: str, password_hash: str, code: str
    ) -> UserAccount:
        """
        Atomically create or overwrite an unverified account.

        The WHERE clause on the conflict branch ensures verified rows are
        never overwritten. RETURNING yields no row in that case.

        Raises:
            DuplicateEmail: If a verified account already holds the email
        """
        sql = f"""
            INSERT INTO users (name, email, password_hash, verification_code)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (email) DO UPDATE
            SET name = EXCLUDED.name,
                password_hash = EXCLUDED.password_hash,
                verification_code = EXCLUDED.verification_code,
                updated_at = NOW()
            WHERE users.verified = FALSE
            RETURNING {_COLUMNS}
        """
        account = self._fetch_one(sql, (name, email, password_hash, code))
        if account is None:
            raise DuplicateEmail(email)
        return account

    def mark_verified(self, user_id: str, code: str) -> Optional[UserAccount]:
        parsed = _parse_id(user_id)
        if parsed is None or not code:
            return None
        sql = f"""
            UPDATE users
            SET verified = TRUE,
                consumed_code = verification_code,
                verification_code = '',
                updated_at = NOW()
            WHERE id = %s AND verified = FALSE AND verification_code = %s
            RETURNING {_COLUMNS}
        """
        return self._fetch_one(sql, (parsed, code))

    def delete(self, user_id: str) -> bool:
        parsed = _parse_id(user_id)
        if parsed is None:
            return False
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("DELETE FROM users WHERE id = %s", (parsed,))
            conn.commit()
            return cursor.rowcount == 1


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: verigate/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
