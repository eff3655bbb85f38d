"""
In-memory repository adapter - Implements UserRepository protocol.

Process-local test double for unit tests. A single lock stands in for
the database's UNIQUE(email) constraint and conditional UPDATEs, so upserts
and verification transitions stay atomic across threads.
"""

import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from verigate.domain.exceptions import DuplicateEmail
from verigate.domain.models import UserAccount


class InMemoryUserRepository:
    """
    Implements UserRepository protocol with a dict keyed by account id.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._accounts: dict[str, UserAccount] = {}

    def find_by_email(self, email: str) -> Optional[UserAccount]:
        with self._lock:
            return self._by_email(email)

    def find_by_id(self, user_id: str) -> Optional[UserAccount]:
        with self._lock:
            return self._accounts.get(user_id)

    def find_by_verification_code(self, code: str) -> Optional[UserAccount]:
        if not code:
            return None
        with self._lock:
            for account in self._accounts.values():
                if code in (account.verification_code, account.consumed_code):
                    return account
        return None

    def upsert_unverified(
        self, name: str, email: str, password_hash: str, code: str
    ) -> UserAccount:
        now = datetime.now(timezone.utc)
        with self._lock:
            existing = self._by_email(email)
            if existing is not None and existing.verified:
                raise DuplicateEmail(email)
            if existing is None:
                account = UserAccount(
                    id=str(uuid.uuid4()),
                    name=name,
                    email=email,
                    password_hash=password_hash,
                    verification_code=code,
                    created_at=now,
                    updated_at=now,
                )
            else:
                account = replace(
                    existing,
                    name=name,
                    password_hash=password_hash,
                    verification_code=code,
                    updated_at=now,
                )
            self._accounts[account.id] = account
            return account

    def mark_verified(self, user_id: str, code: str) -> Optional[UserAccount]:
        with self._lock:
            account = self._accounts.get(user_id)
            if account is None or account.verified:
                return None
            if not code or account.verification_code != code:
                return None
            updated = replace(
                account,
                verified=True,
                consumed_code=account.verification_code,
                verification_code="",
                updated_at=datetime.now(timezone.utc),
            )
            self._accounts[user_id] = updated
            return updated

    def delete(self, user_id: str) -> bool:
        with self._lock:
            return self._accounts.pop(user_id, None) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._accounts)

    def _by_email(self, email: str) -> Optional[UserAccount]:
        for account in self._accounts.values():
            if account.email == email:
                return account
        return None
