"""In-memory implementation of UserRepository for testing."""

import itertools
from datetime import datetime, timezone

from domain.model.errors import DuplicateEmailError
from domain.model.user import User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[int, User] = {}
        self._ids = itertools.count(1)

    # ── write operations ─────────────────────────────────────

    def create(self, email: str, password_hash: str) -> User:
        if any(u.email == email for u in self.store.values()):
            raise DuplicateEmailError(email)

        user = User(
            id=next(self._ids),
            email=email,
            created_at=datetime.now(timezone.utc),
            password_hash=password_hash,
        )
        self.store[user.id] = user
        return user

    def delete(self, user_id: int) -> None:
        """Test helper: drop a user row. The real store has no deletion."""
        self.store.pop(user_id, None)

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return user
        return None

    def get_by_id(self, user_id: int) -> User | None:
        return self.store.get(user_id)

    def get_many(self, user_ids: list[int]) -> dict[int, User]:
        return {uid: self.store[uid] for uid in user_ids if uid in self.store}

    def count(self) -> int:
        return len(self.store)
