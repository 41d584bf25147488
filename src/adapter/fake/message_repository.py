"""In-memory implementation of MessageRepository for testing."""

import itertools
from datetime import datetime, timezone
from typing import Callable

from domain.model.message import Message, latest_per_peer


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FakeMessageRepository:
    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self.store: dict[int, Message] = {}
        self._ids = itertools.count(1)
        self._clock = clock

    # ── write operations ─────────────────────────────────────

    def save(self, sender_id: int, receiver_id: int, body: str) -> Message:
        message = Message(
            id=next(self._ids),
            sender_id=sender_id,
            receiver_id=receiver_id,
            body=body,
            created_at=self._clock(),
        )
        self.store[message.id] = message
        return message

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, message_id: int) -> Message | None:
        return self.store.get(message_id)

    def find_between(self, user_a: int, user_b: int) -> list[Message]:
        return sorted(
            [m for m in self.store.values() if m.involves(user_a, user_b)],
            key=lambda m: m.sort_key,
        )

    def latest_per_peer(self, viewer_id: int) -> list[Message]:
        return latest_per_peer(viewer_id, self.store.values())

    def count(self) -> int:
        return len(self.store)
