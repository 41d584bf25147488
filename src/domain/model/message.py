"""Message and conversation domain models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from domain.model.errors import ValidationError


@dataclass(frozen=True)
class Message:
    """A direct message between two users (Entity).

    Created once by the message store, never updated or deleted.
    """
    id: int
    sender_id: int
    receiver_id: int
    body: str
    created_at: datetime

    @property
    def sort_key(self) -> tuple[datetime, int]:
        """Chronological order; equal timestamps fall back to insertion id."""
        return (self.created_at, self.id)

    def peer_of(self, viewer_id: int) -> int:
        """Return the other participant relative to viewer_id."""
        return self.receiver_id if self.sender_id == viewer_id else self.sender_id

    def involves(self, user_a: int, user_b: int) -> bool:
        return (self.sender_id, self.receiver_id) in ((user_a, user_b), (user_b, user_a))

    @staticmethod
    def validate_body(body: str | None) -> str:
        """Reject missing or whitespace-only bodies. The body is kept as sent."""
        if body is None or not body.strip():
            raise ValidationError("Message body must not be empty")
        return body


@dataclass(frozen=True)
class Conversation:
    """Derived view of a viewer's exchange with one peer (Value Object).

    Not persisted. Built on read from the peer's most recent message.
    """
    peer_id: int
    peer_email: str | None
    last_message: Message

    @property
    def last_message_at(self) -> datetime:
        return self.last_message.created_at


def latest_per_peer(viewer_id: int, messages: Iterable[Message]) -> list[Message]:
    """Select the most recent message per peer for viewer_id.

    Messages not involving the viewer are ignored. Latest means highest
    (created_at, id). Result is sorted newest first.
    """
    latest: dict[int, Message] = {}
    for message in messages:
        if viewer_id not in (message.sender_id, message.receiver_id):
            continue
        peer_id = message.peer_of(viewer_id)
        current = latest.get(peer_id)
        if current is None or message.sort_key > current.sort_key:
            latest[peer_id] = message

    return sorted(latest.values(), key=lambda m: m.sort_key, reverse=True)
