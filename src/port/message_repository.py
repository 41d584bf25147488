from typing import Protocol

from domain.model.message import Message


class MessageRepository(Protocol):
    """Protocol defining the interface for message data access.

    Messages are append-only: there is no update or delete.
    """

    def save(self, sender_id: int, receiver_id: int, body: str) -> Message:
        """Insert a message stamped with the current UTC time and return it."""
        ...

    def get_by_id(self, message_id: int) -> Message | None:
        """Find a message by ID. Return Message or None if not found."""
        ...

    def find_between(self, user_a: int, user_b: int) -> list[Message]:
        """All messages between two users in either direction, oldest first.

        Ordered by (created_at, id). Symmetric in its arguments.
        """
        ...

    def latest_per_peer(self, viewer_id: int) -> list[Message]:
        """The most recent message with each peer of viewer_id, newest first."""
        ...

    def count(self) -> int:
        """Return the number of stored messages."""
        ...
