"""Message service: direct messages, chat history and the conversation list.

Flow for a send: validate body → resolve receiver → append to store.
Conversations are derived on read from the latest message per peer.
"""

import logging

from domain.model.errors import PeerNotFoundError, ReceiverNotFoundError, ValidationError
from domain.model.message import Conversation, Message
from domain.model.user import User
from port.message_repository import MessageRepository
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)


def send_message(
    messages: MessageRepository,
    users: UserRepository,
    sender_id: int,
    receiver_id: int | None,
    body: str | None,
) -> Message:
    """Store a new message from sender_id to receiver_id.

    Sending to yourself is allowed.

    Raises:
        ValidationError: empty body or missing receiver id
        ReceiverNotFoundError: receiver does not exist
    """
    body = Message.validate_body(body)
    if receiver_id is None:
        raise ValidationError("Receiver id is required")

    if users.get_by_id(receiver_id) is None:
        raise ReceiverNotFoundError(f"User {receiver_id} not found")

    message = messages.save(sender_id=sender_id, receiver_id=receiver_id, body=body)

    logger.info("Message sent", extra={
        "messageId": message.id,
        "senderId": sender_id,
        "receiverId": receiver_id,
    })
    return message


def get_history(messages: MessageRepository, user_a: int, user_b: int) -> list[Message]:
    """Full history between two users, oldest first. Empty list if none."""
    return messages.find_between(user_a, user_b)


def get_chat(
    messages: MessageRepository,
    users: UserRepository,
    viewer_id: int,
    peer_id: int | None,
) -> tuple[User, list[Message]]:
    """Return the peer's user record and the chat history with them.

    Raises:
        ValidationError: peer id missing
        PeerNotFoundError: peer does not exist
    """
    if peer_id is None:
        raise ValidationError("Peer user id is required")

    peer = users.get_by_id(peer_id)
    if peer is None:
        raise PeerNotFoundError(f"User {peer_id} not found")

    return peer, get_history(messages, viewer_id, peer_id)


def list_conversations(
    messages: MessageRepository,
    users: UserRepository,
    viewer_id: int,
) -> list[Conversation]:
    """One entry per peer the viewer has exchanged messages with.

    Each carries the latest message with that peer; entries are ordered
    newest first. A peer whose user row is gone gets email None.
    """
    latest = messages.latest_per_peer(viewer_id)
    peer_ids = [m.peer_of(viewer_id) for m in latest]
    peers = users.get_many(peer_ids)

    conversations = []
    for message, peer_id in zip(latest, peer_ids):
        peer = peers.get(peer_id)
        conversations.append(Conversation(
            peer_id=peer_id,
            peer_email=peer.email if peer else None,
            last_message=message,
        ))

    conversations.sort(key=lambda c: c.last_message.sort_key, reverse=True)
    return conversations
