"""Unit tests for message_service module."""

import unittest
from datetime import datetime, timedelta, timezone

from adapter.fake.message_repository import FakeMessageRepository
from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import (
    NotFoundError,
    PeerNotFoundError,
    ReceiverNotFoundError,
    ValidationError,
)
from services import message_service


class _TickingClock:
    """Returns a strictly increasing timestamp on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + self.step
        return current


T0 = datetime(2026, 2, 1, 8, 0, 0, tzinfo=timezone.utc)


class MessageServiceTestCase(unittest.TestCase):

    def setUp(self):
        self.users = FakeUserRepository()
        self.messages = FakeMessageRepository(clock=_TickingClock(T0))
        self.alice = self.users.create("alice@x.com", "hash")
        self.bob = self.users.create("bob@x.com", "hash")
        self.carol = self.users.create("carol@x.com", "hash")

    def send(self, sender, receiver, body):
        return message_service.send_message(
            self.messages, self.users, sender.id, receiver.id, body
        )


class TestSendMessage(MessageServiceTestCase):

    def test_send_returns_stored_message(self):
        message = self.send(self.alice, self.bob, "hello")

        self.assertEqual(message.id, 1)
        self.assertEqual(message.sender_id, self.alice.id)
        self.assertEqual(message.receiver_id, self.bob.id)
        self.assertEqual(message.body, "hello")
        self.assertEqual(message.created_at, T0)
        self.assertEqual(self.messages.get_by_id(1), message)

    def test_empty_body_rejected_without_insert(self):
        for body in ("", "   ", None):
            with self.assertRaises(ValidationError):
                message_service.send_message(
                    self.messages, self.users, self.alice.id, self.bob.id, body
                )
        self.assertEqual(self.messages.count(), 0)

    def test_missing_receiver_id_rejected(self):
        with self.assertRaises(ValidationError):
            message_service.send_message(self.messages, self.users, self.alice.id, None, "hi")
        self.assertEqual(self.messages.count(), 0)

    def test_unknown_receiver_rejected_without_insert(self):
        with self.assertRaises(ReceiverNotFoundError):
            message_service.send_message(self.messages, self.users, self.alice.id, 999, "hi")
        self.assertEqual(self.messages.count(), 0)

    def test_receiver_not_found_is_a_not_found_error(self):
        self.assertTrue(issubclass(ReceiverNotFoundError, NotFoundError))

    def test_self_message_is_allowed(self):
        message = self.send(self.alice, self.alice, "note to self")
        self.assertEqual(message.sender_id, message.receiver_id)


class TestHistory(MessageServiceTestCase):

    def test_history_is_symmetric(self):
        self.send(self.alice, self.bob, "hi")

        a_view = message_service.get_history(self.messages, self.alice.id, self.bob.id)
        b_view = message_service.get_history(self.messages, self.bob.id, self.alice.id)

        self.assertEqual(len(a_view), 1)
        self.assertEqual(a_view[0].body, "hi")
        self.assertEqual(a_view[0].sender_id, self.alice.id)
        self.assertEqual(a_view[0].receiver_id, self.bob.id)
        self.assertEqual(a_view, b_view)

    def test_history_is_chronological_and_excludes_other_pairs(self):
        self.send(self.alice, self.bob, "1")
        self.send(self.alice, self.carol, "other pair")
        self.send(self.bob, self.alice, "2")
        self.send(self.alice, self.bob, "3")

        history = message_service.get_history(self.messages, self.alice.id, self.bob.id)

        self.assertEqual([m.body for m in history], ["1", "2", "3"])

    def test_history_empty_when_no_messages(self):
        self.assertEqual(message_service.get_history(self.messages, self.alice.id, self.bob.id), [])


class TestGetChat(MessageServiceTestCase):

    def test_returns_peer_and_history(self):
        self.send(self.alice, self.bob, "hello")

        peer, history = message_service.get_chat(
            self.messages, self.users, self.alice.id, self.bob.id
        )

        self.assertEqual(peer.email, "bob@x.com")
        self.assertEqual(len(history), 1)

    def test_unknown_peer(self):
        with self.assertRaises(PeerNotFoundError):
            message_service.get_chat(self.messages, self.users, self.alice.id, 42)

    def test_missing_peer_id(self):
        with self.assertRaises(ValidationError):
            message_service.get_chat(self.messages, self.users, self.alice.id, None)

    def test_existing_peer_without_messages_gives_empty_history(self):
        peer, history = message_service.get_chat(
            self.messages, self.users, self.alice.id, self.carol.id
        )
        self.assertEqual(peer.id, self.carol.id)
        self.assertEqual(history, [])


class TestListConversations(MessageServiceTestCase):

    def test_single_peer_uses_most_recent_message_for_both_sides(self):
        self.send(self.alice, self.bob, "first")
        self.send(self.bob, self.alice, "second")
        third = self.send(self.alice, self.bob, "third")

        alice_view = message_service.list_conversations(self.messages, self.users, self.alice.id)
        bob_view = message_service.list_conversations(self.messages, self.users, self.bob.id)

        self.assertEqual(len(alice_view), 1)
        self.assertEqual(alice_view[0].peer_id, self.bob.id)
        self.assertEqual(alice_view[0].peer_email, "bob@x.com")
        self.assertEqual(alice_view[0].last_message, third)

        self.assertEqual(len(bob_view), 1)
        self.assertEqual(bob_view[0].peer_id, self.alice.id)
        self.assertEqual(bob_view[0].peer_email, "alice@x.com")
        self.assertEqual(bob_view[0].last_message, third)

    def test_ordered_by_latest_message_descending(self):
        self.send(self.alice, self.bob, "to bob")
        self.send(self.carol, self.alice, "from carol")

        conversations = message_service.list_conversations(self.messages, self.users, self.alice.id)

        self.assertEqual([c.peer_id for c in conversations], [self.carol.id, self.bob.id])

        self.send(self.bob, self.alice, "bob again")
        conversations = message_service.list_conversations(self.messages, self.users, self.alice.id)
        self.assertEqual([c.peer_id for c in conversations], [self.bob.id, self.carol.id])

    def test_no_messages_no_conversations(self):
        self.send(self.bob, self.carol, "not about alice")
        self.assertEqual(
            message_service.list_conversations(self.messages, self.users, self.alice.id), []
        )

    def test_removed_peer_renders_email_as_none(self):
        self.send(self.alice, self.bob, "hello")
        self.users.delete(self.bob.id)

        conversations = message_service.list_conversations(self.messages, self.users, self.alice.id)

        self.assertEqual(len(conversations), 1)
        self.assertEqual(conversations[0].peer_id, self.bob.id)
        self.assertIsNone(conversations[0].peer_email)

    def test_equal_timestamps_pick_highest_id(self):
        frozen = FakeMessageRepository(clock=lambda: T0)
        message_service.send_message(frozen, self.users, self.alice.id, self.bob.id, "a")
        last = message_service.send_message(frozen, self.users, self.bob.id, self.alice.id, "b")

        conversations = message_service.list_conversations(frozen, self.users, self.alice.id)

        self.assertEqual(conversations[0].last_message.id, last.id)


if __name__ == '__main__':
    unittest.main()
