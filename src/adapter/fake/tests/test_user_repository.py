"""Unit tests for FakeUserRepository: verifies Port contract compliance."""

import unittest

from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import DuplicateEmailError
from domain.model.user import User


class TestFakeUserRepository(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()

    def test_create_and_get_by_id(self):
        user = self.repo.create('alice@x.com', 'hash')

        self.assertIsInstance(user, User)
        self.assertEqual(self.repo.get_by_id(user.id), user)
        self.assertIsNotNone(user.created_at.tzinfo)

    def test_create_duplicate_raises(self):
        self.repo.create('alice@x.com', 'hash')
        with self.assertRaises(DuplicateEmailError):
            self.repo.create('alice@x.com', 'hash')
        self.assertEqual(self.repo.count(), 1)

    def test_get_by_email_missing(self):
        self.assertIsNone(self.repo.get_by_email('nobody@x.com'))

    def test_get_many_omits_missing_ids(self):
        a = self.repo.create('a@x.com', 'h')
        b = self.repo.create('b@x.com', 'h')

        found = self.repo.get_many([a.id, b.id, 99])

        self.assertEqual(set(found), {a.id, b.id})


if __name__ == '__main__':
    unittest.main()
