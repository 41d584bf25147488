"""Tests for the bearer token authentication dependency."""

import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from api.security import get_current_user_required
from domain.model.errors import ExpiredTokenError, InvalidTokenError
from services.token_service import TokenService
from utils.config import Settings

NOW = datetime(2026, 5, 1, tzinfo=timezone.utc)


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetCurrentUserRequired(unittest.TestCase):

    def setUp(self):
        self.now = NOW
        self.service = TokenService(Settings(jwt_secret_key="gate-secret"), clock=lambda: self.now)

    def test_valid_token_binds_identity(self):
        token = self.service.issue(7, "gina@x.com")

        user = get_current_user_required(_bearer(token), self.service)

        self.assertEqual(user.id, 7)
        self.assertEqual(user.email, "gina@x.com")

    def test_missing_credentials(self):
        with self.assertRaises(HTTPException) as ctx:
            get_current_user_required(None, self.service)

        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(ctx.exception.detail, "Not authenticated")

    def test_empty_token(self):
        with self.assertRaises(HTTPException) as ctx:
            get_current_user_required(_bearer("  "), self.service)
        self.assertEqual(ctx.exception.status_code, 401)

    def test_expired_and_forged_tokens_look_the_same(self):
        expired = self.service.issue(7, "gina@x.com", ttl=timedelta(minutes=1))
        forged = TokenService(Settings(jwt_secret_key="other"), clock=lambda: NOW).issue(7, "gina@x.com")
        self.now = NOW + timedelta(hours=1)

        details = []
        for token in (expired, forged):
            with self.assertRaises(HTTPException) as ctx:
                get_current_user_required(_bearer(token), self.service)
            self.assertEqual(ctx.exception.status_code, 401)
            details.append(ctx.exception.detail)

        self.assertEqual(details[0], details[1])

    def test_token_errors_from_service_map_to_401(self):
        for error in (InvalidTokenError("bad"), ExpiredTokenError("old")):
            service = MagicMock()
            service.verify.side_effect = error
            with self.assertRaises(HTTPException) as ctx:
                get_current_user_required(_bearer("abc"), service)
            self.assertEqual(ctx.exception.status_code, 401)
            self.assertEqual(ctx.exception.headers, {"WWW-Authenticate": "Bearer"})


if __name__ == '__main__':
    unittest.main()
