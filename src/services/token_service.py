"""Token service: issues and verifies signed bearer tokens (JWT).

Signature is checked before expiry so a forged token never reports
"expired". Expiry is evaluated against an injectable clock.
"""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Callable

from jose import JWTError, jwt

from domain.model.errors import ExpiredTokenError, InvalidTokenError
from domain.model.token import TokenClaims
from utils.config import Settings

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    def __init__(self, settings: Settings, clock: Callable[[], datetime] = _utcnow):
        self._secret = settings.jwt_secret_key
        self._algorithm = settings.jwt_algorithm
        self._default_ttl = settings.token_ttl
        self._clock = clock

    def issue(self, subject_id: int, subject_email: str, ttl: timedelta | None = None) -> str:
        """Create a signed token for the user, valid for ttl (default from settings)."""
        token, _ = self.issue_with_expiry(subject_id, subject_email, ttl)
        return token

    def issue_with_expiry(
        self, subject_id: int, subject_email: str, ttl: timedelta | None = None
    ) -> tuple[str, datetime]:
        """Like issue(), also returning the absolute expiry written into the token."""
        now = self._clock()
        expire = now + (ttl if ttl is not None else self._default_ttl)
        payload = {
            "sub": str(subject_id),
            "email": subject_email,
            "iat": int(now.timestamp()),
            # Rounded up so the token never lapses before now + ttl
            "exp": math.ceil(expire.timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return token, datetime.fromtimestamp(payload["exp"], tz=timezone.utc)

    def verify(self, token: str) -> TokenClaims:
        """Verify a token and return its claims.

        Raises:
            InvalidTokenError: malformed token, bad signature or missing claims
            ExpiredTokenError: valid signature but now is past the expiry
        """
        if not token:
            raise InvalidTokenError("Empty token")

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "verify_iat": False},
            )
        except JWTError as e:
            logger.debug(f"JWT verification failed: {e}")
            raise InvalidTokenError("Invalid token") from e

        claims = self._parse_claims(payload)

        if self._clock() > claims.expires_at:
            raise ExpiredTokenError("Token expired")
        return claims

    @staticmethod
    def _parse_claims(payload: dict) -> TokenClaims:
        try:
            subject_id = int(payload["sub"])
            subject_email = payload["email"]
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError("Token is missing required claims") from e

        if not isinstance(subject_email, str) or not subject_email:
            raise InvalidTokenError("Token is missing required claims")

        return TokenClaims(
            subject_id=subject_id,
            subject_email=subject_email,
            issued_at=issued_at,
            expires_at=expires_at,
        )
