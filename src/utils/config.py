"""Application settings loaded from environment variables.

Services receive a Settings instance at construction instead of reading
module-level constants, so tests can build their own.
"""

import os
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache

DEFAULT_DATABASE_URL = "sqlite:///./messages.db"


@dataclass(frozen=True)
class Settings:
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_expiration_days: int = 30
    bcrypt_rounds: int = 12
    database_url: str = DEFAULT_DATABASE_URL
    port: int = 8000

    @property
    def token_ttl(self) -> timedelta:
        return timedelta(days=self.jwt_expiration_days)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the environment.

        Raises:
            ValueError: JWT_SECRET_KEY is missing, or a numeric variable is not an int
        """
        secret = os.getenv("JWT_SECRET_KEY")
        if not secret:
            raise ValueError(
                "JWT_SECRET_KEY environment variable is required. "
                "Generate a secure key with: openssl rand -hex 32"
            )
        return cls(
            jwt_secret_key=secret,
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_expiration_days=int(os.getenv("JWT_EXPIRATION_DAYS", "30")),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", "12")),
            database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            port=int(os.getenv("PORT", "8000")),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return Settings.from_env()
