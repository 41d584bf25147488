"""Auth service: registration and credential verification business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging

import bcrypt

from domain.model.errors import DuplicateEmailError, InvalidCredentialsError, ValidationError
from domain.model.user import User
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

DEFAULT_BCRYPT_ROUNDS = 12
# bcrypt only reads the first 72 bytes and newer releases raise beyond that
MAX_PASSWORD_BYTES = 72


def _password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def _hash_password(password: str, rounds: int) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed or _password_too_long(plain):
        return False
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def register(
    repo: UserRepository,
    email: str,
    password: str,
    rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> User:
    """Register a new user.

    Email uniqueness is exact and case-sensitive. Any non-empty password
    of at most 72 UTF-8 bytes is accepted, whitespace included.

    Raises:
        ValidationError: email missing, password empty or too long
        DuplicateEmailError: email already registered
    """
    if not email or not email.strip():
        raise ValidationError("Email is required")
    if not password:
        raise ValidationError("Password is required")
    if _password_too_long(password):
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

    if repo.get_by_email(email):
        raise DuplicateEmailError(email)

    password_hash = _hash_password(password, rounds)
    user = repo.create(email=email, password_hash=password_hash)

    logger.info("User registered", extra={"userId": user.id, "email": email})
    return user


def find_by_email(repo: UserRepository, email: str) -> User | None:
    """Exact-match lookup. Returns None if no user has this email."""
    if not email:
        return None
    return repo.get_by_email(email)


def verify_credentials(repo: UserRepository, email: str, password: str) -> User:
    """Authenticate a user by email and password.

    Unknown email and wrong password raise the same error.

    Raises:
        InvalidCredentialsError: invalid credentials (deliberately vague)
    """
    user = repo.get_by_email(email) if email else None
    if not user or not password or not _verify_password(password, user.password_hash):
        logger.info("Login rejected", extra={"email": email})
        raise InvalidCredentialsError()
    return user
