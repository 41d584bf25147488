"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class ReceiverNotFoundError(NotFoundError):
    """Message receiver id does not resolve to a user."""


class PeerNotFoundError(NotFoundError):
    """Chat peer id does not resolve to a user."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class DuplicateEmailError(DuplicateError):
    """A user with this email is already registered."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("Email already registered")


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class InvalidCredentialsError(DomainError):
    """Unknown email or wrong password.

    One error for both cases so callers cannot tell which one happened.
    """

    def __init__(self):
        super().__init__("Invalid email or password")


class TokenError(DomainError):
    """Base class for bearer token verification failures."""


class InvalidTokenError(TokenError):
    """Token is malformed, has a bad signature or missing claims."""


class ExpiredTokenError(TokenError):
    """Token signature is valid but its expiry has passed."""


class StorageError(DomainError):
    """Underlying persistence failure. Details stay in the logs."""
