from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access."""
    def create(self, email: str, password_hash: str) -> User:
        """Create a new user with the next id.

        Raise DuplicateEmailError if the email is taken, StorageError on failure.
        """
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by exact email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: int) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def get_many(self, user_ids: list[int]) -> dict[int, User]:
        """Find several users at once, keyed by id. Missing ids are omitted."""
        ...

    def count(self) -> int:
        """Return the number of registered users."""
        ...
