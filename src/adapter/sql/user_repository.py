"""SQL implementation of UserRepository."""

from datetime import datetime, timezone
from logging import getLogger

from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from adapter.sql.tables import UserRow
from domain.model.errors import DuplicateEmailError, StorageError
from domain.model.user import User

logger = getLogger(__name__)


class SqlUserRepository:
    def __init__(self, engine: Engine):
        self._session = sessionmaker(bind=engine, expire_on_commit=False)

    def create(self, email: str, password_hash: str) -> User:
        """Insert a user row. The unique index on email decides duplicates."""
        row = UserRow(
            email=email,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )
        try:
            with self._session() as session:
                session.add(row)
                session.commit()
                user = row.to_domain()
        except IntegrityError:
            logger.warning("User creation failed: email already exists", extra={"email": email})
            raise DuplicateEmailError(email)
        except SQLAlchemyError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            raise StorageError("Failed to create user") from e

        logger.info("User created", extra={"userId": user.id, "email": email})
        return user

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        try:
            with self._session() as session:
                row = session.scalars(select(UserRow).where(UserRow.email == email)).first()
                return row.to_domain() if row else None
        except SQLAlchemyError as e:
            logger.error("Failed to get user by email", extra={"email": email, "error": str(e)})
            raise StorageError("Failed to get user") from e

    def get_by_id(self, user_id: int) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            with self._session() as session:
                row = session.get(UserRow, user_id)
                return row.to_domain() if row else None
        except SQLAlchemyError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise StorageError("Failed to get user") from e

    def get_many(self, user_ids: list[int]) -> dict[int, User]:
        if not user_ids:
            return {}
        try:
            with self._session() as session:
                rows = session.scalars(select(UserRow).where(UserRow.id.in_(set(user_ids)))).all()
                return {row.id: row.to_domain() for row in rows}
        except SQLAlchemyError as e:
            logger.error("Failed to get users", extra={"userIds": user_ids, "error": str(e)})
            raise StorageError("Failed to get users") from e

    def count(self) -> int:
        try:
            with self._session() as session:
                return session.scalar(select(func.count()).select_from(UserRow))
        except SQLAlchemyError as e:
            logger.error("Failed to count users", extra={"error": str(e)})
            raise StorageError("Failed to count users") from e
