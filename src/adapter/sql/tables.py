"""SQLAlchemy table mappings for users and messages."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from adapter.sql import MESSAGES_TABLE_NAME, USERS_TABLE_NAME
from domain.model.message import Message
from domain.model.user import User


class UTCDateTime(TypeDecorator):
    """Stores naive UTC, returns aware UTC. SQLite drops tzinfo otherwise."""
    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class Base(DeclarativeBase):
    pass


class UserRow(Base):
    __tablename__ = USERS_TABLE_NAME
    __table_args__ = {'sqlite_autoincrement': True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    def to_domain(self) -> User:
        return User(
            id=self.id,
            email=self.email,
            created_at=self.created_at,
            password_hash=self.password_hash,
        )


class MessageRow(Base):
    __tablename__ = MESSAGES_TABLE_NAME
    __table_args__ = (
        Index('idx_messages_sender_receiver', 'sender_id', 'receiver_id', 'created_at'),
        Index('idx_messages_receiver_sender', 'receiver_id', 'sender_id', 'created_at'),
        {'sqlite_autoincrement': True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sender_id: Mapped[int] = mapped_column(Integer, ForeignKey(f"{USERS_TABLE_NAME}.id"), nullable=False)
    receiver_id: Mapped[int] = mapped_column(Integer, ForeignKey(f"{USERS_TABLE_NAME}.id"), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    def to_domain(self) -> Message:
        return Message(
            id=self.id,
            sender_id=self.sender_id,
            receiver_id=self.receiver_id,
            body=self.body,
            created_at=self.created_at,
        )
