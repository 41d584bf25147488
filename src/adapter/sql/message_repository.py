"""SQL implementation of MessageRepository."""

from datetime import datetime, timezone
from logging import getLogger
from typing import Callable

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from adapter.sql.tables import MessageRow
from domain.model.errors import ReceiverNotFoundError, StorageError
from domain.model.message import Message

logger = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SqlMessageRepository:
    def __init__(self, engine: Engine, clock: Callable[[], datetime] = _utcnow):
        self._session = sessionmaker(bind=engine, expire_on_commit=False)
        self._clock = clock

    # ── write operations ─────────────────────────────────────

    def save(self, sender_id: int, receiver_id: int, body: str) -> Message:
        row = MessageRow(
            sender_id=sender_id,
            receiver_id=receiver_id,
            body=body,
            created_at=self._clock(),
        )
        try:
            with self._session() as session:
                session.add(row)
                session.commit()
                return row.to_domain()
        except IntegrityError as e:
            # Foreign key rejected a receiver deleted between lookup and insert
            logger.warning("Message insert rejected", extra={"receiverId": receiver_id})
            raise ReceiverNotFoundError(f"User {receiver_id} not found") from e
        except SQLAlchemyError as e:
            logger.error("Failed to save message", extra={
                "senderId": sender_id, "receiverId": receiver_id, "error": str(e)
            })
            raise StorageError("Failed to save message") from e

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, message_id: int) -> Message | None:
        try:
            with self._session() as session:
                row = session.get(MessageRow, message_id)
                return row.to_domain() if row else None
        except SQLAlchemyError as e:
            logger.error("Failed to get message", extra={"messageId": message_id, "error": str(e)})
            raise StorageError("Failed to get message") from e

    def find_between(self, user_a: int, user_b: int) -> list[Message]:
        stmt = (
            select(MessageRow)
            .where(or_(
                and_(MessageRow.sender_id == user_a, MessageRow.receiver_id == user_b),
                and_(MessageRow.sender_id == user_b, MessageRow.receiver_id == user_a),
            ))
            .order_by(MessageRow.created_at.asc(), MessageRow.id.asc())
        )
        try:
            with self._session() as session:
                return [row.to_domain() for row in session.scalars(stmt)]
        except SQLAlchemyError as e:
            logger.error("Failed to load chat history", extra={
                "userA": user_a, "userB": user_b, "error": str(e)
            })
            raise StorageError("Failed to load chat history") from e

    def latest_per_peer(self, viewer_id: int) -> list[Message]:
        """Rank each peer's messages newest first and keep rank 1.

        Peer is the receiver when the viewer sent the message, else the sender.
        Equal timestamps rank the higher id first.
        """
        peer = case(
            (MessageRow.sender_id == viewer_id, MessageRow.receiver_id),
            else_=MessageRow.sender_id,
        )
        ranked = (
            select(
                MessageRow.id.label('id'),
                func.row_number().over(
                    partition_by=peer,
                    order_by=[MessageRow.created_at.desc(), MessageRow.id.desc()],
                ).label('rn'),
            )
            .where(or_(MessageRow.sender_id == viewer_id, MessageRow.receiver_id == viewer_id))
            .subquery()
        )
        stmt = (
            select(MessageRow)
            .join(ranked, MessageRow.id == ranked.c.id)
            .where(ranked.c.rn == 1)
            .order_by(MessageRow.created_at.desc(), MessageRow.id.desc())
        )
        try:
            with self._session() as session:
                return [row.to_domain() for row in session.scalars(stmt)]
        except SQLAlchemyError as e:
            logger.error("Failed to load conversations", extra={"userId": viewer_id, "error": str(e)})
            raise StorageError("Failed to load conversations") from e

    def count(self) -> int:
        try:
            with self._session() as session:
                return session.scalar(select(func.count()).select_from(MessageRow))
        except SQLAlchemyError as e:
            logger.error("Failed to count messages", extra={"error": str(e)})
            raise StorageError("Failed to count messages") from e
