from fastapi import HTTPException

from adapter.sql.connection import get_engine
from adapter.sql.message_repository import SqlMessageRepository
from adapter.sql.user_repository import SqlUserRepository
from port.message_repository import MessageRepository
from port.user_repository import UserRepository
from services.token_service import TokenService
from utils.config import Settings, get_settings


def _get_engine():
    """Get the database engine, raising 503 if unavailable."""
    engine = get_engine(get_settings().database_url)
    if engine is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return engine


def get_app_settings() -> Settings:
    return get_settings()


def get_user_repo() -> UserRepository:
    return SqlUserRepository(_get_engine())


def get_message_repo() -> MessageRepository:
    return SqlMessageRepository(_get_engine())


def get_token_service() -> TokenService:
    return TokenService(get_settings())
