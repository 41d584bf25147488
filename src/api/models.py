"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from domain.model.message import Conversation, Message
from domain.model.user import User


class CurrentUser(BaseModel):
    """Identity resolved from a verified bearer token."""
    id: int
    email: str


class RegisterRequest(BaseModel):
    """Request model for user registration."""
    email: str = Field(..., min_length=1, max_length=320)
    password: str = Field(..., min_length=1)


class RegisterResponse(BaseModel):
    user_id: int
    message: str = "User registered successfully"


class LoginRequest(BaseModel):
    """Request model for user login."""
    email: str
    password: str


class LoginResponse(BaseModel):
    """Response model for login."""
    token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: CurrentUser
    message: str = "Login successful"


class MeResponse(BaseModel):
    user: CurrentUser


class PublicUser(BaseModel):
    """A user's outward identity. The password hash never leaves the service."""
    id: int
    email: str
    created_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> "PublicUser":
        return cls(id=user.id, email=user.email, created_at=user.created_at)


class SendMessageRequest(BaseModel):
    """Request model for sending a direct message."""
    receiver_id: Optional[int] = Field(None, description="Recipient user ID")
    message: Optional[str] = Field(None, description="Message body")


class MessageResponse(BaseModel):
    """Response model for a stored message."""
    id: int
    sender_id: int
    receiver_id: int
    message: str = Field(..., description="Message body")
    created_at: datetime

    @classmethod
    def from_domain(cls, message: Message) -> "MessageResponse":
        return cls(
            id=message.id,
            sender_id=message.sender_id,
            receiver_id=message.receiver_id,
            message=message.body,
            created_at=message.created_at,
        )


class ChatResponse(BaseModel):
    """Chat history with one peer, oldest message first."""
    peer: PublicUser
    messages: list[MessageResponse]


class ConversationResponse(BaseModel):
    """One peer in the caller's conversation list with their latest message."""
    user_id: int = Field(..., description="Peer user ID")
    email: Optional[str] = Field(None, description="Peer email, null if the user no longer exists")
    message: str = Field(..., description="Body of the latest message")
    sender_id: int
    receiver_id: int
    created_at: datetime
    message_id: int

    @classmethod
    def from_domain(cls, conversation: Conversation) -> "ConversationResponse":
        last = conversation.last_message
        return cls(
            user_id=conversation.peer_id,
            email=conversation.peer_email,
            message=last.body,
            sender_id=last.sender_id,
            receiver_id=last.receiver_id,
            created_at=conversation.last_message_at,
            message_id=last.id,
        )


class ConversationListResponse(BaseModel):
    conversations: list[ConversationResponse]
