"""Direct message API routes.

This module handles one-to-one messaging:
- POST /messages/send: Send a message to another user
- GET /messages/chat?user=<id>: Full chat history with one user
- GET /messages/conversations: Latest message per peer (inbox)

Flow:
    Client → POST /messages/send → Store message → Return stored message
    Client → Poll GET /messages/chat and /messages/conversations every few seconds
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_message_repo, get_user_repo
from api.models import (
    ChatResponse,
    ConversationListResponse,
    ConversationResponse,
    CurrentUser,
    MessageResponse,
    PublicUser,
    SendMessageRequest,
)
from api.security import get_current_user_required
from domain.model.errors import NotFoundError, ValidationError
from port.message_repository import MessageRepository
from port.user_repository import UserRepository
from services import message_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post("/send", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def send_message(
    request: SendMessageRequest,
    current_user: CurrentUser = Depends(get_current_user_required),
    messages: MessageRepository = Depends(get_message_repo),
    users: UserRepository = Depends(get_user_repo),
):
    """Send a message from the caller to receiver_id.

    Raises:
        HTTPException: 400 if body or receiver is missing, 404 if receiver does not exist
    """
    try:
        message = message_service.send_message(
            messages, users,
            sender_id=current_user.id,
            receiver_id=request.receiver_id,
            body=request.message,
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Receiver not found")

    return MessageResponse.from_domain(message)


@router.get("/chat", response_model=ChatResponse)
def get_chat(
    user: Optional[int] = Query(default=None, description="Peer user ID"),
    current_user: CurrentUser = Depends(get_current_user_required),
    messages: MessageRepository = Depends(get_message_repo),
    users: UserRepository = Depends(get_user_repo),
):
    """Get the full chat history between the caller and another user.

    Returns:
        Peer identity and messages in either direction, oldest first

    Raises:
        HTTPException: 400 if the peer ID is missing, 404 if the peer does not exist
    """
    try:
        peer, history = message_service.get_chat(
            messages, users, viewer_id=current_user.id, peer_id=user
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    logger.debug("Chat retrieved", extra={
        "userId": current_user.id,
        "peerId": peer.id,
        "messageCount": len(history),
    })

    return ChatResponse(
        peer=PublicUser.from_domain(peer),
        messages=[MessageResponse.from_domain(m) for m in history],
    )


@router.get("/conversations", response_model=ConversationListResponse)
def list_conversations(
    current_user: CurrentUser = Depends(get_current_user_required),
    messages: MessageRepository = Depends(get_message_repo),
    users: UserRepository = Depends(get_user_repo),
):
    """List everyone the caller has exchanged messages with, most recent first."""
    conversations = message_service.list_conversations(messages, users, current_user.id)
    return ConversationListResponse(
        conversations=[ConversationResponse.from_domain(c) for c in conversations]
    )
