"""
Chat API endpoints - chat history and question answering.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from ..models import AskRequest, AskResponse, ChatCreate, ChatSession
from ..services import ChatService
from ..utils.auth import get_current_user_id
from .deps import get_chat_service

router = APIRouter(tags=["chat"])


@router.post("/chats", response_model=ChatSession)
async def save_chat(
    chat: ChatCreate,
    response: Response,
    user_id: str = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    """
    Save a prompt/response turn.

    Without ``sessionId`` a new session is created (201); with one, the turn
    is appended to the caller's session (200).
    """
    session, created = await service.create_or_append(
        user_id, chat.session_id, chat.prompt, chat.response
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return session


@router.get("/chats", response_model=List[ChatSession])
async def get_chats(
    user_id: str = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    """All of the caller's sessions, newest first."""
    return await service.list(user_id)


@router.get("/chats/{session_id}", response_model=ChatSession)
async def get_chat(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    return await service.get(user_id, session_id)


@router.post("/ask", response_model=AskResponse)
async def ask(
    body: AskRequest,
    response: Response,
    user_id: str = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    """Send a question to the GenAI function and record the answer."""
    reply, session, created = await service.ask(user_id, body.session_id, body.prompt)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return AskResponse(response=reply, session=session)
