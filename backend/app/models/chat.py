"""
Chat Models - Defines structures for chat sessions and their requests.
"""

from datetime import datetime
from typing import Optional, List
from pydantic import Field

from .base import CamelModel, utcnow


class ChatMessage(CamelModel):
    """One prompt/response turn."""
    prompt: str
    response: str
    created_at: datetime = Field(default_factory=utcnow)


class ChatSession(CamelModel):
    """
    An append-only thread of turns owned by one user.

    ``session_id`` and ``owner_id`` never change after creation; ``messages``
    only grows and its order is the display order.
    """
    session_id: str
    owner_id: str
    created_at: datetime = Field(default_factory=utcnow)
    messages: List[ChatMessage] = Field(default_factory=list)


class ChatCreate(CamelModel):
    """Body of POST /chats - no session id starts a new session."""
    prompt: str = Field(..., min_length=1)
    response: str = Field(..., min_length=1)
    session_id: Optional[str] = None


class AskRequest(CamelModel):
    """Body of POST /ask."""
    prompt: str = Field(..., min_length=1)
    session_id: Optional[str] = None


class AskResponse(CamelModel):
    """Generated reply together with the session it was recorded in."""
    response: str
    session: ChatSession
