"""
Chat Store - persistence of ChatSession documents.
"""

import asyncio
import weakref
from typing import List, Optional

from ..models import ChatMessage, ChatSession
from .documents import DocumentCollection


class ChatStore(DocumentCollection[ChatSession]):
    """
    Chat sessions, one document per session under ``chats/<owner_id>/``.

    Appends to a session are serialized by a lock keyed by its session id, so
    two concurrent appends both land instead of one overwriting the other.
    """

    collection = "chats"
    model = ChatSession

    def __init__(self, storage):
        super().__init__(storage)
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
        return lock

    async def insert(self, session: ChatSession) -> None:
        """Persist a brand new session; refuses to overwrite an existing id."""
        await self._write(session.owner_id, session.session_id, session, create=True)

    async def get(self, owner_id: str, session_id: str) -> Optional[ChatSession]:
        """Owner-scoped lookup; None when missing or owned by someone else."""
        return await self._read(owner_id, session_id)

    async def append(
        self,
        owner_id: str,
        session_id: str,
        message: ChatMessage
    ) -> Optional[ChatSession]:
        """
        Append one message to an owner's session.

        Returns:
            The updated session, or None if the owner has no such session
        """
        async with self._lock_for(session_id):
            session = await self._read(owner_id, session_id)
            if session is None:
                return None
            session.messages.append(message)
            await self._write(owner_id, session_id, session)
            return session

    async def list_for_owner(self, owner_id: str) -> List[ChatSession]:
        """All sessions of one owner, newest first."""
        sessions = await self._read_all(owner_id)
        sessions.sort(key=lambda s: (s.created_at, s.session_id), reverse=True)
        return sessions
