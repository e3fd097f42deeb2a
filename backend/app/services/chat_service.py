"""
Chat Service - create, append to and list a user's chat sessions.
"""

import logging
import uuid
from typing import List, Optional, Tuple

from starlette.concurrency import run_in_threadpool

from ..core.errors import InternalError, NotFound, ValidationError
from ..models import ChatMessage, ChatSession
from ..storage import ChatStore, StorageError

logger = logging.getLogger(__name__)

SESSION_NOT_FOUND = "Session not found"


def _require_text(name: str, value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} is required")
    return value


class ChatService:
    """
    Owner-scoped chat history.

    Every lookup goes through ``(session_id, owner_id)``; a session that does
    not exist and one that belongs to another user produce the same NotFound.
    """

    def __init__(self, store: ChatStore, generator=None):
        """
        Args:
            store: Chat session store
            generator: Optional collaborator with ``generate(prompt) -> str``,
                needed only by ``ask``
        """
        self.store = store
        self.generator = generator

    async def create_or_append(
        self,
        owner_id: str,
        session_id: Optional[str],
        prompt: str,
        response: str
    ) -> Tuple[ChatSession, bool]:
        """
        Start a new session or append a turn to an existing one.

        Args:
            owner_id: Authenticated user
            session_id: Existing session to append to, or None for a new one
            prompt: User's question
            response: Bot's reply

        Returns:
            (session, created) - created is True when a new session was made

        Raises:
            ValidationError: prompt or response missing or blank
            NotFound: session_id unknown for this owner
            InternalError: the store failed
        """
        _require_text("prompt", prompt)
        _require_text("response", response)
        message = ChatMessage(prompt=prompt, response=response)

        try:
            if not session_id:
                session = ChatSession(
                    session_id=str(uuid.uuid4()),
                    owner_id=owner_id,
                    messages=[message],
                )
                await self.store.insert(session)
                logger.info(
                    f"Created chat session {session.session_id}",
                    extra={"extra_fields": {"user_id": owner_id, "session_id": session.session_id}}
                )
                return session, True

            session = await self.store.append(owner_id, session_id, message)
        except StorageError as e:
            logger.error(f"Error saving chat for user {owner_id}: {e}")
            raise InternalError("Internal Server Error") from e

        if session is None:
            raise NotFound(SESSION_NOT_FOUND)

        logger.debug(f"Appended to chat session {session_id} ({len(session.messages)} messages)")
        return session, False

    async def list(self, owner_id: str) -> List[ChatSession]:
        """All of the owner's sessions, newest first. Empty for a new user."""
        try:
            return await self.store.list_for_owner(owner_id)
        except StorageError as e:
            logger.error(f"Error fetching chats for user {owner_id}: {e}")
            raise InternalError("Internal Server Error") from e

    async def get(self, owner_id: str, session_id: str) -> ChatSession:
        """Owner-scoped lookup of one session."""
        try:
            session = await self.store.get(owner_id, session_id)
        except StorageError as e:
            logger.error(f"Error fetching chat {session_id}: {e}")
            raise InternalError("Internal Server Error") from e
        if session is None:
            raise NotFound(SESSION_NOT_FOUND)
        return session

    async def ask(
        self,
        owner_id: str,
        session_id: Optional[str],
        prompt: str
    ) -> Tuple[str, ChatSession, bool]:
        """
        Generate a reply to ``prompt`` and record the turn.

        The session is checked before the generator is called, so an unknown
        session id never costs an upstream invocation.

        Returns:
            (reply, session, created)

        Raises:
            UpstreamError: the generator failed
        """
        _require_text("prompt", prompt)
        if session_id:
            await self.get(owner_id, session_id)
        if self.generator is None:
            raise InternalError("GenAI generator is not configured")

        reply = await run_in_threadpool(self.generator.generate, prompt)
        session, created = await self.create_or_append(owner_id, session_id, prompt, reply)
        return reply, session, created
