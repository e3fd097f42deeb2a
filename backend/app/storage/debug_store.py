"""
Debug Session Store - persistence of DebugSession bundles.
"""

from typing import List, Optional

from ..models import DebugSession
from .documents import DocumentCollection


class DebugSessionStore(DocumentCollection[DebugSession]):
    """Write-once debug sessions under ``debug_sessions/<owner_id>/``."""

    collection = "debug_sessions"
    model = DebugSession

    async def insert(self, session: DebugSession) -> None:
        await self._write(session.owner_id, session.session_id, session, create=True)

    async def get(self, owner_id: str, session_id: str) -> Optional[DebugSession]:
        return await self._read(owner_id, session_id)

    async def list_for_owner(self, owner_id: str) -> List[DebugSession]:
        """Newest first."""
        sessions = await self._read_all(owner_id)
        sessions.sort(key=lambda s: (s.timestamp, s.session_id), reverse=True)
        return sessions
