"""
Debug Session Service - CloudWatch logs and metrics plus a GenAI analysis.
"""

import logging
import uuid
from typing import List, Optional

from starlette.concurrency import run_in_threadpool

from ..core.errors import InternalError, NotFound, ValidationError
from ..models import DebugSession, DebugSessionSummary
from ..storage import DebugSessionStore, StorageError

logger = logging.getLogger(__name__)


def build_analysis_prompt(logs: List[str]) -> str:
    return "Analyze these logs: " + "\n".join(logs)


class DebugService:
    """
    Runs debug requests and keeps their results per user.

    Args:
        store: Debug session store
        monitor: Collaborator with ``fetch_logs(resource_id)`` and
            ``fetch_metrics(resource_id)``
        generator: Collaborator with ``generate(prompt) -> str``
    """

    def __init__(self, store: DebugSessionStore, monitor, generator):
        self.store = store
        self.monitor = monitor
        self.generator = generator

    async def run_debug(
        self,
        owner_id: str,
        resource_type: Optional[str],
        resource_id: Optional[str]
    ) -> DebugSession:
        """
        Collect logs and metrics for a resource, ask for an analysis, save it.

        Upstream failures propagate as UpstreamError after a single attempt.
        """
        if not resource_type or not resource_id:
            raise ValidationError("Resource type and ID are required")

        logs = await run_in_threadpool(self.monitor.fetch_logs, resource_id)
        metrics = await run_in_threadpool(self.monitor.fetch_metrics, resource_id)
        genai_response = await run_in_threadpool(
            self.generator.generate, build_analysis_prompt(logs)
        )

        session = DebugSession(
            session_id=str(uuid.uuid4()),
            owner_id=owner_id,
            resource_type=resource_type,
            resource_id=resource_id,
            logs=logs,
            metrics=metrics,
            genai_response=genai_response,
        )
        try:
            await self.store.insert(session)
        except StorageError as e:
            logger.error(f"Error saving debug session for user {owner_id}: {e}")
            raise InternalError(f"Error fetching debug data: {e}") from e

        logger.info(
            f"Debug session {session.session_id} for {resource_type} {resource_id}",
            extra={"extra_fields": {"user_id": owner_id, "log_lines": len(logs)}}
        )
        return session

    async def list_sessions(self, owner_id: str) -> List[DebugSessionSummary]:
        try:
            sessions = await self.store.list_for_owner(owner_id)
        except StorageError as e:
            logger.error(f"Error fetching debug sessions for user {owner_id}: {e}")
            raise InternalError(f"Error fetching sessions: {e}") from e

        return [
            DebugSessionSummary(
                session_id=s.session_id,
                summary=s.summary,
                timestamp=s.timestamp,
            )
            for s in sessions
        ]

    async def get_session(self, owner_id: str, session_id: Optional[str]) -> DebugSession:
        if not session_id:
            raise ValidationError("Session ID is required")
        try:
            session = await self.store.get(owner_id, session_id)
        except StorageError as e:
            logger.error(f"Error fetching debug session {session_id}: {e}")
            raise InternalError(f"Error fetching session: {e}") from e
        if session is None:
            raise NotFound("Session not found")
        return session
