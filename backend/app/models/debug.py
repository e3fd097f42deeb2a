"""
Debug Session Models - CloudWatch data bundled with a generated analysis.
"""

from datetime import datetime
from typing import Any, Dict, List
from pydantic import Field

from .base import CamelModel, utcnow


class DebugSession(CamelModel):
    """Stored debug bundle. Immutable once saved."""
    session_id: str
    owner_id: str
    resource_type: str
    resource_id: str
    logs: List[str] = Field(default_factory=list)
    metrics: Dict[str, Any] = Field(default_factory=dict)
    genai_response: str = ""
    timestamp: datetime = Field(default_factory=utcnow)

    @property
    def summary(self) -> str:
        return f"Debug {self.resource_type} {self.resource_id}"


class DebugResult(CamelModel):
    """What GET /debug and GET /session return."""
    logs: List[str]
    metrics: Dict[str, Any]
    genai_response: str
    session_id: str

    @classmethod
    def from_session(cls, session: DebugSession) -> "DebugResult":
        return cls(
            logs=session.logs,
            metrics=session.metrics,
            genai_response=session.genai_response,
            session_id=session.session_id,
        )


class DebugSessionSummary(CamelModel):
    """Entry of GET /sessions."""
    session_id: str
    summary: str
    timestamp: datetime
