"""
Debug API endpoints - CloudWatch diagnostics with a GenAI analysis.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..models import DebugResult, DebugSessionSummary
from ..services import DebugService
from ..utils.auth import get_current_user_id
from .deps import get_debug_service

router = APIRouter(tags=["debug"])


@router.get("/debug", response_model=DebugResult)
async def get_debug_data(
    resource_type: Optional[str] = Query(None, alias="type"),
    resource_id: Optional[str] = Query(None, alias="id"),
    user_id: str = Depends(get_current_user_id),
    service: DebugService = Depends(get_debug_service)
):
    """Fetch logs and metrics for a resource and analyze them."""
    session = await service.run_debug(user_id, resource_type, resource_id)
    return DebugResult.from_session(session)


@router.get("/sessions", response_model=List[DebugSessionSummary])
async def get_sessions(
    user_id: str = Depends(get_current_user_id),
    service: DebugService = Depends(get_debug_service)
):
    return await service.list_sessions(user_id)


@router.get("/session", response_model=DebugResult)
async def get_session_by_id(
    session_id: Optional[str] = Query(None, alias="sessionId"),
    user_id: str = Depends(get_current_user_id),
    service: DebugService = Depends(get_debug_service)
):
    session = await service.get_session(user_id, session_id)
    return DebugResult.from_session(session)
