"""
Request dependencies - hand out the collaborators built at startup.

Everything lives on ``app.state`` (see ``main.lifespan``); tests replace these
functions through ``app.dependency_overrides``.
"""

from fastapi import HTTPException, Request, status

from ..services import ChatService, DebugService, UploadService
from ..storage import UserStorage


def get_user_storage(request: Request) -> UserStorage:
    return request.app.state.user_storage


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


def get_debug_service(request: Request) -> DebugService:
    return request.app.state.debug_service


def get_upload_service(request: Request) -> UploadService:
    service = getattr(request.app.state, "upload_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="File uploads are not configured"
        )
    return service
