"""
Upload API endpoint.
"""

from fastapi import APIRouter, Depends, File, UploadFile, status

from ..models import UploadResult
from ..services import UploadService
from ..utils.auth import get_current_user_id
from .deps import get_upload_service

router = APIRouter(tags=["uploads"])


@router.post("/uploads", response_model=UploadResult, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    service: UploadService = Depends(get_upload_service)
):
    """Store an attachment in S3."""
    content = await file.read()
    return await service.upload(user_id, file.filename, content, file.content_type)
