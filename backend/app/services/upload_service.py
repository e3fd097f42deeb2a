"""
Upload Service - stores user files in S3.
"""

import logging
import re
import uuid
from typing import Optional

from starlette.concurrency import run_in_threadpool

from ..core.errors import ValidationError
from ..models import UploadResult
from .aws import S3Uploader

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(filename: Optional[str]) -> str:
    """Drop any directory part and replace characters S3 keys should not carry."""
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1]
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name or "upload"


class UploadService:
    """Puts uploads under ``uploads/<owner_id>/`` so owners never collide."""

    def __init__(self, uploader: S3Uploader):
        self.uploader = uploader

    async def upload(
        self,
        owner_id: str,
        filename: Optional[str],
        content: bytes,
        content_type: Optional[str] = None
    ) -> UploadResult:
        if not content:
            raise ValidationError("File is empty")

        name = safe_filename(filename)
        key = f"uploads/{owner_id}/{uuid.uuid4().hex}-{name}"
        await run_in_threadpool(self.uploader.put, key, content, content_type)

        logger.info(f"Uploaded {name} ({len(content)} bytes) to s3://{self.uploader.bucket}/{key}")
        return UploadResult(bucket=self.uploader.bucket, key=key, filename=name, size=len(content))
