"""
Upload Models.
"""

from .base import CamelModel


class UploadResult(CamelModel):
    """Location of an object stored in S3."""
    bucket: str
    key: str
    filename: str
    size: int
