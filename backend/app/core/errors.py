"""
Service error taxonomy.

Every service maps its own failures onto one of these; the application's
exception handlers render them as ``{"message": ...}`` with the matching status.
"""

from typing import Dict, Optional


class ServiceError(Exception):
    """Base class for errors that cross the HTTP boundary."""

    status_code: int = 500

    def __init__(self, message: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.headers = headers


class ValidationError(ServiceError):
    """Missing or malformed input from the caller."""

    status_code = 400


class Unauthorized(ServiceError):
    """Missing, invalid or expired credential."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class NotFound(ServiceError):
    """Resource absent or not owned by the caller (never says which)."""

    status_code = 404


class UpstreamError(ServiceError):
    """An external collaborator (CloudWatch, Lambda, S3) failed."""

    status_code = 500


class InternalError(ServiceError):
    """Persistence or unexpected failure."""

    status_code = 500
