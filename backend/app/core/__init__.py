"""Core module - error taxonomy and logging setup."""

from .errors import (
    ServiceError,
    ValidationError,
    Unauthorized,
    NotFound,
    UpstreamError,
    InternalError,
)

__all__ = [
    'ServiceError', 'ValidationError', 'Unauthorized',
    'NotFound', 'UpstreamError', 'InternalError'
]
