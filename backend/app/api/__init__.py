"""API module."""

from .auth import router as users_router
from .chat import router as chat_router
from .debug import router as debug_router
from .uploads import router as uploads_router

__all__ = ['users_router', 'chat_router', 'debug_router', 'uploads_router']
