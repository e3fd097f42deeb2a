"""Storage module - provides interface and implementations for data persistence."""

from .interface import StorageInterface, StorageError
from .local_storage import LocalStorage
from .chat_store import ChatStore
from .debug_store import DebugSessionStore
from .user_storage import UserStorage, UsernameTaken

__all__ = [
    'StorageInterface', 'StorageError', 'LocalStorage',
    'ChatStore', 'DebugSessionStore', 'UserStorage', 'UsernameTaken'
]
