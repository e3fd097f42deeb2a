"""Models module."""

from .user import User, UserCreate, UserLogin, UserInDB, Token
from .chat import ChatMessage, ChatSession, ChatCreate, AskRequest, AskResponse
from .debug import DebugSession, DebugResult, DebugSessionSummary
from .upload import UploadResult

__all__ = [
    'User', 'UserCreate', 'UserLogin', 'UserInDB', 'Token',
    'ChatMessage', 'ChatSession', 'ChatCreate', 'AskRequest', 'AskResponse',
    'DebugSession', 'DebugResult', 'DebugSessionSummary',
    'UploadResult'
]
