"""
Storage Interface - Abstract base class for document storage backends.
The stores above it only speak in relative paths and bytes, so a
filesystem, S3 or database backend can be swapped in.
"""

from abc import ABC, abstractmethod
from typing import Optional, List


class StorageError(Exception):
    """Raised when the backend cannot read or write a document."""


class StorageInterface(ABC):
    """
    Contract for all storage implementations.

    Missing documents are reported as ``None``/``False``; anything that
    prevents the backend from answering raises ``StorageError``.
    """

    @abstractmethod
    async def save(self, path: str, content: bytes | str) -> None:
        """
        Write content to the specified path, replacing what was there.

        Args:
            path: Relative path (e.g., "chats/<owner>/<session>.json")
            content: Content to save, bytes or text

        Raises:
            StorageError: If the write failed
        """

    @abstractmethod
    async def load(self, path: str) -> Optional[bytes]:
        """
        Load content from the specified path.

        Args:
            path: Relative path to load from

        Returns:
            Optional[bytes]: File content, or None if the file doesn't exist
        """

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check if a document exists at the specified path."""

    @abstractmethod
    async def list(self, path: str, pattern: Optional[str] = None) -> List[str]:
        """
        List documents directly inside a directory.

        Args:
            path: Directory path to list
            pattern: Optional glob pattern to filter files (e.g., "*.json")

        Returns:
            List[str]: Sorted relative paths; empty if the directory is missing
        """
