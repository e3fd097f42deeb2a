"""
Local Filesystem Storage Implementation.
This implementation stores all documents on the server's local filesystem.
"""

import logging
import os
from pathlib import Path
from typing import Optional, List

import aiofiles

from .interface import StorageInterface, StorageError

logger = logging.getLogger(__name__)


class LocalStorage(StorageInterface):
    """
    Local filesystem storage implementation.
    Stores all data in a base directory on the server.
    """

    def __init__(self, base_dir: str = "./data"):
        """
        Initialize local storage with a base directory.

        Args:
            base_dir: Base directory for all stored files
        """
        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, path: str) -> Path:
        """Convert relative path to full absolute path within base directory."""
        full_path = (self.base_dir / path).resolve()

        # Security check: ensure path is within base_dir
        if full_path != self.base_dir and self.base_dir not in full_path.parents:
            raise StorageError(f"Invalid path: {path} - path traversal detected")

        return full_path

    async def save(self, path: str, content: bytes | str) -> None:
        """Write content atomically: temp file first, then rename over the target."""
        full_path = self._get_full_path(path)
        tmp_path = full_path.with_name(full_path.name + ".tmp")
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, str):
                async with aiofiles.open(tmp_path, 'w', encoding='utf-8') as f:
                    await f.write(content)
            else:
                async with aiofiles.open(tmp_path, 'wb') as f:
                    await f.write(content)
            os.replace(tmp_path, full_path)
        except OSError as e:
            logger.error(f"Error saving file {path}: {e}")
            raise StorageError(f"Could not save {path}") from e

    async def load(self, path: str) -> Optional[bytes]:
        """Load content from local filesystem."""
        full_path = self._get_full_path(path)
        if not full_path.is_file():
            return None
        try:
            async with aiofiles.open(full_path, 'rb') as f:
                return await f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.error(f"Error loading file {path}: {e}")
            raise StorageError(f"Could not load {path}") from e

    async def exists(self, path: str) -> bool:
        """Check if file exists."""
        try:
            return self._get_full_path(path).is_file()
        except StorageError:
            return False

    async def list(self, path: str, pattern: Optional[str] = None) -> List[str]:
        """List files in directory."""
        full_path = self._get_full_path(path)
        if not full_path.is_dir():
            return []
        try:
            files = [p for p in full_path.glob(pattern or "*") if p.is_file()]
        except OSError as e:
            logger.error(f"Error listing files in {path}: {e}")
            raise StorageError(f"Could not list {path}") from e

        return sorted(
            str(p.relative_to(self.base_dir)) for p in files
            if not p.name.endswith(".tmp")
        )
