"""
Owner-scoped JSON document collections on top of a StorageInterface.

Documents live at ``<collection>/<owner_key>/<doc_id>.json`` where the owner
key is a digest of the owner id, so a lookup is always keyed by both ids: a
document can only be reached through its owner.
"""

import hashlib
import logging
import re
from typing import Generic, List, Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel

from .interface import StorageInterface, StorageError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Document ids come from clients; anything else could escape the owner's directory
_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


def is_valid_id(value: Optional[str]) -> bool:
    return bool(value) and _ID_PATTERN.match(value) is not None


def owner_key(owner_id: str) -> str:
    """Path segment for an owner id; owner ids are opaque and may hold any character."""
    return hashlib.sha256(owner_id.encode("utf-8")).hexdigest()


class DocumentCollection(Generic[ModelT]):
    """One pydantic document per file, grouped by owner."""

    collection: str = ""
    model: Type[ModelT]

    def __init__(self, storage: StorageInterface):
        self.storage = storage

    def _path(self, owner_id: str, doc_id: str) -> Optional[str]:
        if not owner_id or not is_valid_id(doc_id):
            return None
        return f"{self.collection}/{owner_key(owner_id)}/{doc_id}.json"

    def _decode(self, path: str, content: bytes) -> ModelT:
        try:
            return self.model.model_validate_json(content)
        except pydantic.ValidationError as e:
            logger.error(f"Corrupt document {path}: {e}")
            raise StorageError(f"Corrupt document {path}") from e

    async def _read(self, owner_id: str, doc_id: str) -> Optional[ModelT]:
        path = self._path(owner_id, doc_id)
        if path is None:
            return None
        content = await self.storage.load(path)
        if content is None:
            return None
        doc = self._decode(path, content)
        # The stored owner must agree with the directory it was found in
        if getattr(doc, "owner_id", None) != owner_id:
            logger.warning(f"Owner mismatch in {path}")
            return None
        return doc

    async def _write(self, owner_id: str, doc_id: str, doc: ModelT, create: bool = False) -> None:
        path = self._path(owner_id, doc_id)
        if path is None:
            raise StorageError(f"Invalid document key {owner_id}/{doc_id}")
        if create and await self.storage.exists(path):
            raise StorageError(f"Document {path} already exists")
        await self.storage.save(path, doc.model_dump_json())

    async def _read_all(self, owner_id: str) -> List[ModelT]:
        if not owner_id:
            return []
        docs = []
        for path in await self.storage.list(f"{self.collection}/{owner_key(owner_id)}", pattern="*.json"):
            content = await self.storage.load(path)
            if content is None:
                continue
            doc = self._decode(path, content)
            if getattr(doc, "owner_id", None) == owner_id:
                docs.append(doc)
        return docs
