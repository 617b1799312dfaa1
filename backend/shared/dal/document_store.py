"""Abstract interface for the revisioned document store."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

Document = dict[str, Any]

LOCAL_PREFIX = "_local/"


def is_local(doc_id: str) -> bool:
    """Local documents hold store bookkeeping and are never listed."""
    return doc_id.startswith(LOCAL_PREFIX)


class DocumentStore(ABC):
    """Key/value store of JSON documents with optimistic concurrency.

    Every stored document carries "_id" and "_rev". A write must present the
    revision currently stored under its key (or no revision for a new key);
    anything else fails with ConflictError.
    """

    @abstractmethod
    async def get(self, doc_id: str) -> Document:
        """Return the document or raise NotFoundError."""

    @abstractmethod
    async def put(self, doc: Document) -> str:
        """Write the document and return its new revision."""

    @abstractmethod
    async def post(self, doc: Document) -> tuple[str, str]:
        """Write the document under a fresh key and return (id, revision)."""

    @abstractmethod
    async def remove(self, doc_id: str, rev: str) -> None: ...

    @abstractmethod
    async def all_docs(self, *, include_local: bool = False) -> list[Document]: ...

    @abstractmethod
    async def bulk_put(self, docs: Sequence[Document]) -> list[str]:
        """Write several documents atomically; one conflict rejects the batch."""

    @abstractmethod
    async def destroy(self) -> None:
        """Irreversibly delete every document along with the underlying storage."""
