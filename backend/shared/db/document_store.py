"""SQLite-backed document store."""

from __future__ import annotations

import asyncio
import contextlib
import json
import sqlite3
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

from shared.dal.document_store import Document, DocumentStore, is_local
from shared.db.exceptions import ConflictError, NotFoundError, StoreUnavailableError

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from shared.db.connection import Database

logger = structlog.get_logger()

_RESERVED_FIELDS = ("_id", "_rev")


def next_revision(current: str | None) -> str:
    """Build the revision that follows `current`: "<generation>-<random hex>"."""
    generation = int(current.split("-", 1)[0]) if current else 0
    return f"{generation + 1}-{uuid4().hex}"


class SqliteDocumentStore(DocumentStore):
    """DocumentStore over a single `documents` table.

    Bodies are stored as JSON without the reserved fields; "_id" and "_rev"
    are re-attached on read. Writes run one at a time under an asyncio lock
    and are committed before the call returns.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def get(self, doc_id: str) -> Document:
        row = self._fetch_one("SELECT rev, data FROM documents WHERE id = ?", (doc_id,))
        if row is None:
            raise NotFoundError(doc_id)
        return _to_document(doc_id, row[0], row[1])

    async def put(self, doc: Document) -> str:
        doc_id = _require_id(doc)
        async with self._lock:
            with self._transaction() as conn:
                rev = _write(conn, doc_id, doc)
        logger.debug("document written", doc_id=doc_id, rev=rev)
        return rev

    async def post(self, doc: Document) -> tuple[str, str]:
        doc_id = str(uuid4())
        body = {k: v for k, v in doc.items() if k not in _RESERVED_FIELDS}
        rev = await self.put({**body, "_id": doc_id})
        return doc_id, rev

    async def remove(self, doc_id: str, rev: str) -> None:
        async with self._lock:
            with self._transaction() as conn:
                current = _current_revision(conn, doc_id)
                if current is None:
                    raise NotFoundError(doc_id)
                if current != rev:
                    raise ConflictError(doc_id, rev, current)
                conn.execute("DELETE FROM documents WHERE id = ?", (doc_id,))
        logger.debug("document removed", doc_id=doc_id, rev=rev)

    async def all_docs(self, *, include_local: bool = False) -> list[Document]:
        rows = self._fetch_all("SELECT id, rev, data FROM documents ORDER BY id")
        return [_to_document(*row) for row in rows if include_local or not is_local(row[0])]

    async def bulk_put(self, docs: Sequence[Document]) -> list[str]:
        if not docs:
            return []
        async with self._lock:
            with self._transaction() as conn:
                revs = [_write(conn, _require_id(doc), doc) for doc in docs]
        logger.debug("documents written", count=len(revs))
        return revs

    async def destroy(self) -> None:
        async with self._lock:
            self._db.destroy()

    @contextlib.contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self._db.connection
        try:
            conn.execute("BEGIN IMMEDIATE")
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            _rollback(conn)
            raise StoreUnavailableError(f"Write to {self._db.path} failed: {exc}") from exc
        except BaseException:
            _rollback(conn)
            raise

    def _fetch_one(self, sql: str, params: tuple[object, ...] = ()) -> tuple[str, ...] | None:
        try:
            return self._db.connection.execute(sql, params).fetchone()
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"Read from {self._db.path} failed: {exc}") from exc

    def _fetch_all(self, sql: str, params: tuple[object, ...] = ()) -> list[tuple[str, ...]]:
        try:
            return self._db.connection.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"Read from {self._db.path} failed: {exc}") from exc


def _require_id(doc: Document) -> str:
    doc_id = doc.get("_id")
    if not isinstance(doc_id, str) or not doc_id:
        raise ValueError("Document must carry a non-empty string '_id'")
    return doc_id


def _current_revision(conn: sqlite3.Connection, doc_id: str) -> str | None:
    row = conn.execute("SELECT rev FROM documents WHERE id = ?", (doc_id,)).fetchone()
    return None if row is None else row[0]


def _write(conn: sqlite3.Connection, doc_id: str, doc: Document) -> str:
    sent = doc.get("_rev")
    current = _current_revision(conn, doc_id)
    if sent != current:
        raise ConflictError(doc_id, sent, current)

    rev = next_revision(current)
    body = json.dumps({k: v for k, v in doc.items() if k not in _RESERVED_FIELDS})
    conn.execute(
        "INSERT INTO documents (id, rev, data) VALUES (?, ?, ?) "
        "ON CONFLICT(id) DO UPDATE SET rev = excluded.rev, data = excluded.data",
        (doc_id, rev, body),
    )
    return rev


def _to_document(doc_id: str, rev: str, data: str) -> Document:
    doc = json.loads(data)
    doc["_id"] = doc_id
    doc["_rev"] = rev
    return doc


def _rollback(conn: sqlite3.Connection) -> None:
    with contextlib.suppress(sqlite3.Error):
        conn.rollback()
