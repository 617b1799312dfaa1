"""SQLite connection that backs the document store."""

import os
import sqlite3
from pathlib import Path

import structlog

from shared.db.exceptions import StoreUnavailableError

logger = structlog.get_logger()

MEMORY_PATH = ":memory:"

_DB_FILE_PERMISSIONS = 0o600
_DB_FILE_SUFFIXES = ("", "-wal", "-shm")

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS documents (
    id TEXT PRIMARY KEY,
    rev TEXT NOT NULL,
    data TEXT NOT NULL
);
"""


class Database:
    """Owns the SQLite file: opening, schema creation, closing and destruction."""

    def __init__(self, path: str | Path) -> None:
        self._path = str(path)
        self._conn: sqlite3.Connection | None = None

    @property
    def path(self) -> str:
        return self._path

    @property
    def is_memory(self) -> bool:
        return self._path == MEMORY_PATH

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    @property
    def connection(self) -> sqlite3.Connection:
        """Return the active connection or raise if disconnected."""
        if self._conn is None:
            raise StoreUnavailableError("Database is not connected")
        return self._conn

    def connect(self) -> None:
        """Open the file, apply pragmas, create the documents table and harden permissions."""
        if not self.is_memory:
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)

        try:
            self._conn = sqlite3.connect(self._path, check_same_thread=False)
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA synchronous=FULL")
            self._conn.execute("PRAGMA busy_timeout=5000")
            self._conn.executescript(_SCHEMA_SQL)
        except sqlite3.Error as exc:
            self.close()
            raise StoreUnavailableError(f"Cannot open document store at {self._path}") from exc

        self._harden_permissions()
        logger.debug("document store opened", path=self._path)

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def destroy(self) -> None:
        """Close the connection and delete every file belonging to the database.

        The instance can be connected again afterwards and starts empty.
        """
        self.close()
        if self.is_memory:
            return
        for suffix in _DB_FILE_SUFFIXES:
            p = Path(self._path + suffix)
            try:
                p.unlink(missing_ok=True)
            except OSError as exc:
                raise StoreUnavailableError(f"Cannot delete {p}") from exc
        logger.info("document store destroyed", path=self._path)

    def _harden_permissions(self) -> None:
        """Restrict the database and its WAL/SHM siblings to the owner (best effort)."""
        if os.name != "posix" or self.is_memory:  # pragma: no cover
            return
        for suffix in _DB_FILE_SUFFIXES:
            p = Path(self._path + suffix)
            if p.exists():
                try:
                    p.chmod(_DB_FILE_PERMISSIONS)
                except OSError:
                    logger.warning("could not set file permissions", permissions=oct(_DB_FILE_PERMISSIONS), path=str(p))
