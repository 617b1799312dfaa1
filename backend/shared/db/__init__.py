"""SQLite document store, schema migrations and the repositories built on them."""

from shared.db.connection import Database
from shared.db.course_repository import DocumentCourseTemplateRepository
from shared.db.document_store import SqliteDocumentStore
from shared.db.exceptions import (
    ConflictError,
    MigrationError,
    NotFoundError,
    StoreError,
    StoreUnavailableError,
)
from shared.db.game_repository import DocumentGameRepository
from shared.db.migrations import SCHEMA_VERSION, migrate

__all__ = [
    "SCHEMA_VERSION",
    "ConflictError",
    "Database",
    "DocumentCourseTemplateRepository",
    "DocumentGameRepository",
    "MigrationError",
    "NotFoundError",
    "SqliteDocumentStore",
    "StoreError",
    "StoreUnavailableError",
    "migrate",
]
