"""Errors raised by the document store and the layers built on it."""


class StoreError(Exception):
    """Base class for document store failures."""


class NotFoundError(StoreError):
    def __init__(self, doc_id: str) -> None:
        super().__init__(f"Document '{doc_id}' not found")
        self.doc_id = doc_id


class ConflictError(StoreError):
    """The revision sent with a write does not match the stored revision.

    Recoverable: re-read the document, re-apply the change and write again.
    """

    def __init__(self, doc_id: str, expected_rev: str | None, current_rev: str | None) -> None:
        super().__init__(
            f"Revision conflict on '{doc_id}': sent {expected_rev!r}, stored {current_rev!r}",
        )
        self.doc_id = doc_id
        self.expected_rev = expected_rev
        self.current_rev = current_rev


class StoreUnavailableError(StoreError):
    """Underlying storage cannot be used (closed, destroyed, disk full, locked)."""


class MigrationError(StoreError):
    def __init__(self, version: int, message: str) -> None:
        super().__init__(f"Migration to version {version} failed: {message}")
        self.version = version
