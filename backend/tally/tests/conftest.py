"""Shared fixtures for scorecard service tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from shared.db.course_repository import DocumentCourseTemplateRepository
from shared.db.game_repository import DocumentGameRepository
from tally.service import ScorecardService

if TYPE_CHECKING:
    from shared.db.document_store import SqliteDocumentStore


class FakeClock:
    """Millisecond clock that ticks forward on every read."""

    def __init__(self, start: int = 1_000) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def games(store: SqliteDocumentStore) -> DocumentGameRepository:
    return DocumentGameRepository(store)


@pytest.fixture
def service(games: DocumentGameRepository, store: SqliteDocumentStore, clock: FakeClock) -> ScorecardService:
    return ScorecardService(games, DocumentCourseTemplateRepository(store), clock=clock)
