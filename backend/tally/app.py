"""Application lifecycle: one store per process, migrated before anything touches it."""

from __future__ import annotations

import structlog

from shared.db import (
    Database,
    DocumentCourseTemplateRepository,
    DocumentGameRepository,
    SqliteDocumentStore,
    StoreError,
    migrate,
)
from shared.logging import setup_logging
from tally.service import ScorecardService
from tally.settings import TallySettings

logger = structlog.get_logger()


class TallyPad:
    """Owns the database handle and hands out repositories once migrations have run.

    Construct once at startup, `await open()`, then use `games`, `courses`
    and `service`. `clear_all_data()` destroys the store and opens a fresh
    one in its place.
    """

    def __init__(self, settings: TallySettings | None = None) -> None:
        if settings is None:  # pragma: no cover
            settings = TallySettings()
        self.settings = settings
        self._db: Database | None = None
        self._store: SqliteDocumentStore | None = None
        self._games: DocumentGameRepository | None = None
        self._courses: DocumentCourseTemplateRepository | None = None
        self._service: ScorecardService | None = None
        self.schema_version: int | None = None

    @property
    def is_open(self) -> bool:
        return self._service is not None

    @property
    def games(self) -> DocumentGameRepository:
        if self._games is None:
            raise RuntimeError("TallyPad is not open")
        return self._games

    @property
    def courses(self) -> DocumentCourseTemplateRepository:
        if self._courses is None:
            raise RuntimeError("TallyPad is not open")
        return self._courses

    @property
    def service(self) -> ScorecardService:
        if self._service is None:
            raise RuntimeError("TallyPad is not open")
        return self._service

    async def open(self, *, configure_logging: bool = False) -> None:
        """Connect, migrate, then expose the repositories. Migration errors propagate."""
        if configure_logging:
            setup_logging(log_dir=self.settings.log_dir)
        if self.is_open:
            return

        db = Database(self.settings.database_path)
        db.connect()
        store = SqliteDocumentStore(db)
        try:
            self.schema_version = await migrate(store)
        except Exception:
            db.close()
            raise

        self._db = db
        self._store = store
        self._games = DocumentGameRepository(
            store,
            default_hole_count=self.settings.default_hole_count,
            default_par=self.settings.default_par,
        )
        self._courses = DocumentCourseTemplateRepository(store)
        self._service = ScorecardService(
            self._games,
            self._courses,
            max_phase10_rounds=self.settings.max_phase10_rounds,
        )
        logger.info("tallypad ready", database_path=self.settings.database_path, schema_version=self.schema_version)

    async def clear_all_data(self) -> None:
        """Destroy every game and template, then reopen on an empty store.

        When the store cannot be destroyed the error is logged and re-raised
        and the app is left closed; `open()` reconnects to whatever remains.
        """
        games = self.games
        try:
            await games.clear_all()
        except StoreError:
            logger.exception("clearing all data failed", database_path=self.settings.database_path)
            raise
        finally:
            self.close()
        await self.open()

    def close(self) -> None:
        if self._db is not None:
            self._db.close()
        self._reset()

    def _reset(self) -> None:
        self._db = None
        self._store = None
        self._games = None
        self._courses = None
        self._service = None
