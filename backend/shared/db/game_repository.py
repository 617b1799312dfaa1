"""Game repository on top of the document store."""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog
from pydantic import ValidationError

from shared.dal.game_repository import GameRepository
from shared.dal.models import (
    DEFAULT_HOLE_COUNT,
    DEFAULT_PAR,
    GAME_DOC_TYPE,
    Game,
    GameVariant,
    GolfHole,
    blank_phase10_round,
)
from shared.db.exceptions import ConflictError, NotFoundError

if TYPE_CHECKING:
    from shared.dal.document_store import Document, DocumentStore
    from shared.dal.models import GameDraft

logger = structlog.get_logger()

# managed by the store or fixed at creation
_IMMUTABLE_FIELDS = frozenset({"id", "rev", "variant"})


def current_time_ms() -> int:
    return time.time_ns() // 1_000_000


def format_created_date(timestamp_ms: int) -> str:
    """Render a creation timestamp the way the game list shows it, e.g. "October 19, 2026"."""
    created = datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC)
    return f"{created:%B} {created.day}, {created.year}"


def game_to_document(game: Game) -> Document:
    doc = game.model_dump(mode="json", exclude={"id", "rev"})
    doc["_id"] = game.id
    doc["type"] = GAME_DOC_TYPE
    if game.rev is not None:
        doc["_rev"] = game.rev
    return doc


def game_from_document(doc: Document) -> Game:
    body = {k: v for k, v in doc.items() if k not in ("_id", "_rev", "type")}
    return Game.model_validate({**body, "id": doc["_id"], "rev": doc["_rev"]})


class DocumentGameRepository(GameRepository):
    """GameRepository storing each game as one document with `type: "game"`."""

    def __init__(
        self,
        store: DocumentStore,
        *,
        default_hole_count: int = DEFAULT_HOLE_COUNT,
        default_par: int = DEFAULT_PAR,
    ) -> None:
        self._store = store
        self._default_hole_count = default_hole_count
        self._default_par = default_par

    async def create_game(self, draft: GameDraft, *, now_ms: int | None = None) -> Game:
        """Build the stored game from a draft and persist it.

        Phase 10 starts with one all-zero round; golf variants get their hole
        layout from the course template, explicit pars, or the default layout.
        """
        created_at = now_ms if now_ms is not None else current_time_ms()
        game = Game(
            id=str(uuid4()),
            name=draft.name or draft.variant.display_name,
            variant=draft.variant,
            created_date=format_created_date(created_at),
            last_played_at=created_at,
            players=draft.players,
            phase10_rounds=[blank_phase10_round(draft.players)] if draft.variant == GameVariant.PHASE10 else [],
            golf_rounds=self._seed_holes(draft),
            course_name=draft.course.name if draft.course else None,
        )
        rev = await self._store.put(game_to_document(game))
        logger.info("game created", game_id=game.id, variant=game.variant, players=len(game.players))
        return game.model_copy(update={"rev": rev})

    async def get_game(self, game_id: str) -> Game | None:
        try:
            doc = await self._store.get(game_id)
        except NotFoundError:
            return None
        if doc.get("type") != GAME_DOC_TYPE:
            return None
        return game_from_document(doc)

    async def list_games(self) -> list[Game]:
        """Return every readable game, most recently played first.

        A game document that no longer validates is logged and left out so
        the rest of the list stays reachable.
        """
        games = []
        for doc in await self._store.all_docs():
            if doc.get("type") != GAME_DOC_TYPE:
                continue
            try:
                games.append(game_from_document(doc))
            except ValidationError as exc:
                logger.warning("skipping unreadable game", game_id=doc["_id"], errors=exc.error_count())
        games.sort(key=lambda g: g.last_played_at, reverse=True)
        return games

    async def update_game(
        self,
        game_id: str,
        changes: dict[str, Any],
        *,
        expected_rev: str | None = None,
    ) -> str:
        """Read the stored game, merge `changes` over it, validate and write it back.

        Raises NotFoundError for an unknown id and ConflictError when
        `expected_rev` is stale or another write lands between read and write.
        """
        immutable = _IMMUTABLE_FIELDS & changes.keys()
        if immutable:
            raise ValueError(f"Cannot change {sorted(immutable)} of game '{game_id}'")

        doc = await self._store.get(game_id)
        if expected_rev is not None and expected_rev != doc["_rev"]:
            raise ConflictError(game_id, expected_rev, doc["_rev"])

        current = game_from_document(doc)
        merged = Game.model_validate({**current.model_dump(), **changes})
        if current.variant.is_golf and len(merged.golf_rounds) != len(current.golf_rounds):
            raise ValueError(f"Hole count of game '{game_id}' is fixed at {len(current.golf_rounds)}")

        rev = await self._store.put(game_to_document(merged))
        logger.debug("game updated", game_id=game_id, fields=sorted(changes), rev=rev)
        return rev

    async def delete_game(self, game_id: str, rev: str) -> None:
        await self._store.remove(game_id, rev)
        logger.info("game deleted", game_id=game_id)

    async def clear_all(self) -> None:
        await self._store.destroy()
        logger.warning("all data cleared")

    def _seed_holes(self, draft: GameDraft) -> list[GolfHole]:
        if not draft.variant.is_golf:
            return []
        if draft.course is not None:
            pars = draft.course.pars
        elif draft.pars:
            pars = draft.pars
        else:
            pars = [self._default_par] * (draft.hole_count or self._default_hole_count)
        return [GolfHole(par=par) for par in pars]
