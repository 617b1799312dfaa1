"""Orchestration between the presentation layer, the scoring engines and the repositories."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from scoring import engine, golf, phase10, simple, yahtzee
from shared.dal.models import MAX_PHASE10_ROUNDS, Game, GameStatus
from shared.db.exceptions import NotFoundError
from shared.db.game_repository import current_time_ms

if TYPE_CHECKING:
    from collections.abc import Callable

    from scoring.engine import Scoreboard
    from scoring.standings import Winner
    from shared.dal.course_repository import CourseTemplateRepository
    from shared.dal.game_repository import GameRepository
    from shared.dal.models import CategoryScore, CourseTemplate, GameDraft, GameVariant, YahtzeeCategory

logger = structlog.get_logger()

Change = dict[str, Any] | None


def _as_change(field: str, value: object | None) -> Change:
    return None if value is None else {field: value}


class ScorecardService:
    """What a scorecard screen calls for every user action.

    Each edit reads the game, lets the variant's engine compute the new raw
    data and writes it back with the revision it read. Edits the rules refuse
    (and any edit of a completed game) are declined: nothing is written and
    None is returned. ConflictError from a concurrent write is passed to the
    caller, who decides whether to re-read and try again.
    """

    def __init__(
        self,
        games: GameRepository,
        courses: CourseTemplateRepository,
        *,
        max_phase10_rounds: int = MAX_PHASE10_ROUNDS,
        clock: Callable[[], int] = current_time_ms,
    ) -> None:
        self._games = games
        self._courses = courses
        self._max_phase10_rounds = max_phase10_rounds
        self._clock = clock

    # -- games --
    async def start_game(self, draft: GameDraft) -> Game:
        return await self._games.create_game(draft, now_ms=self._clock())

    async def list_games(self) -> list[Game]:
        return await self._games.list_games()

    async def get_game(self, game_id: str) -> Game:
        return await self._fetch_game(game_id)

    async def get_scoreboard(self, game_id: str) -> Scoreboard:
        return engine.scoreboard(await self._fetch_game(game_id))

    async def delete_game(self, game_id: str, rev: str) -> None:
        await self._games.delete_game(game_id, rev)

    async def finish_game(self, game_id: str) -> list[Winner] | None:
        """Mark the game completed and return its winners; None if it cannot be finished now."""
        game = await self._fetch_game(game_id)
        if not engine.can_finish(game):
            logger.info("finish declined", game_id=game_id, status=game.status, variant=game.variant)
            return None

        result = engine.winners(game)
        await self._games.update_game(
            game.id,
            {"status": GameStatus.COMPLETED, "last_played_at": self._clock()},
            expected_rev=game.rev,
        )
        logger.info("game finished", game_id=game_id, winners=[w.name for w in result])
        return result

    # -- simple tally --
    async def add_simple_score(self, game_id: str, score: int, player: str | None = None) -> Game | None:
        return await self._edit(
            game_id,
            "add_simple_score",
            lambda g: _as_change("scores", simple.add_score(g, score, player)),
        )

    async def undo_simple_round(self, game_id: str) -> Game | None:
        return await self._edit(
            game_id,
            "undo_simple_round",
            lambda g: _as_change("scores", simple.undo_last_round(g)),
        )

    # -- yahtzee --
    async def set_yahtzee_score(
        self,
        game_id: str,
        player: str,
        category: YahtzeeCategory,
        score: CategoryScore | None,
    ) -> Game | None:
        return await self._edit(
            game_id,
            "set_yahtzee_score",
            lambda g: _as_change("scores", yahtzee.set_entry(g, player, category, score)),
        )

    async def choose_yahtzee_fixed(
        self,
        game_id: str,
        player: str,
        category: YahtzeeCategory,
        choice: bool | None,
    ) -> Game | None:
        return await self.set_yahtzee_score(game_id, player, category, yahtzee.resolve_fixed_choice(category, choice))

    async def add_yahtzee_bonus(self, game_id: str, player: str) -> Game | None:
        return await self._edit(
            game_id,
            "add_yahtzee_bonus",
            lambda g: _as_change("scores", yahtzee.add_yahtzee_bonus(g, player)),
        )

    # -- phase 10 --
    async def add_phase10_round(self, game_id: str) -> Game | None:
        return await self._edit(
            game_id,
            "add_phase10_round",
            lambda g: _as_change("phase10_rounds", phase10.add_round(g, max_rounds=self._max_phase10_rounds)),
        )

    async def remove_phase10_round(self, game_id: str) -> Game | None:
        return await self._edit(
            game_id,
            "remove_phase10_round",
            lambda g: _as_change("phase10_rounds", phase10.remove_round(g)),
        )

    async def set_phase10_entry(
        self,
        game_id: str,
        round_index: int,
        player: str,
        score: int,
        phase_completed: bool,
    ) -> Game | None:
        return await self._edit(
            game_id,
            "set_phase10_entry",
            lambda g: _as_change("phase10_rounds", phase10.set_entry(g, round_index, player, score, phase_completed)),
        )

    # -- golf / putt-putt --
    async def set_golf_score(self, game_id: str, player: str, hole_index: int, strokes: int | None) -> Game | None:
        return await self._edit(
            game_id,
            "set_golf_score",
            lambda g: _as_change("scores", golf.set_score(g, player, hole_index, strokes)),
        )

    # -- course templates --
    async def save_course_template(self, template: CourseTemplate) -> CourseTemplate:
        return await self._courses.save_course_template(template)

    async def list_course_templates(self, game_type: GameVariant) -> list[CourseTemplate]:
        return await self._courses.list_course_templates(game_type)

    async def delete_course_template(self, template_id: str, rev: str) -> None:
        await self._courses.delete_course_template(template_id, rev)

    # -- internal helpers --
    async def _fetch_game(self, game_id: str) -> Game:
        game = await self._games.get_game(game_id)
        if game is None:
            raise NotFoundError(game_id)
        return game

    async def _edit(self, game_id: str, action: str, compute: Callable[[Game], Change]) -> Game | None:
        game = await self._fetch_game(game_id)
        if game.is_completed:
            logger.info("edit declined", game_id=game_id, action=action, reason="game completed")
            return None

        changes = compute(game)
        if changes is None:
            logger.info("edit declined", game_id=game_id, action=action, reason="refused by game rules")
            return None

        changes["last_played_at"] = self._clock()
        rev = await self._games.update_game(game.id, changes, expected_rev=game.rev)
        return Game.model_validate({**game.model_dump(), **changes, "rev": rev})
