"""Variant dispatch: one entry point for totals, winners and finish rules of any game."""

from __future__ import annotations

from dataclasses import dataclass, field

from scoring import golf, phase10, simple, yahtzee
from scoring.standings import Winner
from shared.dal.models import Game, GameStatus, GameVariant


@dataclass(frozen=True)
class Scoreboard:
    """Everything a scorecard renders, derived from one game snapshot."""

    game_id: str
    variant: GameVariant
    status: GameStatus
    totals: dict[str, int]
    can_finish: bool
    # leaders while in progress, final result once completed
    winners: list[Winner] = field(default_factory=list)
    total_par: int | None = None


def totals(game: Game) -> dict[str, int]:
    """The score each player is ranked by."""
    match game.variant:
        case GameVariant.SIMPLE:
            return simple.totals(game)
        case GameVariant.YAHTZEE:
            return {player: t.grand_total for player, t in yahtzee.totals(game).items()}
        case GameVariant.PHASE10:
            return {player: s.total_score for player, s in phase10.player_stats(game).items()}
        case GameVariant.GOLF | GameVariant.PUTT_PUTT:
            return golf.totals(game)
    raise ValueError(f"Unknown game variant: {game.variant}")


def winners(game: Game) -> list[Winner]:
    match game.variant:
        case GameVariant.SIMPLE:
            return simple.winners(game)
        case GameVariant.YAHTZEE:
            return yahtzee.winners(game)
        case GameVariant.PHASE10:
            return phase10.winners(game)
        case GameVariant.GOLF | GameVariant.PUTT_PUTT:
            return golf.winners(game)
    raise ValueError(f"Unknown game variant: {game.variant}")


def can_finish(game: Game) -> bool:
    if game.is_completed:
        return False
    if game.variant == GameVariant.PHASE10:
        return phase10.can_finish(game)
    return True


def scoreboard(game: Game) -> Scoreboard:
    return Scoreboard(
        game_id=game.id,
        variant=game.variant,
        status=game.status,
        totals=totals(game),
        can_finish=can_finish(game),
        winners=winners(game),
        total_par=golf.total_par(game) if game.variant.is_golf else None,
    )
