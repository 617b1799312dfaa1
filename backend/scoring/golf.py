"""Golf and Putt-Putt stroke totals; the lowest total wins."""

from __future__ import annotations

from scoring.standings import Winner, require_variant, select_winners
from shared.dal.models import Game, GameVariant, GolfEntries

_GOLF_VARIANTS = (GameVariant.GOLF, GameVariant.PUTT_PUTT)


def hole_scores(game: Game, player: str) -> list[int | None]:
    """Strokes per hole for `player`, padded with None up to the hole count."""
    require_variant(game, *_GOLF_VARIANTS)
    entries = game.scores.get(player)
    holes = list(entries.holes) if isinstance(entries, GolfEntries) else []
    return holes + [None] * (len(game.golf_rounds) - len(holes))


def totals(game: Game) -> dict[str, int]:
    return {player: sum(s or 0 for s in hole_scores(game, player)) for player in game.players}


def total_par(game: Game) -> int:
    require_variant(game, *_GOLF_VARIANTS)
    return sum(hole.par for hole in game.golf_rounds)


def relative_to_par(game: Game) -> dict[str, int]:
    """Strokes over (+) or under (-) par, counting only the holes each player has played."""
    result = {}
    for player in game.players:
        played = [(s, hole.par) for s, hole in zip(hole_scores(game, player), game.golf_rounds) if s is not None]
        result[player] = sum(s - par for s, par in played)
    return result


def set_score(game: Game, player: str, hole_index: int, strokes: int | None) -> dict[str, GolfEntries] | None:
    """Return new scores with one hole set, or cleared when `strokes` is None.

    Returns None for an unknown player or a hole outside the course.
    """
    require_variant(game, *_GOLF_VARIANTS)
    if player not in game.players or not 0 <= hole_index < len(game.golf_rounds):
        return None
    if strokes is not None and strokes < 0:
        raise ValueError(f"Stroke count cannot be negative, got {strokes}")

    holes = hole_scores(game, player)
    holes[hole_index] = strokes
    while holes and holes[-1] is None:
        holes.pop()

    scores = {p: e.model_copy(deep=True) for p, e in game.scores.items()}
    scores[player] = GolfEntries(holes=holes)
    return scores


def winners(game: Game) -> list[Winner]:
    return select_winners(totals(game), highest=False)
