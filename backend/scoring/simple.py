"""Simple tally: every player adds a round score in turn; highest total wins."""

from __future__ import annotations

from scoring.standings import Winner, require_variant, select_winners
from shared.dal.models import Game, GameVariant, SimpleEntries


def _rounds(game: Game, player: str) -> list[int]:
    entries = game.scores.get(player)
    return list(entries.rounds) if isinstance(entries, SimpleEntries) else []


def player_total(game: Game, player: str) -> int:
    require_variant(game, GameVariant.SIMPLE)
    return sum(_rounds(game, player))


def totals(game: Game) -> dict[str, int]:
    require_variant(game, GameVariant.SIMPLE)
    return {player: sum(_rounds(game, player)) for player in game.players}


def next_player(game: Game) -> str:
    """Whose turn it is: the first player in turn order with the fewest rounds recorded."""
    require_variant(game, GameVariant.SIMPLE)
    counts = {player: len(_rounds(game, player)) for player in game.players}
    fewest = min(counts.values())
    return next(player for player in game.players if counts[player] == fewest)


def add_score(game: Game, score: int, player: str | None = None) -> dict[str, SimpleEntries] | None:
    """Append `score` for `player` (default: whoever's turn it is) and return the new scores.

    Returns None for a player who is not in the game.
    """
    require_variant(game, GameVariant.SIMPLE)
    if player is None:
        player = next_player(game)
    if player not in game.players:
        return None
    scores = {p: SimpleEntries(rounds=_rounds(game, p)) for p in game.scores}
    scores[player] = SimpleEntries(rounds=[*_rounds(game, player), score])
    return scores


def undo_last_round(game: Game) -> dict[str, SimpleEntries] | None:
    """Drop the last score of every player who has one; None when nobody has any."""
    require_variant(game, GameVariant.SIMPLE)
    if not any(_rounds(game, player) for player in game.players):
        return None
    return {p: SimpleEntries(rounds=_rounds(game, p)[:-1]) for p in game.scores}


def winners(game: Game) -> list[Winner]:
    return select_winners(totals(game), highest=True)
