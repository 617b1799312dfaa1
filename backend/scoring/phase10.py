"""
Phase 10 progression and penalty scoring.

A player's current phase is one more than the number of rounds in which
they completed their phase; penalty points add up and the lowest total wins
among those who got past phase 10.
"""

from __future__ import annotations

from dataclasses import dataclass

from scoring.standings import Winner, require_variant, select_winners
from shared.dal.models import MAX_PHASE10_ROUNDS, Game, GameVariant, Phase10Entry, Phase10Round, blank_phase10_round

FINAL_PHASE = 10
MIN_ROUNDS = 1


@dataclass(frozen=True)
class PhaseStats:
    total_score: int
    current_phase: int

    @property
    def finished_all_phases(self) -> bool:
        return self.current_phase > FINAL_PHASE


def _copy_rounds(game: Game) -> list[Phase10Round]:
    return [{p: entry.model_copy() for p, entry in round_.items()} for round_ in game.phase10_rounds]


def player_stats(game: Game) -> dict[str, PhaseStats]:
    require_variant(game, GameVariant.PHASE10)
    stats = {}
    for player in game.players:
        entries = [round_[player] for round_ in game.phase10_rounds if player in round_]
        stats[player] = PhaseStats(
            total_score=sum(e.score for e in entries),
            current_phase=1 + sum(1 for e in entries if e.phase_completed),
        )
    return stats


def can_finish(game: Game) -> bool:
    """Finishing is allowed once somebody has completed all ten phases."""
    return any(s.finished_all_phases for s in player_stats(game).values())


def add_round(game: Game, *, max_rounds: int = MAX_PHASE10_ROUNDS) -> list[Phase10Round] | None:
    """Append an all-zero round; None when the round cap is reached."""
    require_variant(game, GameVariant.PHASE10)
    if len(game.phase10_rounds) >= max_rounds:
        return None
    return [*_copy_rounds(game), blank_phase10_round(game.players)]


def remove_round(game: Game) -> list[Phase10Round] | None:
    """Drop the last round; None when only one round is left."""
    require_variant(game, GameVariant.PHASE10)
    if len(game.phase10_rounds) <= MIN_ROUNDS:
        return None
    return _copy_rounds(game)[:-1]


def set_entry(
    game: Game,
    round_index: int,
    player: str,
    score: int,
    phase_completed: bool,
) -> list[Phase10Round] | None:
    """Record one player's result for one round; None for an unknown round or player."""
    require_variant(game, GameVariant.PHASE10)
    if player not in game.players or not 0 <= round_index < len(game.phase10_rounds):
        return None
    rounds = _copy_rounds(game)
    rounds[round_index][player] = Phase10Entry(score=score, phase_completed=phase_completed)
    return rounds


def winners(game: Game) -> list[Winner]:
    """Lowest total among players past phase 10.

    While nobody is past phase 10 the leaders are reported instead: the
    players on the highest phase, and of those the lowest total.
    """
    stats = player_stats(game)
    scores = {player: s.total_score for player, s in stats.items()}
    finishers = [player for player, s in stats.items() if s.finished_all_phases]
    if finishers:
        return select_winners(scores, highest=False, eligible=finishers)

    top_phase = max(s.current_phase for s in stats.values())
    leaders = [player for player, s in stats.items() if s.current_phase == top_phase]
    return select_winners(scores, highest=False, eligible=leaders)
