"""Winner selection shared by every scoring engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from shared.dal.models import Game, GameVariant


@dataclass(frozen=True)
class Winner:
    name: str
    score: int


def select_winners(
    scores: Mapping[str, int],
    *,
    highest: bool,
    eligible: Iterable[str] | None = None,
) -> list[Winner]:
    """Return every eligible player tied at the best score, in `scores` order.

    `highest` picks the maximum (tally-style games) or the minimum
    (penalty and stroke games). With no eligible players there are no winners.
    """
    allowed = None if eligible is None else set(eligible)
    candidates = {name: score for name, score in scores.items() if allowed is None or name in allowed}
    if not candidates:
        return []
    best = max(candidates.values()) if highest else min(candidates.values())
    return [Winner(name, score) for name, score in candidates.items() if score == best]


def require_variant(game: Game, *variants: GameVariant) -> None:
    if game.variant not in variants:
        expected = ", ".join(v.value for v in variants)
        raise ValueError(f"Game '{game.id}' is a {game.variant} game, expected {expected}")
