"""
Yahtzee scorecard arithmetic.

Upper section: face-count boxes, plus 35 once they reach 63. Lower section:
free-entry boxes, four fixed-value boxes that are either made or scratched,
and a Yahtzee Bonus counter worth 100 per bonus. Scratched and empty boxes
score nothing.
"""

from __future__ import annotations

from dataclasses import dataclass

from scoring.standings import Winner, require_variant, select_winners
from shared.dal.models import (
    UNSET_SCORE,
    CategoryScore,
    EntryState,
    Game,
    GameVariant,
    YahtzeeCategory,
    YahtzeeEntries,
)

UPPER_CATEGORIES = (
    YahtzeeCategory.ACES,
    YahtzeeCategory.TWOS,
    YahtzeeCategory.THREES,
    YahtzeeCategory.FOURS,
    YahtzeeCategory.FIVES,
    YahtzeeCategory.SIXES,
)
LOWER_CATEGORIES = (
    YahtzeeCategory.THREE_OF_A_KIND,
    YahtzeeCategory.FOUR_OF_A_KIND,
    YahtzeeCategory.FULL_HOUSE,
    YahtzeeCategory.SMALL_STRAIGHT,
    YahtzeeCategory.LARGE_STRAIGHT,
    YahtzeeCategory.YAHTZEE,
    YahtzeeCategory.CHANCE,
    YahtzeeCategory.YAHTZEE_BONUS,
)
FIXED_VALUES = {
    YahtzeeCategory.FULL_HOUSE: 25,
    YahtzeeCategory.SMALL_STRAIGHT: 30,
    YahtzeeCategory.LARGE_STRAIGHT: 40,
    YahtzeeCategory.YAHTZEE: 50,
}

UPPER_BONUS_THRESHOLD = 63
UPPER_BONUS = 35
YAHTZEE_BONUS_POINTS = 100


@dataclass(frozen=True)
class YahtzeeTotals:
    upper_total: int
    bonus: int
    upper_total_with_bonus: int
    lower_total: int
    grand_total: int


def _entries(game: Game, player: str) -> YahtzeeEntries:
    entries = game.scores.get(player)
    return entries if isinstance(entries, YahtzeeEntries) else YahtzeeEntries()


def entry_for(game: Game, player: str, category: YahtzeeCategory) -> CategoryScore:
    require_variant(game, GameVariant.YAHTZEE)
    return _entries(game, player).categories.get(category, UNSET_SCORE)


def player_totals(entries: YahtzeeEntries) -> YahtzeeTotals:
    boxes = entries.categories
    upper_total = sum(boxes.get(c, UNSET_SCORE).points for c in UPPER_CATEGORIES)
    bonus = UPPER_BONUS if upper_total >= UPPER_BONUS_THRESHOLD else 0
    lower_total = sum(boxes.get(c, UNSET_SCORE).points for c in LOWER_CATEGORIES if c != YahtzeeCategory.YAHTZEE_BONUS)
    lower_total += boxes.get(YahtzeeCategory.YAHTZEE_BONUS, UNSET_SCORE).points * YAHTZEE_BONUS_POINTS
    return YahtzeeTotals(
        upper_total=upper_total,
        bonus=bonus,
        upper_total_with_bonus=upper_total + bonus,
        lower_total=lower_total,
        grand_total=upper_total + bonus + lower_total,
    )


def totals(game: Game) -> dict[str, YahtzeeTotals]:
    require_variant(game, GameVariant.YAHTZEE)
    return {player: player_totals(_entries(game, player)) for player in game.players}


def is_complete(entries: YahtzeeEntries) -> bool:
    """Every scoring box filled or scratched; the bonus counter is optional."""
    required = [c for c in (*UPPER_CATEGORIES, *LOWER_CATEGORIES) if c != YahtzeeCategory.YAHTZEE_BONUS]
    return all(c in entries.categories for c in required)


def _check_entry(category: YahtzeeCategory, score: CategoryScore) -> None:
    if category in FIXED_VALUES and score.state == EntryState.VALUE and score.value != FIXED_VALUES[category]:
        raise ValueError(f"{category} scores {FIXED_VALUES[category]} or is scratched, not {score.value}")
    if category == YahtzeeCategory.YAHTZEE_BONUS and score.state == EntryState.SCRATCHED:
        raise ValueError("The Yahtzee Bonus counter cannot be scratched")


def set_entry(
    game: Game,
    player: str,
    category: YahtzeeCategory,
    score: CategoryScore | None,
) -> dict[str, YahtzeeEntries] | None:
    """Return new scores with one box set (a value or scratch) or cleared (None).

    Returns None for a player who is not in the game.
    """
    require_variant(game, GameVariant.YAHTZEE)
    if player not in game.players:
        return None
    if score is not None and score.state == EntryState.UNSET:
        score = None
    if score is not None:
        _check_entry(category, score)

    boxes = dict(_entries(game, player).categories)
    if score is None:
        boxes.pop(category, None)
    else:
        boxes[category] = score

    scores = {p: e.model_copy(deep=True) for p, e in game.scores.items()}
    scores[player] = YahtzeeEntries(categories=boxes)
    return scores


def resolve_fixed_choice(category: YahtzeeCategory, choice: bool | None) -> CategoryScore | None:
    """Map the yes/no prompt of a fixed-value box: yes scores it, no scratches it, undecided clears it."""
    if category not in FIXED_VALUES:
        raise ValueError(f"{category} is not a fixed-value category")
    if choice is None:
        return None
    return CategoryScore.of(FIXED_VALUES[category]) if choice else CategoryScore.scratched()


def add_yahtzee_bonus(game: Game, player: str) -> dict[str, YahtzeeEntries] | None:
    count = entry_for(game, player, YahtzeeCategory.YAHTZEE_BONUS).points
    return set_entry(game, player, YahtzeeCategory.YAHTZEE_BONUS, CategoryScore.of(count + 1))


def winners(game: Game) -> list[Winner]:
    grand_totals = {player: t.grand_total for player, t in totals(game).items()}
    return select_winners(grand_totals, highest=True)
