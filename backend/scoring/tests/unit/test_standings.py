import pytest

from scoring.standings import Winner, require_variant, select_winners
from scoring.tests.helpers.games import create_game
from shared.dal.models import GameVariant


class TestSelectWinners:
    def test_highest(self):
        assert select_winners({"A": 3, "B": 9, "C": 1}, highest=True) == [Winner("B", 9)]

    def test_lowest(self):
        assert select_winners({"A": 3, "B": 9, "C": 1}, highest=False) == [Winner("C", 1)]

    def test_ties_keep_input_order(self):
        assert select_winners({"C": 5, "A": 5, "B": 2}, highest=True) == [Winner("C", 5), Winner("A", 5)]

    def test_eligible_restricts_candidates(self):
        result = select_winners({"A": 1, "B": 4, "C": 6}, highest=False, eligible=["B", "C"])
        assert result == [Winner("B", 4)]

    def test_no_candidates(self):
        assert select_winners({}, highest=True) == []
        assert select_winners({"A": 1}, highest=True, eligible=[]) == []


class TestRequireVariant:
    def test_accepts_listed_variant(self):
        require_variant(create_game(GameVariant.PUTT_PUTT), GameVariant.GOLF, GameVariant.PUTT_PUTT)

    def test_rejects_other_variant(self):
        with pytest.raises(ValueError, match="is a phase10 game, expected golf, putt_putt"):
            require_variant(create_game(GameVariant.PHASE10), GameVariant.GOLF, GameVariant.PUTT_PUTT)
