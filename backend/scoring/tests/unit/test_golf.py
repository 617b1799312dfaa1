import pytest

from scoring import golf
from scoring.standings import Winner
from scoring.tests.helpers.games import create_game, golf_game
from shared.dal.models import GameVariant, GolfEntries


class TestTotalPar:
    def test_total_par(self):
        assert golf.total_par(golf_game({}, pars=[3, 4, 5], players=["A"])) == 12


class TestTotals:
    def test_eighteen_holes(self):
        game = golf_game({"A": [2] * 18, "B": [3] * 9 + [1] * 9}, pars=[3] * 18)
        assert golf.totals(game) == {"A": 36, "B": 36}

    def test_unplayed_holes_count_as_zero(self):
        game = golf_game({"A": [4, None, 5]}, players=["A", "B"])
        assert golf.totals(game) == {"A": 9, "B": 0}

    def test_hole_scores_padded_to_course(self):
        game = golf_game({"A": [4, None, 5]}, pars=[3, 3, 3, 3])
        assert golf.hole_scores(game, "A") == [4, None, 5, None]

    def test_relative_to_par_counts_played_holes_only(self):
        game = golf_game({"A": [4, None, 2], "B": []}, pars=[3, 4, 3, 5])
        assert golf.relative_to_par(game) == {"A": 0, "B": 0}

    def test_rejects_other_variants(self):
        with pytest.raises(ValueError, match="expected golf"):
            golf.totals(create_game(GameVariant.SIMPLE))


class TestSetScore:
    def test_set_hole(self):
        game = create_game(GameVariant.PUTT_PUTT)

        scores = golf.set_score(game, "B", 2, 4)

        assert scores == {"B": GolfEntries(holes=[None, None, 4])}

    def test_clearing_last_hole_trims_trailing_gaps(self):
        game = golf_game({"A": [3, None, 4]})

        scores = golf.set_score(game, "A", 2, None)

        assert scores is not None
        assert scores["A"].holes == [3]

    def test_hole_outside_course_is_declined(self):
        game = golf_game({}, pars=[3, 3], players=["A"])
        assert golf.set_score(game, "A", 2, 3) is None
        assert golf.set_score(game, "A", -1, 3) is None

    def test_unknown_player_is_declined(self):
        assert golf.set_score(create_game(GameVariant.GOLF), "Z", 0, 3) is None

    def test_negative_strokes_rejected(self):
        with pytest.raises(ValueError, match="negative"):
            golf.set_score(create_game(GameVariant.GOLF), "A", 0, -1)


class TestWinners:
    def test_lowest_total_wins(self):
        game = golf_game({"A": [4] * 9, "B": [4] * 7 + [3, 3]})
        assert golf.winners(game) == [Winner("B", 34)]

    def test_putt_putt_tie(self):
        game = golf_game({"A": [2, 2], "B": [3, 1]}, pars=[2, 2], variant=GameVariant.PUTT_PUTT)
        assert [w.name for w in golf.winners(game)] == ["A", "B"]
