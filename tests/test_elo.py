"""Tests for pairwise Elo rating calculations."""

import pytest

from wordle_ladder.core.errors import DuplicateParticipantError
from wordle_ladder.models import Outcome
from wordle_ladder.ranking import (
    PairwiseEloEngine,
    PriorState,
    RatingSystem,
    calculate_expected_score,
    learning_rate,
    pairwise_score,
)


class TestCalculateExpectedScore:
    """Tests for expected score calculation."""

    def test_equal_ratings(self):
        """Test equal ratings produce 0.5 expected."""
        expected = calculate_expected_score(1500, 1500)
        assert expected == pytest.approx(0.5, abs=0.001)

    def test_higher_rating_higher_expected(self):
        """Test higher rated player has higher expected score."""
        expected = calculate_expected_score(1600, 1400)
        assert expected > 0.5
        assert expected < 1.0

    def test_400_point_difference(self):
        """Test 400 point difference produces ~91% expected."""
        expected = calculate_expected_score(1900, 1500)
        # 10^(400/400) = 10, so expected = 1/(1+0.1) ≈ 0.909
        assert expected == pytest.approx(0.909, abs=0.01)

    def test_symmetry(self):
        """E(a,b) + E(b,a) must equal 1.0 for any pair."""
        for a, b in [(1500, 1500), (1200, 1600), (2000, 1000), (1500, 1501)]:
            assert calculate_expected_score(a, b) + calculate_expected_score(b, a) == pytest.approx(
                1.0
            )


class TestPairwiseScore:
    """Tests for head-to-head scoring of two outcomes."""

    def test_fewer_guesses_wins(self):
        assert pairwise_score(3, 5) == 1.0
        assert pairwise_score(5, 3) == 0.0

    def test_solve_beats_failure(self):
        assert pairwise_score(6, None) == 1.0
        assert pairwise_score(None, 1) == 0.0

    def test_ties(self):
        """Equal guesses and double failures are draws."""
        assert pairwise_score(4, 4) == 0.5
        assert pairwise_score(None, None) == 0.5


class TestLearningRate:
    """Tests for the experience-adjusted K-factor."""

    def test_new_player(self):
        assert learning_rate(0) == 35

    def test_shrinks_per_game(self):
        assert learning_rate(1) == 33
        assert learning_rate(5) == 25

    def test_floor(self):
        """K never drops below 10."""
        assert learning_rate(12) == 11
        assert learning_rate(13) == 10
        assert learning_rate(500) == 10


class TestPairwiseEloEngine:
    """Tests for rating a whole puzzle."""

    def test_implements_protocol(self):
        assert isinstance(PairwiseEloEngine(), RatingSystem)

    def test_single_participant_unchanged(self):
        """A lone participant has no opponents and keeps their rating."""
        engine = PairwiseEloEngine()
        update = engine.update("1", [Outcome("p1", 4)], {"p1": PriorState(1620.0, 7)})

        assert update.deltas == {"p1": 0.0}
        assert update.ratings_after == {"p1": 1620.0}

    def test_two_players_winner_gains_loser_loses(self):
        """Test winner gains rating, loser loses the same amount with equal K."""
        engine = PairwiseEloEngine()
        update = engine.update("1", [Outcome("a", 2), Outcome("b", 4)], {})

        assert update.ratings_after["a"] > 1500
        assert update.ratings_after["b"] < 1500
        assert update.deltas["a"] == pytest.approx(17.5)
        assert abs(update.deltas["a"]) == pytest.approx(abs(update.deltas["b"]))

    def test_three_player_scenario(self):
        """3/6 beats 5/6 beats X/6, starting from 1500 with K=35."""
        engine = PairwiseEloEngine()
        outcomes = [Outcome("P1", 3), Outcome("P2", 5), Outcome("P3", None)]
        update = engine.update("100", outcomes, {})

        assert update.k_factors == {"P1": 35, "P2": 35, "P3": 35}
        assert update.deltas["P1"] == pytest.approx(35.0)
        assert update.deltas["P2"] == pytest.approx(0.0)
        assert update.deltas["P3"] == pytest.approx(-35.0)
        assert sum(update.deltas.values()) == pytest.approx(0.0, abs=1e-9)

    def test_delta_sums_over_every_opponent(self):
        """The last opponent visited must not overwrite earlier comparisons."""
        engine = PairwiseEloEngine()
        outcomes = [Outcome("a", 1), Outcome("b", 2), Outcome("c", 3), Outcome("d", 4)]
        update = engine.update("1", outcomes, {})

        # a beats three opponents at expected 0.5 each
        assert update.deltas["a"] == pytest.approx(3 * 35 * 0.5)
        assert update.deltas["d"] == pytest.approx(-3 * 35 * 0.5)

    def test_all_tied_equal_ratings_no_change(self):
        engine = PairwiseEloEngine()
        outcomes = [Outcome(p, 4) for p in ("a", "b", "c")]
        update = engine.update("1", outcomes, {})

        for delta in update.deltas.values():
            assert delta == pytest.approx(0.0)

    def test_all_tied_moves_toward_equal(self):
        """A draw pulls the higher-rated player down and the lower one up."""
        engine = PairwiseEloEngine()
        prior = {"hi": PriorState(1700.0, 0), "lo": PriorState(1300.0, 0)}
        update = engine.update("1", [Outcome("hi", None), Outcome("lo", None)], prior)

        assert update.deltas["hi"] < 0
        assert update.deltas["lo"] > 0
        assert sum(update.deltas.values()) == pytest.approx(0.0)

    def test_uses_ratings_before_puzzle(self):
        """Every comparison uses pre-puzzle ratings, so visiting order doesn't matter."""
        engine = PairwiseEloEngine()
        prior = {"a": PriorState(1550.0, 3), "b": PriorState(1480.0, 1), "c": PriorState(1500.0)}
        outcomes = [Outcome("a", 3), Outcome("b", 2), Outcome("c", None)]

        forward = engine.update("1", outcomes, prior)
        backward = engine.update("1", list(reversed(outcomes)), prior)

        for p in ("a", "b", "c"):
            assert forward.ratings_after[p] == pytest.approx(backward.ratings_after[p])

    def test_k_factor_per_participant(self):
        """Experienced players move less than newcomers for the same result."""
        engine = PairwiseEloEngine()
        prior = {"vet": PriorState(1500.0, 20), "new": PriorState(1500.0, 0)}
        update = engine.update("1", [Outcome("vet", 3), Outcome("new", 4)], prior)

        assert update.k_factors == {"vet": 10, "new": 35}
        assert update.deltas["vet"] == pytest.approx(5.0)
        assert update.deltas["new"] == pytest.approx(-17.5)

    def test_unseen_participant_uses_initial_rating(self):
        engine = PairwiseEloEngine(initial_rating=1200.0)
        update = engine.update("1", [Outcome("a", 3)], {})
        assert update.ratings_before == {"a": 1200.0}

    def test_custom_k_configuration(self):
        engine = PairwiseEloEngine(k_base=20, k_step=5, k_floor=4)
        assert engine.k_factor(0) == 20
        assert engine.k_factor(3) == 5
        assert engine.k_factor(10) == 4

    def test_duplicate_participant_rejected(self):
        engine = PairwiseEloEngine()
        with pytest.raises(DuplicateParticipantError, match="a"):
            engine.update("9", [Outcome("a", 3), Outcome("a", 5)], {})
