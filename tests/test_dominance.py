"""Tests for strict dominance."""

import pytest

from strategic.errors import ConvergenceError, InvalidIndex
from strategic.game import Pos, build2
from strategic.solver import SolverConfig
from strategic.solver.dominance import (
    dominated, outcome_dominated, remap_round, iterated_dominance, reduce_game
)


@pytest.fixture
def mixture_game():
    """Row 3 is beaten only by a 50/50 mix of rows 1 and 2."""
    return build2([
        [(3, 0), (0, 0)],
        [(0, 0), (3, 0)],
        [(1, 0), (1, 0)],
    ])


class TestDominated:
    def test_prisoners_dilemma(self, pd):
        for player in (1, 2):
            assert dominated(pd, player, 1)
            assert not dominated(pd, player, 2)

    def test_mixed_dominator(self, mixture_game):
        assert dominated(mixture_game, 1, 3)
        assert not dominated(mixture_game, 1, 1)
        assert not dominated(mixture_game, 1, 2)

    def test_weak_dominance_is_not_strict(self):
        game = build2([
            [(1, 0), (1, 0)],
            [(1, 0), (0, 0)],
        ])
        assert not dominated(game, 1, 1)
        assert not dominated(game, 1, 2)

    def test_constant_payoffs(self):
        game = build2([[(0, 0), (0, 0)], [(0, 0), (0, 0)]])
        for player in (1, 2):
            for action in (1, 2):
                assert not dominated(game, player, action)

    def test_negative_payoffs(self):
        # Payoffs all negative; row 2 is strictly worse than row 1
        game = build2([
            [(-1, -2), (-3, -1)],
            [(-4, -1), (-5, -2)],
        ])
        assert dominated(game, 1, 2)
        assert not dominated(game, 1, 1)
        assert not dominated(game, 2, 1)
        assert not dominated(game, 2, 2)

    def test_small_gap_in_wide_payoff_range(self):
        # Row 2 beats row 1 by exactly 1 against both columns
        game = build2([
            [(1e7, 0), (0, 0)],
            [(1e7 + 1, 0), (1, 0)],
        ])
        assert dominated(game, 1, 1)
        assert not dominated(game, 1, 2)
        assert iterated_dominance(game) == Pos.of([(1,), ()])

    def test_gap_below_margin_is_a_tie(self):
        game = build2([
            [(1, 0), (0, 0)],
            [(1 + 1e-9, 0), (1e-9, 0)],
        ])
        assert not dominated(game, 1, 1)

    def test_zero_sum_nothing_dominated(self, pennies):
        for player in (1, 2):
            for action in (1, 2):
                assert not dominated(pennies, player, action)

    def test_three_players(self, public_goods):
        for player in (1, 2, 3):
            assert dominated(public_goods, player, 1)
            assert not dominated(public_goods, player, 2)

    def test_single_action_never_dominated(self, pd):
        reduced = pd.eliminate(1, 1)
        assert not dominated(reduced, 1, 1)

    def test_invalid_action(self, pd):
        with pytest.raises(InvalidIndex):
            dominated(pd, 1, 3)
        with pytest.raises(InvalidIndex):
            dominated(pd, 0, 1)


class TestOutcomeDominated:
    def test_prisoners_dilemma(self, pd):
        assert outcome_dominated(pd, Pos.of([1, 1]))
        assert outcome_dominated(pd, Pos.of([1, 2]))
        assert outcome_dominated(pd, Pos.of([2, 1]))
        assert not outcome_dominated(pd, Pos.of([2, 2]))

    def test_ties_do_not_count(self):
        game = build2([[(1, 1), (1, 1)]])
        assert not outcome_dominated(game, [1, 1])
        assert not outcome_dominated(game, [1, 2])

    def test_accepts_plain_sequence(self, coord):
        assert not outcome_dominated(coord, (1, 1))
        assert outcome_dominated(coord, (1, 2))


class TestRemapRound:
    def test_first_round(self):
        remap = remap_round((1, 2, 3), [2])
        assert remap.survivors == (1, 3)
        assert remap.eliminated == (2,)
        assert remap.table == {1: 1, 2: 3}

    def test_later_round_uses_original_numbers(self):
        # Actions 2 and 5 already gone; local 2 is original 3, local 3 is 4
        remap = remap_round((1, 3, 4, 6), [3, 2])
        assert remap.eliminated == (3, 4)
        assert remap.survivors == (1, 6)
        assert remap.table == {1: 1, 2: 6}

    def test_nothing_dominated(self):
        remap = remap_round((2, 4), [])
        assert remap.survivors == (2, 4)
        assert remap.eliminated == ()
        assert remap.table == {1: 2, 2: 4}

    def test_local_index_out_of_range(self):
        with pytest.raises(InvalidIndex):
            remap_round((1, 2), [3])


class TestIteratedDominance:
    def test_prisoners_dilemma(self, pd):
        result = iterated_dominance(pd)
        assert result == Pos.of([(1,), (1,)])

    def test_nothing_to_remove(self, coord, pennies):
        assert iterated_dominance(coord) == Pos.of([(), ()])
        assert iterated_dominance(pennies) == Pos.of([(), ()])

    def test_multiple_rounds_use_original_numbering(self, three_round_game):
        result = iterated_dominance(three_round_game)
        assert result.at(1) == (2, 3)
        assert result.at(2) == (2, 3)

    def test_mixture_round(self, mixture_game):
        result = iterated_dominance(mixture_game)
        assert result.at(1) == (3,)
        assert result.at(2) == ()

    def test_three_players(self, public_goods):
        assert iterated_dominance(public_goods) == Pos.of([(1,), (1,), (1,)])

    def test_round_cap(self, three_round_game):
        with pytest.raises(ConvergenceError):
            iterated_dominance(three_round_game, SolverConfig(max_rounds=1))

    def test_cap_large_enough(self, three_round_game):
        result = iterated_dominance(three_round_game, SolverConfig(max_rounds=4))
        assert result.at(1) == (2, 3)

    def test_original_game_untouched(self, three_round_game):
        iterated_dominance(three_round_game)
        assert three_round_game.dims == Pos.of([3, 3])


class TestReduceGame:
    def test_reduced_game(self, three_round_game):
        reduced, survivors = reduce_game(three_round_game)
        assert reduced.dims == Pos.of([1, 1])
        assert survivors == Pos.of([(1,), (1,)])
        assert reduced.utility([1, 1]) == three_round_game.utility([1, 1])

    def test_payoffs_follow_survivors(self, mixture_game):
        reduced, survivors = reduce_game(mixture_game)
        assert survivors.at(1) == (1, 2)
        for profile in reduced.profiles():
            original = Pos.of([survivors.at(1)[profile.at(1) - 1], survivors.at(2)[profile.at(2) - 1]])
            assert reduced.utility(profile) == mixture_game.utility(original)
