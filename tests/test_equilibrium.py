"""Tests for equilibrium solvers."""

import numpy as np
import pytest

from strategic.errors import InvalidIndex, UnimplementedOperation, UnsupportedGame
from strategic.game import Pos, build2, GAMES
from strategic.game.library import (
    battle_of_sexes, rock_paper_scissors, stag_hunt, chicken,
)
from strategic.solver.equilibrium import (
    maximin, stackelberg_mixed_commitment, pure_nash, mixed_nash
)


class TestMaxiMin:
    @pytest.mark.parametrize("player", [1, 2])
    def test_matching_pennies(self, pennies, player):
        value, strategy = maximin(pennies, player)
        assert value == pytest.approx(0.0, abs=1e-7)
        assert np.allclose(strategy, [0.5, 0.5], atol=1e-6)

    def test_prisoners_dilemma(self, pd):
        result = maximin(pd, 1)
        assert result.value == pytest.approx(1.0)
        assert np.allclose(result.strategy, [0.0, 1.0], atol=1e-6)

    def test_rock_paper_scissors(self):
        result = maximin(rock_paper_scissors(), 2)
        assert result.value == pytest.approx(0.0, abs=1e-7)
        assert np.allclose(result.strategy, [1 / 3] * 3, atol=1e-6)

    def test_three_players(self, public_goods):
        # Keeping guarantees the endowment whatever the others do
        result = maximin(public_goods, 3)
        assert result.value == pytest.approx(10.0)
        assert np.allclose(result.strategy, [0.0, 1.0], atol=1e-6)

    def test_strategy_is_distribution(self, coord):
        result = maximin(coord, 1)
        assert result.strategy.sum() == pytest.approx(1.0)
        assert np.all(result.strategy >= 0)
        assert result.value == pytest.approx(0.5)

    def test_invalid_player(self, pd):
        with pytest.raises(InvalidIndex):
            maximin(pd, 3)


class TestStackelberg:
    def test_leader_gains_by_mixing(self, commitment_game):
        utility, strategy = stackelberg_mixed_commitment(commitment_game, 1)
        assert utility == pytest.approx(3.5)
        assert np.allclose(strategy, [0.5, 0.5], atol=1e-6)

    def test_second_player_leads(self, commitment_game):
        # Player 1 always answers with action 1, so player 2 picks column 1
        result = stackelberg_mixed_commitment(commitment_game, 2)
        assert result.utility == pytest.approx(1.0)
        assert np.allclose(result.strategy, [1.0, 0.0], atol=1e-6)

    @pytest.mark.parametrize("name", [
        "prisoners-dilemma", "coordination", "battle-of-sexes",
        "chicken", "stag-hunt",
    ])
    @pytest.mark.parametrize("leader", [1, 2])
    def test_at_least_nash_payoff(self, name, leader):
        game = GAMES[name]()
        commitment = stackelberg_mixed_commitment(game, leader)
        for profile in pure_nash(game):
            assert commitment.utility >= game.payoff(profile, leader) - 1e-7

    def test_zero_sum_matches_maximin(self, pennies):
        commitment = stackelberg_mixed_commitment(pennies, 1)
        assert commitment.utility == pytest.approx(0.0, abs=1e-7)

    def test_requires_two_players(self, public_goods):
        with pytest.raises(UnsupportedGame):
            stackelberg_mixed_commitment(public_goods, 1)

    def test_invalid_leader(self, pd):
        with pytest.raises(InvalidIndex):
            stackelberg_mixed_commitment(pd, 3)


class TestPureNash:
    def test_prisoners_dilemma(self, pd):
        assert pure_nash(pd) == [Pos.of([2, 2])]

    def test_coordination(self, coord):
        assert pure_nash(coord) == [Pos.of([1, 1]), Pos.of([2, 2])]

    def test_matching_pennies(self, pennies):
        assert pure_nash(pennies) == []

    def test_battle_of_sexes(self):
        assert pure_nash(battle_of_sexes()) == [Pos.of([1, 1]), Pos.of([2, 2])]

    def test_chicken(self):
        assert pure_nash(chicken()) == [Pos.of([1, 2]), Pos.of([2, 1])]

    def test_after_dominance_rounds(self, three_round_game):
        assert pure_nash(three_round_game) == [Pos.of([1, 1])]

    def test_three_players(self, public_goods):
        assert pure_nash(public_goods) == [Pos.of([2, 2, 2])]

    @pytest.mark.parametrize("name", sorted(GAMES))
    def test_matches_brute_force(self, name):
        game = GAMES[name]()
        brute = [
            profile for profile in game.profiles()
            if all(
                game.payoff(profile, p) >= max(
                    game.payoff(profile.values[:p - 1] + (a,) + profile.values[p:], p)
                    for a in range(1, game.dims.at(p) + 1)
                )
                for p in range(1, game.n_players + 1)
            )
        ]
        assert pure_nash(game) == brute


class TestMixedNash:
    def test_matching_pennies(self, pennies):
        equilibria = mixed_nash(pennies)
        assert len(equilibria) == 1
        assert np.allclose(equilibria[0].at(1), [0.5, 0.5])
        assert np.allclose(equilibria[0].at(2), [0.5, 0.5])

    def test_coordination(self, coord):
        equilibria = mixed_nash(coord)
        assert len(equilibria) == 3
        assert np.allclose(equilibria[0].at(1), [1, 0])
        assert np.allclose(equilibria[1].at(2), [0, 1])
        assert np.allclose(equilibria[2].at(1), [0.5, 0.5])
        assert np.allclose(equilibria[2].at(2), [0.5, 0.5])

    def test_battle_of_sexes_mixed(self):
        equilibria = mixed_nash(battle_of_sexes())
        mixed = [eq for eq in equilibria if 0 < eq.at(1)[0] < 1]
        assert len(mixed) == 1
        assert np.allclose(mixed[0].at(1), [2 / 3, 1 / 3])
        assert np.allclose(mixed[0].at(2), [1 / 3, 2 / 3])

    def test_rock_paper_scissors(self):
        equilibria = mixed_nash(rock_paper_scissors())
        assert len(equilibria) == 1
        assert np.allclose(equilibria[0].at(1), [1 / 3] * 3)

    def test_contains_pure_equilibria(self):
        game = stag_hunt()
        equilibria = mixed_nash(game)
        for profile in pure_nash(game):
            point = [np.eye(d)[a - 1] for a, d in zip(profile, game.dims)]
            assert any(
                np.allclose(eq.at(1), point[0]) and np.allclose(eq.at(2), point[1])
                for eq in equilibria
            )

    def test_no_profitable_deviation(self):
        game = build2([
            [(3, 1), (0, 2), (1, 0)],
            [(1, 3), (2, 1), (0, 2)],
        ])
        for eq in mixed_nash(game):
            for player in (1, 2):
                value = game.expected_utility(player, eq)
                for action in range(1, game.dims.at(player) + 1):
                    pure = np.eye(game.dims.at(player))[action - 1]
                    deviation = list(eq)
                    deviation[player - 1] = pure
                    assert game.expected_utility(player, deviation) <= value + 1e-7

    def test_three_players_unimplemented(self, public_goods):
        with pytest.raises(UnimplementedOperation):
            mixed_nash(public_goods)
