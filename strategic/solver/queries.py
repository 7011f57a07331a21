"""Payoff queries shared by the solvers."""

from typing import Iterator

import numpy as np

from strategic.game.coords import Pos, insert_pos, pos_range, replace_at, yank
from strategic.game.normal_form import Game


def opponent_profiles(game: Game, player: int) -> Iterator[Pos]:
    """Every combination of the other players' actions, in row-major order."""
    game.check_player(player)
    _, other_dims = yank(player, game.dims)
    return pos_range(Pos.ones(len(other_dims)), Pos.of(other_dims))


def payoff_matrix(game: Game, player: int) -> np.ndarray:
    """
    A player's payoffs laid out against the opponents.

    Returns:
        Array of shape (own actions, opponent profiles); column k belongs
        to the k-th profile yielded by opponent_profiles
    """
    own_actions = range(1, game.dims.at(player) + 1)
    columns = [
        [game.payoff(insert_pos(others, player, a), player) for a in own_actions]
        for others in opponent_profiles(game, player)
    ]
    return np.array(columns, dtype=float).T


def deviations(game: Game, profile: Pos, player: int) -> Iterator[Pos]:
    """Profiles reachable when only this player changes their action."""
    game.check_player(player)
    for action in range(1, game.dims.at(player) + 1):
        yield replace_at(profile, player, action)
