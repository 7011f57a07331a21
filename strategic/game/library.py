"""Classic textbook games, ready to solve."""

from typing import Callable

from .normal_form import Game, build2, build3


def prisoners_dilemma(
    reward: float = 3.0,
    temptation: float = 5.0,
    sucker: float = 0.0,
    punishment: float = 1.0,
) -> Game:
    """Action 1 = cooperate, action 2 = defect."""
    return build2([
        [(reward, reward), (sucker, temptation)],
        [(temptation, sucker), (punishment, punishment)],
    ])


def matching_pennies() -> Game:
    """Zero-sum; player 1 wins on a match. Action 1 = heads, 2 = tails."""
    return build2([
        [(1, -1), (-1, 1)],
        [(-1, 1), (1, -1)],
    ])


def coordination(payoff: float = 1.0) -> Game:
    """Both players gain only when they pick the same action."""
    return build2([
        [(payoff, payoff), (0, 0)],
        [(0, 0), (payoff, payoff)],
    ])


def battle_of_sexes() -> Game:
    """Player 1 prefers action 1, player 2 prefers action 2, both prefer agreeing."""
    return build2([
        [(2, 1), (0, 0)],
        [(0, 0), (1, 2)],
    ])


def chicken(crash: float = -10.0) -> Game:
    """Action 1 = swerve, action 2 = straight."""
    return build2([
        [(0, 0), (-1, 1)],
        [(1, -1), (crash, crash)],
    ])


def stag_hunt() -> Game:
    """Action 1 = stag, action 2 = hare."""
    return build2([
        [(4, 4), (0, 3)],
        [(3, 0), (3, 3)],
    ])


def rock_paper_scissors() -> Game:
    """Zero-sum; actions are rock, paper, scissors."""
    return build2([
        [(0, 0), (-1, 1), (1, -1)],
        [(1, -1), (0, 0), (-1, 1)],
        [(-1, 1), (1, -1), (0, 0)],
    ])


def three_player_public_goods(
    endowment: float = 10.0,
    multiplier: float = 1.5,
) -> Game:
    """
    Each player keeps or contributes their endowment (action 1 = contribute,
    action 2 = keep). The pot is multiplied and shared equally.

    With a multiplier below the player count, keeping strictly dominates.
    """
    def payoffs(contributions: tuple[int, int, int]) -> tuple[float, float, float]:
        share = multiplier * endowment * sum(contributions) / 3
        return tuple(endowment * (1 - c) + share for c in contributions)

    # layers[k][i][j]: player 1 -> i, player 2 -> j, player 3 -> k
    return build3([
        [
            [payoffs((int(i == 0), int(j == 0), int(k == 0))) for j in range(2)]
            for i in range(2)
        ]
        for k in range(2)
    ])


GAMES: dict[str, Callable[[], Game]] = {
    "prisoners-dilemma": prisoners_dilemma,
    "matching-pennies": matching_pennies,
    "coordination": coordination,
    "battle-of-sexes": battle_of_sexes,
    "chicken": chicken,
    "stag-hunt": stag_hunt,
    "rock-paper-scissors": rock_paper_scissors,
    "public-goods": three_player_public_goods,
}
