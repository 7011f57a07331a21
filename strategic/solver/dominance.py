"""
Strict dominance.

An action is strictly dominated when some mixture of the player's
actions earns strictly more against every combination of opponent
actions. Each test is one LP; iterated elimination repeats the test on
the shrinking game until nothing more can be removed.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import numpy as np

from strategic.errors import ConvergenceError, InvalidIndex
from strategic.game.coords import Pos
from strategic.game.normal_form import Game, Profile
from .config import SolverConfig
from .lp import LinearProgram, Relation, Sense, solve_lp
from .queries import deviations, payoff_matrix


logger = logging.getLogger(__name__)


def dominated(
    game: Game,
    player: int,
    action: int,
    config: Optional[SolverConfig] = None,
) -> bool:
    """
    Check if an action is strictly dominated by a mixed strategy.

    Solves: minimize sum_b s(b) subject to s >= 0 and, for every
    opponent profile o, sum_b s(b) * u(b, o) >= u(action, o). The action
    is dominated iff the optimum v is below 1. Payoffs are shifted to be
    at least 1 first; the certificate is only sound for positive payoffs.

    The verdict is taken in payoff units: the mixture s / v beats the
    action by at least (1/v - 1) times its payoff, so the action counts
    as dominated when that gain, measured at the action's largest
    payoff, exceeds config.dominance_margin.

    Args:
        game: Game to inspect
        player: Player owning the action
        action: Action to test

    Returns:
        True if the action is strictly dominated
    """
    config = config or SolverConfig()
    game.check_action(player, action)

    matrix = payoff_matrix(game, player)
    matrix = matrix - matrix.min() + 1.0
    num_actions, num_profiles = matrix.shape

    lp = LinearProgram(num_actions, Sense.MINIMIZE)
    lp.set_objective(np.ones(num_actions))
    for k in range(num_profiles):
        lp.add_constraint(matrix[:, k], Relation.GE, matrix[action - 1, k])

    solution = solve_lp(lp, method=config.lp_method)
    # v > 0: every constraint has a right-hand side of at least 1
    gain = (1.0 / solution.value - 1.0) * matrix[action - 1].max()
    is_dominated = gain > config.dominance_margin

    logger.debug(
        "Player %d action %d: weight %.6g, gain %.6g -> %s",
        player, action, solution.value, gain,
        "dominated" if is_dominated else "not dominated",
    )
    return is_dominated


def outcome_dominated(
    game: Game,
    profile: Profile,
    config: Optional[SolverConfig] = None,
) -> bool:
    """
    Check if some player gains by deviating alone from a profile.

    Returns:
        True if any player has an action that, with everybody else's
        actions held fixed, pays them strictly more
    """
    config = config or SolverConfig()
    if not isinstance(profile, Pos):
        profile = Pos.of(profile)

    for player in range(1, game.n_players + 1):
        current = game.payoff(profile, player)
        for alternative in deviations(game, profile, player):
            if game.payoff(alternative, player) > current + config.tolerance:
                return True
    return False


@dataclass
class RoundRemap:
    """
    Bookkeeping for one player after one elimination round.

    Attributes:
        survivors: Original numbers of the actions still in play, in order
        eliminated: Original numbers of the actions removed this round
        table: Next round's local action index -> original action number
    """
    survivors: tuple[int, ...]
    eliminated: tuple[int, ...]
    table: dict[int, int]


def remap_round(actions: Sequence[int], dominated_local: Iterable[int]) -> RoundRemap:
    """
    Translate one round's eliminations back to original action numbers.

    Args:
        actions: Original numbers of the actions in play this round; the
            action with local index i is actions[i - 1]
        dominated_local: Local indices found dominated this round

    Returns:
        RoundRemap for the next round
    """
    actions = tuple(actions)
    dropped = set(dominated_local)
    for local in dropped:
        if not 1 <= local <= len(actions):
            raise InvalidIndex(f"Local action {local} outside 1..{len(actions)}")

    eliminated = tuple(actions[i - 1] for i in sorted(dropped))
    survivors = tuple(a for i, a in enumerate(actions, start=1) if i not in dropped)
    table = {i: a for i, a in enumerate(survivors, start=1)}
    return RoundRemap(survivors=survivors, eliminated=eliminated, table=table)


def _eliminate_dominated(
    game: Game,
    config: SolverConfig,
) -> tuple[Game, list[tuple[int, ...]], list[list[int]]]:
    """Run elimination rounds to a fixpoint; returns (game, survivors, removed)."""
    n = game.n_players
    survivors = [tuple(range(1, d + 1)) for d in game.dims]
    removed: list[list[int]] = [[] for _ in range(n)]

    max_rounds = config.max_rounds
    if max_rounds is None:
        max_rounds = sum(game.dims)

    for round_num in range(1, max_rounds + 1):
        # All players are tested against the same game, then pruned together
        local = [
            [a for a in range(1, game.dims.at(p) + 1) if dominated(game, p, a, config)]
            for p in range(1, n + 1)
        ]
        if not any(local):
            logger.info(
                "Iterated dominance converged after %d round(s); remaining dims %s",
                round_num, game.dims,
            )
            return game, survivors, removed

        for player, dropped in enumerate(local, start=1):
            remap = remap_round(survivors[player - 1], dropped)
            survivors[player - 1] = remap.survivors
            removed[player - 1].extend(remap.eliminated)
            # Highest index first so the remaining local indices stay valid
            for action in sorted(dropped, reverse=True):
                game = game.eliminate(player, action)

        logger.info("Round %d eliminated %s", round_num, [sorted(r) for r in removed])

    raise ConvergenceError(f"Iterated dominance did not settle within {max_rounds} rounds")


def iterated_dominance(game: Game, config: Optional[SolverConfig] = None) -> Pos:
    """
    Iterated elimination of strictly dominated actions.

    Returns:
        Pos holding, for each player, the sorted tuple of every action
        eliminated in any round, in the game's original numbering
    """
    config = config or SolverConfig()
    _, _, removed = _eliminate_dominated(game, config)
    return Pos(tuple(tuple(sorted(r)) for r in removed), game.n_players)


def reduce_game(
    game: Game,
    config: Optional[SolverConfig] = None,
) -> tuple[Game, Pos]:
    """
    Remove every iteratively dominated action.

    Returns:
        Tuple of (reduced game, Pos of surviving original actions per player)
    """
    config = config or SolverConfig()
    reduced, survivors, _ = _eliminate_dominated(game, config)
    return reduced, Pos(tuple(survivors), game.n_players)
