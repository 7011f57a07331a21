"""
Equilibrium solvers for normal-form games.

- maximin: security strategy via one LP
- stackelberg_mixed_commitment: optimal leader commitment, one LP per
  follower response
- pure_nash: dominance pruning followed by a deviation check of every
  remaining profile
- mixed_nash: support enumeration for two-player games
"""

import logging
from itertools import combinations, product
from typing import NamedTuple, Optional

import numpy as np

from strategic.errors import LPInfeasible, SolverError, UnimplementedOperation, UnsupportedGame
from strategic.game.coords import Pos
from strategic.game.normal_form import Game
from .config import SolverConfig
from .dominance import outcome_dominated, reduce_game
from .lp import LinearProgram, Relation, Sense, solve_lp
from .queries import payoff_matrix


logger = logging.getLogger(__name__)


class MaxiMin(NamedTuple):
    """Security level and the mixed strategy that guarantees it."""
    value: float
    strategy: np.ndarray


class Commitment(NamedTuple):
    """Leader's expected utility and the strategy it commits to."""
    utility: float
    strategy: np.ndarray


def _as_distribution(x: np.ndarray) -> np.ndarray:
    """Clip solver noise below zero and renormalize."""
    x = np.maximum(np.asarray(x, dtype=float), 0.0)
    total = x.sum()
    if total <= 0:
        raise SolverError("Solver returned an empty probability vector")
    return x / total


def maximin(
    game: Game,
    player: int,
    config: Optional[SolverConfig] = None,
) -> MaxiMin:
    """
    Compute a maximin (security) strategy.

    Solves: maximize v subject to sum p = 1, p >= 0 and, for every
    opponent profile o, sum_a p(a) * u(a, o) >= v.

    Args:
        game: Game to solve
        player: Player whose security level is computed

    Returns:
        MaxiMin(value, strategy)
    """
    config = config or SolverConfig()
    game.check_player(player)

    matrix = payoff_matrix(game, player)
    num_actions, num_profiles = matrix.shape

    # Variables: [v, p_1, ..., p_d]
    lp = LinearProgram(num_actions + 1, Sense.MAXIMIZE)
    lp.set_objective(np.r_[1.0, np.zeros(num_actions)])
    lp.set_bounds(0, None, None)
    lp.add_constraint(np.r_[0.0, np.ones(num_actions)], Relation.EQ, 1.0)
    for k in range(num_profiles):
        lp.add_constraint(np.r_[-1.0, matrix[:, k]], Relation.GE, 0.0)

    solution = solve_lp(lp, method=config.lp_method)
    strategy = _as_distribution(solution.x[1:])

    logger.info("Player %d security level %.6g", player, solution.value)
    return MaxiMin(value=solution.value, strategy=strategy)


def stackelberg_mixed_commitment(
    game: Game,
    leader: int,
    config: Optional[SolverConfig] = None,
) -> Commitment:
    """
    Optimal mixed strategy for a leader who commits before the follower moves.

    For each follower action, solves an LP for the leader distribution
    that maximizes the leader's payoff while keeping that action a best
    response for the follower. Follower actions that cannot be induced
    are skipped; the best of the rest wins.

    Args:
        game: Two-player game
        leader: Committing player (1 or 2)

    Returns:
        Commitment(utility, strategy)
    """
    config = config or SolverConfig()
    if game.n_players != 2:
        raise UnsupportedGame(
            f"Stackelberg commitment needs a two-player game, got {game.n_players} players"
        )
    game.check_player(leader)
    follower = 3 - leader

    # Both matrices indexed [leader action, follower action]
    leader_payoffs = payoff_matrix(game, leader)
    follower_payoffs = payoff_matrix(game, follower).T
    num_own, num_responses = leader_payoffs.shape

    best: Optional[Commitment] = None
    best_response = None

    for anchor in range(num_responses):
        lp = LinearProgram(num_own, Sense.MAXIMIZE)
        lp.set_objective(leader_payoffs[:, anchor])
        lp.add_constraint(np.ones(num_own), Relation.EQ, 1.0)
        for alt in range(num_responses):
            if alt != anchor:
                lp.add_constraint(
                    follower_payoffs[:, anchor] - follower_payoffs[:, alt],
                    Relation.GE,
                    0.0,
                )

        try:
            solution = solve_lp(lp, method=config.lp_method)
        except LPInfeasible:
            logger.debug("Follower action %d cannot be induced", anchor + 1)
            continue

        if best is None or solution.value > best.utility:
            best = Commitment(utility=solution.value, strategy=_as_distribution(solution.x))
            best_response = anchor + 1

    if best is None:
        raise LPInfeasible("No follower action can be induced by any commitment")

    logger.info(
        "Leader %d commits for utility %.6g; follower answers with action %d",
        leader, best.utility, best_response,
    )
    return best


def pure_nash(game: Game, config: Optional[SolverConfig] = None) -> list[Pos]:
    """
    Find all pure-strategy Nash equilibria.

    Iteratively dominated actions never appear in an equilibrium, so
    they are pruned first; every remaining profile is then kept iff no
    player gains by deviating alone.

    Returns:
        Equilibrium profiles in row-major order
    """
    config = config or SolverConfig()
    _, survivors = reduce_game(game, config)

    equilibria = []
    for combo in product(*survivors):
        profile = Pos(combo, game.n_players)
        if not outcome_dominated(game, profile, config):
            equilibria.append(profile)

    logger.info("Found %d pure Nash equilibria", len(equilibria))
    return equilibria


def _indifferent_mix(matrix: np.ndarray, tol: float) -> Optional[np.ndarray]:
    """
    Mixture over the columns of a square matrix that equalizes all rows.

    Solves matrix @ y = v * 1 with sum(y) = 1. Returns None when the
    system is singular or the solution leaves the simplex.
    """
    k = matrix.shape[0]
    kkt = np.block([
        [matrix, -np.ones((k, 1))],
        [np.ones((1, k)), np.zeros((1, 1))],
    ])
    rhs = np.r_[np.zeros(k), 1.0]
    try:
        solution = np.linalg.solve(kkt, rhs)
    except np.linalg.LinAlgError:
        return None

    y = solution[:k]
    if np.any(y < -tol):
        return None
    y = np.maximum(y, 0.0)
    return y / y.sum()


def _is_best_response(payoffs: np.ndarray, mix: np.ndarray, tol: float) -> bool:
    """True if no pure action beats the mixture against these payoffs."""
    value = float(mix @ payoffs)
    scale = max(1.0, float(np.abs(payoffs).max()))
    return bool(np.all(payoffs <= value + tol * scale))


def mixed_nash(game: Game, config: Optional[SolverConfig] = None) -> list[Pos]:
    """
    Find mixed-strategy Nash equilibria by support enumeration.

    Only two-player games are handled. Every pair of equal-size supports
    is tried: each player's mixture must make the opponent indifferent
    across the opponent's support, and no action outside a support may
    do better. This finds all equilibria of nondegenerate games.

    Returns:
        Distinct equilibria, each a Pos of two probability tuples
    """
    config = config or SolverConfig()
    if game.n_players != 2:
        raise UnimplementedOperation(
            f"Mixed Nash equilibria are only computed for two-player games, "
            f"not {game.n_players}"
        )

    tol = config.support_tolerance
    row_payoffs = game.payoffs[..., 0]
    col_payoffs = game.payoffs[..., 1]
    num_rows, num_cols = row_payoffs.shape

    equilibria: list[Pos] = []
    for size in range(1, min(num_rows, num_cols) + 1):
        for rows in combinations(range(num_rows), size):
            for cols in combinations(range(num_cols), size):
                q = _indifferent_mix(row_payoffs[np.ix_(rows, cols)], tol)
                if q is None:
                    continue
                p = _indifferent_mix(col_payoffs[np.ix_(rows, cols)].T, tol)
                if p is None:
                    continue

                x = np.zeros(num_rows)
                x[list(rows)] = p
                y = np.zeros(num_cols)
                y[list(cols)] = q

                if not _is_best_response(row_payoffs @ y, x, tol):
                    continue
                if not _is_best_response(x @ col_payoffs, y, tol):
                    continue
                if any(
                    np.allclose(x, eq.at(1)) and np.allclose(y, eq.at(2))
                    for eq in equilibria
                ):
                    continue

                equilibria.append(Pos((tuple(x.tolist()), tuple(y.tolist())), 2))

    if not equilibria:
        raise SolverError("Support enumeration found no equilibrium; the game is degenerate")

    logger.info("Found %d mixed Nash equilibria", len(equilibria))
    return equilibria
