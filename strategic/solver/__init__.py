"""Solver engine module."""

from .config import SolverConfig
from .lp import LinearProgram, LPSolution, Relation, Sense, solve_lp
from .dominance import (
    dominated,
    outcome_dominated,
    remap_round,
    RoundRemap,
    iterated_dominance,
    reduce_game,
)
from .equilibrium import (
    MaxiMin,
    Commitment,
    maximin,
    stackelberg_mixed_commitment,
    pure_nash,
    mixed_nash,
)

__all__ = [
    "SolverConfig",
    "LinearProgram",
    "LPSolution",
    "Relation",
    "Sense",
    "solve_lp",
    "dominated",
    "outcome_dominated",
    "remap_round",
    "RoundRemap",
    "iterated_dominance",
    "reduce_game",
    "MaxiMin",
    "Commitment",
    "maximin",
    "stackelberg_mixed_commitment",
    "pure_nash",
    "mixed_nash",
]
