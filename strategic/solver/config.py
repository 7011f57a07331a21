"""Solver configuration."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class SolverConfig:
    """Configuration shared by the dominance and equilibrium solvers."""
    lp_method: str = "highs"           # scipy.optimize.linprog method
    tolerance: float = 1e-9            # Margin for strict payoff comparisons
    dominance_margin: float = 1e-6     # Smallest payoff gain that certifies strict dominance
    max_rounds: Optional[int] = None   # Iterated dominance cap (None = total action count)
    support_tolerance: float = 1e-9    # Feasibility slack in support enumeration
