"""
Linear programming backend.

Solvers describe their problems with LinearProgram and hand them to
solve_lp, which runs scipy's linprog and turns every non-optimal
outcome into a typed error.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Sequence

import numpy as np
from scipy.optimize import linprog

from strategic.errors import LPError, LPInfeasible, LPUnbounded


logger = logging.getLogger(__name__)

# scipy.optimize.linprog status codes
STATUS_OPTIMAL = 0
STATUS_ITERATION_LIMIT = 1
STATUS_INFEASIBLE = 2
STATUS_UNBOUNDED = 3
STATUS_NUMERICAL = 4


class Sense(Enum):
    """Direction of optimization."""
    MINIMIZE = auto()
    MAXIMIZE = auto()


class Relation(Enum):
    """Comparison between a linear form and its bound."""
    LE = "<="
    GE = ">="
    EQ = "=="


@dataclass
class LPSolution:
    """Optimal objective value and variable assignment."""
    value: float
    x: np.ndarray


class LinearProgram:
    """
    A linear program over num_vars variables.

    Variables are non-negative unless their bounds are changed with
    set_bounds; None stands for an infinite bound.
    """

    def __init__(self, num_vars: int, sense: Sense = Sense.MINIMIZE):
        self.num_vars = num_vars
        self.sense = sense
        self.objective = np.zeros(num_vars)
        self.bounds: list[tuple[Optional[float], Optional[float]]] = [(0.0, None)] * num_vars

        self._ub_rows: list[np.ndarray] = []
        self._ub_rhs: list[float] = []
        self._eq_rows: list[np.ndarray] = []
        self._eq_rhs: list[float] = []

    def _coefficients(self, coeffs: Sequence[float]) -> np.ndarray:
        row = np.asarray(coeffs, dtype=float)
        if row.shape != (self.num_vars,):
            raise ValueError(
                f"Expected {self.num_vars} coefficients, got shape {row.shape}"
            )
        return row

    def set_objective(self, coeffs: Sequence[float]) -> None:
        self.objective = self._coefficients(coeffs)

    def set_bounds(
        self,
        var: int,
        lower: Optional[float] = 0.0,
        upper: Optional[float] = None,
    ) -> None:
        """Bounds for the variable at 0-based index var."""
        self.bounds[var] = (lower, upper)

    def add_constraint(
        self,
        coeffs: Sequence[float],
        relation: Relation,
        bound: float,
    ) -> None:
        """Add the constraint coeffs . x <relation> bound."""
        row = self._coefficients(coeffs)
        if relation == Relation.LE:
            self._ub_rows.append(row)
            self._ub_rhs.append(bound)
        elif relation == Relation.GE:
            # linprog only takes <=, so flip the sign
            self._ub_rows.append(-row)
            self._ub_rhs.append(-bound)
        elif relation == Relation.EQ:
            self._eq_rows.append(row)
            self._eq_rhs.append(bound)
        else:
            raise ValueError(f"Unknown relation: {relation}")

    @property
    def num_constraints(self) -> int:
        return len(self._ub_rows) + len(self._eq_rows)

    def matrices(self) -> dict:
        """Keyword arguments for scipy.optimize.linprog."""
        c = self.objective if self.sense == Sense.MINIMIZE else -self.objective
        return {
            "c": c,
            "A_ub": np.vstack(self._ub_rows) if self._ub_rows else None,
            "b_ub": np.array(self._ub_rhs) if self._ub_rows else None,
            "A_eq": np.vstack(self._eq_rows) if self._eq_rows else None,
            "b_eq": np.array(self._eq_rhs) if self._eq_rows else None,
            "bounds": list(self.bounds),
        }


def solve_lp(lp: LinearProgram, method: str = "highs") -> LPSolution:
    """
    Solve a linear program.

    Args:
        lp: Problem description
        method: linprog method name

    Returns:
        Optimal value (in the program's own sense) and assignment

    Raises:
        LPInfeasible: No point satisfies the constraints
        LPUnbounded: The objective can be improved without limit
        LPError: Any other solver failure
    """
    logger.debug(
        "Solving LP: %d variables, %d constraints, %s",
        lp.num_vars, lp.num_constraints, lp.sense.name.lower(),
    )
    result = linprog(method=method, **lp.matrices())

    if result.status == STATUS_NUMERICAL and "infeasible" in str(result.message).lower():
        # HiGHS presolve cannot always tell infeasible from unbounded
        logger.debug("Presolve was inconclusive, solving again without it")
        result = linprog(method=method, options={"presolve": False}, **lp.matrices())

    if result.status == STATUS_INFEASIBLE:
        raise LPInfeasible(f"LP infeasible: {result.message}", result.status)
    if result.status == STATUS_UNBOUNDED:
        raise LPUnbounded(f"LP unbounded: {result.message}", result.status)
    if result.status != STATUS_OPTIMAL or not result.success:
        raise LPError(f"LP failed: {result.message}", result.status)

    value = float(result.fun)
    if lp.sense == Sense.MAXIMIZE:
        value = -value

    logger.debug("LP optimal value %.6g", value)
    return LPSolution(value=value, x=np.asarray(result.x, dtype=float))
