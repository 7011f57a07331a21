"""Error types raised by games and solvers."""


class GameTheoryError(Exception):
    """Base class for all errors raised by this package."""


class ConstructionError(GameTheoryError, ValueError):
    """Malformed payoff data or a vector of the wrong length."""


class InvalidIndex(GameTheoryError, IndexError):
    """Player, action or position outside its declared range."""


class UnsupportedGame(GameTheoryError, ValueError):
    """The algorithm does not apply to a game of this shape."""


class SolverError(GameTheoryError, RuntimeError):
    """A solver could not produce an answer."""


class LPError(SolverError):
    """The LP backend stopped without an optimal solution."""

    def __init__(self, message: str, status: int = -1):
        super().__init__(message)
        self.status = status


class LPInfeasible(LPError):
    """The linear program has no feasible point."""


class LPUnbounded(LPError):
    """The linear program's objective is unbounded."""


class ConvergenceError(SolverError):
    """An iterative procedure hit its round limit."""


class UnimplementedOperation(GameTheoryError, NotImplementedError):
    """The operation is not available for this input."""
