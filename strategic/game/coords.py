"""
Fixed-length coordinate vectors.

A Pos is used both as an index into a payoff tensor (one action per
player) and as a plain per-player container (payoff vectors, strategy
profiles). Positions inside a Pos are 1-based throughout, matching the
numbering of players and actions.
"""

from dataclasses import dataclass
from itertools import product
from typing import Any, Iterable, Iterator, Sequence

from strategic.errors import ConstructionError, InvalidIndex


@dataclass(frozen=True, order=True)
class Pos:
    """
    Immutable vector whose length is fixed at construction.

    Args:
        values: Components, one per player
        n: Declared length; construction fails if it disagrees with values
    """
    values: tuple
    n: int

    def __post_init__(self):
        values = tuple(self.values)
        object.__setattr__(self, "values", values)
        if self.n < 0 or len(values) != self.n:
            raise ConstructionError(
                f"Expected {self.n} components, got {len(values)}"
            )

    @classmethod
    def of(cls, values: Iterable[Any]) -> "Pos":
        """Build a Pos whose length is taken from the input."""
        values = tuple(values)
        return cls(values, len(values))

    @classmethod
    def ones(cls, n: int) -> "Pos":
        """Lower bound [1, ..., 1] of an n-dimensional region."""
        return cls((1,) * n, n)

    def at(self, i: int) -> Any:
        """Component at 1-based position i."""
        _check_position(i, self.n)
        return self.values[i - 1]

    def __len__(self) -> int:
        return self.n

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def __str__(self) -> str:
        return " \\ ".join(str(v) for v in self.values)


def _check_position(i: int, n: int) -> None:
    if not 1 <= i <= n:
        raise InvalidIndex(f"Position {i} outside 1..{n}")


def _check_same_length(*vectors: Pos) -> int:
    n = vectors[0].n
    for vec in vectors[1:]:
        if vec.n != n:
            raise ConstructionError(
                f"Vectors of different lengths: {n} and {vec.n}"
            )
    return n


def pos_range(low: Pos, high: Pos) -> Iterator[Pos]:
    """
    Every vector component-wise between low and high, inclusive.

    The first axis varies slowest (row-major), the same order in
    which payoff tensors are stored.
    """
    n = _check_same_length(low, high)
    axes = [range(lo, hi + 1) for lo, hi in zip(low, high)]
    for combo in product(*axes):
        yield Pos(combo, n)


def in_range(low: Pos, high: Pos, pos: Pos) -> bool:
    """True if every coordinate of pos lies inside [low_i, high_i]."""
    _check_same_length(low, high, pos)
    return all(lo <= p <= hi for lo, p, hi in zip(low, pos, high))


def linear_index(low: Pos, high: Pos, pos: Pos) -> int:
    """
    0-based rank of pos in the pos_range(low, high) ordering.

    Computed with mixed-radix strides, so it does not enumerate the region.
    """
    if not in_range(low, high, pos):
        raise InvalidIndex(f"{pos} outside region [{low}] .. [{high}]")

    index = 0
    stride = 1
    for lo, hi, p in reversed(list(zip(low, high, pos))):
        index += (p - lo) * stride
        stride *= hi - lo + 1
    return index


def insert_pos(vec: Pos, i: int, value: Any) -> Pos:
    """New vector of length n+1 with value placed at 1-based position i."""
    _check_position(i, vec.n + 1)
    values = vec.values[:i - 1] + (value,) + vec.values[i - 1:]
    return Pos(values, vec.n + 1)


def yank(i: int, seq: Sequence[Any]) -> tuple[Any, list]:
    """
    Split off the element at 1-based position i.

    Returns:
        Tuple of (element, remaining elements in order)
    """
    items = list(seq)
    _check_position(i, len(items))
    return items[i - 1], items[:i - 1] + items[i:]


def replace_at(vec: Pos, i: int, value: Any) -> Pos:
    """Copy of vec with the component at 1-based position i replaced."""
    _check_position(i, vec.n)
    values = vec.values[:i - 1] + (value,) + vec.values[i:]
    return Pos(values, vec.n)
