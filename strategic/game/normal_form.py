"""
Normal-form (strategic-form) game representation.

A game is a dense payoff tensor: for every action profile (one action per
player, each numbered from 1) it stores a payoff vector with one entry per
player. Games are immutable; eliminating an action returns a new game.
"""

import json
from functools import reduce
from typing import Any, Iterator, Sequence, Union

import numpy as np

from strategic.errors import ConstructionError, InvalidIndex, UnsupportedGame
from .coords import Pos, in_range, pos_range

# A profile may be given as a Pos or as any sequence of action numbers
Profile = Union[Pos, Sequence[int]]


def _is_index(value: Any) -> bool:
    """True for integers usable as 1-based player or action numbers."""
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


class Game:
    """
    Payoff tensor for a finite n-player game.

    The tensor has shape (d1, ..., dN, N): one axis per player whose
    length is that player's action count, plus a trailing axis holding
    the payoff vector.

    Construct games with build2 / build3. Calling Game directly is the
    low-level path used by eliminate and the builders: it only checks the
    tensor shape. General N-player construction is not supported, and
    nested layouts and JSON persistence exist for two and three players only.
    """

    def __init__(self, payoffs: Any):
        """
        Args:
            payoffs: Array-like of shape (d1, ..., dN, N)
        """
        try:
            arr = np.array(payoffs, dtype=float)
        except ValueError as e:
            raise ConstructionError(f"Payoffs are not a rectangular array: {e}") from e

        if arr.ndim < 2:
            raise ConstructionError("Payoffs need at least one player axis and a payoff axis")

        n = arr.ndim - 1
        if arr.shape[-1] != n:
            raise ConstructionError(
                f"Payoff vectors have length {arr.shape[-1]}, expected {n}"
            )
        if any(d < 1 for d in arr.shape[:-1]):
            raise ConstructionError("Every player needs at least one action")

        arr.setflags(write=False)
        self._payoffs = arr

    @property
    def n_players(self) -> int:
        return self._payoffs.ndim - 1

    @property
    def dims(self) -> Pos:
        """Action count per player; also the upper bound of the index region."""
        return Pos(self._payoffs.shape[:-1], self.n_players)

    @property
    def payoffs(self) -> np.ndarray:
        """Read-only view of the payoff tensor."""
        return self._payoffs

    def check_player(self, player: int) -> None:
        if not _is_index(player) or not 1 <= player <= self.n_players:
            raise InvalidIndex(f"Player {player} outside 1..{self.n_players}")

    def check_action(self, player: int, action: int) -> None:
        self.check_player(player)
        if not _is_index(action):
            raise InvalidIndex(f"Action {action!r} is not an integer")
        num_actions = self.dims.at(player)
        if not 1 <= action <= num_actions:
            raise InvalidIndex(
                f"Action {action} outside 1..{num_actions} for player {player}"
            )

    def _index(self, profile: Profile) -> tuple[int, ...]:
        if not isinstance(profile, Pos):
            profile = Pos.of(profile)
        if profile.n != self.n_players:
            raise ConstructionError(
                f"Profile {profile} has {profile.n} actions, game has {self.n_players} players"
            )
        if not all(_is_index(a) for a in profile):
            raise InvalidIndex(f"Profile {profile} has non-integer actions")
        if not in_range(Pos.ones(self.n_players), self.dims, profile):
            raise InvalidIndex(f"Profile {profile} outside game bounds {self.dims}")
        return tuple(a - 1 for a in profile)

    def utility(self, profile: Profile) -> Pos:
        """Payoff vector (one entry per player) at an action profile."""
        values = self._payoffs[self._index(profile)]
        return Pos(tuple(float(v) for v in values), self.n_players)

    def payoff(self, profile: Profile, player: int) -> float:
        """Single player's payoff at an action profile."""
        self.check_player(player)
        return float(self._payoffs[self._index(profile)][player - 1])

    def profiles(self) -> Iterator[Pos]:
        """All action profiles in storage order."""
        return pos_range(Pos.ones(self.n_players), self.dims)

    def expected_utility(self, player: int, strategies: Union[Pos, Sequence]) -> float:
        """
        Expected payoff of a player when everybody plays a mixed strategy.

        The joint probability of a profile is the product of each player's
        probability on their own action. Cost grows with the product of all
        action counts.

        Args:
            player: Player whose payoff is evaluated
            strategies: One probability vector per player

        Returns:
            Expected utility
        """
        self.check_player(player)
        if not isinstance(strategies, Pos):
            strategies = Pos.of(strategies)
        if strategies.n != self.n_players:
            raise ConstructionError(
                f"Got {strategies.n} strategies for {self.n_players} players"
            )

        vectors = []
        for i, (strategy, num_actions) in enumerate(zip(strategies, self.dims), start=1):
            vec = np.asarray(strategy, dtype=float)
            if vec.shape != (num_actions,):
                raise ConstructionError(
                    f"Strategy for player {i} has shape {vec.shape}, expected ({num_actions},)"
                )
            vectors.append(vec)

        joint = reduce(np.multiply.outer, vectors)
        return float(np.sum(joint * self._payoffs[..., player - 1]))

    def eliminate(self, player: int, action: int) -> "Game":
        """
        New game without one action of one player.

        Actions numbered above the removed one shift down by one, so the
        player's actions stay numbered 1..d-1 in their original order.
        """
        self.check_action(player, action)
        if self.dims.at(player) == 1:
            raise InvalidIndex(f"Cannot eliminate the only action of player {player}")
        return Game(np.delete(self._payoffs, action - 1, axis=player - 1))

    def to_nested(self) -> list:
        """Nested payoff lists in the layout accepted by build2 / build3."""
        if self.n_players == 2:
            return self._payoffs.tolist()
        if self.n_players == 3:
            return np.transpose(self._payoffs, (2, 0, 1, 3)).tolist()
        raise UnsupportedGame(
            f"Nested payoff layout only defined for 2 or 3 players, not {self.n_players}"
        )

    def save(self, filepath: str) -> None:
        """Save game to a JSON file."""
        data = {
            "players": self.n_players,
            "payoffs": self.to_nested(),
        }
        with open(filepath, "w") as f:
            json.dump(data, f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> "Game":
        """Load game from a JSON file written by save()."""
        with open(filepath, "r") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConstructionError(f"Invalid game file {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise ConstructionError(f"Invalid game file {filepath}: expected a JSON object")

        players = data.get("players")
        try:
            payoffs = data["payoffs"]
        except KeyError as e:
            raise ConstructionError(f"Invalid game file {filepath}: missing {e}") from e

        if players == 2:
            return build2(payoffs)
        if players == 3:
            return build3(payoffs)
        raise ConstructionError(f"Cannot build a game with {players} players")

    def __repr__(self) -> str:
        return f"Game(players={self.n_players}, dims=[{self.dims}])"


def player_utility(payoffs: Pos, player: int) -> float:
    """Extract one player's entry from a payoff vector."""
    return float(payoffs.at(player))


def _shape_of(data: Any, depth: int) -> tuple[int, ...]:
    """Shape of a nested structure, failing on raggedness or empty levels."""
    if depth == 0:
        return ()
    try:
        items = list(data)
    except TypeError:
        raise ConstructionError(f"Expected a sequence, got {data!r}") from None
    if not items:
        raise ConstructionError("Payoff data contains an empty level")

    shapes = {_shape_of(item, depth - 1) for item in items}
    if len(shapes) != 1:
        raise ConstructionError(f"Ragged payoff data: {sorted(shapes)}")
    return (len(items),) + shapes.pop()


def _to_lists(data: Any, depth: int) -> Any:
    if depth == 0:
        return data
    return [_to_lists(item, depth - 1) for item in data]


def _build(data: Any, n: int) -> np.ndarray:
    # n nested levels of actions, then the payoff vector itself
    shape = _shape_of(data, n + 1)
    if shape[-1] != n:
        raise ConstructionError(f"Payoff vectors have length {shape[-1]}, expected {n}")
    try:
        return np.array(_to_lists(data, n + 1), dtype=float)
    except (TypeError, ValueError) as e:
        raise ConstructionError(f"Non-numeric payoff: {e}") from e


def build2(rows: Sequence[Sequence[Sequence[float]]]) -> Game:
    """
    Build a two-player game from a matrix of payoff pairs.

    Args:
        rows: rows[i][j] is the payoff vector when player 1 plays i+1
            and player 2 plays j+1

    Returns:
        Game with dims [len(rows), len(rows[0])]
    """
    return Game(_build(rows, 2))


def build3(layers: Sequence[Sequence[Sequence[Sequence[float]]]]) -> Game:
    """
    Build a three-player game from a stack of payoff matrices.

    Args:
        layers: layers[k][i][j] is the payoff vector when player 1 plays
            i+1, player 2 plays j+1 and player 3 plays k+1

    Returns:
        Game with dims [rows, columns, layers]
    """
    arr = _build(layers, 3)
    return Game(np.transpose(arr, (1, 2, 0, 3)))
