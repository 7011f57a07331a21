"""Game representation module."""

from .coords import Pos, pos_range, in_range, linear_index, insert_pos, yank, replace_at
from .normal_form import Game, player_utility, build2, build3
from .library import GAMES

__all__ = [
    "Pos",
    "pos_range",
    "in_range",
    "linear_index",
    "insert_pos",
    "yank",
    "replace_at",
    "Game",
    "player_utility",
    "build2",
    "build3",
    "GAMES",
]
