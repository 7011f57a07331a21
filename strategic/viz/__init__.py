"""Visualization module."""

from .display import GameDisplay, display_game

__all__ = [
    "GameDisplay",
    "display_game",
]
