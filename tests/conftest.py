"""Pytest configuration and fixtures."""

import tempfile
from pathlib import Path

import pytest

from strategic.game import build2
from strategic.game.library import (
    prisoners_dilemma, matching_pennies, coordination,
    three_player_public_goods,
)


@pytest.fixture
def pd():
    """Prisoner's dilemma; action 1 = cooperate, 2 = defect."""
    return prisoners_dilemma()


@pytest.fixture
def pennies():
    return matching_pennies()


@pytest.fixture
def coord():
    return coordination()


@pytest.fixture
def public_goods():
    return three_player_public_goods()


@pytest.fixture
def three_round_game():
    """
    3x3 game that needs three elimination rounds.

    Round 1 removes column 2, round 2 rows 2 and 3, round 3 column 3,
    leaving the profile (1, 1).
    """
    return build2([
        [(4, 3), (5, 1), (6, 2)],
        [(2, 1), (8, 4), (3, 6)],
        [(3, 0), (9, 6), (2, 8)],
    ])


@pytest.fixture
def commitment_game():
    """Leader (player 1) gains by committing to a mix of its two actions."""
    return build2([
        [(2, 1), (4, 0)],
        [(1, 0), (3, 1)],
    ])


@pytest.fixture
def temp_file():
    """Create a temporary file that's cleaned up after the test."""
    files = []

    def _temp_file(suffix=""):
        f = tempfile.NamedTemporaryFile(suffix=suffix, delete=False)
        files.append(Path(f.name))
        f.close()
        return Path(f.name)

    yield _temp_file

    # Cleanup
    for f in files:
        if f.exists():
            f.unlink()
