#!/usr/bin/env python3
"""Solve a normal-form game."""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from strategic.errors import GameTheoryError
from strategic.game import Game, GAMES
from strategic.solver import (
    SolverConfig,
    iterated_dominance,
    maximin,
    mixed_nash,
    pure_nash,
    stackelberg_mixed_commitment,
)
from strategic.viz import GameDisplay


MODES = ["all", "maximin", "dominance", "pure-nash", "mixed-nash", "stackelberg"]


def main():
    parser = argparse.ArgumentParser(
        description="Compute solution concepts for a normal-form game"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "-g", "--game",
        help="Game file (JSON, as written by Game.save)",
    )
    source.add_argument(
        "-e", "--example",
        choices=sorted(GAMES),
        help="Use a built-in example game",
    )
    parser.add_argument(
        "-m", "--mode",
        choices=MODES,
        default="all",
        help="Solution concept to compute (default: all)",
    )
    parser.add_argument(
        "-p", "--player",
        type=int,
        help="Player for maximin (default: every player)",
    )
    parser.add_argument(
        "-l", "--leader",
        type=int,
        default=1,
        help="Leader for Stackelberg commitment (default: 1)",
    )
    parser.add_argument(
        "--max-rounds",
        type=int,
        help="Cap on iterated dominance rounds",
    )
    parser.add_argument(
        "-o", "--save",
        help="Save the game to a JSON file",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )

    args = parser.parse_args()
    console = Console()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    try:
        game, name = _load_game(args)
    except FileNotFoundError as e:
        console.print(f"[red]Game file not found: {e.filename}[/]")
        return 1
    except GameTheoryError as e:
        console.print(f"[red]{type(e).__name__}: {e}[/]")
        return 1

    config = SolverConfig(max_rounds=args.max_rounds)
    display = GameDisplay(console)

    console.print(f"[bold]Game:[/] {name}")
    console.print(f"[bold]Players:[/] {game.n_players}")
    console.print(f"[bold]Actions:[/] {game.dims}")
    console.print()
    display.show_game(game)

    try:
        _solve(args, game, config, display)
    except GameTheoryError as e:
        console.print(f"[red]{type(e).__name__}: {e}[/]")
        return 1

    if args.save:
        game.save(args.save)
        console.print(f"\n[bold]Game saved to:[/] {args.save}")

    return 0


def _load_game(args) -> tuple[Game, str]:
    """Game named on the command line, with a display name."""
    if args.game:
        game_path = Path(args.game)
        return Game.load(str(game_path)), game_path.stem
    return GAMES[args.example](), args.example


def _solve(args, game: Game, config: SolverConfig, display: GameDisplay) -> None:
    """Run the requested solution concepts and print each result."""
    console = display.console
    wanted = set(MODES[1:]) if args.mode == "all" else {args.mode}

    if "maximin" in wanted:
        players = [args.player] if args.player else range(1, game.n_players + 1)
        for player in players:
            display.show_maximin(player, maximin(game, player, config))

    if "dominance" in wanted:
        display.show_dominance(iterated_dominance(game, config))

    if "pure-nash" in wanted:
        display.show_pure_equilibria(game, pure_nash(game, config))

    if "mixed-nash" in wanted:
        if game.n_players == 2 or args.mode == "mixed-nash":
            display.show_mixed_equilibria(game, mixed_nash(game, config))
        else:
            console.print("[dim]Mixed Nash skipped: only two-player games are supported[/]")

    if "stackelberg" in wanted:
        if game.n_players == 2 or args.mode == "stackelberg":
            display.show_commitment(
                args.leader,
                stackelberg_mixed_commitment(game, args.leader, config),
            )
        else:
            console.print("[dim]Stackelberg skipped: only two-player games are supported[/]")


if __name__ == "__main__":
    sys.exit(main())
