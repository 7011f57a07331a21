"""Terminal rendering of games and solver results."""

from typing import Optional, Sequence

import numpy as np
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from strategic.game.coords import Pos
from strategic.game.normal_form import Game
from strategic.solver.equilibrium import Commitment, MaxiMin


def _format_payoffs(values: Sequence[float]) -> str:
    return ", ".join(f"{v:g}" for v in values)


def _format_strategy(strategy: Sequence[float]) -> str:
    """Probabilities as percentages, dropping actions never played."""
    parts = [
        f"[cyan]{i}[/] {p:.0%}"
        for i, p in enumerate(strategy, start=1)
        if p >= 0.005
    ]
    return "  ".join(parts)


class GameDisplay:
    """
    Render payoff matrices and solution concepts with rich.

    Two-player games print as a bimatrix, three-player games as one
    matrix per action of player 3, larger games as a profile listing.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def _matrix_table(self, payoffs: np.ndarray, title: str) -> Table:
        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("P1 \\ P2", style="bold")
        for j in range(payoffs.shape[1]):
            table.add_column(str(j + 1), justify="center")

        for i in range(payoffs.shape[0]):
            row = [str(i + 1)]
            row.extend(_format_payoffs(payoffs[i, j]) for j in range(payoffs.shape[1]))
            table.add_row(*row)
        return table

    def show_game(self, game: Game, title: str = "Payoffs") -> None:
        """Display the payoff tensor."""
        if game.n_players == 2:
            self.console.print(self._matrix_table(game.payoffs, title))
            return

        if game.n_players == 3:
            for k in range(game.dims.at(3)):
                self.console.print(
                    self._matrix_table(game.payoffs[:, :, k], f"{title} (P3 plays {k + 1})")
                )
            return

        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("Profile", style="bold")
        table.add_column("Payoffs", justify="right")
        for profile in game.profiles():
            table.add_row(str(profile), _format_payoffs(game.utility(profile)))
        self.console.print(table)

    def show_dominance(self, eliminated: Pos) -> None:
        """Display the actions removed by iterated dominance."""
        table = Table(title="Iterated Strict Dominance", show_header=True, header_style="bold")
        table.add_column("Player", style="cyan")
        table.add_column("Eliminated actions")

        for player, actions in enumerate(eliminated, start=1):
            text = ", ".join(str(a) for a in actions) if actions else "[dim]none[/]"
            table.add_row(str(player), text)

        self.console.print(table)

    def show_maximin(self, player: int, result: MaxiMin) -> None:
        self.console.print(Panel(
            f"[bold]Security level:[/] {result.value:.4f}\n"
            f"[bold]Strategy:[/] {_format_strategy(result.strategy)}",
            title=f"[bold]Maximin (player {player})[/]",
            border_style="green",
        ))

    def show_commitment(self, leader: int, result: Commitment) -> None:
        self.console.print(Panel(
            f"[bold]Leader utility:[/] {result.utility:.4f}\n"
            f"[bold]Commitment:[/] {_format_strategy(result.strategy)}",
            title=f"[bold]Stackelberg commitment (leader {leader})[/]",
            border_style="green",
        ))

    def show_pure_equilibria(self, game: Game, profiles: list[Pos]) -> None:
        if not profiles:
            self.console.print("[yellow]No pure Nash equilibrium[/]")
            return

        table = Table(title="Pure Nash Equilibria", show_header=True, header_style="bold")
        table.add_column("Profile", style="cyan")
        table.add_column("Payoffs", justify="right")
        for profile in profiles:
            table.add_row(str(profile), _format_payoffs(game.utility(profile)))
        self.console.print(table)

    def show_mixed_equilibria(self, game: Game, equilibria: list[Pos]) -> None:
        table = Table(title="Mixed Nash Equilibria", show_header=True, header_style="bold")
        for player in range(1, game.n_players + 1):
            table.add_column(f"P{player} strategy")
        table.add_column("Expected payoffs", justify="right")

        for eq in equilibria:
            values = [game.expected_utility(p, eq) for p in range(1, game.n_players + 1)]
            row = [_format_strategy(s) for s in eq]
            row.append(_format_payoffs(values))
            table.add_row(*row)
        self.console.print(table)


def display_game(game: Game, title: str = "Payoffs") -> None:
    """Convenience function to print a game to the terminal."""
    GameDisplay().show_game(game, title=title)
