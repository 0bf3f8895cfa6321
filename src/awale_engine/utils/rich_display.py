"""
Rich-based terminal display for boards, traces and simulation results.

Provides clean, formatted output with:
- Board panel with both rows, scores and pit indices
- Move trace table
- Self-play summary table
"""

import logging
from typing import Iterable, Optional, Sequence
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core import MoveTrace, StepKind, owner_pits
from ..simulation import SimulationStats

console = Console()
logger = logging.getLogger(__name__)

PLAYER_NAMES = ("South", "North")
_STEP_STYLES = {
    StepKind.PICKUP: "yellow",
    StepKind.SOW: "white",
    StepKind.CAPTURE: "bold red",
}


class BoardDisplay:
    """
    Rich-based display for a game.

    Shows:
    - North row (pits 11..6) above South row (pits 0..5)
    - Scores and whose turn it is
    - Highlighted pits (e.g. last landed pit)
    """

    def __init__(self, console: Console = console):
        self.console = console

    def log(self, message: str, style: str = ""):
        """Log a message using rich console."""
        self.console.print(message, style=style)

    def log_info(self, message: str):
        self.console.print(f"[blue]ℹ[/blue] {message}")

    def log_success(self, message: str):
        self.console.print(f"[green]✓[/green] {message}")

    def log_warning(self, message: str):
        self.console.print(f"[yellow]⚠[/yellow]  {message}")

    def log_error(self, message: str):
        self.console.print(f"[red]✗[/red] {message}")

    def show_header(self, title: str):
        self.console.rule(f"[bold blue]{title}[/bold blue]")

    def board_table(
        self, board: Sequence[int], highlight: Iterable[int] = ()
    ) -> Table:
        """Create a two-row board table with pit indices in the header."""
        highlight = set(highlight)
        north = list(reversed(owner_pits(1)))
        south = list(owner_pits(0))

        table = Table(show_header=False, box=None, padding=(0, 2))
        for _ in range(len(south) + 1):
            table.add_column(justify="right")

        def cells(pits):
            return [
                f"[bold reverse]{board[p]}[/bold reverse]" if p in highlight else str(board[p])
                for p in pits
            ]

        table.add_row("[dim]#[/dim]", *[f"[dim]{p}[/dim]" for p in north])
        table.add_row(f"[magenta]{PLAYER_NAMES[1]}[/magenta]", *cells(north))
        table.add_row(f"[cyan]{PLAYER_NAMES[0]}[/cyan]", *cells(south))
        table.add_row("[dim]#[/dim]", *[f"[dim]{p}[/dim]" for p in south])
        return table

    def show_board(
        self,
        board: Sequence[int],
        scores: Sequence[int],
        current_player: Optional[int] = None,
        highlight: Iterable[int] = (),
        title: str = "Board",
    ):
        """Show the board in a panel with scores."""
        subtitle = (
            f"[cyan]{PLAYER_NAMES[0]}[/cyan] {scores[0]}  |  "
            f"[magenta]{PLAYER_NAMES[1]}[/magenta] {scores[1]}"
        )
        if current_player is not None:
            subtitle += f"  |  to move: [bold]{PLAYER_NAMES[current_player]}[/bold]"
        self.console.print(
            Panel(self.board_table(board, highlight), title=title, subtitle=subtitle, expand=False)
        )

    def show_trace(self, trace: MoveTrace):
        """Show every step of a move trace."""
        table = Table(title="Move trace")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Step")
        table.add_column("Pit", justify="right")
        table.add_column("Board")

        for i, step in enumerate(trace.steps, 1):
            style = _STEP_STYLES[step.kind]
            table.add_row(
                str(i),
                f"[{style}]{step.kind.value}[/{style}]",
                str(step.pit),
                " ".join(f"{s:>2}" for s in step.board),
            )
        self.console.print(table)

        result = trace.result
        summary = (
            f"Last pit {result.last_pit} | laps {result.laps} | captured {result.captured}"
        )
        if result.rolled_back:
            summary += " [yellow](capture cancelled: opponent would starve)[/yellow]"
        self.log_info(summary)

    def show_simulation(self, stats: SimulationStats):
        """Show self-play summary."""
        table = Table(title="Self-play summary", show_header=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")

        table.add_row("Games", f"{stats.games:,}")
        table.add_row(f"{PLAYER_NAMES[0]} wins", f"{stats.wins[0]:,}")
        table.add_row(f"{PLAYER_NAMES[1]} wins", f"{stats.wins[1]:,}")
        table.add_row("Draws", f"{stats.draws:,}")
        table.add_row("Unfinished", f"{stats.unfinished:,}")
        table.add_row("Average moves", f"{stats.average_moves:.1f}")
        table.add_row("Longest game", f"{stats.longest_game:,}")
        table.add_row("Relay moves", f"{stats.relay_moves:,}")
        table.add_row("Max laps in one move", f"{stats.max_laps}")
        table.add_row("Captures", f"{stats.captures:,}")
        table.add_row("Cancelled captures", f"{stats.rollbacks:,}")
        table.add_row("Sweeps", f"{stats.sweeps:,}")
        table.add_row("Checkpoints", f"{stats.checkpoints:,}")
        relay_color = "red" if stats.relay_faults else "green"
        table.add_row("Relay faults", f"[{relay_color}]{stats.relay_faults}[/{relay_color}]")
        self.console.print(table)


def setup_rich_logging(level: str = "INFO"):
    """Configure logging to work nicely with rich console."""
    from rich.logging import RichHandler

    # Remove existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s"))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=[rich_handler],
        format="%(message)s",
    )
