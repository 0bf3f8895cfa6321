"""
Main CLI for the Awale rules engine.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Tuple

from rich.prompt import Prompt
from rich.table import Table

from ..core import (
    NUM_PITS,
    check_move,
    opponent,
    owner_pits,
    trace_move,
)
from ..core.errors import IllegalMoveError, MoveRejection
from ..session import CheckpointDecision, GameSession, GameStatus, SessionRegistry
from ..simulation import SelfPlayRunner
from ..storage import GameStore, PostgreSQLGameStore, SQLiteGameStore
from ..utils.rich_display import PLAYER_NAMES, BoardDisplay, setup_rich_logging

logger = logging.getLogger(__name__)

_CHECKPOINT_CHOICES = {
    "continue": CheckpointDecision.CONTINUE,
    "end": CheckpointDecision.END_GAME,
    "declare": CheckpointDecision.DECLARE_WINNER,
}


def setup_logging(level: str = "INFO") -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_board(value: str) -> Tuple[int, ...]:
    """argparse type for a comma-separated 12-pit board."""
    try:
        board = tuple(int(part) for part in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Board must be comma-separated integers: {value!r}")
    if len(board) != NUM_PITS or any(seeds < 0 for seeds in board):
        raise argparse.ArgumentTypeError(f"Board must hold {NUM_PITS} non-negative counts")
    return board


def open_store(args) -> GameStore:
    """Open the game store selected on the command line."""
    if args.backend == "postgresql":
        logger.info(f"Backend: PostgreSQL ({args.pg_host}:{args.pg_port}/{args.pg_database})")
        return PostgreSQLGameStore(
            host=args.pg_host,
            port=args.pg_port,
            database=args.pg_database,
            user=args.pg_user,
            password=args.pg_password,
        )
    db_path = Path(args.db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"Backend: SQLite ({db_path})")
    return SQLiteGameStore(str(db_path))


def _play_turns(session: GameSession, display: BoardDisplay) -> None:
    """Prompt players for moves until the game ends or they quit."""
    last_pit = None
    while session.status is not GameStatus.COMPLETED:
        state = session.state
        display.show_board(
            state.board,
            state.scores,
            current_player=session.current_player,
            highlight=() if last_pit is None else (last_pit,),
            title=f"Game {session.game_id}",
        )

        if session.status is GameStatus.PAUSED:
            session.resume()
            continue

        if session.status is GameStatus.CHECKPOINT:
            leader = PLAYER_NAMES[session.checkpoint_leader]
            display.log_success(f"{leader} reached 25!")
            choice = Prompt.ask(
                "Continue playing, end now (rows to owners), or declare the winner?",
                choices=list(_CHECKPOINT_CHOICES),
                default="continue",
            )
            session.decide_checkpoint(_CHECKPOINT_CHOICES[choice])
            continue

        player = session.current_player
        answer = Prompt.ask(
            f"{PLAYER_NAMES[player]}, choose a pit {list(owner_pits(player))} or q to quit"
        )
        if answer.strip().lower() == "q":
            session.pause()
            display.log_info(f"Game {session.game_id} paused")
            return
        try:
            pit = int(answer)
        except ValueError:
            display.log_error(f"Not a pit number: {answer}")
            continue

        try:
            outcome = session.play(player, pit)
        except IllegalMoveError as e:
            display.log_error(e.reason.message)
            continue

        last_pit = outcome.result.last_pit
        if outcome.result.captured:
            display.log_success(f"{PLAYER_NAMES[player]} captured {outcome.result.captured}")
        if outcome.result.rolled_back:
            display.log_warning("Capture cancelled: it would leave the opponent without seeds")
        if outcome.swept:
            display.log_info(
                f"{PLAYER_NAMES[outcome.next_player]} cannot move: "
                f"remaining seeds go to {PLAYER_NAMES[player]}"
            )

    state = session.state
    display.show_board(state.board, state.scores, title=f"Game {session.game_id} - final")
    if session.winner is None:
        display.log_success("Draw")
    else:
        display.log_success(f"{PLAYER_NAMES[session.winner]} wins")


def play_command(args):
    """Play a hot-seat game in the terminal."""
    display = BoardDisplay()
    display.show_header("Awale")

    store = open_store(args) if args.persist else None
    try:
        registry = SessionRegistry(store=store)
        if args.game_id and store is not None and store.get(args.game_id) is not None:
            session = registry.get(args.game_id)
            display.log_info(f"Resuming game {session.game_id}")
        else:
            session = registry.create(args.game_id)
            display.log_info(f"New game {session.game_id}")
        _play_turns(session, display)
    finally:
        if store is not None:
            store.close()


def moves_command(args):
    """List legal moves for a board."""
    display = BoardDisplay()
    display.show_board(args.board, (0, 0), current_player=args.player)

    table = Table(title=f"Moves for {PLAYER_NAMES[args.player]}")
    table.add_column("Pit", justify="right")
    table.add_column("Seeds", justify="right")
    table.add_column("Verdict")
    for pit in owner_pits(args.player):
        reason = check_move(args.board, pit, args.player)
        verdict = "[green]legal[/green]" if reason is None else f"[red]{reason.message}[/red]"
        table.add_row(str(pit), str(args.board[pit]), verdict)
    display.console.print(table)


def trace_command(args):
    """Print the stepwise trace of a move."""
    display = BoardDisplay()
    reason = check_move(args.board, args.pit, args.player)
    if reason in (MoveRejection.NOT_OWN_PIT, MoveRejection.EMPTY_PIT):
        display.log_error(reason.message)
        sys.exit(1)
    if reason is not None:
        display.log_warning(f"{reason.message} (tracing anyway)")

    trace = trace_move(args.board, args.pit, args.player)
    display.show_board(args.board, (0, 0), current_player=args.player, highlight=(args.pit,), title="Before")
    display.show_trace(trace)
    display.show_board(
        trace.result.board,
        (trace.result.captured, 0) if args.player == 0 else (0, trace.result.captured),
        current_player=opponent(args.player),
        highlight=(trace.result.last_pit,),
        title="After (captures this move)",
    )


def simulate_command(args):
    """Run random self-play games."""
    display = BoardDisplay()
    display.show_header(f"Self-play: {args.games:,} games")

    runner = SelfPlayRunner(seed=args.seed, max_moves=args.max_moves)
    stats = runner.run(args.games, progress=not args.no_progress)
    display.show_simulation(stats)

    if stats.relay_faults:
        sys.exit(1)


def show_command(args):
    """Show a stored game."""
    display = BoardDisplay()
    store = open_store(args)
    try:
        record = store.get(args.game_id)
        if record is None:
            display.log_error(f"Game {args.game_id} not found")
            sys.exit(1)
        display.show_board(
            record.board,
            record.scores,
            current_player=record.current_player,
            title=f"Game {record.game_id} ({record.status})",
        )
        if record.status == GameStatus.COMPLETED.value:
            result = "Draw" if record.winner is None else f"{PLAYER_NAMES[record.winner]} wins"
            display.log_info(result)
    finally:
        store.close()


def add_store_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--backend", choices=["sqlite", "postgresql"], default="sqlite", help="Game store backend"
    )
    parser.add_argument(
        "--db-path", default="data/games.db", help="Path to SQLite database file"
    )
    parser.add_argument("--pg-host", default="localhost", help="PostgreSQL host")
    parser.add_argument("--pg-port", type=int, default=5432, help="PostgreSQL port")
    parser.add_argument("--pg-database", default="awale", help="PostgreSQL database name")
    parser.add_argument("--pg-user", default="postgres", help="PostgreSQL user")
    parser.add_argument("--pg-password", default="", help="PostgreSQL password")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Relay-sowing Awale")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    parser.add_argument(
        "--rich-logs", action="store_true", help="Render log records with rich"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a hot-seat game")
    play_parser.add_argument("--game-id", default=None, help="Game id (resumes a stored game)")
    play_parser.add_argument(
        "--persist", action="store_true", help="Save the game after every move"
    )
    add_store_arguments(play_parser)
    play_parser.set_defaults(func=play_command)

    # Moves command
    moves_parser = subparsers.add_parser("moves", help="List legal moves for a board")
    moves_parser.add_argument("--board", type=parse_board, required=True, help="12 comma-separated counts")
    moves_parser.add_argument("--player", type=int, choices=[0, 1], required=True)
    moves_parser.set_defaults(func=moves_command)

    # Trace command
    trace_parser = subparsers.add_parser("trace", help="Show a move step by step")
    trace_parser.add_argument("--board", type=parse_board, required=True, help="12 comma-separated counts")
    trace_parser.add_argument("--player", type=int, choices=[0, 1], required=True)
    trace_parser.add_argument("--pit", type=int, required=True, help="Pit to sow from")
    trace_parser.set_defaults(func=trace_command)

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Run random self-play games")
    simulate_parser.add_argument("--games", type=int, default=1000, help="Number of games")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    simulate_parser.add_argument(
        "--max-moves", type=int, default=500, help="Abandon a game after this many moves"
    )
    simulate_parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar")
    simulate_parser.set_defaults(func=simulate_command)

    # Show command
    show_parser = subparsers.add_parser("show", help="Show a stored game")
    show_parser.add_argument("--game-id", required=True)
    add_store_arguments(show_parser)
    show_parser.set_defaults(func=show_command)

    return parser


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.rich_logs:
        setup_rich_logging(args.log_level)
    else:
        setup_logging(args.log_level)

    args.func(args)


if __name__ == "__main__":
    main()
