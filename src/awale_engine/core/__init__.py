"""Core board representation and rules."""

from .board import (
    BoardState,
    create_starting_state,
    NUM_PITS,
    PITS_PER_PLAYER,
    SEEDS_PER_PIT,
    TOTAL_SEEDS,
    CHECKPOINT_SCORE,
    MAX_RELAY_LAPS,
)
from .errors import MoveRejection
from .rules import (
    MoveResult,
    GameOverResult,
    MoveTrace,
    SowStep,
    StepKind,
    owner_pits,
    opponent,
    has_seeds,
    is_legal_move,
    check_move,
    would_feed_opponent,
    resolve_move,
    trace_move,
    get_valid_moves,
    check_game_over,
    winner_by_score,
    sweep_to_mover,
    sweep_rows_to_owners,
)

__all__ = [
    "BoardState",
    "create_starting_state",
    "NUM_PITS",
    "PITS_PER_PLAYER",
    "SEEDS_PER_PIT",
    "TOTAL_SEEDS",
    "CHECKPOINT_SCORE",
    "MAX_RELAY_LAPS",
    "MoveRejection",
    "MoveResult",
    "GameOverResult",
    "MoveTrace",
    "SowStep",
    "StepKind",
    "owner_pits",
    "opponent",
    "has_seeds",
    "is_legal_move",
    "check_move",
    "would_feed_opponent",
    "resolve_move",
    "trace_move",
    "get_valid_moves",
    "check_game_over",
    "winner_by_score",
    "sweep_to_mover",
    "sweep_rows_to_owners",
]
