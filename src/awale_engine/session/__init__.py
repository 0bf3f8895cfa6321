"""Game sessions: the stateful layer around the rules engine."""

from .game import GameSession, GameStatus, CheckpointDecision, MoveOutcome
from .registry import SessionRegistry

__all__ = [
    "GameSession",
    "GameStatus",
    "CheckpointDecision",
    "MoveOutcome",
    "SessionRegistry",
]
