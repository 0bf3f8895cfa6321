"""
Exception hierarchy and move rejection reasons.

Illegal moves are not exceptional for the rules engine: it reports them as a
MoveRejection value. The session layer turns a rejection into an
IllegalMoveError for its callers.
"""

from enum import Enum
from typing import Optional


class MoveRejection(str, Enum):
    """Why a move is not allowed, in the order the checks run."""

    NOT_OWN_PIT = "not_own_pit"
    EMPTY_PIT = "empty_pit"
    MUST_FEED_OPPONENT = "must_feed_opponent"

    @property
    def message(self) -> str:
        return _REJECTION_MESSAGES[self]


_REJECTION_MESSAGES = {
    MoveRejection.NOT_OWN_PIT: "Pit does not belong to you",
    MoveRejection.EMPTY_PIT: "Pit is empty",
    MoveRejection.MUST_FEED_OPPONENT: "You must give seeds to your opponent",
}


class AwaleError(Exception):
    """Base exception for all awale_engine errors."""


class RulesInvariantError(AwaleError, RuntimeError):
    """An internal rules invariant was violated (a bug, not a game outcome)."""


class RelayLimitExceeded(RulesInvariantError):
    """Relay sowing did not halt within the lap cap."""

    def __init__(self, board, pit: int, player: int, laps: int):
        super().__init__(
            f"Relay sowing from pit {pit} for player {player} exceeded {laps} laps "
            f"(board={list(board)})"
        )
        self.board = tuple(board)
        self.pit = pit
        self.player = player
        self.laps = laps


class ConservationError(RulesInvariantError):
    """Seeds on the board plus captured seeds no longer add up."""


class SessionError(AwaleError):
    """A session-level action was rejected."""


class GameNotActiveError(SessionError):
    """The game is not accepting moves in its current status."""


class NotYourTurnError(SessionError):
    """A player tried to move out of turn."""


class IllegalMoveError(SessionError):
    """The rules engine rejected the move."""

    def __init__(self, pit: int, player: int, reason: MoveRejection):
        super().__init__(f"Illegal move {pit} for player {player}: {reason.message}")
        self.pit = pit
        self.player = player
        self.reason = reason


class InvalidTransitionError(SessionError):
    """The requested status transition is not allowed from the current status."""


class SessionExistsError(SessionError):
    """A session with this id is already registered."""


class SessionNotFoundError(SessionError, KeyError):
    """No session with this id is registered or stored."""

    def __init__(self, game_id: str, detail: Optional[str] = None):
        super().__init__(detail or f"Game {game_id} not found")
        self.game_id = game_id

    def __str__(self) -> str:
        return self.args[0]
