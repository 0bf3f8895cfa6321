"""
Game session: the authoritative owner of one game's board, scores and turn.

The rules engine is pure; this is the caller it expects. A session
serializes moves under a lock, credits captures, alternates turns, runs the
end-of-game sweep and drives the reached-25 checkpoint:

    ACTIVE --move reaching 25--> CHECKPOINT
    CHECKPOINT --CONTINUE--> ACTIVE (no further checkpoint prompts)
    CHECKPOINT --END_GAME / DECLARE_WINNER--> COMPLETED
    ACTIVE <--pause/resume--> PAUSED
    any --end_game--> COMPLETED, any --reset--> ACTIVE
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from ..core import (
    BoardState,
    CHECKPOINT_SCORE,
    MoveResult,
    TOTAL_SEEDS,
    check_game_over,
    check_move,
    create_starting_state,
    get_valid_moves,
    opponent,
    resolve_move,
    sweep_rows_to_owners,
    sweep_to_mover,
    winner_by_score,
)
from ..core.errors import (
    ConservationError,
    GameNotActiveError,
    IllegalMoveError,
    InvalidTransitionError,
    NotYourTurnError,
)
from ..storage import GameRecord, GameStore

logger = logging.getLogger(__name__)


class GameStatus(str, Enum):
    ACTIVE = "active"
    CHECKPOINT = "checkpoint"  # A player reached 25, waiting for a decision
    PAUSED = "paused"
    COMPLETED = "completed"


class CheckpointDecision(str, Enum):
    CONTINUE = "continue"  # Keep playing
    END_GAME = "end_game"  # Each row goes to its owner, higher score wins
    DECLARE_WINNER = "declare_winner"  # The player who reached 25 wins as things stand


@dataclass(frozen=True)
class MoveOutcome:
    """Everything a transport layer needs to notify players of a move."""

    previous_board: Tuple[int, ...]
    pit: int
    mover: int
    result: MoveResult
    state: BoardState  # Board and scores after the move (and any sweep)
    next_player: int
    status: GameStatus
    winner: Optional[int]
    swept: bool  # Remaining seeds were swept to the mover


class GameSession:
    """
    One game in progress.

    All public methods that change state hold the session lock, so at most
    one move is evaluated at a time for a given game.
    """

    def __init__(
        self,
        game_id: str,
        state: Optional[BoardState] = None,
        current_player: int = 0,
        status: GameStatus = GameStatus.ACTIVE,
        winner: Optional[int] = None,
        store: Optional[GameStore] = None,
        checkpoint_acknowledged: bool = False,
    ):
        """
        Initialize a session.

        Args:
            game_id: Game identifier
            state: Board and scores (default: starting position)
            current_player: Player to move
            status: Initial status
            winner: Winner of a completed game
            store: Optional store saved to after every accepted change
            checkpoint_acknowledged: Players already chose to play on past 25
        """
        if current_player not in (0, 1):
            raise ValueError(f"Invalid player {current_player}, must be 0 or 1")
        self.game_id = game_id
        self.store = store
        self._state = state if state is not None else create_starting_state()
        self._current_player = current_player
        self._status = GameStatus(status)
        self._winner = winner
        self._checkpoint_acknowledged = checkpoint_acknowledged
        self._lock = threading.Lock()

    @property
    def state(self) -> BoardState:
        return self._state

    @property
    def current_player(self) -> int:
        return self._current_player

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def winner(self) -> Optional[int]:
        return self._winner

    @property
    def checkpoint_leader(self) -> Optional[int]:
        """Player who reached 25, while the game waits at the checkpoint."""
        if self._status is not GameStatus.CHECKPOINT:
            return None
        return 0 if self._state.scores[0] >= CHECKPOINT_SCORE else 1

    def valid_moves(self) -> List[int]:
        """Legal pits for the player to move."""
        return get_valid_moves(self._state.board, self._current_player)

    def play(self, player: int, pit: int) -> MoveOutcome:
        """
        Play a move for `player`.

        Args:
            player: Player making the move
            pit: Pit index to move from

        Returns:
            MoveOutcome describing the accepted move

        Raises:
            GameNotActiveError: game is paused, at the checkpoint or over
            NotYourTurnError: `player` is not the player to move
            IllegalMoveError: the rules reject the move (state is unchanged)
        """
        with self._lock:
            if self._status is not GameStatus.ACTIVE:
                raise GameNotActiveError(f"Game {self.game_id} is {self._status.value}")
            if player != self._current_player:
                raise NotYourTurnError(f"Not player {player}'s turn in game {self.game_id}")

            previous = self._state
            reason = check_move(previous.board, pit, player)
            if reason is not None:
                logger.info(
                    f"Game {self.game_id}: rejected pit {pit} for player {player} ({reason.value})"
                )
                raise IllegalMoveError(pit, player, reason)

            result = resolve_move(previous.board, pit, player)
            scores = list(previous.scores)
            scores[player] += result.captured
            if sum(result.board) + sum(scores) != TOTAL_SEEDS:
                raise ConservationError(
                    f"Game {self.game_id}: pit {pit} for player {player} turned "
                    f"{list(previous.board)} into {list(result.board)} (+{result.captured})"
                )
            self._state = BoardState(board=result.board, scores=(scores[0], scores[1]))
            self._current_player = opponent(player)

            logger.info(
                f"Game {self.game_id}: player {player} played pit {pit}, "
                f"captured {result.captured}, laps {result.laps}, scores {self._state.scores}"
            )

            swept = False
            verdict = check_game_over(self._state.board, self._state.scores)
            if verdict.terminal:
                self._complete(verdict.winner)
            elif verdict.reached25 and not self._checkpoint_acknowledged:
                self._status = GameStatus.CHECKPOINT
                logger.info(f"Game {self.game_id}: player {verdict.winner} reached {CHECKPOINT_SCORE}")
            else:
                swept = self._sweep_if_stuck(mover=player)

            self._save()
            return MoveOutcome(
                previous_board=previous.board,
                pit=pit,
                mover=player,
                result=result,
                state=self._state,
                next_player=self._current_player,
                status=self._status,
                winner=self._winner,
                swept=swept,
            )

    def decide_checkpoint(self, decision: CheckpointDecision) -> GameStatus:
        """
        Resolve the reached-25 checkpoint.

        Returns:
            Status after the decision

        Raises:
            InvalidTransitionError: game is not waiting at the checkpoint
        """
        decision = CheckpointDecision(decision)
        with self._lock:
            if self._status is not GameStatus.CHECKPOINT:
                raise InvalidTransitionError(
                    f"Game {self.game_id} is {self._status.value}, not at the checkpoint"
                )

            if decision is CheckpointDecision.CONTINUE:
                self._checkpoint_acknowledged = True
                self._status = GameStatus.ACTIVE
                self._sweep_if_stuck(mover=opponent(self._current_player))
            elif decision is CheckpointDecision.END_GAME:
                self._end_with_rows_to_owners()
            else:
                self._complete(self.checkpoint_leader)

            logger.info(f"Game {self.game_id}: checkpoint decision {decision.value}")
            self._save()
            return self._status

    def pause(self) -> None:
        with self._lock:
            if self._status is not GameStatus.ACTIVE:
                raise InvalidTransitionError(f"Game {self.game_id} is not active")
            self._status = GameStatus.PAUSED
            self._save()

    def resume(self) -> None:
        with self._lock:
            if self._status is not GameStatus.PAUSED:
                raise InvalidTransitionError(f"Game {self.game_id} is not paused")
            self._status = GameStatus.ACTIVE
            self._save()

    def end_game(self) -> Optional[int]:
        """
        End the game now: each row is credited to its owner.

        Returns:
            Winner by score, None for a draw
        """
        with self._lock:
            if self._status is GameStatus.COMPLETED:
                raise InvalidTransitionError(f"Game {self.game_id} is already completed")
            self._end_with_rows_to_owners()
            self._save()
            return self._winner

    def reset(self) -> None:
        """Start over from the initial position with player 0 to move."""
        with self._lock:
            self._state = create_starting_state()
            self._current_player = 0
            self._status = GameStatus.ACTIVE
            self._winner = None
            self._checkpoint_acknowledged = False
            logger.info(f"Game {self.game_id}: reset")
            self._save()

    def _sweep_if_stuck(self, mover: int) -> bool:
        """If the player to move has no legal move, give the board to `mover`."""
        if get_valid_moves(self._state.board, self._current_player):
            return False
        board, scores = sweep_to_mover(self._state.board, self._state.scores, mover)
        self._state = BoardState(board=board, scores=scores)
        logger.info(
            f"Game {self.game_id}: player {self._current_player} cannot move, "
            f"remaining seeds go to player {mover}"
        )
        self._complete(winner_by_score(scores))
        return True

    def _end_with_rows_to_owners(self) -> None:
        board, scores = sweep_rows_to_owners(self._state.board, self._state.scores)
        self._state = BoardState(board=board, scores=scores)
        self._complete(winner_by_score(scores))

    def _complete(self, winner: Optional[int]) -> None:
        self._status = GameStatus.COMPLETED
        self._winner = winner
        result = f"player {winner} wins" if winner is not None else "draw"
        logger.info(f"Game {self.game_id}: completed, {result} {self._state.scores}")

    def to_record(self) -> GameRecord:
        return GameRecord(
            game_id=self.game_id,
            board=self._state.board,
            scores=self._state.scores,
            current_player=self._current_player,
            status=self._status.value,
            winner=self._winner,
            checkpoint_acknowledged=self._checkpoint_acknowledged,
        )

    def _save(self) -> None:
        if self.store is not None:
            self.store.save(self.to_record())

    @classmethod
    def from_record(cls, record: GameRecord, store: Optional[GameStore] = None) -> "GameSession":
        """Rebuild a session from a stored record."""
        status = GameStatus(record.status)
        scores = (record.scores[0], record.scores[1])
        return cls(
            game_id=record.game_id,
            state=BoardState(board=tuple(record.board), scores=scores),
            current_player=record.current_player,
            status=status,
            winner=record.winner,
            store=store,
            checkpoint_acknowledged=record.checkpoint_acknowledged,
        )
