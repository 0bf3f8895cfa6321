"""
Board representation for relay-sowing Awale.

A game position consists of:
- 12 pits arranged in two rows of 6
- The seeds captured so far by each player

Pits 0-5 belong to player 0 (South), pits 6-11 to player 1 (North).
Sowing runs counter-clockwise, i.e. by increasing index modulo 12.
"""

from typing import Tuple
from dataclasses import dataclass

NUM_PITS = 12
PITS_PER_PLAYER = 6
SEEDS_PER_PIT = 4
TOTAL_SEEDS = NUM_PITS * SEEDS_PER_PIT  # 48
CHECKPOINT_SCORE = 25
MAX_RELAY_LAPS = 100


@dataclass(frozen=True)
class BoardState:
    """
    Immutable board + scores snapshot.

    Board layout:
          North (player 1)
       [11][10][ 9][ 8][ 7][ 6]
       [ 0][ 1][ 2][ 3][ 4][ 5]
          South (player 0)

    Invariant: sum(board) + sum(scores) == TOTAL_SEEDS
    """

    board: Tuple[int, ...]  # Seeds in each pit (immutable)
    scores: Tuple[int, int] = (0, 0)  # Seeds captured by each player

    def __post_init__(self) -> None:
        """Validate state invariants."""
        if len(self.board) != NUM_PITS:
            raise ValueError(
                f"Board size {len(self.board)} doesn't match expected {NUM_PITS}"
            )
        if any(seeds < 0 for seeds in self.board):
            raise ValueError("Negative seed count not allowed")
        if len(self.scores) != 2 or any(score < 0 for score in self.scores):
            raise ValueError(f"Invalid scores {self.scores}")
        if self.total_seeds != TOTAL_SEEDS:
            raise ValueError(
                f"Seed count {self.total_seeds} doesn't match expected {TOTAL_SEEDS}"
            )

    @property
    def seeds_on_board(self) -> int:
        """Seeds still in play."""
        return sum(self.board)

    @property
    def total_seeds(self) -> int:
        """Seeds on the board plus seeds captured."""
        return sum(self.board) + sum(self.scores)

    def row(self, player: int) -> Tuple[int, ...]:
        """Seed counts of a player's row, in pit order."""
        start = 0 if player == 0 else PITS_PER_PLAYER
        return self.board[start : start + PITS_PER_PLAYER]

    def __str__(self) -> str:
        """Human-readable board representation."""
        north = list(reversed(self.row(1)))
        south = list(self.row(0))

        pit_width = 3
        north_str = " ".join(f"{s:>{pit_width}}" for s in north)
        south_str = " ".join(f"{s:>{pit_width}}" for s in south)

        return f"""
  North [{self.scores[1]:>2}]  {north_str}
  South [{self.scores[0]:>2}]  {south_str}
"""


def create_starting_state() -> BoardState:
    """
    Create the initial position: 4 seeds in every pit, no captures.

    Returns:
        Starting BoardState
    """
    return BoardState(board=(SEEDS_PER_PIT,) * NUM_PITS, scores=(0, 0))
