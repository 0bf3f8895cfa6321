"""
Relay-sowing Awale rules implementation.

Implements the move-resolution rules:
- Counter-clockwise sowing that never drops a seed back into the lap's origin
- Relay: a lap ending in a non-empty own pit after crossing the opponent's
  row starts a new lap from that pit
- Capture chain walking backward over opponent pits holding 2 or 3 seeds
- A capture that would leave the opponent without seeds is cancelled
- A starved opponent must be fed whenever some move can feed them

Every function here is pure: boards come in as sequences and new tuples are
returned. resolve_move() and trace_move() share one internal routine so a
trace always describes exactly the move the engine plays.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .board import CHECKPOINT_SCORE, MAX_RELAY_LAPS, NUM_PITS, PITS_PER_PLAYER, TOTAL_SEEDS
from .errors import MoveRejection, RelayLimitExceeded

logger = logging.getLogger(__name__)

CAPTURE_COUNTS = (2, 3)


@dataclass(frozen=True)
class MoveResult:
    """Outcome of resolving one move."""

    board: Tuple[int, ...]  # Board after sowing and capture
    captured: int  # Seeds won by the mover (0 if rolled back)
    last_pit: int  # Pit the final seed of the final lap landed in
    laps: int  # Number of sowing laps, 1 when no relay happened
    rolled_back: bool = False  # Capture cancelled to avoid starving the opponent


@dataclass(frozen=True)
class GameOverResult:
    """Verdict of check_game_over()."""

    terminal: bool
    winner: Optional[int]  # Winner if terminal, leader if reached25, None on draw
    reached25: bool = False


class StepKind(str, Enum):
    """Kind of board change recorded in a move trace."""

    PICKUP = "pickup"
    SOW = "sow"
    CAPTURE = "capture"


@dataclass(frozen=True)
class SowStep:
    """One board change, with a snapshot of the board right after it."""

    kind: StepKind
    pit: int
    board: Tuple[int, ...]


@dataclass(frozen=True)
class MoveTrace:
    """Stepwise account of a move, for previews and animations."""

    result: MoveResult
    steps: Tuple[SowStep, ...]


def owner_pits(player: int) -> range:
    """
    Get pit indices for a player.

    Args:
        player: 0 (South) or 1 (North)

    Returns:
        range of the player's 6 pit indices
    """
    if player == 0:
        return range(0, PITS_PER_PLAYER)
    elif player == 1:
        return range(PITS_PER_PLAYER, NUM_PITS)
    raise ValueError(f"Invalid player {player}, must be 0 or 1")


def opponent(player: int) -> int:
    """The other player."""
    return 1 - player


def has_seeds(board: Sequence[int], player: int) -> bool:
    """True if any of the player's pits holds a seed."""
    return any(board[pit] > 0 for pit in owner_pits(player))


def _validate_board(board: Sequence[int]) -> None:
    if len(board) != NUM_PITS:
        raise ValueError(f"Board size {len(board)} doesn't match expected {NUM_PITS}")
    if any(seeds < 0 for seeds in board):
        raise ValueError("Negative seed count not allowed")


def _sow_lap(
    board: List[int], origin: int, player: int, steps: Optional[List[SowStep]]
) -> Tuple[int, bool]:
    """
    Sow every seed of `origin` counter-clockwise, skipping `origin` itself.

    Mutates `board` (a private working copy).

    Returns:
        (last pit sown, whether any seed landed in an opponent pit)
    """
    own = owner_pits(player)
    seeds = board[origin]
    board[origin] = 0
    if steps is not None:
        steps.append(SowStep(StepKind.PICKUP, origin, tuple(board)))

    current = origin
    crossed_opponent = False
    while seeds > 0:
        current = (current + 1) % NUM_PITS
        if current == origin:
            continue
        if current not in own:
            crossed_opponent = True
        board[current] += 1
        seeds -= 1
        if steps is not None:
            steps.append(SowStep(StepKind.SOW, current, tuple(board)))

    return current, crossed_opponent


def _relay_sow(
    board: List[int], pit: int, player: int, steps: Optional[List[SowStep]]
) -> Tuple[int, int]:
    """
    Sow from `pit`, relaying from the landing pit while the relay rules allow.

    A new lap starts only when the last seed landed in the mover's own row,
    in a pit that was not empty before, and the lap reached the opponent's row.

    Returns:
        (last pit sown, number of laps)
    """
    own = owner_pits(player)
    start_board = tuple(board)

    last_pit, crossed_opponent = _sow_lap(board, pit, player, steps)
    laps = 1
    while last_pit in own and board[last_pit] != 1 and crossed_opponent:
        if laps >= MAX_RELAY_LAPS:
            raise RelayLimitExceeded(start_board, pit, player, laps)
        logger.debug(f"Relay lap {laps + 1} from pit {last_pit} ({board[last_pit]} seeds)")
        last_pit, crossed_opponent = _sow_lap(board, last_pit, player, steps)
        laps += 1

    return last_pit, laps


def _capture(
    board: List[int], last_pit: int, player: int, steps: Optional[List[SowStep]]
) -> int:
    """
    Walk backward from `last_pit`, taking opponent pits holding 2 or 3 seeds.

    The walk leaves the opponent's row after at most 6 pits.

    Returns:
        Number of seeds captured
    """
    opponent_row = owner_pits(opponent(player))
    captured = 0
    pit = last_pit
    for _ in range(PITS_PER_PLAYER):
        if pit not in opponent_row or board[pit] not in CAPTURE_COUNTS:
            break
        captured += board[pit]
        board[pit] = 0
        if steps is not None:
            steps.append(SowStep(StepKind.CAPTURE, pit, tuple(board)))
        pit = (pit - 1) % NUM_PITS
    return captured


def _resolve(
    board: Sequence[int], pit: int, player: int, steps: Optional[List[SowStep]]
) -> MoveResult:
    _validate_board(board)
    if pit not in owner_pits(player):
        raise ValueError(f"Pit {pit} does not belong to player {player}")
    if board[pit] <= 0:
        raise ValueError(f"Illegal move {pit}: pit is empty")

    work = list(board)
    last_pit, laps = _relay_sow(work, pit, player, steps)
    sown = tuple(work)

    capture_steps: Optional[List[SowStep]] = [] if steps is not None else None
    captured = _capture(work, last_pit, player, capture_steps)

    if captured > 0 and not has_seeds(work, opponent(player)):
        # Capture would starve the opponent: keep the sowing, cancel the capture
        logger.debug(f"Capture of {captured} from pit {pit} cancelled (opponent starved)")
        return MoveResult(board=sown, captured=0, last_pit=last_pit, laps=laps, rolled_back=True)

    if steps is not None:
        steps.extend(capture_steps)
    return MoveResult(board=tuple(work), captured=captured, last_pit=last_pit, laps=laps)


def resolve_move(board: Sequence[int], pit: int, player: int) -> MoveResult:
    """
    Play a move and return the resulting board.

    1. Pick up all seeds from the chosen pit
    2. Sow counter-clockwise, skipping the pit the lap started from
    3. Relay from the landing pit while it is a non-empty own pit and the
       lap crossed into the opponent's row
    4. Capture backward from the last pit over opponent pits holding 2 or 3
    5. Cancel the capture if it would leave the opponent with no seeds

    The starvation-avoidance rule is not checked here; query
    is_legal_move() first.

    Args:
        board: Current 12-pit board (not modified)
        pit: Pit index to move from
        player: Player making the move

    Returns:
        MoveResult with the new board, captured seeds and last landed pit

    Raises:
        ValueError: malformed board, or pit is not a non-empty pit of `player`
        RelayLimitExceeded: relay did not halt within MAX_RELAY_LAPS laps
    """
    return _resolve(board, pit, player, None)


def trace_move(board: Sequence[int], pit: int, player: int) -> MoveTrace:
    """
    Play a move like resolve_move(), recording every pickup, drop and capture.

    Capture steps are left out when the capture is cancelled.
    """
    steps: List[SowStep] = []
    result = _resolve(board, pit, player, steps)
    return MoveTrace(result=result, steps=tuple(steps))


def would_feed_opponent(board: Sequence[int], pit: int, player: int) -> bool:
    """True if sowing from `pit` (with relays) leaves the opponent a seed."""
    work = list(board)
    _relay_sow(work, pit, player, None)
    return has_seeds(work, opponent(player))


def check_move(board: Sequence[int], pit: int, player: int) -> Optional[MoveRejection]:
    """
    Explain why a move is illegal.

    A move is legal if the chosen pit:
    - Belongs to the player
    - Contains at least one seed
    - Feeds a starved opponent, unless no move of the player can feed them

    Args:
        board: Current board
        pit: Pit index to move from
        player: Player making the move

    Returns:
        None if the move is legal, otherwise the first rule it breaks
    """
    if pit not in owner_pits(player):
        return MoveRejection.NOT_OWN_PIT
    if board[pit] <= 0:
        return MoveRejection.EMPTY_PIT

    if not has_seeds(board, opponent(player)) and not would_feed_opponent(board, pit, player):
        # Non-feeding moves are only allowed when no move feeds
        for other in owner_pits(player):
            if other != pit and board[other] > 0 and would_feed_opponent(board, other, player):
                return MoveRejection.MUST_FEED_OPPONENT

    return None


def is_legal_move(board: Sequence[int], pit: int, player: int) -> bool:
    """True if `player` may move from `pit`."""
    return check_move(board, pit, player) is None


def get_valid_moves(board: Sequence[int], player: int) -> List[int]:
    """
    Generate all legal moves for a player.

    Args:
        board: Current board
        player: Player to move

    Returns:
        Legal pit indices in ascending order
    """
    return [pit for pit in owner_pits(player) if is_legal_move(board, pit, player)]


def winner_by_score(scores: Sequence[int]) -> Optional[int]:
    """Player with the higher score, or None for a draw."""
    if scores[0] > scores[1]:
        return 0
    elif scores[1] > scores[0]:
        return 1
    return None


def check_game_over(board: Sequence[int], scores: Sequence[int]) -> GameOverResult:
    """
    Evaluate the position after a move.

    Checked in order:
    1. A score of 25 or more with seeds on both rows is a checkpoint, not an
       end: the players decide whether to continue
    2. All 48 seeds captured ends the game
    3. Both rows empty ends the game

    Args:
        board: Board after the move
        scores: Scores after the move

    Returns:
        GameOverResult (winner is None for a draw or an unfinished game)
    """
    both_rows_seeded = has_seeds(board, 0) and has_seeds(board, 1)

    if (scores[0] >= CHECKPOINT_SCORE or scores[1] >= CHECKPOINT_SCORE) and both_rows_seeded:
        leader = 0 if scores[0] >= CHECKPOINT_SCORE else 1
        return GameOverResult(terminal=False, winner=leader, reached25=True)

    if scores[0] + scores[1] == TOTAL_SEEDS:
        return GameOverResult(terminal=True, winner=winner_by_score(scores))

    if not has_seeds(board, 0) and not has_seeds(board, 1):
        return GameOverResult(terminal=True, winner=winner_by_score(scores))

    return GameOverResult(terminal=False, winner=None)


def sweep_to_mover(
    board: Sequence[int], scores: Sequence[int], mover: int
) -> Tuple[Tuple[int, ...], Tuple[int, int]]:
    """
    Award every seed left on the board to `mover` and clear the board.

    Used when the player to move next has no legal move.
    """
    new_scores = list(scores)
    new_scores[mover] += sum(board)
    return (0,) * NUM_PITS, (new_scores[0], new_scores[1])


def sweep_rows_to_owners(
    board: Sequence[int], scores: Sequence[int]
) -> Tuple[Tuple[int, ...], Tuple[int, int]]:
    """Credit each row's remaining seeds to its owner and clear the board."""
    new_scores = list(scores)
    for player in (0, 1):
        new_scores[player] += sum(board[pit] for pit in owner_pits(player))
    return (0,) * NUM_PITS, (new_scores[0], new_scores[1])
