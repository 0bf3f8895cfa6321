"""Tests for game rules."""

import random

import pytest
from awale_engine.core import (
    MoveRejection,
    check_game_over,
    check_move,
    create_starting_state,
    get_valid_moves,
    has_seeds,
    is_legal_move,
    owner_pits,
    resolve_move,
    sweep_rows_to_owners,
    sweep_to_mover,
    winner_by_score,
    would_feed_opponent,
)
from awale_engine.core import rules
from awale_engine.core.errors import RelayLimitExceeded


def test_owner_pits():
    """Test pit ownership."""
    assert list(owner_pits(0)) == [0, 1, 2, 3, 4, 5]
    assert list(owner_pits(1)) == [6, 7, 8, 9, 10, 11]

    with pytest.raises(ValueError):
        owner_pits(2)


def test_has_seeds():
    """Test row emptiness."""
    board = [0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0]
    assert has_seeds(board, 0) is True
    assert has_seeds(board, 1) is False


def test_simple_move():
    """Basic sow without capture."""
    board = [4] * 12

    # Pit 2 holds 4 seeds: they go to pits 3, 4, 5, 6
    result = resolve_move(board, 2, 0)

    assert result.board == (4, 4, 0, 5, 5, 5, 5, 4, 4, 4, 4, 4)
    assert result.captured == 0
    assert result.last_pit == 6
    assert result.laps == 1
    assert result.rolled_back is False


def test_input_board_not_modified():
    """resolve_move works on a copy."""
    board = [4] * 12
    resolve_move(board, 0, 0)
    assert board == [4] * 12


def test_simple_capture():
    """Last seed makes an opponent pit hold 2."""
    board = [0, 0, 0, 0, 0, 1, 1, 2, 4, 4, 4, 4]

    result = resolve_move(board, 5, 0)

    assert result.captured == 2
    assert result.last_pit == 6
    assert result.board == (0, 0, 0, 0, 0, 0, 0, 2, 4, 4, 4, 4)


def test_capture_chain():
    """Capture walks backward over consecutive 2s and 3s."""
    # Pit 5 sows into 6, 7, 8 making them 2, 3, 2
    board = [0, 0, 0, 0, 0, 3, 1, 2, 1, 4, 4, 4]

    result = resolve_move(board, 5, 0)

    assert result.captured == 7
    assert result.last_pit == 8
    assert result.board == (0, 0, 0, 0, 0, 0, 0, 0, 0, 4, 4, 4)


def test_capture_chain_stops_at_other_count():
    """The walk stops at the first pit not holding 2 or 3."""
    # Pit 5 sows into 6, 7, 8 making them 4, 3, 2
    board = [0, 0, 0, 0, 0, 3, 3, 2, 1, 4, 4, 4]

    result = resolve_move(board, 5, 0)

    assert result.captured == 5
    assert result.board == (0, 0, 0, 0, 0, 0, 4, 0, 0, 4, 4, 4)


def test_capture_for_north():
    """Player 1 captures in South's row and stops at its own row."""
    # Pit 11 sows into 0, 1 making them 2, 3
    board = [1, 2, 4, 4, 4, 4, 0, 0, 0, 0, 0, 2]

    result = resolve_move(board, 11, 1)

    assert result.last_pit == 1
    assert result.captured == 5
    assert result.board == (0, 0, 4, 4, 4, 4, 0, 0, 0, 0, 0, 0)


def test_no_capture_in_own_row():
    """Landing in an own pit holding 2 captures nothing."""
    board = [1, 1, 0, 0, 0, 0, 4, 4, 4, 4, 4, 4]

    result = resolve_move(board, 0, 0)

    assert result.captured == 0
    assert result.board == (0, 2, 0, 0, 0, 0, 4, 4, 4, 4, 4, 4)


def test_relay_sowing():
    """A lap ending in a non-empty own pit after crossing relays from there."""
    # Lap 1: pit 5 (7 seeds) -> 6..11 and pit 0, which becomes 3
    # Lap 2: pit 0 (3 seeds) -> 1, 2, 3; pit 3 was empty so the relay stops
    board = [2, 0, 0, 0, 0, 7, 1, 1, 1, 1, 1, 1]

    result = resolve_move(board, 5, 0)

    assert result.laps == 2
    assert result.last_pit == 3
    assert result.board == (0, 1, 1, 1, 0, 0, 2, 2, 2, 2, 2, 2)
    # Last pit is in our own row: the 2s across the board are safe
    assert result.captured == 0


def test_no_relay_without_crossing():
    """A lap that never reached the opponent does not relay."""
    # Pit 0 (2 seeds) -> 1, 2; pit 2 now holds 2 but the lap stayed home
    board = [2, 0, 1, 0, 0, 0, 4, 4, 4, 4, 4, 4]

    result = resolve_move(board, 0, 0)

    assert result.laps == 1
    assert result.last_pit == 2
    assert result.board == (0, 1, 2, 0, 0, 0, 4, 4, 4, 4, 4, 4)


def test_origin_pit_skipped():
    """A lap of 12 seeds skips the pit it was drawn from."""
    # Lap 1: pit 0 (12 seeds) -> 1..11, skip 0, then 1 again (holds 2)
    # Lap 2: pit 1 (2 seeds) -> 2, 3; no opponent pit reached so it stops
    board = [12, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0]

    result = resolve_move(board, 0, 0)

    assert result.board[0] == 0
    assert result.board == (0, 0, 2, 2, 1, 1, 1, 1, 1, 1, 1, 1)
    assert result.last_pit == 3
    assert result.laps == 2


def test_starvation_rollback():
    """A capture that would empty the opponent's row is cancelled."""
    # Opponent row is empty. Lap 1: pit 5 (7 seeds) -> 6..11 and pit 0 (now 11)
    # Lap 2: pit 0 (11 seeds) -> 1..11 leaving every opponent pit at 2
    board = [10, 0, 0, 0, 0, 7, 0, 0, 0, 0, 0, 0]

    result = resolve_move(board, 5, 0)

    assert result.captured == 0
    assert result.rolled_back is True
    assert result.last_pit == 11
    # Sow-only board
    assert result.board == (0, 1, 1, 1, 1, 1, 2, 2, 2, 2, 2, 2)


def test_rollback_move_is_legal():
    """The rolled-back move feeds the starved opponent, so it is allowed."""
    board = [10, 0, 0, 0, 0, 7, 0, 0, 0, 0, 0, 0]

    assert would_feed_opponent(board, 5, 0) is True
    assert is_legal_move(board, 5, 0) is True


def test_relay_limit(monkeypatch):
    """Exceeding the lap cap is reported as an invariant fault."""
    monkeypatch.setattr(rules, "MAX_RELAY_LAPS", 1)
    board = [2, 0, 0, 0, 0, 7, 1, 1, 1, 1, 1, 1]  # Needs 2 laps

    with pytest.raises(RelayLimitExceeded) as exc_info:
        resolve_move(board, 5, 0)
    assert exc_info.value.laps == 1
    assert exc_info.value.pit == 5


def test_resolve_rejects_bad_input():
    """Structural problems raise ValueError."""
    with pytest.raises(ValueError):
        resolve_move([4] * 11, 0, 0)  # Wrong size
    with pytest.raises(ValueError):
        resolve_move([0] + [4] * 11, 0, 0)  # Empty pit
    with pytest.raises(ValueError):
        resolve_move([4] * 12, 7, 0)  # Opponent's pit


def test_legal_moves():
    """Test legal move generation."""
    state = create_starting_state()

    # All pits are legal at start
    assert get_valid_moves(state.board, 0) == [0, 1, 2, 3, 4, 5]
    assert get_valid_moves(state.board, 1) == [6, 7, 8, 9, 10, 11]

    # Empty pits are not legal
    board = list(state.board)
    board[0] = 0
    board[2] = 0
    assert get_valid_moves(board, 0) == [1, 3, 4, 5]


def test_check_move_reasons():
    """Rejections are reported in order."""
    board = [0, 4, 4, 4, 4, 4, 4, 4, 4, 4, 4, 4]

    assert check_move(board, 7, 0) is MoveRejection.NOT_OWN_PIT
    assert check_move(board, 12, 0) is MoveRejection.NOT_OWN_PIT
    assert check_move(board, -1, 0) is MoveRejection.NOT_OWN_PIT
    assert check_move(board, 0, 0) is MoveRejection.EMPTY_PIT
    assert check_move(board, 1, 0) is None


def test_must_feed_starved_opponent():
    """Non-feeding moves are illegal while a feeding move exists."""
    # Pit 0 only reaches pit 1; pit 5 reaches pit 6
    board = [1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0]

    assert check_move(board, 0, 0) is MoveRejection.MUST_FEED_OPPONENT
    assert is_legal_move(board, 5, 0) is True
    assert get_valid_moves(board, 0) == [5]


def test_feeding_waived_when_impossible():
    """If no move can feed the opponent, any non-empty pit may be played."""
    board = [1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0]

    assert would_feed_opponent(board, 0, 0) is False
    assert would_feed_opponent(board, 1, 0) is False
    assert get_valid_moves(board, 0) == [0, 1]


def test_all_feeding_moves_allowed():
    """Several feeding moves are equally legal."""
    # Pits 3, 4 and 5 all reach pit 6
    board = [0, 0, 0, 3, 2, 1, 0, 0, 0, 0, 0, 0]

    assert get_valid_moves(board, 0) == [3, 4, 5]


def test_game_over_all_seeds_captured():
    """All seeds off the board ends the game."""
    result = check_game_over([0] * 12, [30, 18])

    assert result.terminal is True
    assert result.winner == 0
    assert result.reached25 is False


def test_game_over_draw():
    """Equal scores at the end is a draw."""
    result = check_game_over([0] * 12, [24, 24])

    assert result.terminal is True
    assert result.winner is None


def test_reached_25_checkpoint():
    """Reaching 25 with seeds on both rows is a checkpoint, not an end."""
    board = [4, 2, 1, 0, 0, 0, 0, 3, 2, 1, 0, 0]  # 13 seeds
    result = check_game_over(board, [25, 10])

    assert result.reached25 is True
    assert result.terminal is False
    assert result.winner == 0

    result = check_game_over(board, [10, 25])
    assert result.winner == 1


def test_reached_25_needs_both_rows():
    """With one row empty the checkpoint is not raised."""
    board = [2, 2, 2, 2, 2, 2, 0, 0, 0, 0, 0, 0]

    result = check_game_over(board, [26, 10])

    assert result.reached25 is False
    assert result.terminal is False


def test_game_not_over():
    """Test non-terminal state."""
    state = create_starting_state()
    result = check_game_over(state.board, state.scores)

    assert result.terminal is False
    assert result.winner is None
    assert result.reached25 is False


def test_winner_by_score():
    assert winner_by_score([10, 5]) == 0
    assert winner_by_score([5, 10]) == 1
    assert winner_by_score([7, 7]) is None


def test_sweep_to_mover():
    """Remaining seeds go to the player who just moved."""
    board = [0, 0, 0, 0, 2, 0, 0, 0, 0, 0, 0, 1]

    new_board, scores = sweep_to_mover(board, [30, 15], mover=1)

    assert new_board == (0,) * 12
    assert scores == (30, 18)


def test_sweep_rows_to_owners():
    """Each row is credited to its owner."""
    board = [1, 1, 0, 0, 0, 0, 0, 0, 0, 3, 0, 0]

    new_board, scores = sweep_rows_to_owners(board, [20, 23])

    assert new_board == (0,) * 12
    assert scores == (22, 26)


def test_conservation_in_random_games():
    """Seeds are never created or destroyed over random play."""
    rng = random.Random(1234)

    for _ in range(25):
        board = list(create_starting_state().board)
        scores = [0, 0]
        player = 0

        for _ in range(150):
            moves = get_valid_moves(board, player)
            if not moves:
                break
            result = resolve_move(board, rng.choice(moves), player)

            assert sum(result.board) + result.captured + sum(scores) == 48
            assert all(seeds >= 0 for seeds in result.board)
            # Never reward a capture that starves the opponent
            if result.captured > 0:
                assert has_seeds(result.board, 1 - player)

            board = list(result.board)
            scores[player] += result.captured
            player = 1 - player
