"""Tests for the command line interface."""

import argparse

import pytest
from awale_engine.cli.main import build_parser, main, parse_board
from awale_engine.session import GameSession
from awale_engine.storage import SQLiteGameStore

START = "4,4,4,4,4,4,4,4,4,4,4,4"


def test_parse_board():
    assert parse_board(START) == (4,) * 12
    assert parse_board("0,0,0,0,0,1,1,2,4,4,4,4") == (0, 0, 0, 0, 0, 1, 1, 2, 4, 4, 4, 4)


@pytest.mark.parametrize("value", ["4,4,4", "a,b,c", "4,4,4,4,4,4,4,4,4,4,4,-1"])
def test_parse_board_rejects(value):
    with pytest.raises(argparse.ArgumentTypeError):
        parse_board(value)


def test_no_command_prints_help():
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 1


def test_parser_defaults():
    args = build_parser().parse_args(["simulate"])

    assert args.games == 1000
    assert args.max_moves == 500
    assert args.log_level == "WARNING"


def test_moves_command(capsys):
    main(["moves", "--board", "1,0,0,0,0,1,0,0,0,0,0,0", "--player", "0"])

    out = capsys.readouterr().out
    assert "legal" in out
    # Pit 0 cannot reach North
    assert "must give seeds" in out


def test_trace_command(capsys):
    main(["trace", "--board", START, "--player", "0", "--pit", "2"])

    out = capsys.readouterr().out
    assert "Move trace" in out
    assert "Last pit 6" in out


def test_trace_empty_pit_exits():
    with pytest.raises(SystemExit) as exc_info:
        main(["trace", "--board", "0,4,4,4,4,4,4,4,4,4,4,8", "--player", "0", "--pit", "0"])
    assert exc_info.value.code == 1


def test_simulate_command(capsys):
    main(["simulate", "--games", "3", "--seed", "1", "--max-moves", "100", "--no-progress"])

    assert "Self-play summary" in capsys.readouterr().out


def test_show_command(tmp_path, capsys):
    db_path = str(tmp_path / "games.db")
    with SQLiteGameStore(db_path) as store:
        GameSession("stored", store=store).play(0, 2)

    main(["show", "--game-id", "stored", "--db-path", db_path])

    assert "Game stored (active)" in capsys.readouterr().out


def test_show_missing_game(tmp_path):
    db_path = str(tmp_path / "games.db")

    with pytest.raises(SystemExit) as exc_info:
        main(["show", "--game-id", "nope", "--db-path", db_path])
    assert exc_info.value.code == 1
