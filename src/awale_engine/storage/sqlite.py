"""SQLite game store for local play."""

import json
import sqlite3
import logging
import threading
from datetime import datetime, timezone
from typing import List, Optional
from .base import GameStore, GameRecord

logger = logging.getLogger(__name__)


class SQLiteGameStore(GameStore):
    """
    SQLite storage implementation.

    Board and scores are stored as JSON arrays.
    """

    def __init__(self, db_path: str = ":memory:"):
        """
        Initialize SQLite store.

        Args:
            db_path: Path to database file (use ":memory:" for in-memory)
        """
        self.db_path = db_path
        # One connection shared by every session; statements run under _lock
        self.conn = sqlite3.connect(db_path, check_same_thread=False, timeout=30.0)
        self.conn.row_factory = sqlite3.Row  # Enable dict-like access
        self._lock = threading.Lock()
        self._create_schema()
        self._optimize()

    def _create_schema(self) -> None:
        """Create database schema."""
        with self._lock:
            self.conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS games (
                    game_id TEXT PRIMARY KEY,
                    board TEXT NOT NULL,               -- JSON array of 12 ints
                    scores TEXT NOT NULL,              -- JSON array of 2 ints
                    current_player INTEGER NOT NULL,
                    status TEXT NOT NULL,
                    winner INTEGER,                    -- NULL while playing or on a draw
                    checkpoint_acknowledged INTEGER NOT NULL DEFAULT 0,
                    updated_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_status ON games(status);
            """
            )
            self.conn.commit()

    def _optimize(self) -> None:
        """Apply SQLite pragmas for file-backed databases."""
        if self.db_path == ":memory:":
            return
        with self._lock:
            self.conn.executescript(
                """
                PRAGMA journal_mode = WAL;           -- Write-Ahead Logging
                PRAGMA synchronous = NORMAL;         -- Balanced durability
            """
            )
        logger.debug(f"SQLite store at {self.db_path} (WAL)")

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> GameRecord:
        return GameRecord(
            game_id=row["game_id"],
            board=tuple(json.loads(row["board"])),
            scores=tuple(json.loads(row["scores"])),
            current_player=row["current_player"],
            status=row["status"],
            winner=row["winner"],
            checkpoint_acknowledged=bool(row["checkpoint_acknowledged"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def save(self, record: GameRecord) -> None:
        """Upsert a game record."""
        updated_at = datetime.now(timezone.utc)
        with self._lock:
            self.conn.execute(
                """
                INSERT INTO games (game_id, board, scores, current_player, status, winner,
                                   checkpoint_acknowledged, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(game_id) DO UPDATE SET
                    board = excluded.board,
                    scores = excluded.scores,
                    current_player = excluded.current_player,
                    status = excluded.status,
                    winner = excluded.winner,
                    checkpoint_acknowledged = excluded.checkpoint_acknowledged,
                    updated_at = excluded.updated_at
            """,
                (
                    record.game_id,
                    json.dumps(list(record.board)),
                    json.dumps(list(record.scores)),
                    record.current_player,
                    record.status,
                    record.winner,
                    int(record.checkpoint_acknowledged),
                    updated_at.isoformat(),
                ),
            )
            self.conn.commit()

    def get(self, game_id: str) -> Optional[GameRecord]:
        """Retrieve game by id."""
        with self._lock:
            row = self.conn.execute(
                "SELECT * FROM games WHERE game_id = ?", (game_id,)
            ).fetchone()
        if row:
            return self._row_to_record(row)
        return None

    def list_games(self, status: Optional[str] = None) -> List[GameRecord]:
        """List games, newest first."""
        # rowid breaks ties between saves within the same clock tick
        order = "ORDER BY updated_at DESC, rowid DESC"
        with self._lock:
            if status is None:
                rows = self.conn.execute(f"SELECT * FROM games {order}").fetchall()
            else:
                rows = self.conn.execute(
                    f"SELECT * FROM games WHERE status = ? {order}", (status,)
                ).fetchall()
        return [self._row_to_record(row) for row in rows]

    def delete(self, game_id: str) -> bool:
        """Delete game by id."""
        with self._lock:
            cursor = self.conn.execute("DELETE FROM games WHERE game_id = ?", (game_id,))
            self.conn.commit()
            return cursor.rowcount > 0

    def count_games(self, status: Optional[str] = None) -> int:
        """Count games."""
        with self._lock:
            if status is None:
                cursor = self.conn.execute("SELECT COUNT(*) FROM games")
            else:
                cursor = self.conn.execute(
                    "SELECT COUNT(*) FROM games WHERE status = ?", (status,)
                )
            return cursor.fetchone()[0]

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            self.conn.commit()
            self.conn.close()
