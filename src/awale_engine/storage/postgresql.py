"""PostgreSQL game store for shared deployments."""

import logging
import threading
from datetime import datetime, timezone
from typing import List, Optional

import psycopg2
import psycopg2.extras
from .base import GameStore, GameRecord

logger = logging.getLogger(__name__)


class PostgreSQLGameStore(GameStore):
    """
    PostgreSQL storage implementation.

    Board and scores are stored as JSONB arrays.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 5432,
        database: str = "awale",
        user: str = "postgres",
        password: str = "",
    ):
        """
        Initialize PostgreSQL store.

        Args:
            host: Database host
            port: Database port
            database: Database name
            user: Database user
            password: Database password
        """
        self.host = host
        self.port = port
        self.database = database
        self.user = user

        self.conn = psycopg2.connect(
            host=host,
            port=port,
            database=database,
            user=user,
            password=password,
        )
        self.conn.autocommit = False  # Manual transaction control
        self._lock = threading.Lock()
        self._create_schema()

    def _create_schema(self) -> None:
        """Create database schema."""
        with self.conn.cursor() as cursor:
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS games (
                    game_id TEXT PRIMARY KEY,
                    board JSONB NOT NULL,                 -- 12 pit counts
                    scores JSONB NOT NULL,                -- 2 captured totals
                    current_player SMALLINT NOT NULL,
                    status TEXT NOT NULL,
                    winner SMALLINT,                      -- NULL while playing or on a draw
                    checkpoint_acknowledged BOOLEAN NOT NULL DEFAULT FALSE,
                    updated_at TIMESTAMPTZ NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_games_status ON games(status);
            """
            )
            self.conn.commit()
        logger.debug(f"PostgreSQL store at {self.host}:{self.port}/{self.database}")

    @staticmethod
    def _row_to_record(row) -> GameRecord:
        return GameRecord(
            game_id=row["game_id"],
            board=tuple(row["board"]),
            scores=tuple(row["scores"]),
            current_player=row["current_player"],
            status=row["status"],
            winner=row["winner"],
            checkpoint_acknowledged=row["checkpoint_acknowledged"],
            updated_at=row["updated_at"],
        )

    def _fetch(self, query: str, params: tuple = ()) -> List[GameRecord]:
        with self._lock:
            with self.conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cursor:
                cursor.execute(query, params)
                rows = cursor.fetchall()
            self.conn.commit()
        return [self._row_to_record(row) for row in rows]

    def save(self, record: GameRecord) -> None:
        """Upsert a game record."""
        updated_at = datetime.now(timezone.utc)
        with self._lock:
            try:
                with self.conn.cursor() as cursor:
                    cursor.execute(
                        """
                        INSERT INTO games (game_id, board, scores, current_player, status, winner,
                                           checkpoint_acknowledged, updated_at)
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                        ON CONFLICT (game_id) DO UPDATE SET
                            board = EXCLUDED.board,
                            scores = EXCLUDED.scores,
                            current_player = EXCLUDED.current_player,
                            status = EXCLUDED.status,
                            winner = EXCLUDED.winner,
                            checkpoint_acknowledged = EXCLUDED.checkpoint_acknowledged,
                            updated_at = EXCLUDED.updated_at
                    """,
                        (
                            record.game_id,
                            psycopg2.extras.Json(list(record.board)),
                            psycopg2.extras.Json(list(record.scores)),
                            record.current_player,
                            record.status,
                            record.winner,
                            record.checkpoint_acknowledged,
                            updated_at,
                        ),
                    )
                self.conn.commit()
            except psycopg2.Error:
                self.conn.rollback()
                raise

    def get(self, game_id: str) -> Optional[GameRecord]:
        """Retrieve game by id."""
        records = self._fetch("SELECT * FROM games WHERE game_id = %s", (game_id,))
        return records[0] if records else None

    def list_games(self, status: Optional[str] = None) -> List[GameRecord]:
        """List games, newest first."""
        if status is None:
            return self._fetch("SELECT * FROM games ORDER BY updated_at DESC")
        return self._fetch(
            "SELECT * FROM games WHERE status = %s ORDER BY updated_at DESC", (status,)
        )

    def delete(self, game_id: str) -> bool:
        """Delete game by id."""
        with self._lock:
            try:
                with self.conn.cursor() as cursor:
                    cursor.execute("DELETE FROM games WHERE game_id = %s", (game_id,))
                    deleted = cursor.rowcount > 0
                self.conn.commit()
            except psycopg2.Error:
                self.conn.rollback()
                raise
        return deleted

    def count_games(self, status: Optional[str] = None) -> int:
        """Count games."""
        with self._lock:
            with self.conn.cursor() as cursor:
                if status is None:
                    cursor.execute("SELECT COUNT(*) FROM games")
                else:
                    cursor.execute("SELECT COUNT(*) FROM games WHERE status = %s", (status,))
                count = cursor.fetchone()[0]
            self.conn.commit()
        return count

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            self.conn.commit()
            self.conn.close()
