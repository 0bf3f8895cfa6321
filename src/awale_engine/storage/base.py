"""Abstract base class for game record stores."""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from dataclasses import dataclass
from datetime import datetime


@dataclass
class GameRecord:
    """
    Represents a stored game.
    """

    game_id: str
    board: Tuple[int, ...]  # 12 pit counts
    scores: Tuple[int, int]  # Seeds captured by each player
    current_player: int  # Player to move (0 or 1)
    status: str  # GameStatus value
    winner: Optional[int] = None  # Winning player once completed, None for a draw
    checkpoint_acknowledged: bool = False  # Players chose to play on past 25
    updated_at: Optional[datetime] = None  # Set by the store on save


class GameStore(ABC):
    """Abstract interface for game record storage."""

    @abstractmethod
    def save(self, record: GameRecord) -> None:
        """
        Insert or replace a game record.

        Args:
            record: Game to persist
        """
        pass

    @abstractmethod
    def get(self, game_id: str) -> Optional[GameRecord]:
        """
        Retrieve a game by id.

        Args:
            game_id: Game identifier

        Returns:
            GameRecord or None if not found
        """
        pass

    @abstractmethod
    def list_games(self, status: Optional[str] = None) -> List[GameRecord]:
        """
        List stored games, most recently updated first.

        Args:
            status: Optional status filter

        Returns:
            Matching game records
        """
        pass

    @abstractmethod
    def delete(self, game_id: str) -> bool:
        """
        Delete a game.

        Returns:
            True if a record was deleted
        """
        pass

    @abstractmethod
    def count_games(self, status: Optional[str] = None) -> int:
        """Count games, optionally filtered by status."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Cleanup and close connection."""
        pass

    def __enter__(self):
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager cleanup."""
        self.close()
