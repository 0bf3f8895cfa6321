"""Storage backends for game records."""

from .base import GameStore, GameRecord
from .sqlite import SQLiteGameStore
from .postgresql import PostgreSQLGameStore

__all__ = ["GameStore", "GameRecord", "SQLiteGameStore", "PostgreSQLGameStore"]
