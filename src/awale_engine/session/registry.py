"""Registry of live game sessions, keyed by session id."""

import logging
import threading
import uuid
from typing import Dict, List, Optional

from ..core.errors import SessionExistsError, SessionNotFoundError
from ..storage import GameStore
from .game import GameSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Owns the GameSession objects a server is currently serving.

    Sessions not in memory are loaded from the store on first access when a
    store is configured.
    """

    def __init__(self, store: Optional[GameStore] = None):
        self.store = store
        self._sessions: Dict[str, GameSession] = {}
        self._lock = threading.Lock()

    def create(self, game_id: Optional[str] = None) -> GameSession:
        """
        Register a new game at the starting position.

        Args:
            game_id: Identifier to use (default: random UUID)

        Raises:
            SessionExistsError: id already registered or stored
        """
        game_id = game_id or str(uuid.uuid4())
        with self._lock:
            if game_id in self._sessions or (
                self.store is not None and self.store.get(game_id) is not None
            ):
                raise SessionExistsError(f"Game {game_id} already exists")
            session = GameSession(game_id, store=self.store)
            # Saved before it is registered, so a failed save leaves no trace
            session.reset()
            self._sessions[game_id] = session
        logger.info(f"Created game {game_id}")
        return session

    def get(self, game_id: str) -> GameSession:
        """
        Look up a session, loading it from the store if needed.

        Raises:
            SessionNotFoundError: unknown id
        """
        with self._lock:
            session = self._sessions.get(game_id)
            if session is not None:
                return session
            record = self.store.get(game_id) if self.store is not None else None
            if record is None:
                raise SessionNotFoundError(game_id)
            session = GameSession.from_record(record, store=self.store)
            self._sessions[game_id] = session
            logger.debug(f"Loaded game {game_id} from store")
            return session

    def remove(self, game_id: str) -> bool:
        """Drop a session from memory (stored records are kept)."""
        with self._lock:
            return self._sessions.pop(game_id, None) is not None

    def session_ids(self) -> List[str]:
        with self._lock:
            return list(self._sessions)

    def __contains__(self, game_id: str) -> bool:
        with self._lock:
            return game_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
