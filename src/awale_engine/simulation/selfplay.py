"""
Random self-play simulator.

Plays many games with uniformly random legal moves through a GameSession,
exercising the rules engine at scale: seed conservation is checked by the
session on every move, relay sowing must halt within the lap cap, and every
game should reach a verdict.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional
from tqdm import tqdm

from ..core.errors import RelayLimitExceeded
from ..session import CheckpointDecision, GameSession, GameStatus

logger = logging.getLogger(__name__)


@dataclass
class SimulationStats:
    """Aggregate results of a batch of self-play games."""

    games: int = 0
    wins: List[int] = field(default_factory=lambda: [0, 0])
    draws: int = 0
    total_moves: int = 0
    longest_game: int = 0
    max_laps: int = 0  # Most relay laps seen in a single move
    relay_moves: int = 0  # Moves that relayed at least once
    captures: int = 0
    rollbacks: int = 0
    sweeps: int = 0
    checkpoints: int = 0
    unfinished: int = 0  # Hit max_moves without a verdict
    relay_faults: int = 0  # Aborted by RelayLimitExceeded

    @property
    def average_moves(self) -> float:
        return self.total_moves / self.games if self.games else 0.0


class SelfPlayRunner:
    """
    Self-play driver.

    Checkpoints are always continued so games are played to the end.
    """

    def __init__(self, seed: Optional[int] = None, max_moves: int = 500):
        """
        Initialize runner.

        Args:
            seed: Random seed for reproducibility
            max_moves: Moves after which a game is abandoned as unfinished
        """
        self.seed = seed
        self.max_moves = max_moves
        self.rng = random.Random(seed)

    def play_game(self, game_id: str, stats: SimulationStats) -> GameSession:
        """Play one game to completion (or max_moves), updating `stats`."""
        session = GameSession(game_id)
        moves_played = 0

        while moves_played < self.max_moves:
            if session.status is GameStatus.CHECKPOINT:
                stats.checkpoints += 1
                session.decide_checkpoint(CheckpointDecision.CONTINUE)
                continue
            if session.status is GameStatus.COMPLETED:
                break

            player = session.current_player
            pit = self.rng.choice(session.valid_moves())
            outcome = session.play(player, pit)
            moves_played += 1

            stats.max_laps = max(stats.max_laps, outcome.result.laps)
            if outcome.result.laps > 1:
                stats.relay_moves += 1
            if outcome.result.captured > 0:
                stats.captures += 1
            if outcome.result.rolled_back:
                stats.rollbacks += 1
            if outcome.swept:
                stats.sweeps += 1

        stats.games += 1
        stats.total_moves += moves_played
        stats.longest_game = max(stats.longest_game, moves_played)

        if session.status is GameStatus.COMPLETED:
            if session.winner is None:
                stats.draws += 1
            else:
                stats.wins[session.winner] += 1
        else:
            stats.unfinished += 1
            logger.debug(f"{game_id}: no verdict after {moves_played} moves")

        return session

    def run(self, num_games: int, progress: bool = True) -> SimulationStats:
        """
        Play `num_games` games.

        Args:
            num_games: Number of games
            progress: Show a tqdm progress bar

        Returns:
            SimulationStats for the batch
        """
        logger.info(f"Starting self-play: {num_games:,} games (seed={self.seed})")
        stats = SimulationStats()

        for i in tqdm(range(num_games), desc="Self-play", unit=" game", disable=not progress):
            try:
                self.play_game(f"selfplay-{i}", stats)
            except RelayLimitExceeded as e:
                stats.games += 1
                stats.relay_faults += 1
                logger.warning(f"selfplay-{i} aborted: {e}")

        logger.info(
            f"Self-play complete: {stats.games:,} games, "
            f"wins {stats.wins[0]}/{stats.wins[1]}, draws {stats.draws}, "
            f"unfinished {stats.unfinished}, avg {stats.average_moves:.1f} moves"
        )
        return stats
