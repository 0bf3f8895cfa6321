"""Self-play simulation."""

from .selfplay import SelfPlayRunner, SimulationStats

__all__ = ["SelfPlayRunner", "SimulationStats"]
