"""Relay-sowing Awale rules engine, game sessions and tooling."""

__version__ = "0.1.0"
