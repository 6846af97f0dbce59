"""Sourcer performance metrics and leaderboard engine."""

__version__ = "0.1.0"
