"""Wager leaderboard rendered from a published spreadsheet export."""

__version__ = "1.0.0"
