"""Score submission and leaderboard backend for the browser game."""

__version__ = "0.3.0"
