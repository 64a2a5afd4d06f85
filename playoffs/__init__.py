"""Playoff elimination brackets with automatic match scheduling."""

__version__ = "0.1.0"

__all__ = ["bracket", "formats", "matchup", "store"]