"""Kaspa Brawl API: wallet authentication and game data retrieval."""

__version__ = "0.1.0"
