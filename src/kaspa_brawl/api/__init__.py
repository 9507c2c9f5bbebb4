# src/kaspa_brawl/api/__init__.py
"""HTTP API for the Kaspa Brawl application."""

from .endpoints import (
    auth_router,
    debug_router,
    fight_logs_router,
    fighters_router,
    matchmaking_router,
    wallet_router,
)

__all__ = [
    "auth_router",
    "debug_router",
    "fight_logs_router",
    "fighters_router",
    "matchmaking_router",
    "wallet_router",
]
