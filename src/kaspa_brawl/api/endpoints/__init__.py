# src/kaspa_brawl/api/endpoints/__init__.py
"""API endpoint modules."""

from .auth import router as auth_router
from .debug import router as debug_router
from .fight_logs import router as fight_logs_router
from .fighters import router as fighters_router
from .matchmaking import router as matchmaking_router
from .wallet import router as wallet_router

__all__ = [
    "auth_router",
    "debug_router",
    "fight_logs_router",
    "fighters_router",
    "matchmaking_router",
    "wallet_router",
]
