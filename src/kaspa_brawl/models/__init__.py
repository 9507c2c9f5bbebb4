"""SQLAlchemy models for the Kaspa Brawl application."""

from .fight_log import FightLog
from .fighter import Fighter
from .nonce import Nonce
from .user import User

__all__ = [
    "FightLog",
    "Fighter",
    "Nonce",
    "User",
]
