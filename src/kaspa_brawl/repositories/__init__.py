"""Data access helpers for nonces, users, fighters and fight logs."""

from .fight_logs import FightLogRepository
from .fighters import FighterRepository
from .nonces import (
    InMemoryNonceStore,
    NonceRecord,
    NonceStore,
    RedisNonceStore,
    SqlNonceStore,
)
from .users import get_or_create_user, get_user_by_address

__all__ = [
    "FightLogRepository",
    "FighterRepository",
    "InMemoryNonceStore",
    "NonceRecord",
    "NonceStore",
    "RedisNonceStore",
    "SqlNonceStore",
    "get_or_create_user",
    "get_user_by_address",
]
