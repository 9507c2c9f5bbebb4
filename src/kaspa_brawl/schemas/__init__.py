"""Pydantic schemas for the Kaspa Brawl API."""

from .auth import NonceResponse, SessionResponse, VerifyRequest, VerifyResponse
from .fight_log import FightLogListItem, FightLogResponse, PlayerRef
from .fighter import (
    FighterData,
    FighterExistsResponse,
    FighterRequest,
    FighterResponse,
    FighterView,
    MatchmakeResponse,
    SuccessResponse,
)
from .wallet import BalanceResponse

__all__ = [
    "BalanceResponse",
    "FightLogListItem",
    "FightLogResponse",
    "FighterData",
    "FighterExistsResponse",
    "FighterRequest",
    "FighterResponse",
    "FighterView",
    "MatchmakeResponse",
    "NonceResponse",
    "PlayerRef",
    "SessionResponse",
    "SuccessResponse",
    "VerifyRequest",
    "VerifyResponse",
]
