# src/kaspa_brawl/api/endpoints/matchmaking.py
"""Matchmaking endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from kaspa_brawl.api.dependencies import CurrentAddressDep, SessionDep
from kaspa_brawl.schemas.fighter import MatchmakeResponse
from kaspa_brawl.services.matchmaking import find_opponent

router = APIRouter(tags=["matchmaking"])


@router.post(
    "/matchmake",
    summary="Pick an opponent for the authenticated wallet",
    response_model=MatchmakeResponse,
)
def matchmake(address: CurrentAddressDep, db: SessionDep) -> MatchmakeResponse:
    return MatchmakeResponse(opponent=find_opponent(db, address))
