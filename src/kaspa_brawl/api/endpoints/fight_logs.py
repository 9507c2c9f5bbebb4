# src/kaspa_brawl/api/endpoints/fight_logs.py
"""Fight log retrieval endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from kaspa_brawl.api.dependencies import SessionDep
from kaspa_brawl.core.errors import NotFoundError
from kaspa_brawl.db.time import as_utc
from kaspa_brawl.models import FightLog
from kaspa_brawl.repositories.fight_logs import FightLogRepository
from kaspa_brawl.schemas.fight_log import FightLogListItem, FightLogResponse, PlayerRef

DEFAULT_LIMIT = 5
MAX_LIMIT = 50

router = APIRouter(prefix="/fightLogs", tags=["fight logs"])


def _list_item(fight: FightLog) -> FightLogListItem:
    return FightLogListItem(
        id=fight.id,
        player_a=PlayerRef.model_validate(fight.player_a),
        player_b=PlayerRef.model_validate(fight.player_b),
        winner=fight.winner,
        created_at=as_utc(fight.created_at),
    )


@router.get(
    "",
    summary="List the most recent fights",
    response_model=list[FightLogListItem],
)
def list_fight_logs(
    db: SessionDep,
    limit: Annotated[int, Query(ge=1, le=MAX_LIMIT)] = DEFAULT_LIMIT,
) -> list[FightLogListItem]:
    """Return the newest fights with their winners."""
    fights = FightLogRepository(db).list_recent(limit)
    return [_list_item(fight) for fight in fights]


@router.get(
    "/{fight_id}",
    summary="Fetch one fight with its full log",
    response_model=FightLogResponse,
)
def get_fight_log(fight_id: str, db: SessionDep) -> FightLogResponse:
    fight = FightLogRepository(db).get_by_id(fight_id)
    if fight is None:
        raise NotFoundError("Fight log not found", code="fight_log_not_found")
    return FightLogResponse(
        id=fight.id,
        player_a=PlayerRef.model_validate(fight.player_a),
        player_b=PlayerRef.model_validate(fight.player_b),
        log=fight.steps,
        created_at=as_utc(fight.created_at),
    )
