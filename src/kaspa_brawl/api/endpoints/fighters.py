# src/kaspa_brawl/api/endpoints/fighters.py
"""Fighter persistence endpoints for the authenticated wallet."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from kaspa_brawl.api.dependencies import CurrentAddressDep, SessionDep
from kaspa_brawl.core.errors import NotFoundError, ValidationError
from kaspa_brawl.db.time import as_utc
from kaspa_brawl.models import Fighter
from kaspa_brawl.repositories.fighters import FighterRepository
from kaspa_brawl.schemas.fighter import (
    FighterData,
    FighterExistsResponse,
    FighterRequest,
    FighterResponse,
    FighterView,
    SuccessResponse,
)

router = APIRouter(prefix="/fighters", tags=["fighters"])

# Keys owned by the server; never taken from the client's free-form data.
RESERVED_KEYS = frozenset(
    {"address", "walletAddress", "createdAt", "updatedAt", "created_at", "updated_at"}
)


def _require_fighter(payload: FighterRequest) -> FighterData:
    if payload.fighter is None:
        raise ValidationError("Missing required fields", code="missing_field")
    return payload.fighter


def _fields(fighter: FighterData) -> dict[str, Any]:
    extra = fighter.model_extra or {}
    return {
        "name": fighter.name,
        "fighter_class": fighter.fighter_class,
        "level": fighter.level,
        "experience": fighter.experience,
        "attributes": {k: v for k, v in extra.items() if k not in RESERVED_KEYS},
    }


def _load(repo: FighterRepository, address: str) -> Fighter:
    fighter = repo.get_by_address(address)
    if fighter is None:
        raise NotFoundError("Fighter not found", code="fighter_not_found")
    return fighter


@router.post(
    "/register",
    summary="Register the fighter of the authenticated wallet",
    response_model=SuccessResponse,
)
def register_fighter(
    payload: FighterRequest,
    address: CurrentAddressDep,
    db: SessionDep,
) -> SuccessResponse:
    fighter = _require_fighter(payload)
    repo = FighterRepository(db)
    if repo.exists(address):
        raise ValidationError("Wallet already has a registered fighter", code="fighter_exists")
    repo.create(address, **_fields(fighter))
    return SuccessResponse()


@router.get(
    "/exists",
    summary="Check whether the authenticated wallet has a fighter",
    response_model=FighterExistsResponse,
)
def fighter_exists(address: CurrentAddressDep, db: SessionDep) -> FighterExistsResponse:
    return FighterExistsResponse(exists=FighterRepository(db).exists(address))


@router.get(
    "/load",
    summary="Load the fighter of the authenticated wallet",
    response_model=FighterResponse,
)
def load_fighter(address: CurrentAddressDep, db: SessionDep) -> FighterResponse:
    fighter = _load(FighterRepository(db), address)
    view = FighterView(
        **fighter.attributes,
        name=fighter.name,
        fighter_class=fighter.fighter_class,
        level=fighter.level,
        experience=fighter.experience,
        address=fighter.address,
        created_at=as_utc(fighter.created_at),
        updated_at=as_utc(fighter.updated_at),
    )
    return FighterResponse(fighter=view)


@router.post(
    "/save",
    summary="Overwrite the fighter of the authenticated wallet",
    response_model=SuccessResponse,
)
def save_fighter(
    payload: FighterRequest,
    address: CurrentAddressDep,
    db: SessionDep,
) -> SuccessResponse:
    """Replace the stored fighter; unlike register, the fighter must already exist."""
    fighter = _require_fighter(payload)
    repo = FighterRepository(db)
    repo.update(_load(repo, address), **_fields(fighter))
    return SuccessResponse()


@router.delete(
    "/delete",
    summary="Delete the fighter of the authenticated wallet",
    response_model=SuccessResponse,
)
def delete_fighter(address: CurrentAddressDep, db: SessionDep) -> SuccessResponse:
    repo = FighterRepository(db)
    repo.delete(_load(repo, address))
    return SuccessResponse()
