"""Fight log Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PlayerRef(BaseModel):
    """Minimal player reference embedded in fight logs."""

    id: int
    address: str

    model_config = ConfigDict(from_attributes=True)


class FightLogListItem(BaseModel):
    """Summary row for the recent fights list."""

    id: str
    player_a: PlayerRef = Field(..., alias="playerA")
    player_b: PlayerRef = Field(..., alias="playerB")
    winner: str = Field(..., description="Identifier of the winning attacker, empty if unknown")
    created_at: datetime = Field(..., alias="createdAt")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class FightLogResponse(BaseModel):
    """Full fight log with its decoded steps."""

    id: str
    player_a: PlayerRef = Field(..., alias="playerA")
    player_b: PlayerRef = Field(..., alias="playerB")
    log: list[dict[str, Any]] = Field(..., description="Decoded fight steps")
    created_at: datetime = Field(..., alias="createdAt")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)
