"""Fighter and matchmaking Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

FighterClass = Literal["Warrior", "Rogue", "Mage", "Ranger", "Cleric"]


class FighterData(BaseModel):
    """Fighter as the game client sends it.

    Fields beyond the declared ones (stats, equipment, skills, ...) are kept
    and stored verbatim.
    """

    name: str = Field(..., min_length=1, max_length=64)
    fighter_class: FighterClass = Field(..., alias="class")
    level: int = Field(default=1, ge=1)
    experience: int = Field(default=0, ge=0)

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class FighterRequest(BaseModel):
    """Body of the register and save endpoints."""

    fighter: FighterData | None = None


class FighterView(FighterData):
    """Stored fighter returned to its owner."""

    address: str
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")


class FighterResponse(BaseModel):
    fighter: FighterView


class FighterExistsResponse(BaseModel):
    exists: bool


class SuccessResponse(BaseModel):
    success: bool = True


class MatchmakeResponse(BaseModel):
    opponent: str = Field(
        ..., description="Opponent address, or a guest id when nobody is available"
    )
