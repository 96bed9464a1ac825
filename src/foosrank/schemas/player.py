# src/foosrank/schemas/player.py

"""Pydantic schemas for the Player resource."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import BeliefRead


# ===============================================
# Base Schema: Defines shared attributes for creation
# ===============================================
class PlayerBase(BaseModel):
    """Shared properties for a player."""

    name: str = Field(..., max_length=100)

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Player name is required")
        return value


# ===============================================
# Create Schema: Inherits the base properties
# ===============================================
class PlayerCreate(PlayerBase):
    """Properties to receive via API on create."""

    pass


# ===============================================
# Read Schemas: Define attributes for returning data
# ===============================================
class PlayerRatingRead(BeliefRead):
    """One stored belief of a player."""

    role: str


class PlayerSummary(BaseModel):
    """Minimal player reference embedded in match records."""

    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class PlayerRead(PlayerSummary):
    """Properties to return to the client."""

    created_at: datetime
    ratings: list[PlayerRatingRead] = Field(default_factory=list)


class RoleStanding(BaseModel):
    """A player's standing in one role, for role leaderboards."""

    id: int
    name: str
    role: str
    mean: float
    deviation: float
    conservative_rating: float
    matches_played: int = Field(..., ge=0)


class ResetRatingsResponse(BaseModel):
    """Result of the bulk rating reset."""

    success: bool
    message: str
    ratings_reset: int
