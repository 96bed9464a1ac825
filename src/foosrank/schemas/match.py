# src/foosrank/schemas/match.py

"""Pydantic schemas for the Match resource."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .player import PlayerSummary

# ===============================================
# == Lineup Schemas
# ===============================================


class TeamLineupIn(BaseModel):
    """The two players of a team, referenced by name.

    Example:
        {"defender": "Alice", "attacker": "Bob"}
    """

    defender: str = Field(..., max_length=100)
    attacker: str = Field(..., max_length=100)

    @field_validator("defender", "attacker")
    @classmethod
    def name_must_not_be_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Each team must have a defender and an attacker")
        return value


class ForecastRequest(BaseModel):
    """Two prospective lineups to forecast."""

    team1: TeamLineupIn
    team2: TeamLineupIn


class ForecastRead(BaseModel):
    """Win probabilities of two prospective lineups."""

    team1_win_probability: float = Field(..., ge=0, le=1)
    team2_win_probability: float = Field(..., ge=0, le=1)


# ===============================================
# == Match Participant Schemas
# ===============================================


class MatchParticipantRead(BaseModel):
    """Properties to return to the client for a match participant."""

    id: int
    player_id: int
    player: PlayerSummary
    team: int
    role: str

    # Belief history for auditing and analysis
    mean_before: float
    deviation_before: float
    mean_after: float
    deviation_after: float

    model_config = ConfigDict(from_attributes=True)


# ===============================================
# == Match Schemas
# ===============================================


class MatchCreate(BaseModel):
    """
    Properties to receive via API on create.
    This is the main payload for submitting a new match.
    """

    team1: TeamLineupIn
    team2: TeamLineupIn

    # 1 or 2; checked by the rating coordinator so the API and direct
    # callers reject bad values the same way.
    winner: int

    # Optional: when the match was played (defaults to now if not provided)
    played_at: datetime | None = Field(
        default=None,
        description="When the match was played (ISO format). Defaults to current time.",
    )


class MatchRead(BaseModel):
    """Properties to return to the client for a match."""

    id: int
    winner: int
    team1_win_probability: float
    team2_win_probability: float
    played_at: datetime

    participants: list[MatchParticipantRead]

    model_config = ConfigDict(from_attributes=True)
