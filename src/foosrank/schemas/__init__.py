# src/foosrank/schemas/__init__.py

"""Pydantic schemas for API validation and serialization."""

from .common import BeliefRead
from .match import (
    ForecastRead,
    ForecastRequest,
    MatchCreate,
    MatchParticipantRead,
    MatchRead,
    TeamLineupIn,
)
from .pagination import MatchSortField, PaginatedResponse, PlayerSortField, SortOrder
from .player import (
    PlayerBase,
    PlayerCreate,
    PlayerRatingRead,
    PlayerRead,
    PlayerSummary,
    ResetRatingsResponse,
    RoleStanding,
)

__all__ = [
    # Common
    "BeliefRead",
    # Match
    "ForecastRead",
    "ForecastRequest",
    "MatchCreate",
    "MatchParticipantRead",
    "MatchRead",
    "TeamLineupIn",
    # Pagination
    "MatchSortField",
    "PaginatedResponse",
    "PlayerSortField",
    "SortOrder",
    # Player
    "PlayerBase",
    "PlayerCreate",
    "PlayerRatingRead",
    "PlayerRead",
    "PlayerSummary",
    "ResetRatingsResponse",
    "RoleStanding",
]
