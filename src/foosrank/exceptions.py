# src/foosrank/exceptions.py

"""Custom exception hierarchy for FoosRank.

This module provides a structured exception hierarchy that enables:
1. Proper HTTP status code mapping in API endpoints
2. Detailed error context for logging and debugging
3. Clear distinction between rejected input and engine failures
"""

from __future__ import annotations


class FoosRankError(Exception):
    """Base exception for all FoosRank errors.

    Attributes:
        message: Human-readable error description
        details: Optional dict with additional context for logging/debugging
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


# =============================================================================
# Resource Not Found Errors (HTTP 404)
# =============================================================================


class ResourceNotFoundError(FoosRankError):
    """Base class for resource not found errors."""

    pass


class PlayerNotFoundError(ResourceNotFoundError):
    """Raised when a player ID does not exist."""

    def __init__(self, player_id: int) -> None:
        super().__init__(
            message=f"Player with ID {player_id} not found",
            details={"player_id": player_id},
        )


class MatchNotFoundError(ResourceNotFoundError):
    """Raised when a match ID does not exist."""

    def __init__(self, match_id: int) -> None:
        super().__init__(
            message=f"Match with ID {match_id} not found",
            details={"match_id": match_id},
        )


# =============================================================================
# Validation Errors (HTTP 422)
# =============================================================================


class ValidationError(FoosRankError):
    """Base class for validation errors."""

    pass


class InvalidBeliefError(ValidationError):
    """Raised when a skill belief has a non-positive or non-finite field."""

    def __init__(
        self, mean: float | None, deviation: float | None, reason: str
    ) -> None:
        super().__init__(
            message=f"Invalid skill belief (mean={mean}, deviation={deviation}): "
            f"{reason}",
            details={"mean": mean, "deviation": deviation, "reason": reason},
        )


class InvalidOutcomeError(ValidationError):
    """Raised when the winner indicator is not exactly 1 or 2."""

    def __init__(self, winner: object) -> None:
        super().__init__(
            message=f"Winner must be 1 or 2, got {winner!r}",
            details={"winner": repr(winner)},
        )


class TeamSizeError(ValidationError):
    """Raised when a team does not hold exactly two beliefs."""

    def __init__(self, team_index: int, size: int) -> None:
        super().__init__(
            message=f"Team {team_index} must have exactly 2 players, got {size}",
            details={"team": team_index, "size": size},
        )


class InvalidRoleError(ValidationError):
    """Raised when a role name is not recognised."""

    def __init__(self, role: str) -> None:
        super().__init__(
            message=f"Invalid role '{role}'. Must be defender or attacker",
            details={"role": role},
        )


class DuplicatePlayerError(ValidationError):
    """Raised when the same player appears more than once in a match."""

    def __init__(self, names: list[str]) -> None:
        super().__init__(
            message=f"Duplicate player(s) in match: {names}",
            details={"duplicate_players": names},
        )


# =============================================================================
# Conflict Errors (HTTP 409)
# =============================================================================


class ConflictError(FoosRankError):
    """Base class for uniqueness conflicts."""

    pass


class PlayerAlreadyExistsError(ConflictError):
    """Raised when creating a player whose name is already taken."""

    def __init__(self, name: str) -> None:
        super().__init__(
            message=f"A player with the name '{name}' already exists",
            details={"player_name": name},
        )


# =============================================================================
# Rating Engine Errors (HTTP 500)
# =============================================================================


class RatingEngineError(FoosRankError):
    """Base class for rating calculation errors."""

    pass


class RatingCalculationError(RatingEngineError):
    """Raised when an update would produce a non-finite belief."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message=message, details=details)
