# src/foosrank/rating/belief.py

"""Gaussian skill beliefs and the roles they are kept for."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from foosrank.exceptions import InvalidBeliefError, InvalidRoleError

DEFAULT_MEAN = 25.0
DEFAULT_DEVIATION = 8.333


class Role(str, Enum):
    """The slot a player occupies in a team, or `any` when unpartitioned."""

    DEFENDER = "defender"
    ATTACKER = "attacker"
    ANY = "any"

    @classmethod
    def parse(cls, value: str, allow_any: bool = False) -> "Role":
        """Parse a playing role. `any` is only accepted when allow_any is set."""
        try:
            role = cls(value)
        except ValueError:
            raise InvalidRoleError(value) from None
        if role is cls.ANY and not allow_any:
            raise InvalidRoleError(value)
        return role


# Team slot order: first is the defender, second the attacker.
TEAM_SLOTS: tuple[Role, Role] = (Role.DEFENDER, Role.ATTACKER)


class RatingMode(str, Enum):
    """How many beliefs each player owns.

    PER_ROLE: one independent belief per playing role.
    SINGLE: one shared belief, stored under `Role.ANY`, used for both slots.
    """

    PER_ROLE = "per_role"
    SINGLE = "single"

    def storage_roles(self) -> tuple[Role, ...]:
        """The roles a player has a stored belief for under this mode."""
        if self is RatingMode.SINGLE:
            return (Role.ANY,)
        return TEAM_SLOTS

    def storage_role(self, slot: Role) -> Role:
        """Map a team slot onto the role its belief is stored under."""
        return Role.ANY if self is RatingMode.SINGLE else slot


@dataclass(frozen=True)
class SkillBelief:
    """A player's estimated strength as a Gaussian N(mean, deviation^2)."""

    mean: float = DEFAULT_MEAN
    deviation: float = DEFAULT_DEVIATION

    def __post_init__(self) -> None:
        if not math.isfinite(self.mean):
            raise InvalidBeliefError(self.mean, self.deviation, "mean must be finite")
        if not math.isfinite(self.deviation):
            raise InvalidBeliefError(
                self.mean, self.deviation, "deviation must be finite"
            )
        if self.deviation <= 0:
            raise InvalidBeliefError(
                self.mean, self.deviation, "deviation must be positive"
            )
        if not math.isfinite(self.deviation * self.deviation):
            raise InvalidBeliefError(
                self.mean, self.deviation, "deviation is too large to square"
            )

    @property
    def variance(self) -> float:
        return self.deviation * self.deviation

    @property
    def conservative_rating(self) -> float:
        """Lower bound on skill (mean - 3 * deviation), used for display ranking."""
        return self.mean - 3 * self.deviation


DEFAULT_BELIEF = SkillBelief(DEFAULT_MEAN, DEFAULT_DEVIATION)
