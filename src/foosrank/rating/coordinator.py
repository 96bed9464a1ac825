# src/foosrank/rating/coordinator.py

"""
Orchestrates one match outcome: belief lookup, forecast, update, result bundle.

Nothing here touches storage. Callers hand in a lookup function and persist
the returned beliefs themselves; two results for the same player must be
persisted in the order they were computed, or a stale belief can overwrite
a fresher one.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import NamedTuple

from foosrank.exceptions import DuplicatePlayerError
from foosrank.rating.belief import (
    DEFAULT_BELIEF,
    TEAM_SLOTS,
    RatingMode,
    Role,
    SkillBelief,
)
from foosrank.rating.trueskill_engine import (
    DEFAULT_ENGINE,
    Team,
    TrueSkillEngine,
    check_winner,
)


class SlotKey(NamedTuple):
    """Identifies one stored belief: a participant and the role it is kept for."""

    name: str
    role: Role


BeliefLookup = Callable[[str, Role], "SkillBelief | None"]


@dataclass(frozen=True)
class TeamLineup:
    """The two players of a team, by name."""

    defender: str
    attacker: str

    def slots(self) -> tuple[tuple[str, Role], tuple[str, Role]]:
        return (self.defender, TEAM_SLOTS[0]), (self.attacker, TEAM_SLOTS[1])


@dataclass(frozen=True)
class MatchResolution:
    """Everything the caller needs to persist after one match."""

    winner: int
    team1_before: Team
    team2_before: Team
    team1_after: Team
    team2_after: Team
    team1_win_probability: float
    team2_win_probability: float
    before: dict[SlotKey, SkillBelief] = field(default_factory=dict)
    after: dict[SlotKey, SkillBelief] = field(default_factory=dict)
    defaulted: list[SlotKey] = field(default_factory=list)


def _check_distinct(team1: TeamLineup, team2: TeamLineup) -> None:
    names = [team1.defender, team1.attacker, team2.defender, team2.attacker]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise DuplicatePlayerError(duplicates)


def _resolve_team(
    lineup: TeamLineup,
    lookup: BeliefLookup,
    mode: RatingMode,
    defaulted: list[SlotKey],
) -> tuple[Team, list[SlotKey]]:
    beliefs = []
    keys = []
    for name, slot in lineup.slots():
        key = SlotKey(name, mode.storage_role(slot))
        belief = lookup(key.name, key.role)
        if belief is None:
            belief = DEFAULT_BELIEF
            defaulted.append(key)
        beliefs.append(belief)
        keys.append(key)
    return (beliefs[0], beliefs[1]), keys


def forecast_match(
    team1: TeamLineup,
    team2: TeamLineup,
    lookup: BeliefLookup,
    mode: RatingMode = RatingMode.PER_ROLE,
    engine: TrueSkillEngine | None = None,
) -> tuple[float, float]:
    """Win probabilities of (team1, team2) for a match that has not been played."""
    engine = engine or DEFAULT_ENGINE
    _check_distinct(team1, team2)
    first, _ = _resolve_team(team1, lookup, mode, [])
    second, _ = _resolve_team(team2, lookup, mode, [])
    return engine.win_probability(first, second), engine.win_probability(
        second, first
    )


def resolve_match(
    team1: TeamLineup,
    team2: TeamLineup,
    winner: int,
    lookup: BeliefLookup,
    mode: RatingMode = RatingMode.PER_ROLE,
    engine: TrueSkillEngine | None = None,
) -> MatchResolution:
    """
    Computes the forecast and the post-match beliefs for one decided match.

    The forecast uses the beliefs as they were before the match. Unknown
    participants start from the default belief.

    Raises:
        InvalidOutcomeError: If winner is not 1 or 2
        DuplicatePlayerError: If a name fills more than one slot
        InvalidBeliefError: If the lookup returns an invalid belief
    """
    engine = engine or DEFAULT_ENGINE
    check_winner(winner)
    _check_distinct(team1, team2)

    defaulted: list[SlotKey] = []
    first, first_keys = _resolve_team(team1, lookup, mode, defaulted)
    second, second_keys = _resolve_team(team2, lookup, mode, defaulted)

    p_team1 = engine.win_probability(first, second)
    p_team2 = engine.win_probability(second, first)

    first_after, second_after = engine.rate(first, second, winner)

    keys = first_keys + second_keys
    before = dict(zip(keys, first + second))
    after = dict(zip(keys, first_after + second_after))

    return MatchResolution(
        winner=winner,
        team1_before=first,
        team2_before=second,
        team1_after=first_after,
        team2_after=second_after,
        team1_win_probability=p_team1,
        team2_win_probability=p_team2,
        before=before,
        after=after,
        defaulted=defaulted,
    )
