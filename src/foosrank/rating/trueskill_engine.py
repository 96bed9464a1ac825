# src/foosrank/rating/trueskill_engine.py

"""
Two-team TrueSkill updates for teams of two, on top of the `trueskill` package.
The model is the one from Herbrich, Minka and Graepel, "TrueSkill: A Bayesian
Skill Rating System" (NIPS 2006).

The win forecast does not go through the package: it is a plain normal-CDF of
the strength gap, computed in `foosrank.rating.gaussian`.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Union

import trueskill

from foosrank import config
from foosrank.exceptions import (
    InvalidBeliefError,
    InvalidOutcomeError,
    RatingCalculationError,
    TeamSizeError,
)
from foosrank.rating import gaussian
from foosrank.rating.belief import (
    DEFAULT_BELIEF,
    DEFAULT_DEVIATION,
    DEFAULT_MEAN,
    SkillBelief,
)

# A slot may hold a belief, a raw (mean, deviation) pair, or None for an
# unknown player.
BeliefLike = Union[SkillBelief, tuple[float, float], None]
Team = tuple[SkillBelief, SkillBelief]

TEAM_SIZE = 2


def _coerce_slot(slot: BeliefLike) -> SkillBelief:
    if slot is None:
        return DEFAULT_BELIEF
    if isinstance(slot, SkillBelief):
        return slot
    try:
        mean, deviation = slot
        mean, deviation = float(mean), float(deviation)
    except (TypeError, ValueError):
        raise InvalidBeliefError(
            None, None, f"expected a (mean, deviation) pair, got {slot!r}"
        ) from None
    return SkillBelief(mean, deviation)


def _coerce_team(team: Sequence[BeliefLike], team_index: int) -> Team:
    """Validate a team and substitute the default belief for missing players."""
    if len(team) != TEAM_SIZE:
        raise TeamSizeError(team_index, len(team))
    first, second = (_coerce_slot(slot) for slot in team)
    return first, second


def check_winner(winner: int) -> None:
    if isinstance(winner, bool) or winner not in (1, 2):
        raise InvalidOutcomeError(winner)


class TrueSkillEngine:
    """Encapsulates the two-team TrueSkill calculation logic."""

    # beta is the per-player performance noise; tau widens every prior a
    # little before each match so deviations cannot collapse to zero over a
    # long career. Both are fixed for the lifetime of the engine.
    def __init__(
        self,
        beta: float = 25.0 / 6.0,
        tau: float = 25.0 / 300.0,
        draw_probability: float = 0.10,
        min_deviation: float = 1e-4,
    ):
        if beta <= 0:
            raise ValueError(f"beta must be positive, got {beta}")
        if tau < 0:
            raise ValueError(f"tau must be non-negative, got {tau}")
        if not 0 <= draw_probability < 1:
            raise ValueError(
                f"draw_probability must be in [0, 1), got {draw_probability}"
            )
        if min_deviation <= 0:
            raise ValueError(f"min_deviation must be positive, got {min_deviation}")
        self._min_deviation = min_deviation
        self._env = trueskill.TrueSkill(
            mu=DEFAULT_MEAN,
            sigma=DEFAULT_DEVIATION,
            beta=beta,
            tau=tau,
            draw_probability=draw_probability,
        )

    @property
    def beta(self) -> float:
        return self._env.beta

    @property
    def tau(self) -> float:
        return self._env.tau

    def rate(
        self,
        team1: Sequence[BeliefLike],
        team2: Sequence[BeliefLike],
        winner: int,
    ) -> tuple[Team, Team]:
        """
        Calculates both teams' new beliefs after a decided match.

        Args:
            team1: (defender, attacker) beliefs of the first team.
            team2: (defender, attacker) beliefs of the second team.
            winner: 1 if team1 won, 2 if team2 won.

        Returns:
            The updated (team1, team2) beliefs, in input order.
        """
        # Step 1: Validate the outcome and both lineups
        check_winner(winner)
        first = _coerce_team(team1, 1)
        second = _coerce_team(team2, 2)

        # Step 2: Lower rank wins
        ranks = [0, 1] if winner == 1 else [1, 0]
        groups = [
            tuple(self._env.create_rating(b.mean, b.deviation) for b in team)
            for team in (first, second)
        ]

        # Step 3: Run the factor graph
        try:
            rated = self._env.rate(groups, ranks=ranks)
        except (FloatingPointError, OverflowError, ValueError, ZeroDivisionError) as e:
            raise RatingCalculationError(
                "Rating update is numerically unstable",
                details={
                    "team1": [(b.mean, b.deviation) for b in first],
                    "team2": [(b.mean, b.deviation) for b in second],
                    "error": str(e),
                },
            ) from e

        # Step 4: Check and clamp each updated belief against its prior
        first_after = tuple(
            self._settle(prior, r) for prior, r in zip(first, rated[0])
        )
        second_after = tuple(
            self._settle(prior, r) for prior, r in zip(second, rated[1])
        )
        return (first_after[0], first_after[1]), (second_after[0], second_after[1])

    def win_probability(
        self, team_a: Sequence[BeliefLike], team_b: Sequence[BeliefLike]
    ) -> float:
        """
        Forecasts P(team_a beats team_b) from the normal CDF of the strength gap.

        Uses only the beliefs themselves (no performance noise), so the value
        matches what the match history has always stored.
        """
        first = _coerce_team(team_a, 1)
        second = _coerce_team(team_b, 2)

        strength_a = sum(b.mean for b in first)
        strength_b = sum(b.mean for b in second)
        spread_a = math.sqrt(sum(b.variance for b in first))
        spread_b = math.sqrt(sum(b.variance for b in second))
        combined = math.sqrt(spread_a * spread_a + spread_b * spread_b)

        probability = gaussian.normal_win_probability(
            strength_a - strength_b, combined
        )
        if math.isnan(probability):
            raise RatingCalculationError(
                "Win probability is undefined for these beliefs",
                details={"strength_a": strength_a, "strength_b": strength_b},
            )
        return probability

    def _settle(self, prior: SkillBelief, rating: trueskill.Rating) -> SkillBelief:
        mean, deviation = rating.mu, rating.sigma
        if not (math.isfinite(mean) and math.isfinite(deviation)):
            raise RatingCalculationError(
                "Rating update produced a non-finite belief",
                details={"mean": prior.mean, "deviation": prior.deviation},
            )

        # Never below the floor, never above the prior
        deviation = min(max(deviation, self._min_deviation), prior.deviation)
        return SkillBelief(mean, deviation)


# ===============================================
# == Process-wide engine
# ===============================================

DEFAULT_ENGINE = TrueSkillEngine(
    beta=config.TRUESKILL_BETA,
    tau=config.TRUESKILL_TAU,
    draw_probability=config.TRUESKILL_DRAW_PROBABILITY,
)


def update_ratings(
    team1: Sequence[BeliefLike],
    team2: Sequence[BeliefLike],
    winner: int,
) -> tuple[Team, Team]:
    """Updates both teams' beliefs with the process-wide engine."""
    return DEFAULT_ENGINE.rate(team1, team2, winner)


def win_probability(
    team_a: Sequence[BeliefLike], team_b: Sequence[BeliefLike]
) -> float:
    """Forecasts P(team_a beats team_b) with the process-wide engine."""
    return DEFAULT_ENGINE.win_probability(team_a, team_b)
