# src/foosrank/services/match_service.py

"""Business logic for match-related operations."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from foosrank.db import models
from foosrank.exceptions import MatchNotFoundError
from foosrank.rating.belief import RatingMode, Role, SkillBelief
from foosrank.rating.coordinator import (
    MatchResolution,
    SlotKey,
    TeamLineup,
    forecast_match,
    resolve_match,
)
from foosrank.rating.trueskill_engine import TrueSkillEngine
from foosrank.schemas import match as match_schema
from foosrank.services import player_service

logger = logging.getLogger(__name__)


def _lineup(team: match_schema.TeamLineupIn) -> TeamLineup:
    return TeamLineup(defender=team.defender, attacker=team.attacker)


def _belief_lookup(players: dict[str, models.Player]):
    """Adapts loaded players to the coordinator's (name, role) lookup."""

    def lookup(name: str, role: Role) -> SkillBelief | None:
        player = players.get(name)
        if player is None:
            return None
        return player_service.stored_belief(player, role)

    return lookup


def _persist_beliefs(
    players: dict[str, models.Player], resolution: MatchResolution
) -> None:
    """Writes every updated belief back onto its player's rating rows."""
    for key, belief in resolution.after.items():
        player = players[key.name]
        rating = player.rating_for(key.role.value)
        if rating is None:
            player.ratings.append(
                models.PlayerRating(
                    role=key.role.value, mean=belief.mean, deviation=belief.deviation
                )
            )
            continue
        rating.mean = belief.mean
        rating.deviation = belief.deviation
        rating.version += 1


def _build_match(
    match_in: match_schema.MatchCreate,
    players: dict[str, models.Player],
    resolution: MatchResolution,
    mode: RatingMode,
) -> models.Match:
    match = models.Match(
        winner=resolution.winner,
        team1_win_probability=resolution.team1_win_probability,
        team2_win_probability=resolution.team2_win_probability,
    )
    if match_in.played_at is not None:
        match.played_at = match_in.played_at

    for team_number, team in ((1, match_in.team1), (2, match_in.team2)):
        for name, slot in _lineup(team).slots():
            key = SlotKey(name, mode.storage_role(slot))
            before = resolution.before[key]
            after = resolution.after[key]
            match.participants.append(
                models.MatchParticipant(
                    player=players[name],
                    team=team_number,
                    role=slot.value,
                    mean_before=before.mean,
                    deviation_before=before.deviation,
                    mean_after=after.mean,
                    deviation_after=after.deviation,
                )
            )
    return match


def _log_match(match_in: match_schema.MatchCreate, resolution: MatchResolution) -> None:
    t1, t2 = match_in.team1, match_in.team2
    (t1_def, t1_att), (t2_def, t2_att) = resolution.team1_after, resolution.team2_after
    logger.info(
        "Match recorded: winner=Team %d, team1=%s (%.2f) & %s (%.2f), "
        "team2=%s (%.2f) & %s (%.2f), win probability %.1f%% / %.1f%%",
        resolution.winner,
        t1.defender,
        t1_def.mean,
        t1.attacker,
        t1_att.mean,
        t2.defender,
        t2_def.mean,
        t2.attacker,
        t2_att.mean,
        resolution.team1_win_probability * 100,
        resolution.team2_win_probability * 100,
    )


async def get_match(db: AsyncSession, match_id: int) -> models.Match:
    """
    Fetches a match with its participants and their players eager loaded.

    Raises:
        MatchNotFoundError: If no such match exists
    """
    query = (
        select(models.Match)
        .where(models.Match.id == match_id)
        .options(
            selectinload(models.Match.participants).selectinload(
                models.MatchParticipant.player
            )
        )
    )
    match = (await db.execute(query)).scalar_one_or_none()
    if match is None:
        raise MatchNotFoundError(match_id)
    return match


async def process_new_match(
    db: AsyncSession,
    match_in: match_schema.MatchCreate,
    mode: RatingMode | None = None,
    engine: TrueSkillEngine | None = None,
) -> models.Match:
    """
    Processes the recording of a new match.

    This service is responsible for:
    1. Resolving player names, creating players seen for the first time
    2. Running the rating coordinator (forecast, then belief update)
    3. Writing the updated beliefs back to the players' rating rows
    4. Creating the Match and MatchParticipant records with before/after beliefs

    All operations are performed within a single transaction. If any step
    fails, the entire transaction is rolled back to maintain data consistency.

    Raises:
        InvalidOutcomeError: If winner is not 1 or 2
        DuplicatePlayerError: If a name fills more than one slot
        InvalidBeliefError: If a stored belief is invalid
        RatingCalculationError: If the update produces a non-finite belief
    """
    mode = mode or player_service.RATING_MODE
    team1, team2 = _lineup(match_in.team1), _lineup(match_in.team2)
    names = [team1.defender, team1.attacker, team2.defender, team2.attacker]

    logger.info(
        "Processing new match",
        extra={"players": names, "winner": match_in.winner, "mode": mode.value},
    )

    try:
        # 1. Lock existing players, create the unknown ones
        players = await player_service.get_or_create_players(db, names)

        # 2. Forecast and update. Validation of winner and lineup happens here,
        #    before anything is written.
        resolution = resolve_match(
            team1,
            team2,
            match_in.winner,
            _belief_lookup(players),
            mode=mode,
            engine=engine,
        )
        if resolution.defaulted:
            logger.debug(
                "Using default beliefs",
                extra={
                    "slots": [f"{k.name}/{k.role.value}" for k in resolution.defaulted]
                },
            )

        # 3. Persist beliefs and the match record
        _persist_beliefs(players, resolution)
        new_match = _build_match(match_in, players, resolution, mode)
        db.add(new_match)

        # 4. COMMIT the entire transaction atomically (match + ratings together)
        await db.commit()
        _log_match(match_in, resolution)

        # 5. Re-query the match to eager load all relationships for the response.
        return await get_match(db, new_match.id)

    except Exception as e:
        logger.error(
            "Failed to process match",
            extra={"players": names, "error": str(e)},
            exc_info=True,
        )
        await db.rollback()
        raise


async def forecast(
    db: AsyncSession,
    request: match_schema.ForecastRequest,
    mode: RatingMode | None = None,
    engine: TrueSkillEngine | None = None,
) -> match_schema.ForecastRead:
    """Win probabilities for two prospective lineups. Writes nothing."""
    mode = mode or player_service.RATING_MODE
    team1, team2 = _lineup(request.team1), _lineup(request.team2)
    names = [team1.defender, team1.attacker, team2.defender, team2.attacker]

    query = select(models.Player).where(models.Player.name.in_(names))
    result = await db.execute(query)
    players = {p.name: p for p in result.scalars().all()}

    p_team1, p_team2 = forecast_match(
        team1, team2, _belief_lookup(players), mode=mode, engine=engine
    )
    return match_schema.ForecastRead(
        team1_win_probability=p_team1, team2_win_probability=p_team2
    )
